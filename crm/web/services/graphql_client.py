from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class GraphQLLocation(BaseModel):
    line: int
    column: int


class GraphQLErrorModel(BaseModel):
    message: str
    locations: Optional[List[GraphQLLocation]] = None
    path: Optional[List[Any]] = None
    extensions: Optional[Dict[str, Any]] = None


class GraphQLResponse(BaseModel):
    data: Optional[Dict[str, Any]] = None
    errors: Optional[List[GraphQLErrorModel]] = None

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def first_error(self) -> str | None:
        if not self.errors:
            return None
        return self.errors[0].message


class GraphQLClient:
    """Thin async client posting GraphQL operations to the API process."""

    def __init__(self, http: httpx.AsyncClient, endpoint: str = ""):
        self.http = http
        self.endpoint = endpoint

    async def execute(self, query: str, variables: Dict[str, Any] | None = None) -> GraphQLResponse | None:
        payload = {"query": query, "variables": variables or {}}
        try:
            response = await self.http.post(self.endpoint, json=payload)
            response.raise_for_status()
            result = GraphQLResponse.model_validate(response.json())
        except httpx.HTTPStatusError as exc:
            logger.error(
                "GraphQL request failed status=%s body=%s",
                exc.response.status_code,
                exc.response.text[:500],
            )
            return None
        except httpx.HTTPError as exc:
            logger.error("GraphQL transport error: %s", exc)
            return None
        except (ValueError, ValidationError) as exc:
            logger.error("GraphQL response could not be decoded: %s", exc)
            return None

        if result.errors:
            for error in result.errors:
                logger.error("GraphQL error: %s", error.message)
        return result
