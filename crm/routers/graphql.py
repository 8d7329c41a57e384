from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from graphql import GraphQLError, GraphQLSyntaxError, OperationType, get_operation_ast, parse
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from crm.core.config import GRAPHQL_INCLUDE_EXCEPTION_DETAILS
from crm.core.database import get_db
from crm.graph import schema

router = APIRouter(tags=["graphql"])
logger = logging.getLogger(__name__)


class GraphQLRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str
    variables: Optional[Dict[str, Any]] = None
    operation_name: Optional[str] = Field(None, alias="operationName")


def format_error(error: GraphQLError) -> dict[str, Any]:
    formatted = dict(error.formatted)
    original = error.original_error
    if GRAPHQL_INCLUDE_EXCEPTION_DETAILS and original is not None and not isinstance(original, GraphQLError):
        extensions = dict(formatted.get("extensions") or {})
        extensions["exception"] = {"type": type(original).__name__, "message": str(original)}
        formatted["extensions"] = extensions
    return formatted


def _error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"data": None, "errors": [{"message": message}]})


def execute_operation(db: Session, request: Request, payload: GraphQLRequest) -> dict[str, Any]:
    result = schema.execute(
        payload.query,
        variable_values=payload.variables,
        operation_name=payload.operation_name,
        context_value={"db": db, "request": request},
    )

    body: dict[str, Any] = {"data": result.data}
    if result.errors:
        body["errors"] = [format_error(error) for error in result.errors]
        logger.warning(
            "GraphQL operation=%s errors=%s first_error=%s",
            payload.operation_name or "anonymous",
            len(result.errors),
            result.errors[0].message,
        )
    else:
        logger.info("GraphQL operation=%s errors=0", payload.operation_name or "anonymous")
    return body


@router.post("/graphql")
def graphql_post(
    payload: GraphQLRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    return execute_operation(db, request, payload)


@router.get("/graphql")
def graphql_get(
    request: Request,
    query: str,
    variables: Optional[str] = None,
    operationName: Optional[str] = None,
    db: Session = Depends(get_db),
):
    parsed_variables = None
    if variables:
        try:
            parsed_variables = json.loads(variables)
        except ValueError:
            return _error_response("Variables must be a JSON object", status.HTTP_400_BAD_REQUEST)
        if not isinstance(parsed_variables, dict):
            return _error_response("Variables must be a JSON object", status.HTTP_400_BAD_REQUEST)

    try:
        operation = get_operation_ast(parse(query), operationName)
    except GraphQLSyntaxError:
        # Execution reports the syntax error in the usual payload.
        operation = None

    if operation is not None and operation.operation != OperationType.QUERY:
        return _error_response(
            "Only query operations are allowed over GET",
            status.HTTP_405_METHOD_NOT_ALLOWED,
        )

    payload = GraphQLRequest(query=query, variables=parsed_variables, operation_name=operationName)
    return execute_operation(db, request, payload)
