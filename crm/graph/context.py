from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session


def get_session(info: Any) -> Session:
    """Return the SQLAlchemy session the HTTP layer put in the execution context."""
    return info.context["db"]
