"""Shared helpers for routes: query parsing and body validation."""

import json
from enum import Enum
from typing import Any, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from core.exceptions import RequestValidationError

M = TypeVar("M", bound=BaseModel)
E = TypeVar("E", bound=Enum)


def parse_int_param(query: dict, name: str, default: Optional[int] = None, minimum: int = 1) -> Optional[int]:
    """Read an integer query parameter, rejecting non-integers and values below ``minimum``."""
    raw = query.get(name)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise RequestValidationError(f"Query parameter '{name}' must be an integer, got {raw!r}")
    if value < minimum:
        raise RequestValidationError(f"Query parameter '{name}' must be >= {minimum}")
    return value


def parse_pagination(query: dict, default_page_size: int) -> Tuple[int, int]:
    """Return (page, page_size); pages are 1-based."""
    page = parse_int_param(query, "page", default=1)
    page_size = parse_int_param(query, "pageSize", default=default_page_size)
    return page, page_size


def parse_enum_param(query: dict, name: str, enum_cls: Type[E]) -> Optional[E]:
    raw = query.get(name)
    if raw is None or str(raw).strip() == "":
        return None
    try:
        return enum_cls(str(raw).strip())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise RequestValidationError(f"Query parameter '{name}' must be one of: {allowed}")


def parse_tags(raw: Optional[str]) -> List[str]:
    """Split a comma list into trimmed, lower-cased, non-empty tags."""
    if not raw:
        return []
    return [tag.strip().lower() for tag in raw.split(",") if tag.strip()]


def parse_body(body: Any, model: Type[M]) -> M:
    """Validate a JSON-like body against a request model."""
    if isinstance(body, (str, bytes)):
        try:
            body = json.loads(body)
        except ValueError as e:
            raise RequestValidationError(f"Malformed JSON body: {e}") from e
    if body is None:
        body = {}
    if not isinstance(body, dict):
        raise RequestValidationError("Request body must be a JSON object")
    try:
        return model.model_validate(body)
    except ValidationError as e:
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        raise RequestValidationError(f"Invalid {model.__name__}", errors=errors) from e
