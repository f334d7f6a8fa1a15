"""Request-body reading shared by the login and registration routes.

Both routes accept JSON or form-encoded bodies, and a missing body or missing
keys must reach the service as None so it can answer "Missing parameters".
"""

import json
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from fastapi import HTTPException, Request, status
from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)

FORM_CONTENT_TYPES = frozenset(
    {"application/x-www-form-urlencoded", "multipart/form-data"}
)


async def read_fields(request: Request) -> dict[str, str]:
    """
    Return the string-valued top-level fields of a JSON object or form body.

    An empty body, a non-object JSON value, or non-string values count as absent.
    """
    raw = await request.body()
    if not raw:
        return {}
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type in FORM_CONTENT_TYPES:
        data: Any = dict(await request.form())
    elif content_type in ("", "application/json") or content_type.endswith("+json"):
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid JSON: {e!s}",
            ) from e
    else:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Content-Type must be application/json or form-encoded.",
        )
    if not isinstance(data, dict):
        return {}
    return {k: v for k, v in data.items() if isinstance(v, str)}


def payload_of(schema: type[ModelT]) -> Callable[[Request], Awaitable[ModelT]]:
    """Dependency factory: parse the request body into schema. Usage: Depends(payload_of(LoginRequest))."""

    async def dependency(request: Request) -> ModelT:
        return schema.model_validate(await read_fields(request))

    return dependency


def body_docs(schema: type[BaseModel]) -> dict[str, Any]:
    """openapi_extra describing the accepted body, since it is read by hand."""
    model_schema = schema.model_json_schema()
    return {
        "requestBody": {
            "content": {
                "application/json": {"schema": model_schema},
                "application/x-www-form-urlencoded": {"schema": model_schema},
            },
        }
    }
