"""
Shared plumbing for the resource facades.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ValidationError

from luzia_python.errors import ErrorCode, LuziaError

if TYPE_CHECKING:
    from luzia_python.client.core import Luzia

M = TypeVar("M", bound=BaseModel)


class Resource:
    """Base class for resource facades bound to a client."""

    def __init__(self, client: Luzia) -> None:
        self._client = client


def parse_model(model: type[M], data: Any) -> M:
    """Validate a response body into a record.

    Raises:
        LuziaError: ``unknown`` if the body does not match the record
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise LuziaError(
            f"Unexpected response shape for {model.__name__}",
            code=ErrorCode.UNKNOWN,
            cause=e,
        ) from e
