"""Path-aware JSON decoding of verified webhook bodies."""

import json
from collections.abc import Sequence
from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from hubhook.webhook.errors import DecodeError

T = TypeVar("T")

ROOT_PATH = "."


@lru_cache(maxsize=128)
def _cached_adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def _adapter(target: Any) -> TypeAdapter[Any]:
    try:
        return _cached_adapter(target)
    except TypeError:
        # Unhashable annotations cannot be cached
        return TypeAdapter(target)


def format_error_path(loc: Sequence[int | str]) -> str:
    """Render a pydantic error location as a JSON path.

    Field names are joined with dots and list indices use brackets, e.g.
    ``("pull_request", "labels", 2, "name")`` becomes
    ``pull_request.labels[2].name``. An empty location is the document root.

    Args:
        loc: The error location.

    Returns:
        The rendered path.
    """
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path or ROOT_PATH


def _document_loc(
    loc: Sequence[int | str], body: bytes, error_type: str
) -> tuple[int | str, ...]:
    """Keep only the parts of ``loc`` that address the JSON document.

    Union validation adds the name of each member tried (``Event``, ``int``,
    ``list[str]``) to the location. Those parts are dropped by walking the
    parsed document: a name is a field only if the current object has it, or
    if it is the last part of a missing-field error.
    """
    try:
        current: Any = json.loads(body)
    except ValueError:
        return tuple(loc)

    parts: list[int | str] = []
    for i, part in enumerate(loc):
        if isinstance(part, int):
            parts.append(part)
            if isinstance(current, list) and 0 <= part < len(current):
                current = current[part]
            else:
                current = None
        elif isinstance(current, dict) and part in current:
            parts.append(part)
            current = current[part]
        elif i == len(loc) - 1 and error_type.startswith("missing"):
            parts.append(part)
    return tuple(parts)


def decode_payload(body: bytes, target: type[T], *, strict: bool = True) -> T:
    """Decode a JSON body into ``target``.

    Args:
        body: The verified raw request body.
        target: Any type pydantic can validate (dataclass, BaseModel, TypedDict, ...).
        strict: Reject implicit coercions such as ``"1"`` for an ``int`` field.

    Returns:
        The decoded payload.

    Raises:
        DecodeError: If the body is not valid JSON or does not match ``target``.
    """
    try:
        return _adapter(target).validate_json(body, strict=strict)
    except ValidationError as e:
        errors = e.errors(include_url=False)
        first = errors[0]
        detail = first["msg"]
        if len(errors) > 1:
            detail += f" (and {len(errors) - 1} more errors)"
        loc = _document_loc(first["loc"], body, first["type"])
        raise DecodeError(format_error_path(loc), detail, errors) from e
