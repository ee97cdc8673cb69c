"""Validating extraction: decode, check the shape, then check field rules.

Every inbound value (JSON body, query string, path parameters) goes through
the same three stages before a route handler sees it:

1. decode the raw input (``json_invalid`` failures),
2. check the decoded value against the declared shape (missing fields,
   wrong types, unparsable values),
3. check field-level rules (length, range, email shape, custom predicates).

A failure in stage 1 or 2 stops the pipeline and yields exactly one message.
Stage 3 accumulates every violated rule.
"""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Sequence
from enum import Enum
from typing import Any
from typing import TypeVar

from pydantic import BaseModel
from pydantic import ValidationError

from postboard.core.errors import AppError
from postboard.core.errors import BodyDecodeError
from postboard.core.errors import PathDecodeError
from postboard.core.errors import QueryDecodeError
from postboard.core.errors import ValidationFailed
from postboard.core.errors import Violation

ModelT = TypeVar("ModelT", bound=BaseModel)


class Source(str, Enum):
    BODY = "body"
    QUERY = "query"
    PATH = "path"


_DECODE_ERRORS: dict[Source, type[AppError]] = {
    Source.BODY: BodyDecodeError,
    Source.QUERY: QueryDecodeError,
    Source.PATH: PathDecodeError,
}

# pydantic error type -> (rule code, {context key -> detail key})
_RULES: dict[str, tuple[str, dict[str, str]]] = {
    "string_too_short": ("length", {"min_length": "min"}),
    "string_too_long": ("length", {"max_length": "max"}),
    "too_short": ("length", {"min_length": "min"}),
    "too_long": ("length", {"max_length": "max"}),
    "greater_than_equal": ("range", {"ge": "min"}),
    "less_than_equal": ("range", {"le": "max"}),
    "greater_than": ("range", {"gt": "exclusive_min"}),
    "less_than": ("range", {"lt": "exclusive_max"}),
    "string_pattern_mismatch": ("pattern", {"pattern": "pattern"}),
}

_STRUCTURAL = frozenset(
    {
        "missing",
        "extra_forbidden",
        "json_invalid",
        "json_type",
        "model_type",
        "model_attributes_type",
    }
)

_SOURCE_ORDER = (Source.PATH, Source.QUERY, Source.BODY)


def is_structural(error_type: str) -> bool:
    """True when the error is about shape or syntax rather than a field rule."""
    return error_type in _STRUCTURAL or error_type.endswith(("_type", "_parsing"))


def _format_location(location: Sequence[Any], source: Source) -> str | None:
    parts = list(location)
    if parts and parts[0] == source.value:
        parts = parts[1:]
    if not parts:
        return None
    return ".".join(str(part) for part in parts)


def _json_safe(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def _violation(error: Mapping[str, Any], source: Source) -> Violation:
    error_type = str(error["type"])
    context = error.get("ctx") or {}
    field = _format_location(error.get("loc", ()), source)

    if error_type in _RULES:
        code, keys = _RULES[error_type]
        params = {detail: _json_safe(context[key]) for key, detail in keys.items() if key in context}
        return Violation(field=field, code=code, params=params)

    params = {key: _json_safe(value) for key, value in context.items()}
    return Violation(field=field, code=error_type, params=params)


def _decode_failure(error: Mapping[str, Any], source: Source) -> AppError:
    if error["type"] == "json_invalid":
        context = error.get("ctx") or {}
        reason = context.get("error")
        text = f"{error.get('msg', 'Invalid JSON')}: {reason}" if reason else str(error.get("msg", "Invalid JSON"))
        return BodyDecodeError(text, code="invalid_json")

    return _DECODE_ERRORS[source](
        str(error.get("msg", "Invalid value")),
        location=_format_location(error.get("loc", ()), source),
    )


def classify(errors: Sequence[Mapping[str, Any]], source: Source) -> AppError:
    """Turn validation errors for one extraction site into a taxonomy error."""
    errors = list(errors)

    for error in errors:
        if is_structural(str(error["type"])):
            return _decode_failure(error, source)

    return ValidationFailed([_violation(error, source) for error in errors])


def _source_of(location: Sequence[Any]) -> Source:
    if location:
        try:
            return Source(location[0])
        except ValueError:
            pass
    return Source.BODY


def classify_request_errors(errors: Sequence[Mapping[str, Any]]) -> AppError:
    """Classify errors reported by FastAPI for a whole request.

    Structural failures win over rule violations; among them path parameters
    are reported first, then the query string, then the body.
    """
    grouped: dict[Source, list[Mapping[str, Any]]] = {}
    for error in errors:
        grouped.setdefault(_source_of(error.get("loc", ())), []).append(error)

    for source in _SOURCE_ORDER:
        for error in grouped.get(source, []):
            if is_structural(str(error["type"])):
                return _decode_failure(error, source)

    return ValidationFailed(
        [_violation(error, source) for source in _SOURCE_ORDER for error in grouped.get(source, [])]
    )


def extract(model: type[ModelT], raw: bytes | str | Mapping[str, Any], source: Source) -> ModelT:
    """Decode and validate ``raw`` into ``model`` or raise the classified error."""
    try:
        if isinstance(raw, (bytes, bytearray, str)):
            return model.model_validate_json(raw)
        return model.model_validate(dict(raw))
    except ValidationError as exc:
        raise classify(exc.errors(), source) from exc
