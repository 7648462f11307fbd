"""
Helpers for the Asana response envelope and form-encoded request bodies.

Every response wraps its payload as ``{"data": ..., "next_page": {...}}``.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import AsanaModelValidationError, AsanaParseError
from .models import NamedEntity, NextPage

T = TypeVar("T", bound=BaseModel)


def parse_json(body: bytes) -> Dict[str, Any]:
    """Parse a response body into a dict; an empty body is ``{}``."""
    if not body:
        return {}
    try:
        payload = json.loads(body)
    except ValueError as exc:
        snippet = body[:500].decode("utf-8", "replace")
        raise AsanaParseError(
            f"Expected JSON, got non-JSON body snippet: {snippet!r}"
        ) from exc
    if not isinstance(payload, dict):
        raise AsanaParseError(
            f"Expected top-level JSON object, got {type(payload).__name__}"
        )
    return payload


def data_object(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    data = payload.get("data")
    if data is None:
        return None
    if not isinstance(data, dict):
        raise AsanaParseError(
            f"Expected data to be an object, got {type(data).__name__}."
        )
    return data


def data_list(payload: Dict[str, Any]) -> List[Any]:
    """
    Extract the ``data`` list from a collection payload.
    Raises AsanaParseError if the key is missing or is not a list.
    """
    if "data" not in payload:
        raise AsanaParseError("Expected a 'data' key in collection response.")
    data = payload["data"]
    if not isinstance(data, list):
        raise AsanaParseError("Expected data to be a list.")
    return data


def next_page_of(payload: Dict[str, Any]) -> Optional[NextPage]:
    raw = payload.get("next_page")
    if not isinstance(raw, dict):
        return None
    try:
        return NextPage.model_validate(raw)
    except ValidationError as exc:
        raise AsanaModelValidationError(f"Malformed next_page cursor: {exc}") from exc


def decode_records(
    elements: Iterable[Any], model: Type[T]
) -> Tuple[List[T], Optional[AsanaModelValidationError]]:
    """Validate elements in order, stopping at the first bad one."""
    records: List[T] = []
    for index, element in enumerate(elements):
        try:
            records.append(model.model_validate(element))
        except ValidationError as exc:
            return records, AsanaModelValidationError(
                f"Record {index} did not match model {model.__name__}: {exc}"
            )
    return records, None


def decode_record(body: bytes, model: Type[T]) -> Optional[T]:
    """Decode a single-record envelope; None when the envelope carries no data."""
    data = data_object(parse_json(body))
    if data is None:
        return None
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise AsanaModelValidationError(
            f"Response did not match model {model.__name__}: {exc}"
        ) from exc


def _form_value(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, NamedEntity):
        return value.ref
    if isinstance(value, BaseModel):
        return json.dumps(value.model_dump(mode="json", exclude_none=True))
    if isinstance(value, dict):
        return json.dumps(value, default=str)
    if isinstance(value, (list, tuple)):
        parts = [p for p in (_form_value(v) for v in value) if p]
        return ",".join(parts) if parts else None
    return str(value)


def to_form_values(model: BaseModel, *, exclude: Iterable[str] = ()) -> Dict[str, str]:
    """Flatten a request model into form fields, dropping unset (None) values."""
    skip = set(exclude)
    values: Dict[str, str] = {}
    for name in type(model).model_fields:
        if name in skip:
            continue
        encoded = _form_value(getattr(model, name))
        if encoded is not None:
            values[name] = encoded
    return values


__all__ = [
    "parse_json",
    "data_object",
    "data_list",
    "next_page_of",
    "decode_records",
    "decode_record",
    "to_form_values",
]
