# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Structured errors and error-detail extraction for the bulk delete workflow.

Capabilities supplied by the caller may fail with arbitrary values. The
orchestrator never interprets them; it only needs a short human-readable
detail, obtained with :func:`parse_api_error` followed by
:func:`pluck_error_detail`.
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import requests

from ..common.constants import UNKNOWN_ERROR_DETAIL
from ._error_codes import VALIDATION_BATCH_IN_PROGRESS, _http_subcode, _is_transient_status


class BulkDeleteError(Exception):
    """Base structured error for the bulk delete workflow."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        subcode: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
        is_transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.subcode = subcode
        self.status_code = status_code
        self.details = details or {}
        self.source = source or "client"
        self.is_transient = is_transient
        self.timestamp = _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "subcode": self.subcode,
            "status_code": self.status_code,
            "details": self.details,
            "source": self.source,
            "is_transient": self.is_transient,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(code={self.code!r}, subcode={self.subcode!r}, message={self.message!r})"


class ConfigurationError(BulkDeleteError):
    """Raised when the embedding caller wires the workflow incorrectly. Not user-recoverable."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="configuration_error", subcode=subcode, details=details, source="client")


class ValidationError(BulkDeleteError):
    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="validation_error", subcode=subcode, details=details, source="client")


class BatchInProgressError(ValidationError):
    def __init__(self, message: str = "A batch delete is already in progress.", *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, subcode=VALIDATION_BATCH_IN_PROGRESS, details=details)


class HttpError(BulkDeleteError):
    def __init__(
        self,
        message: str,
        status_code: int,
        *,
        body: Optional[Any] = None,
        body_excerpt: Optional[str] = None,
        request_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        d = details or {}
        if body is not None:
            d["body"] = body
        if body_excerpt is not None:
            d["body_excerpt"] = body_excerpt
        if request_id is not None:
            d["request_id"] = request_id
        super().__init__(
            message,
            code="http_error",
            subcode=_http_subcode(status_code),
            status_code=status_code,
            details=d,
            source="server",
            is_transient=_is_transient_status(status_code),
        )


@dataclass(frozen=True)
class ParsedError:
    """
    Normalized view of an arbitrary failure value.

    :param detail: Top-level human-readable detail, if any.
    :type detail: str or None
    :param code: Machine-readable error code, if any.
    :type code: str or None
    :param status_code: HTTP status, when the failure came from a response.
    :type status_code: int or None
    :param non_field_errors: Errors not tied to a single field.
    :type non_field_errors: list[str]
    :param field_errors: Validation errors per field.
    :type field_errors: dict[str, list[str]]
    """

    detail: Optional[str] = None
    code: Optional[str] = None
    status_code: Optional[int] = None
    non_field_errors: List[str] = field(default_factory=list)
    field_errors: Dict[str, List[str]] = field(default_factory=dict)


_RESERVED_KEYS = {"detail", "code", "non_field_errors", "error"}


def _as_messages(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v not in (None, "")]
    return []


def _parse_body(body: Mapping[str, Any], status_code: Optional[int] = None) -> ParsedError:
    detail = body.get("detail")
    code = body.get("code")
    # {"error": {"code": ..., "message": ...}} envelope
    envelope = body.get("error")
    if isinstance(envelope, Mapping):
        detail = detail or envelope.get("message")
        code = code or envelope.get("code")
    elif isinstance(envelope, str) and not detail:
        detail = envelope
    field_errors: Dict[str, List[str]] = {}
    for key, value in body.items():
        if key in _RESERVED_KEYS:
            continue
        messages = _as_messages(value)
        if messages:
            field_errors[str(key)] = messages
    return ParsedError(
        detail=str(detail) if detail else None,
        code=str(code) if code else None,
        status_code=status_code,
        non_field_errors=_as_messages(body.get("non_field_errors")),
        field_errors=field_errors,
    )


def _parse_response(response: requests.Response) -> ParsedError:
    status = getattr(response, "status_code", None)
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, Mapping):
        return _parse_body(body, status)
    return ParsedError(detail=getattr(response, "reason", None) or None, status_code=status)


def parse_api_error(error: Any) -> ParsedError:
    """
    Normalize a failure value raised by a caller-supplied capability.

    Understands :class:`HttpError`, :class:`requests.HTTPError`,
    :class:`requests.Response`, other :class:`BulkDeleteError` subclasses,
    JSON-like mappings, plain strings and arbitrary exceptions.

    :param error: The failure value.
    :return: Best-effort structured view; empty when nothing is extractable.
    :rtype: ParsedError
    """
    if isinstance(error, HttpError):
        body = error.details.get("body")
        if isinstance(body, Mapping):
            return _parse_body(body, error.status_code)
        return ParsedError(detail=error.message or None, code=error.subcode, status_code=error.status_code)
    if isinstance(error, BulkDeleteError):
        return ParsedError(detail=error.message or None, code=error.code, status_code=error.status_code)
    if isinstance(error, requests.HTTPError):
        if error.response is not None:
            return _parse_response(error.response)
        return ParsedError(detail=str(error) or None)
    if isinstance(error, requests.Response):
        return _parse_response(error)
    if isinstance(error, Mapping):
        return _parse_body(error)
    if isinstance(error, str):
        return ParsedError(detail=error or None)
    if isinstance(error, BaseException):
        return ParsedError(detail=str(error) or None)
    return ParsedError()


def pluck_error_detail(parsed: ParsedError) -> str:
    """
    Pick the single most useful message out of a :class:`ParsedError`.

    Preference order: ``detail``, joined ``non_field_errors``, the first field
    error, then a generic description.
    """
    if parsed.detail:
        return parsed.detail
    if parsed.non_field_errors:
        return "; ".join(parsed.non_field_errors)
    for key, messages in parsed.field_errors.items():
        return f"{key}: {messages[0]}"
    return UNKNOWN_ERROR_DETAIL


__all__ = [
    "BulkDeleteError",
    "ConfigurationError",
    "ValidationError",
    "BatchInProgressError",
    "HttpError",
    "ParsedError",
    "parse_api_error",
    "pluck_error_detail",
]
