# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
REST-backed ``delete`` and ``used_by`` capabilities.

The adapter targets APIs that expose, per resource::

    DELETE {base_url}/{resource}/{pk}/
    GET    {base_url}/{resource}/{pk}/used_by/

and answer the second with a list of ``{"app", "model_name", "pk", "name", "action"}``
objects. Blocking HTTP calls run on a worker thread so the capabilities can be
awaited concurrently by the orchestrator.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests
from azure.core.credentials import TokenCredential

from ..core._auth import _AuthManager
from ..core._error_codes import VALIDATION_TARGET_WITHOUT_PK
from ..core._http import _HttpClient
from ..core.config import BulkDeleteConfig
from ..core.errors import HttpError, ValidationError, parse_api_error, pluck_error_detail
from ..models.consequence import ConsequenceRecord
from ..models.target import target_pk

_LOGGER = logging.getLogger(__name__)

_BODY_EXCERPT = 200


class RestCapabilities:
    """
    Builds the capabilities of a :class:`~BulkDelete.operations.orchestrator.BatchDeletionOrchestrator`
    for one REST resource.

    :param base_url: API root, e.g. ``"https://auth.example.com/api/v3"``. Trailing slash is removed.
    :type base_url: :class:`str`
    :param resource: Resource path below the root, e.g. ``"core/users"``.
    :type resource: :class:`str`
    :param credential: Optional Azure Identity credential used for bearer tokens.
    :type credential: ~azure.core.credentials.TokenCredential or None
    :param scope: Token scope requested from ``credential``. Default: ``"<base_url>/.default"``.
    :type scope: :class:`str` or None
    :param config: HTTP retry and timeout settings.
    :type config: ~BulkDelete.core.config.BulkDeleteConfig or None
    :param session: Optional session for connection pooling.
    :type session: :class:`requests.Session` or None

    :raises ValueError: If ``base_url`` or ``resource`` is empty.

    Example::

        with RestCapabilities(base_url, "core/users", credential) as api:
            orchestrator = BatchDeletionOrchestrator(api.delete, users, used_by=api.used_by)
            await orchestrator.confirm()
    """

    def __init__(
        self,
        base_url: str,
        resource: str,
        credential: Optional[TokenCredential] = None,
        *,
        scope: Optional[str] = None,
        config: Optional[BulkDeleteConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._base_url = (base_url or "").rstrip("/")
        if not self._base_url:
            raise ValueError("base_url is required.")
        self._resource = (resource or "").strip("/")
        if not self._resource:
            raise ValueError("resource is required.")
        self.auth = _AuthManager(credential) if credential is not None else None
        self._scope = scope or f"{self._base_url}/.default"
        self._config = config or BulkDeleteConfig.from_env()
        self._http = _HttpClient(
            retries=self._config.http_retries,
            backoff=self._config.http_backoff,
            timeout=self._config.http_timeout,
            session=session,
        )

    @property
    def api(self) -> str:
        return f"{self._base_url}/{self._resource}"

    def __enter__(self) -> "RestCapabilities":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    # ------------------------------------------------------------ internals

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.auth is not None:
            token = self.auth._acquire_token(self._scope)
            headers["Authorization"] = f"Bearer {token.access_token}"
        return headers

    def _url(self, item: Any, suffix: str = "") -> str:
        pk = target_pk(item)
        if pk is None:
            raise ValidationError(
                "Target has no identifier and cannot be addressed.",
                subcode=VALIDATION_TARGET_WITHOUT_PK,
            )
        return f"{self.api}/{quote(pk, safe='')}/{suffix}"

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        r = self._http._request(method, url, headers=self._headers(), **kwargs)
        self._raise_for_status(r)
        return r

    @staticmethod
    def _raise_for_status(r: requests.Response) -> None:
        status = r.status_code
        if status < 400:
            return
        try:
            body = r.json()
        except ValueError:
            body = None
        text = getattr(r, "text", "") or ""
        message = pluck_error_detail(parse_api_error(body)) if isinstance(body, dict) else f"HTTP {status}"
        raise HttpError(
            message,
            status,
            body=body,
            body_excerpt=text[:_BODY_EXCERPT] if text else None,
            request_id=r.headers.get("X-Request-Id") if r.headers else None,
        )

    # -------------------------------------------------------- sync variants

    def delete_sync(self, item: Any) -> None:
        """Delete one target.

        :raises HttpError: If the server answers with an error status.
        :raises ValidationError: If the target has no ``pk``.
        """
        url = self._url(item)
        _LOGGER.debug("DELETE %s", url)
        self._request("delete", url)

    def used_by_sync(self, item: Any) -> List[ConsequenceRecord]:
        """Fetch the consequences of deleting one target."""
        url = self._url(item, "used_by/")
        _LOGGER.debug("GET %s", url)
        r = self._request("get", url)
        try:
            body = r.json()
        except ValueError:
            body = []
        if isinstance(body, dict):
            body = body.get("results", [])
        return [ConsequenceRecord.from_dict(entry) for entry in body or [] if isinstance(entry, dict)]

    # ---------------------------------------------------------- capabilities

    async def delete(self, item: Any) -> None:
        await asyncio.to_thread(self.delete_sync, item)

    async def used_by(self, item: Any) -> List[ConsequenceRecord]:
        return await asyncio.to_thread(self.used_by_sync, item)


__all__ = ["RestCapabilities"]
