# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Tests for the REST capability adapter."""

import asyncio
import unittest
from unittest.mock import MagicMock

from azure.core.credentials import TokenCredential

from BulkDelete.core._error_codes import HTTP_404, VALIDATION_TARGET_WITHOUT_PK
from BulkDelete.core.errors import HttpError, ValidationError
from BulkDelete.data._rest import RestCapabilities
from BulkDelete.models.consequence import ConsequenceAction
from BulkDelete.models.target import DestroyableObject
from BulkDelete.operations.orchestrator import BatchDeletionOrchestrator, DeletionLabels


def _response(status, body=None, headers=None):
    resp = MagicMock()
    resp.status_code = status
    resp.headers = headers or {}
    if body is None:
        resp.json.side_effect = ValueError("no json")
        resp.text = ""
    else:
        resp.json.return_value = body
        resp.text = str(body)
    return resp


class TestRestCapabilities(unittest.TestCase):
    def setUp(self):
        self.credential = MagicMock(spec=TokenCredential)
        self.credential.get_token.return_value = MagicMock(token="token-123")
        self.session = MagicMock()
        self.api = RestCapabilities(
            "https://auth.example.com/api/v3/",
            "/core/users/",
            self.credential,
            session=self.session,
        )
        self.user = DestroyableObject(pk="42", name="akadmin")

    def test_base_url_required(self):
        with self.assertRaises(ValueError):
            RestCapabilities("", "core/users")
        with self.assertRaises(ValueError):
            RestCapabilities("https://auth.example.com", "/")

    def test_api_root(self):
        self.assertEqual(self.api.api, "https://auth.example.com/api/v3/core/users")

    def test_delete_url_and_auth(self):
        self.session.request.return_value = _response(204)
        self.api.delete_sync(self.user)
        method, url = self.session.request.call_args.args
        self.assertEqual(method, "delete")
        self.assertEqual(url, "https://auth.example.com/api/v3/core/users/42/")
        headers = self.session.request.call_args.kwargs["headers"]
        self.assertEqual(headers["Authorization"], "Bearer token-123")
        self.credential.get_token.assert_called_with("https://auth.example.com/api/v3/.default")

    def test_pk_is_quoted(self):
        self.session.request.return_value = _response(204)
        self.api.delete_sync(DestroyableObject(pk="a/b c"))
        url = self.session.request.call_args.args[1]
        self.assertTrue(url.endswith("/core/users/a%2Fb%20c/"))

    def test_no_credential_no_auth_header(self):
        session = MagicMock()
        session.request.return_value = _response(204)
        RestCapabilities("https://auth.example.com/api/v3", "core/users", session=session).delete_sync(self.user)
        self.assertNotIn("Authorization", session.request.call_args.kwargs["headers"])

    def test_target_without_pk(self):
        with self.assertRaises(ValidationError) as ctx:
            self.api.delete_sync(DestroyableObject(name="nameless"))
        self.assertEqual(ctx.exception.subcode, VALIDATION_TARGET_WITHOUT_PK)

    def test_delete_error_status(self):
        self.session.request.return_value = _response(
            404, {"detail": "No User matches the given query."}, {"X-Request-Id": "req-1"}
        )
        with self.assertRaises(HttpError) as ctx:
            self.api.delete_sync(self.user)
        err = ctx.exception
        self.assertEqual(err.subcode, HTTP_404)
        self.assertEqual(err.message, "No User matches the given query.")
        self.assertEqual(err.details["request_id"], "req-1")
        self.assertEqual(err.details["body"], {"detail": "No User matches the given query."})

    def test_error_status_without_json(self):
        self.session.request.return_value = _response(500)
        with self.assertRaises(HttpError) as ctx:
            self.api.delete_sync(self.user)
        self.assertEqual(ctx.exception.message, "HTTP 500")
        self.assertTrue(ctx.exception.is_transient is False)

    def test_used_by(self):
        self.session.request.return_value = _response(
            200,
            [
                {"app": "authentik_core", "model_name": "token", "pk": "t1", "name": "api token", "action": "cascade"},
                {"app": "authentik_flows", "model_name": "flow", "pk": "f1", "name": "login", "action": "set_null"},
            ],
        )
        relations = self.api.used_by_sync(self.user)
        url = self.session.request.call_args.args[1]
        self.assertEqual(url, "https://auth.example.com/api/v3/core/users/42/used_by/")
        self.assertEqual([r.name for r in relations], ["api token", "login"])
        self.assertEqual(relations[1].action, ConsequenceAction.SET_NULL)
        self.assertEqual(relations[0].model_name, "token")

    def test_used_by_paginated_body(self):
        self.session.request.return_value = _response(200, {"results": [{"name": "x", "action": "???"}]})
        relations = self.api.used_by_sync(self.user)
        self.assertEqual(relations[0].action, ConsequenceAction.UNKNOWN)

    def test_async_capabilities_drive_orchestrator(self):
        self.session.request.side_effect = [_response(204), _response(403, {"detail": "Permission denied"})]
        users = [self.user, DestroyableObject(pk="43", name="other")]
        notifier = MagicMock()
        orchestrator = BatchDeletionOrchestrator(
            self.api.delete,
            users,
            used_by=self.api.used_by,
            labels=DeletionLabels(object_label="Users"),
            notifier=notifier,
        )
        outcome = asyncio.run(orchestrator.confirm())
        self.assertFalse(outcome.succeeded)
        self.assertEqual(outcome.detail, "Permission denied")
        self.assertEqual(self.session.request.call_count, 2)

    def test_close_closes_session(self):
        with self.api:
            pass
        self.session.close.assert_called_once()
