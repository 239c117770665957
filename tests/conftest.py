# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared pytest fixtures and configuration for bulk delete tests.

This module provides common test fixtures and fake capabilities that can be
used across all test modules.
"""

import asyncio

import pytest

from BulkDelete.core.config import BulkDeleteConfig
from BulkDelete.models.consequence import ConsequenceAction, ConsequenceRecord
from BulkDelete.models.target import DestroyableObject


class RecordingDelete:
    """Async delete capability that records calls and fails for selected targets.

    Args:
        fail: Targets (by identity) whose deletion raises ``error_factory(target)``.
        delays: Optional per-target sleep, to control completion order.
    """

    def __init__(self, fail=(), delays=None, error_factory=None):
        self._fail = list(fail)
        self._delays = delays or {}
        self._error_factory = error_factory or (lambda item: RuntimeError(f"cannot delete {item.name}"))
        self.calls = []
        self.deleted = []

    async def __call__(self, item):
        self.calls.append(item)
        await asyncio.sleep(self._delays.get(id(item), 0))
        if any(item is f for f in self._fail):
            raise self._error_factory(item)
        self.deleted.append(item)


class RecordingUsedBy:
    """Async used-by capability returning canned relations and counting calls."""

    def __init__(self, relations=None, error=None, delay=0):
        self._relations = relations or {}
        self._error = error
        self._delay = delay
        self.calls = []

    async def __call__(self, item):
        self.calls.append(item)
        await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return list(self._relations.get(id(item), []))


@pytest.fixture
def targets():
    """Three targets with both name and pk."""
    return [
        DestroyableObject(pk="1", name="alice"),
        DestroyableObject(pk="2", name="bob"),
        DestroyableObject(pk="3", name="carol"),
    ]


@pytest.fixture
def sample_relations():
    return [
        ConsequenceRecord(name="A", action=ConsequenceAction.CASCADE),
        ConsequenceRecord(name="B", action=ConsequenceAction.SET_NULL),
    ]


@pytest.fixture
def test_config():
    """Test configuration with safe defaults."""
    return BulkDeleteConfig(http_retries=1, http_backoff=0.0, http_timeout=5, logger_name="BulkDelete.tests")


@pytest.fixture
def recording_delete():
    return RecordingDelete


@pytest.fixture
def recording_used_by():
    return RecordingUsedBy


@pytest.fixture
def run():
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run
