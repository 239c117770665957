# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Tests for batch hook dispatch."""

import logging
from unittest.mock import MagicMock

from BulkDelete.core.hooks import BatchContext, DeletionHook, HookDispatcher
from BulkDelete.core.results import BatchOutcome, MessageLevel, OutcomeMessage


def _outcome():
    return BatchOutcome(True, 1, OutcomeMessage("ok", MessageLevel.SUCCESS))


class TestBatchContext:
    def test_count_and_elapsed(self):
        ctx = BatchContext(batch=[1, 2, 3], object_label="Users")
        assert ctx.count == 3
        assert ctx.elapsed_ms >= 0
        assert ctx.custom_data == {}


class TestHookDispatcher:
    def test_dispatches_to_all_hooks(self):
        first, second = MagicMock(), MagicMock()
        dispatcher = HookDispatcher([first, second])
        ctx = BatchContext(batch=[])
        dispatcher.batch_start(ctx)
        first.on_batch_start.assert_called_once_with(ctx)
        second.on_batch_start.assert_called_once_with(ctx)

    def test_partial_hooks_are_fine(self):
        class OnlyRefresh:
            def __init__(self):
                self.refreshed = []

            def on_refresh(self, outcome):
                self.refreshed.append(outcome)

        hook = OnlyRefresh()
        dispatcher = HookDispatcher([hook])
        outcome = _outcome()
        dispatcher.batch_start(BatchContext(batch=[]))
        dispatcher.refresh(outcome)
        assert hook.refreshed == [outcome]

    def test_failing_hook_is_logged_not_raised(self, caplog):
        bad, good = MagicMock(), MagicMock()
        bad.on_refresh.side_effect = RuntimeError("hook broke")
        dispatcher = HookDispatcher([bad, good], logging.getLogger("BulkDelete.tests"))
        with caplog.at_level(logging.ERROR, logger="BulkDelete.tests"):
            dispatcher.refresh(_outcome())
        good.on_refresh.assert_called_once()
        assert "on_refresh" in caplog.text

    def test_add_remove(self):
        hook = MagicMock()
        dispatcher = HookDispatcher()
        dispatcher.add(hook)
        assert len(dispatcher) == 1
        dispatcher.remove(hook)
        assert len(dispatcher) == 0

    def test_protocol_runtime_check(self):
        class Full:
            def on_batch_start(self, context):
                pass

            def on_target_error(self, context, target, error):
                pass

            def on_batch_end(self, context, outcome):
                pass

            def on_refresh(self, outcome):
                pass

        assert isinstance(Full(), DeletionHook)
