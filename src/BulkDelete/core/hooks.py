# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Observer hooks for batch deletions.

Hooks are how the surrounding application learns about a batch: the refresh
signal that list views use to re-query is delivered through
:meth:`DeletionHook.on_refresh`.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Protocol, runtime_checkable

from .results import BatchOutcome


@dataclass
class BatchContext:
    """Context passed to hooks for one confirm attempt."""

    batch: List[Any]
    object_label: Optional[str] = None
    start_time: float = field(default_factory=time.perf_counter)

    # Custom data bag for hooks to share state
    custom_data: Dict[str, Any] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.batch)

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.start_time) * 1000


@runtime_checkable
class DeletionHook(Protocol):
    """Protocol for batch observers.

    All methods are optional - implement only what you need.

    Example:
        class RefreshListView:
            def __init__(self, view):
                self.view = view

            def on_refresh(self, outcome: BatchOutcome) -> None:
                self.view.reload()
    """

    def on_batch_start(self, context: BatchContext) -> None:
        """Called after the batch snapshot is taken, before any delete call is issued."""
        ...

    def on_target_error(self, context: BatchContext, target: Any, error: BaseException) -> None:
        """Called for every failed delete call, in completion order."""
        ...

    def on_batch_end(self, context: BatchContext, outcome: BatchOutcome) -> None:
        """Called once all delete calls have settled."""
        ...

    def on_refresh(self, outcome: BatchOutcome) -> None:
        """Called exactly once after a fully successful batch."""
        ...


class HookDispatcher:
    """Dispatches batch events to registered hooks.

    This class is internal and not part of the public API.
    """

    def __init__(self, hooks: Optional[Iterable[Any]] = None, logger: Optional[logging.Logger] = None) -> None:
        self._hooks = list(hooks or [])
        self._logger = logger or logging.getLogger(__name__)

    def add(self, hook: Any) -> None:
        self._hooks.append(hook)

    def remove(self, hook: Any) -> None:
        self._hooks.remove(hook)

    def __len__(self) -> int:
        return len(self._hooks)

    def _dispatch(self, method: str, *args: Any) -> None:
        for hook in self._hooks:
            callback = getattr(hook, method, None)
            if callback is None:
                continue
            try:
                callback(*args)
            except Exception:
                # Hooks should not break a batch
                self._logger.exception("Hook %r failed in %s", hook, method)

    def batch_start(self, context: BatchContext) -> None:
        self._dispatch("on_batch_start", context)

    def target_error(self, context: BatchContext, target: Any, error: BaseException) -> None:
        self._dispatch("on_target_error", context, target, error)

    def batch_end(self, context: BatchContext, outcome: BatchOutcome) -> None:
        self._dispatch("on_batch_end", context, outcome)

    def refresh(self, outcome: BatchOutcome) -> None:
        self._dispatch("on_refresh", outcome)


__all__ = ["BatchContext", "DeletionHook", "HookDispatcher"]
