# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Result types for bulk delete operations.

- :class:`MessageLevel`: Severity of a user-facing message.
- :class:`OutcomeMessage`: The single message reported per confirm attempt.
- :class:`TargetFailure`: One failed delete call inside a batch.
- :class:`BatchOutcome`: Aggregate result of a confirm attempt.

Example::

    outcome = await orchestrator.confirm()
    if not outcome.succeeded:
        print(outcome.detail)
        for failure in outcome.failures:
            print(failure.target, failure.error)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional


class MessageLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class OutcomeMessage:
    """
    User-visible message handed to the notifier.

    :param message: Interpolated text, e.g. ``"Successfully deleted 3 Users"``.
    :type message: :class:`str`
    :param level: Severity used by the message display.
    :type level: :class:`MessageLevel`
    """

    message: str
    level: MessageLevel


@dataclass(frozen=True)
class TargetFailure:
    """
    One delete call that failed.

    :param target: The target whose delete call failed.
    :param error: The exception raised by the delete capability.
    :param index: Position of the target in the batch snapshot.
    """

    target: Any
    error: BaseException
    index: int


@dataclass(frozen=True)
class BatchOutcome:
    """
    Aggregate result of one confirm attempt.

    :param succeeded: True only if every delete call succeeded.
    :type succeeded: :class:`bool`
    :param count: Number of targets in the batch snapshot.
    :type count: :class:`int`
    :param message: The message that was reported for this attempt.
    :type message: :class:`OutcomeMessage`
    :param failures: Failed calls in the order they were observed.
    :type failures: :class:`list` of :class:`TargetFailure`
    :param detail: Readable detail extracted from the first observed failure.
    :type detail: :class:`str` | None
    """

    succeeded: bool
    count: int
    message: OutcomeMessage
    failures: List[TargetFailure] = field(default_factory=list)
    detail: Optional[str] = None

    @property
    def first_failure(self) -> Optional[TargetFailure]:
        return self.failures[0] if self.failures else None

    @property
    def deleted_count(self) -> int:
        """Number of delete calls that completed without error."""
        return self.count - len(self.failures)

    def __bool__(self) -> bool:
        return self.succeeded
