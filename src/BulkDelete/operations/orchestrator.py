# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Confirmation and concurrent execution of a bulk delete."""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Collection, Iterable, List, Optional, Union

from ..common.constants import (
    CLASS_DANGER,
    CLASS_SECONDARY,
    DEFAULT_ACTION,
    DEFAULT_BUTTON_LABEL,
    DEFAULT_CANCEL_LABEL,
    DEFAULT_VERB,
)
from ..core._error_codes import CONFIG_CAPABILITY_NOT_CALLABLE, CONFIG_DELETE_MISSING
from ..core.config import BulkDeleteConfig
from ..core.errors import BatchInProgressError, ConfigurationError, parse_api_error, pluck_error_detail
from ..core.hooks import BatchContext, HookDispatcher
from ..core.results import BatchOutcome, MessageLevel, OutcomeMessage, TargetFailure
from ..models.metadata import MetadataCallback, default_metadata
from ..models.target import describe_target
from .lookup_table import RelationLookupTable, UsedByCallback

DeleteCallback = Callable[[Any], Union[Awaitable[Any], Any]]
Notifier = Callable[[OutcomeMessage], None]


@dataclass(frozen=True)
class DeletionLabels:
    """
    Display text of the confirmation surface and outcome messages.

    :param object_label: Plural name of the objects, e.g. ``"Users"``.
    :param action_label: Title override. Default: ``"Confirm <object_label> Deletion"``.
    :param action_subtext: Prompt override. Default: ``"Are you sure you want to delete N <object_label>?"``.
    :param button_label: Confirm button text.
    :param action: Past-tense verb of the success message, e.g. ``"deleted"`` or ``"revoked"``.
    :param verb: Present-tense verb of the prompt and failure message, e.g. ``"delete"`` or ``"revoke"``.
    :param cancel_label: Cancel button text.
    """

    object_label: Optional[str] = None
    action_label: Optional[str] = None
    action_subtext: Optional[str] = None
    button_label: str = DEFAULT_BUTTON_LABEL
    action: str = DEFAULT_ACTION
    verb: str = DEFAULT_VERB
    cancel_label: str = DEFAULT_CANCEL_LABEL

    @property
    def objects(self) -> str:
        return self.object_label or ""

    def title(self) -> str:
        return self.action_label or f"Confirm {self.objects} Deletion"

    def prompt(self, count: int) -> str:
        return self.action_subtext or f"Are you sure you want to {self.verb} {count} {self.objects}?"

    def table_label(self) -> str:
        return f"{self.objects} to be deleted"

    def confirm_button(self, count: int) -> str:
        return f"{self.button_label} {count:,} {self.objects}"

    def success(self, count: int) -> str:
        return f"Successfully {self.action} {count} {self.objects}"

    def failure(self, count: int, detail: str) -> str:
        return f"Failed to {self.verb} {count} {self.objects}: {detail}"


@dataclass(frozen=True)
class ConfirmationView:
    """Everything the confirmation surface shows."""

    title: str
    prompt: str
    count: int
    confirm_label: str
    cancel_label: str
    table: RelationLookupTable
    confirm_class: str = CLASS_DANGER
    cancel_class: str = CLASS_SECONDARY


class BatchDeletionOrchestrator:
    """
    Confirms and executes the deletion of a set of objects as one logical operation.

    :param delete: Deletes one target. Required; may return an awaitable.
    :type delete: Callable
    :param objects: Targets to delete. Can also be assigned later via :attr:`objects`.
    :type objects: Iterable
    :param used_by: Fetches the consequences of deleting one target. Enables
        expandable rows in the embedded table.
    :type used_by: Callable or None
    :param metadata: Metadata cells per target (default: Name and ID).
    :type metadata: Callable or None
    :param labels: Display text overrides.
    :type labels: DeletionLabels or None
    :param notifier: Receives the single outcome message of each confirm. Defaults to logging it.
    :type notifier: Callable or None
    :param hooks: Batch observers; see :class:`~BulkDelete.core.hooks.DeletionHook`.
    :type hooks: Iterable or None
    :param config: Logging configuration.
    :type config: BulkDeleteConfig or None

    :raises ConfigurationError: If ``delete`` is missing or not callable.

    Deletion is best-effort and non-transactional: every delete call is
    issued at once, all of them are allowed to settle, and deletions that
    succeeded stay committed when another one fails.

    Example::

        orchestrator = BatchDeletionOrchestrator(
            api.delete,
            users,
            used_by=api.used_by,
            labels=DeletionLabels(object_label="Users"),
            notifier=toasts.show,
            hooks=[RefreshListView(view)],
        )
        orchestrator.open()
        view = orchestrator.confirmation()
        outcome = await orchestrator.confirm()
    """

    def __init__(
        self,
        delete: DeleteCallback,
        objects: Iterable[Any] = (),
        *,
        used_by: Optional[UsedByCallback] = None,
        metadata: Optional[MetadataCallback] = default_metadata,
        labels: Optional[DeletionLabels] = None,
        notifier: Optional[Notifier] = None,
        hooks: Optional[Iterable[Any]] = None,
        config: Optional[BulkDeleteConfig] = None,
    ) -> None:
        self._check_callable("notifier", notifier)
        self._table: Optional[RelationLookupTable] = None
        self.delete = delete
        self.objects = objects
        self.used_by = used_by
        self.metadata = metadata
        self.labels = labels
        self._config = config or BulkDeleteConfig.from_env()
        self._logger = self._config.get_logger()
        self._notifier = notifier or self._log_message
        self._hooks = HookDispatcher(hooks, self._logger)
        self._in_flight = False
        self.is_open = False

    @property
    def delete(self) -> DeleteCallback:
        return self._delete

    @delete.setter
    def delete(self, value: DeleteCallback) -> None:
        if value is None:
            raise ConfigurationError("A delete capability is required.", subcode=CONFIG_DELETE_MISSING)
        if not callable(value):
            raise ConfigurationError("delete must be callable.", subcode=CONFIG_CAPABILITY_NOT_CALLABLE)
        self._delete = value

    @property
    def objects(self) -> Collection[Any]:
        return self._objects

    @objects.setter
    def objects(self, value: Iterable[Any]) -> None:
        self._objects = value if isinstance(value, Collection) else list(value)
        if self._table is not None:
            self._table.objects = self._objects

    @staticmethod
    def _check_callable(name: str, value: Any) -> None:
        if value is not None and not callable(value):
            raise ConfigurationError(f"{name} must be callable.", subcode=CONFIG_CAPABILITY_NOT_CALLABLE)

    def _unbind_table(self) -> None:
        # Rebuilt on next access with the current capabilities and label
        if self._table is not None:
            self._table.close()
            self._table = None

    @property
    def used_by(self) -> Optional[UsedByCallback]:
        return self._used_by

    @used_by.setter
    def used_by(self, value: Optional[UsedByCallback]) -> None:
        self._check_callable("used_by", value)
        self._used_by = value
        self._unbind_table()

    @property
    def metadata(self) -> Optional[MetadataCallback]:
        return self._metadata

    @metadata.setter
    def metadata(self, value: Optional[MetadataCallback]) -> None:
        self._check_callable("metadata", value)
        self._metadata = value
        self._unbind_table()

    @property
    def labels(self) -> DeletionLabels:
        return self._labels

    @labels.setter
    def labels(self, value: Optional[DeletionLabels]) -> None:
        self._labels = value or DeletionLabels()
        self._unbind_table()

    @property
    def hooks(self) -> HookDispatcher:
        return self._hooks

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def actionable(self) -> bool:
        """False while a batch is outstanding; a second confirm is rejected until it settles."""
        return not self._in_flight

    # ----------------------------------------------------------- the surface

    @property
    def table(self) -> RelationLookupTable:
        """The embedded lookup table, bound to the same objects and capabilities."""
        if self._table is None:
            self._table = RelationLookupTable(
                self._objects,
                metadata=self.metadata,
                used_by=self.used_by,
                label=self.labels.table_label(),
                logger=self._logger,
            )
        return self._table

    def open(self) -> ConfirmationView:
        self.is_open = True
        return self.confirmation()

    def close(self) -> None:
        """Close the surface and discard the table's relation cache."""
        self.is_open = False
        self._unbind_table()

    def cancel(self) -> None:
        """Close without side effects. An outstanding batch keeps running."""
        self.close()

    def confirmation(self) -> ConfirmationView:
        count = len(self._objects)
        return ConfirmationView(
            title=self.labels.title(),
            prompt=self.labels.prompt(count),
            count=count,
            confirm_label=self.labels.confirm_button(count),
            cancel_label=self.labels.cancel_label,
            table=self.table,
        )

    # ------------------------------------------------------------- execution

    def _log_message(self, message: OutcomeMessage) -> None:
        level = logging.ERROR if message.level is MessageLevel.ERROR else logging.INFO
        self._logger.log(level, message.message)

    async def _delete_one(self, item: Any) -> None:
        self._logger.debug("Deleting %s", describe_target(item))
        result = self._delete(item)
        if inspect.isawaitable(result):
            await result

    async def confirm(self) -> BatchOutcome:
        """
        Delete every target concurrently and report one aggregate outcome.

        The batch is a snapshot of :attr:`objects` taken now. On full success a
        success message is reported, the refresh signal is sent and the surface
        closes. Otherwise one error message carries the detail of the first
        observed failure and the surface stays open.

        Cancelling the caller does not cancel the batch: issued deletes run to
        completion and the outcome is still reported.

        :raises BatchInProgressError: If a previous batch is still outstanding.
        """
        if self._in_flight:
            raise BatchInProgressError()

        self._in_flight = True
        execution = asyncio.ensure_future(self._execute(list(self._objects)))
        return await asyncio.shield(execution)

    async def _execute(self, batch: List[Any]) -> BatchOutcome:
        context = BatchContext(batch=batch, object_label=self.labels.object_label)
        failures: List[TargetFailure] = []

        async def run(index: int, item: Any) -> None:
            try:
                await self._delete_one(item)
            except (Exception, asyncio.CancelledError) as e:
                # Appended as calls complete, so failures[0] is the first observed
                failures.append(TargetFailure(item, e, index))
                self._logger.debug("Deleting %s failed: %r", describe_target(item), e)
                self._hooks.target_error(context, item, e)

        try:
            self._hooks.batch_start(context)
            tasks = [asyncio.ensure_future(run(index, item)) for index, item in enumerate(batch)]
            await asyncio.gather(*tasks)
        finally:
            self._in_flight = False

        if not failures:
            message = OutcomeMessage(self.labels.success(len(batch)), MessageLevel.SUCCESS)
            outcome = BatchOutcome(True, len(batch), message)
            self._logger.info(
                "Deleted %d object(s) in %.1fms", len(batch), context.elapsed_ms
            )
        else:
            detail = pluck_error_detail(parse_api_error(failures[0].error))
            message = OutcomeMessage(self.labels.failure(len(batch), detail), MessageLevel.ERROR)
            outcome = BatchOutcome(False, len(batch), message, failures, detail)
            self._logger.warning(
                "Batch delete failed for %d of %d object(s): %s", len(failures), len(batch), detail
            )

        self._notifier(message)
        self._hooks.batch_end(context, outcome)
        if outcome.succeeded:
            self._hooks.refresh(outcome)
            self.close()
        return outcome


__all__ = ["DeletionLabels", "ConfirmationView", "BatchDeletionOrchestrator"]
