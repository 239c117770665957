# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Walk through a bulk delete against an in-memory store.

Run from the repository root::

    python examples/quickstart.py
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add src to PYTHONPATH for local runs
sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from BulkDelete.models.consequence import ConsequenceAction, ConsequenceRecord
from BulkDelete.models.target import DestroyableObject
from BulkDelete.operations.orchestrator import BatchDeletionOrchestrator, DeletionLabels


class InMemoryStore:
    def __init__(self, users):
        self.users = {user.pk: user for user in users}
        self.protected = {"akadmin"}

    async def delete(self, user):
        await asyncio.sleep(0.01)
        if user.name in self.protected:
            raise RuntimeError(f"{user.name} is protected")
        self.users.pop(user.pk, None)

    async def used_by(self, user):
        await asyncio.sleep(0.01)
        return [
            ConsequenceRecord(f"{user.name}'s API token", ConsequenceAction.CASCADE),
            ConsequenceRecord("Default enrollment flow", ConsequenceAction.SET_NULL),
        ]


class PrintRefresh:
    def on_refresh(self, outcome):
        print(f"refresh: {outcome.count} object(s) gone")


async def main():
    users = [DestroyableObject(pk=str(i), name=name) for i, name in enumerate(["alice", "bob", "akadmin"], 1)]
    store = InMemoryStore(users)
    orchestrator = BatchDeletionOrchestrator(
        store.delete,
        users,
        used_by=store.used_by,
        labels=DeletionLabels(object_label="Users"),
        notifier=lambda message: print(f"[{message.level.value}] {message.message}"),
        hooks=[PrintRefresh()],
    )

    view = orchestrator.open()
    print(view.title)
    print(view.prompt)
    print(view.table.to_dataframe().to_string(index=False))
    for row in await view.table.expand_all():
        print(f"\n{row.target.name}:\n{row.summary}")

    outcome = await orchestrator.confirm()
    print(f"\nsurface open: {orchestrator.is_open}, remaining: {sorted(store.users)}")

    # Retry without the protected user
    orchestrator.objects = [user for user in users if user.name not in store.protected]
    outcome = await orchestrator.confirm()
    print(f"surface open: {orchestrator.is_open}, succeeded: {outcome.succeeded}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
