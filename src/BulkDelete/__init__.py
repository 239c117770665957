# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Dependency-aware bulk deletion workflow.

Import the public types from their modules:

- :class:`~BulkDelete.operations.orchestrator.BatchDeletionOrchestrator`
- :class:`~BulkDelete.operations.lookup_table.RelationLookupTable`
- :class:`~BulkDelete.models.consequence.ConsequenceRecord`
- :class:`~BulkDelete.models.metadata.MetadataField`
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
