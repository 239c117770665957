# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Data models for the bulk delete workflow.

- :class:`~BulkDelete.models.target.DestroyableObject`: Minimal deletion target.
- :class:`~BulkDelete.models.consequence.ConsequenceRecord`: One "used by" relation.
- :class:`~BulkDelete.models.metadata.MetadataField`: One metadata column value.

Note:
    This ``__init__.py`` does NOT import/export models. Import directly from
    the specific module files.
"""

__all__ = []
