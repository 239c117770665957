# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Operation classes for the bulk delete workflow:

- RelationLookupTable: targets, metadata columns and cached "used by" lookups
- BatchDeletionOrchestrator: confirmation and concurrent batch execution
"""

__all__ = []
