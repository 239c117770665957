# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Common constants shared across the bulk delete workflow.
"""

__all__ = []
