# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Core infrastructure components for the bulk delete workflow.

This module contains the foundational components including authentication,
configuration, HTTP client, error handling and batch hooks.
"""

__all__ = []
