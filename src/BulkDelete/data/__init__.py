# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Capability adapters backed by a remote API.
"""

__all__ = []
