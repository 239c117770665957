# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Display constants for the bulk delete workflow.

These constants define the default user-facing copy and style hints used when
building confirmation views and outcome messages.
"""

# Consequence labels, one per ConsequenceAction variant
LABEL_CASCADE = "Object will be DELETED"
LABEL_CASCADE_MANY = "Connection will be deleted"
LABEL_SET_DEFAULT = "Reference will be reset to default value"
LABEL_SET_NULL = "Reference will be set to an empty value"
LABEL_UNKNOWN = "Unknown action"

NOT_USED_MESSAGE = "Not used by any other object."
"""Shown in an expanded row when the target has no consequences."""

# Default metadata
METADATA_KEY_NAME = "Name"
METADATA_KEY_ID = "ID"
CLASS_MONOSPACE = "pf-m-monospace"

# Confirmation surface defaults
DEFAULT_BUTTON_LABEL = "Delete"
DEFAULT_CANCEL_LABEL = "Cancel"
DEFAULT_ACTION = "deleted"
DEFAULT_VERB = "delete"
CLASS_DANGER = "pf-m-danger"
CLASS_SECONDARY = "pf-m-secondary"

UNKNOWN_ERROR_DETAIL = "An unknown error occurred."
"""Fallback failure detail when nothing structured can be extracted."""
