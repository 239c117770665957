# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

# HTTP subcode constants
HTTP_400 = "http_400"
HTTP_401 = "http_401"
HTTP_403 = "http_403"
HTTP_404 = "http_404"
HTTP_409 = "http_409"
HTTP_429 = "http_429"
HTTP_500 = "http_500"
HTTP_502 = "http_502"
HTTP_503 = "http_503"
HTTP_504 = "http_504"

TRANSIENT_STATUS = {429, 502, 503, 504}

# Configuration subcodes
CONFIG_DELETE_MISSING = "config_delete_missing"
CONFIG_CAPABILITY_NOT_CALLABLE = "config_capability_not_callable"

# Validation subcodes
VALIDATION_BATCH_IN_PROGRESS = "validation_batch_in_progress"
VALIDATION_TARGET_WITHOUT_PK = "validation_target_without_pk"


def _http_subcode(status: int) -> str:
    return f"http_{status}"


def _is_transient_status(status: int) -> bool:
    return status in TRANSIENT_STATUS
