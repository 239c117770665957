# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Metadata columns shown for each deletion target."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

from ..common.constants import CLASS_MONOSPACE, METADATA_KEY_ID, METADATA_KEY_NAME
from .target import target_name, target_pk


@dataclass(frozen=True)
class MetadataField:
    """
    One column's content for one target.

    :param key: Column header.
    :type key: str
    :param value: Cell text.
    :type value: str
    :param class_name: Optional style class for the cell.
    :type class_name: str or None
    """

    key: str
    value: str
    class_name: Optional[str] = None


MetadataCallback = Callable[[Any], Iterable[MetadataField]]


def default_metadata(item: Any) -> List[MetadataField]:
    """Name (when present) followed by a monospace ID (when present)."""
    meta: List[MetadataField] = []
    name = target_name(item)
    if name:
        meta.append(MetadataField(METADATA_KEY_NAME, name))
    pk = target_pk(item)
    if pk:
        meta.append(MetadataField(METADATA_KEY_ID, pk, class_name=CLASS_MONOSPACE))
    return meta


__all__ = ["MetadataField", "MetadataCallback", "default_metadata"]
