# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Deletion targets and identity-keyed helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class DeletionTarget(Protocol):
    """Any object exposing an optional ``pk`` and an optional ``name``."""

    pk: Optional[str]
    name: Optional[str]


@dataclass(eq=False)
class DestroyableObject:
    """
    Minimal deletion target.

    Compares and hashes by identity, so two instances with the same ``pk`` are
    distinct targets.

    :param pk: Unique identifier, if known.
    :type pk: str or None
    :param name: Display name, if any.
    :type name: str or None
    """

    pk: Optional[str] = None
    name: Optional[str] = None


def _read(target: Any, key: str) -> Any:
    if isinstance(target, Mapping):
        return target.get(key)
    return getattr(target, key, None)


def target_pk(target: Any) -> Optional[str]:
    """Return the target's identifier as a string, or None when it has none."""
    value = _read(target, "pk")
    if value is None or value == "":
        return None
    return str(value)


def target_name(target: Any) -> Optional[str]:
    """Return the target's display name, or None when it has none."""
    value = _read(target, "name")
    if value is None or value == "":
        return None
    return str(value)


def describe_target(target: Any) -> str:
    """Short description for log lines."""
    name = target_name(target)
    pk = target_pk(target)
    if name and pk:
        return f"{name} ({pk})"
    return name or pk or f"<{type(target).__name__} at {id(target):#x}>"


__all__ = ["DeletionTarget", "DestroyableObject", "target_pk", "target_name", "describe_target"]
