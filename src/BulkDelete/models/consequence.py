# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Consequence model for "used by" relations.

A :class:`ConsequenceRecord` describes what happens to one related object
when a target is deleted. Its :class:`ConsequenceAction` is drawn from a
closed set, and every variant has exactly one label.

Example::

    record = ConsequenceRecord(name="Default flow", action=ConsequenceAction.CASCADE)
    record.describe()  # "Default flow (Object will be DELETED)"
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from ..common.constants import (
    LABEL_CASCADE,
    LABEL_CASCADE_MANY,
    LABEL_SET_DEFAULT,
    LABEL_SET_NULL,
    LABEL_UNKNOWN,
)


class ConsequenceAction(str, Enum):
    """What deleting a target does to a related object."""

    CASCADE = "cascade"
    """The related object will itself be deleted."""

    CASCADE_MANY = "cascade_many"
    """A connecting (junction) record will be deleted."""

    SET_DEFAULT = "set_default"
    """A reference on the related object will be reset to its default."""

    SET_NULL = "set_null"
    """A reference on the related object will be cleared."""

    UNKNOWN = "unknown"
    """The action could not be classified."""

    @classmethod
    def parse(cls, value: Any) -> "ConsequenceAction":
        """
        Map a wire value onto the enumeration.

        Accepts members, their values in any case, and member names
        (``"SET_NULL"``). Anything else, including ``None``, is ``UNKNOWN``.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.UNKNOWN
        key = value.strip().lower()
        for member in cls:
            if key in (member.value, member.name.lower()):
                return member
        return cls.UNKNOWN

    @property
    def label(self) -> str:
        return consequence_label(self)


def consequence_label(action: ConsequenceAction) -> str:
    """
    Return the human-readable label for ``action``.

    :raises ValueError: If ``action`` is not a :class:`ConsequenceAction` member.
    """
    if action is ConsequenceAction.CASCADE:
        return LABEL_CASCADE
    if action is ConsequenceAction.CASCADE_MANY:
        return LABEL_CASCADE_MANY
    if action is ConsequenceAction.SET_DEFAULT:
        return LABEL_SET_DEFAULT
    if action is ConsequenceAction.SET_NULL:
        return LABEL_SET_NULL
    if action is ConsequenceAction.UNKNOWN:
        return LABEL_UNKNOWN
    raise ValueError(f"Unhandled consequence action: {action!r}")


@dataclass(frozen=True)
class ConsequenceRecord:
    """
    One relation discovered for a deletion target.

    :param name: Display name of the related object.
    :type name: str
    :param action: What deleting the target does to it.
    :type action: ConsequenceAction
    :param app: Application label of the related object's model, if known.
    :type app: str or None
    :param model_name: Model name of the related object, if known.
    :type model_name: str or None
    :param pk: Identifier of the related object, if known.
    :type pk: str or None
    """

    name: str
    action: ConsequenceAction = ConsequenceAction.UNKNOWN
    app: Optional[str] = None
    model_name: Optional[str] = None
    pk: Optional[str] = None

    def describe(self) -> str:
        """Render as ``"<name> (<label>)"``."""
        return f"{self.name} ({consequence_label(self.action)})"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConsequenceRecord":
        """Build a record from a used-by API payload."""
        pk = data.get("pk")
        return cls(
            name=str(data.get("name") or ""),
            action=ConsequenceAction.parse(data.get("action")),
            app=data.get("app"),
            model_name=data.get("model_name"),
            pk=str(pk) if pk is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "app": self.app,
            "model_name": self.model_name,
            "pk": self.pk,
            "name": self.name,
            "action": self.action.value,
        }


__all__ = ["ConsequenceAction", "ConsequenceRecord", "consequence_label"]
