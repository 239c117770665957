# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Internal pandas helpers"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Sequence

import pandas as pd

from ..models.metadata import MetadataField


def cells_to_record(cells: Iterable[MetadataField]) -> Dict[str, Any]:
    """Convert one row's metadata fields to a ``{key: value}`` dict. Later duplicates win."""
    return {cell.key: cell.value for cell in cells}


def rows_to_dataframe(rows: Iterable[Sequence[MetadataField]], columns: List[str]) -> pd.DataFrame:
    """Build a DataFrame restricted to ``columns``.

    :param rows: Metadata cells per row.
    :param columns: Fixed column set. Keys outside it are dropped; columns a row
        does not produce are left as missing values.
    """
    return pd.DataFrame([cells_to_record(cells) for cells in rows], columns=columns)
