from __future__ import annotations

import io
from typing import Mapping, Sequence

import pandas as pd

from ..core.constants import EXPORT_HEADERS, EXPORT_SHEET_NAME


def build_workbook(
    rows: Sequence[Mapping[str, str]],
    headers: Sequence[str] = EXPORT_HEADERS,
    *,
    sheet_name: str = EXPORT_SHEET_NAME,
) -> bytes:
    """Render rows as a single-sheet .xlsx in memory.

    Columns follow `headers` exactly; an empty row list still yields the header row.
    """

    df = pd.DataFrame([{h: row.get(h, "") for h in headers} for row in rows], columns=list(headers))

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    return output.getvalue()
