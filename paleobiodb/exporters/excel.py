"""
Excel exporter with a styled header row.

Exports result tables to Excel format with:
- Yellow highlighting for rows without coordinates
- Proper column widths
- Frozen header row
"""

from __future__ import annotations

from pathlib import Path

import openpyxl
import pandas as pd
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from paleobiodb.utils import find_coordinate_columns, get_logger


def strip_illegal_characters(df: pd.DataFrame) -> pd.DataFrame:
    """Remove control characters that worksheets cannot store from text columns."""
    df = df.copy()
    for column in df.columns:
        series = df[column]
        if pd.api.types.is_object_dtype(series) or pd.api.types.is_string_dtype(series):
            df[column] = series.map(
                lambda v: ILLEGAL_CHARACTERS_RE.sub("", v) if isinstance(v, str) else v
            )
    return df


class ExcelExporter:
    """
    Export a result table to Excel format.

    Example:
        exporter = ExcelExporter()
        exporter.export(df, "output.xlsx", highlight_missing_coords=True)
    """

    YELLOW_FILL = PatternFill(start_color="FFF2CC", end_color="FFF2CC", fill_type="solid")

    HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")

    HEADER_FONT = Font(color="FFFFFF", bold=True)

    def __init__(self, sheet_title: str = "PBDB Data"):
        """
        Initialize the exporter.

        Args:
            sheet_title: Title of the worksheet
        """
        self.sheet_title = sheet_title
        self.logger = get_logger()

    def export(
        self,
        df: pd.DataFrame,
        output_path: str | Path,
        styled: bool = True,
        highlight_missing_coords: bool = True,
        **kwargs,
    ) -> Path:
        """
        Export a table to an Excel file.

        Args:
            df: Result table
            output_path: Output file path
            styled: Apply header styling, widths and frozen header
            highlight_missing_coords: Highlight rows without coordinates

        Returns:
            Path to the created file
        """
        output_path = Path(output_path)

        if output_path.suffix.lower() != ".xlsx":
            output_path = output_path.with_suffix(".xlsx")

        self.logger.info(f"Exporting {len(df):,} rows to Excel...")
        df = strip_illegal_characters(df)

        if not styled:
            df.to_excel(output_path, index=False, engine="openpyxl", sheet_name=self.sheet_title)
            self.logger.info(f"Excel file saved: {output_path}")
            return output_path

        self._export_with_styling(df, output_path, highlight_missing_coords)
        return output_path

    def _export_with_styling(
        self,
        df: pd.DataFrame,
        output_path: Path,
        highlight_missing_coords: bool,
    ) -> None:
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = self.sheet_title

        for col_idx, column in enumerate(df.columns, start=1):
            cell = ws.cell(row=1, column=col_idx, value=str(column))
            cell.fill = self.HEADER_FILL
            cell.font = self.HEADER_FONT
            cell.alignment = Alignment(horizontal="center")

        coords = find_coordinate_columns(df.columns)
        coord_positions = (
            [df.columns.get_loc(name) for name in coords] if coords else []
        )

        # NaN becomes an empty cell
        values = df.astype(object).where(df.notna(), None)

        for row_idx, row in enumerate(values.itertuples(index=False), start=2):
            for col_idx, value in enumerate(row, start=1):
                cell = ws.cell(row=row_idx, column=col_idx, value=value)

                if isinstance(value, str) and value.startswith("http"):
                    cell.hyperlink = value
                    cell.font = Font(color="0563C1", underline="single")

            missing = any(row[pos] is None for pos in coord_positions)
            if highlight_missing_coords and missing:
                for col_idx in range(1, len(row) + 1):
                    ws.cell(row=row_idx, column=col_idx).fill = self.YELLOW_FILL

        # Sample first 100 rows for width calculation, max 50 characters
        for col_idx, column in enumerate(df.columns, start=1):
            max_length = len(str(column))
            for value in values.iloc[:100, col_idx - 1]:
                if value is not None:
                    max_length = max(max_length, len(str(value)))

            ws.column_dimensions[get_column_letter(col_idx)].width = min(max_length + 2, 50)

        ws.freeze_panes = "A2"

        wb.save(output_path)
        self.logger.info(f"Excel file saved with styling: {output_path}")
