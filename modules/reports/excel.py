from datetime import datetime
from io import BytesIO
from typing import Any, Dict, List, Optional

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from pydantic import ValidationError

from core.errors import ImportParseError
from core.settings import DEFAULT_CATEGORY, DEFAULT_UNIT
from modules.catalog.entities import Component, new_id

DEFAULT_COMPONENT_NAME = "Unknown Component"

HEADER_ALIASES = {
    "name": {"name", "component", "component name", "item", "item name"},
    "price": {"price", "unit price", "cost", "rate"},
    "unit": {"unit", "uom", "units"},
    "category": {"category", "group", "type"},
}

TEMPLATES = {
    "component": (["Name", "Price", "Unit", "Category"], [["Gold Chain 2mm", 15, "meter", "Chain"]]),
    "product": (["Name", "SKU", "MakingCharges"], [["Necklace Set A1", "NK-001", 50]]),
}

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _create_styles():
    """Create reusable style definitions."""
    thin_border = Side(style="thin", color="000000")
    return {
        "title_font": Font(bold=True, size=14),
        "section_font": Font(bold=True, size=11),
        "header_font": Font(bold=True, size=10),
        "header_fill": PatternFill(start_color="FCE8B2", end_color="FCE8B2", fill_type="solid"),
        "warning_fill": PatternFill(start_color="FFF2CC", end_color="FFF2CC", fill_type="solid"),
        "subtotal_font": Font(bold=True),
        "border": Border(left=thin_border, right=thin_border, top=thin_border, bottom=thin_border),
        "center_align": Alignment(horizontal="center", vertical="center"),
        "right_align": Alignment(horizontal="right", vertical="center"),
        "left_align": Alignment(horizontal="left", vertical="center"),
    }


def _apply_header_row(ws, row: int, columns: List[str], styles: dict):
    for col_idx, col_name in enumerate(columns, start=1):
        cell = ws.cell(row=row, column=col_idx, value=col_name)
        cell.font = styles["header_font"]
        cell.fill = styles["header_fill"]
        cell.border = styles["border"]
        cell.alignment = styles["center_align"]


def _apply_data_row(ws, row: int, values: List[Any], styles: dict, alignments: List[str] = None):
    for col_idx, value in enumerate(values, start=1):
        cell = ws.cell(row=row, column=col_idx, value=value)
        cell.border = styles["border"]
        if alignments and col_idx <= len(alignments):
            align_type = alignments[col_idx - 1]
            cell.alignment = styles.get(f"{align_type}_align", styles["left_align"])


def _set_column_widths(ws, widths: List[int]):
    for col_idx, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = width


def _format_currency(value: float, symbol: str = "") -> str:
    if value is None:
        return "-"
    return f"{symbol}{value:,.2f}"


def _save(wb: Workbook) -> BytesIO:
    stream = BytesIO()
    wb.save(stream)
    stream.seek(0)
    return stream


# --- bulk import ---


def _read_frame(data: bytes, filename: str) -> pd.DataFrame:
    buffer = BytesIO(data)
    try:
        if filename.lower().endswith(".csv"):
            return pd.read_csv(buffer, dtype=object)
        return pd.read_excel(buffer, sheet_name=0, dtype=object)
    except Exception as exc:
        raise ImportParseError(f"Could not read {filename}: {exc}") from exc


def _map_columns(columns) -> Dict[str, Any]:
    mapping: Dict[str, Any] = {}
    for column in columns:
        key = str(column).strip().lower()
        for field_name, aliases in HEADER_ALIASES.items():
            if key in aliases and field_name not in mapping:
                mapping[field_name] = column
    return mapping


def _cell(row: pd.Series, column) -> Optional[Any]:
    if column is None:
        return None
    value = row[column]
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def parse_components_table(data: bytes, filename: str) -> List[Component]:
    """Turn an uploaded sheet into new components with fresh ids.

    Either every row converts or ImportParseError is raised and nothing is
    returned.
    """
    frame = _read_frame(data, filename)
    mapping = _map_columns(frame.columns)
    if not mapping:
        raise ImportParseError("No Name, Price, Unit or Category column found; please use the template")

    components: List[Component] = []
    for row_number, (_, row) in enumerate(frame.iterrows(), start=2):
        cells = {field_name: _cell(row, mapping.get(field_name)) for field_name in HEADER_ALIASES}
        if all(value is None for value in cells.values()):
            continue
        raw_price = cells["price"]
        try:
            price = float(raw_price) if raw_price is not None else 0.0
        except (TypeError, ValueError) as exc:
            raise ImportParseError(f"Row {row_number}: price {raw_price!r} is not a number") from exc
        try:
            components.append(
                Component(
                    id=new_id(),
                    name=str(cells["name"]).strip() if cells["name"] is not None else DEFAULT_COMPONENT_NAME,
                    price=price,
                    unit=str(cells["unit"]).strip() if cells["unit"] is not None else DEFAULT_UNIT,
                    category=str(cells["category"]).strip() if cells["category"] is not None else DEFAULT_CATEGORY,
                )
            )
        except ValidationError as exc:
            raise ImportParseError(f"Row {row_number}: {exc.errors()[0]['msg']}") from exc
    return components


def build_template(kind: str) -> BytesIO:
    """Workbook with the expected header and one sample row."""
    if kind not in TEMPLATES:
        raise ValueError(f"Unknown template kind: {kind}")
    columns, rows = TEMPLATES[kind]
    wb = Workbook()
    ws = wb.active
    ws.title = "Template"
    styles = _create_styles()
    _apply_header_row(ws, 1, columns, styles)
    for row_idx, values in enumerate(rows, start=2):
        _apply_data_row(ws, row_idx, values, styles)
    _set_column_widths(ws, [25] + [15] * (len(columns) - 1))
    return _save(wb)


# --- cost report ---


def build_cost_report_excel(summary: Dict[str, Any], currency_symbol: str = "") -> BytesIO:
    """Generate a formatted cost report from ``dashboard_summary`` output."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Cost Report"
    styles = _create_styles()

    current_row = 1
    ws.cell(row=current_row, column=1, value="PRODUCT COST REPORT").font = styles["title_font"]
    ws.merge_cells(start_row=current_row, start_column=1, end_row=current_row, end_column=6)
    current_row += 2

    header_info = [
        ("Report Date:", datetime.now().strftime("%Y-%m-%d")),
        ("Products:", summary.get("total_products", 0)),
        ("Components:", summary.get("total_components", 0)),
        ("Portfolio Value:", _format_currency(summary.get("portfolio_value", 0.0), currency_symbol)),
    ]
    for label, value in header_info:
        ws.cell(row=current_row, column=1, value=label).font = Font(bold=True)
        ws.cell(row=current_row, column=2, value=value)
        current_row += 1

    current_row += 1
    ws.cell(row=current_row, column=1, value="PRODUCTS").font = styles["section_font"]
    current_row += 1

    columns = ["Product", "SKU", "Material Cost", "Making Charges", "Total Cost", "Missing Components"]
    _apply_header_row(ws, current_row, columns, styles)
    current_row += 1

    alignments = ["left", "center", "right", "right", "right", "center"]
    products = summary.get("products", [])
    for item in products:
        row_values = [
            item.get("name", "-"),
            item.get("sku", "-"),
            _format_currency(item.get("material_cost", 0.0), currency_symbol),
            _format_currency(item.get("making_charges", 0.0), currency_symbol),
            _format_currency(item.get("total_cost", 0.0), currency_symbol),
            item.get("missing_components", 0),
        ]
        _apply_data_row(ws, current_row, row_values, styles, alignments)
        if item.get("missing_components"):
            for col in range(1, len(columns) + 1):
                ws.cell(row=current_row, column=col).fill = styles["warning_fill"]
        current_row += 1

    subtotal_values = [
        "TOTAL",
        "",
        _format_currency(sum(p.get("material_cost", 0.0) for p in products), currency_symbol),
        _format_currency(sum(p.get("making_charges", 0.0) for p in products), currency_symbol),
        _format_currency(summary.get("portfolio_value", 0.0), currency_symbol),
        sum(p.get("missing_components", 0) for p in products),
    ]
    _apply_data_row(ws, current_row, subtotal_values, styles, alignments)
    for col in range(1, len(columns) + 1):
        ws.cell(row=current_row, column=col).font = styles["subtotal_font"]

    _set_column_widths(ws, [30, 14, 16, 16, 16, 20])
    return _save(wb)
