from io import BytesIO

import pytest
from openpyxl import Workbook, load_workbook

from core.errors import DataServiceError, ImportParseError
from modules.catalog.entities import Component, Product, ProductComponent
from modules.catalog.kinds import COMPONENTS
from modules.costing.service import dashboard_summary
from modules.reports.excel import build_cost_report_excel, build_template, parse_components_table
from ui.importer import import_components_file


def make_xlsx(rows):
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    stream = BytesIO()
    wb.save(stream)
    return stream.getvalue()


def test_three_row_table_imports_three_components(local_service):
    data = make_xlsx(
        [
            ["Name", "Price", "Unit", "Category"],
            ["Gold Chain 2mm", 15, "meter", "Chain"],
            ["Crystal Bead", 0.5, "pcs", "Beads"],
            ["Brass Pendant", 12.75, "pcs", "Pendants"],
        ]
    )

    imported = import_components_file(local_service, data, "components.xlsx")

    assert len(imported) == 3
    assert len({c.id for c in imported}) == 3
    assert [(c.name, c.price, c.unit, c.category) for c in imported] == [
        ("Gold Chain 2mm", 15.0, "meter", "Chain"),
        ("Crystal Bead", 0.5, "pcs", "Beads"),
        ("Brass Pendant", 12.75, "pcs", "Pendants"),
    ]
    assert local_service.fetch_components() == imported


def test_headers_are_case_insensitive_and_aliased():
    data = make_xlsx([["NAME", "unit price", "UOM", "group"], ["Clasp", 2, "pack", "Findings"]])

    [component] = parse_components_table(data, "upload.xlsx")

    assert (component.name, component.price, component.unit, component.category) == ("Clasp", 2.0, "pack", "Findings")


def test_missing_cells_use_defaults():
    data = make_xlsx([["Name", "Price", "Unit", "Category"], [None, None, None, "Chain"], ["Bead", 1, None, None]])

    first, second = parse_components_table(data, "upload.xlsx")

    assert (first.name, first.price, first.unit, first.category) == ("Unknown Component", 0.0, "pcs", "Chain")
    assert (second.unit, second.category) == ("pcs", "General")


def test_blank_rows_are_skipped():
    data = make_xlsx([["Name", "Price"], ["Bead", 1], [None, None], ["Clasp", 2]])

    assert [c.name for c in parse_components_table(data, "upload.xlsx")] == ["Bead", "Clasp"]


def test_csv_import():
    data = b"Name,Price,Unit,Category\nWire,3.5,meter,Wire\nRing,1,pcs,Findings\n"

    components = parse_components_table(data, "components.csv")

    assert [(c.name, c.price) for c in components] == [("Wire", 3.5), ("Ring", 1.0)]


def test_malformed_file_persists_nothing(local_service):
    with pytest.raises(ImportParseError):
        import_components_file(local_service, b"this is not a spreadsheet", "broken.xlsx")

    assert local_service.store.read(COMPONENTS.store_key) == []


def test_bad_price_aborts_whole_import(local_service):
    data = make_xlsx([["Name", "Price"], ["Bead", 1], ["Clasp", "two"]])

    with pytest.raises(ImportParseError) as excinfo:
        import_components_file(local_service, data, "upload.xlsx")

    assert "Row 3" in str(excinfo.value)
    assert local_service.fetch_components() == []


def test_failed_store_rolls_back_earlier_rows(local_service, monkeypatch):
    existing = Component(id="keep", name="Clasp", price=2)
    local_service.add_component(existing)
    data = make_xlsx([["Name", "Price"], ["Bead", 1], ["Wire", 2], ["Ring", 3]])
    store_component = local_service.add_component

    def add_until_full(component):
        if component.name == "Ring":
            raise DataServiceError("disk full")
        return store_component(component)

    monkeypatch.setattr(local_service, "add_component", add_until_full)

    with pytest.raises(DataServiceError):
        import_components_file(local_service, data, "upload.xlsx")

    assert local_service.fetch_components() == [existing]


def test_sheet_without_known_columns_is_rejected():
    with pytest.raises(ImportParseError):
        parse_components_table(make_xlsx([["Foo", "Bar"], [1, 2]]), "upload.xlsx")


def test_component_template_round_trips_through_import():
    components = parse_components_table(build_template("component").getvalue(), "component_template.xlsx")

    assert [(c.name, c.price, c.unit, c.category) for c in components] == [("Gold Chain 2mm", 15.0, "meter", "Chain")]


def test_product_template_header():
    ws = load_workbook(build_template("product")).active
    assert [cell.value for cell in ws[1]] == ["Name", "SKU", "MakingCharges"]


def test_unknown_template_kind():
    with pytest.raises(ValueError):
        build_template("invoice")


def test_cost_report_lists_products_and_total():
    components = [Component(id="1", name="Wire", price=10, unit="meter")]
    products = [
        Product(id="p1", name="Bracelet", sku="BR-1", making_charges=5, components=[ProductComponent(component_id="1", quantity=2)]),
        Product(id="p2", name="Anklet", sku="AN-1", making_charges=3, components=[ProductComponent(component_id="gone", quantity=1)]),
    ]

    ws = load_workbook(build_cost_report_excel(dashboard_summary(products, components), "$")).active
    values = [[cell.value for cell in row] for row in ws.iter_rows()]

    assert values[0][0] == "PRODUCT COST REPORT"
    assert ["Portfolio Value:", "$28.00"] == values[5][:2]
    bracelet_row = next(row for row in values if row[0] == "Bracelet")
    assert bracelet_row[2:5] == ["$20.00", "$5.00", "$25.00"]
    anklet_row = next(row for row in values if row[0] == "Anklet")
    assert anklet_row[5] == 1
