from typing import Any, Dict, List

import streamlit as st

from core.errors import DataServiceError, ImportParseError
from core.logging_config import configure_logging
from core.settings import DEFAULT_UNITS, get_settings
from modules.advisor.service import CostAdvisor
from modules.catalog.entities import (
    Component,
    Product,
    ProductComponent,
    add_to_recipe,
    new_id,
    remove_from_recipe,
    set_recipe_quantity,
)
from modules.costing.service import compute_cost, dashboard_summary, product_cost
from modules.reports.excel import XLSX_MIME, build_cost_report_excel, build_template
from ui import components as ui
from ui.data_service import DataService, build_data_service
from ui.importer import import_components_file
from ui.seed import load_initial_data
from ui.texts_en import (
    APP_TITLE,
    BTN_ADD,
    BTN_ANALYZE,
    BTN_COMPONENT_TEMPLATE,
    BTN_DELETE,
    BTN_DOWNLOAD_REPORT,
    BTN_IMPORT,
    BTN_PRODUCT_TEMPLATE,
    BTN_SAVE_PRODUCT,
    ERR_IMPORT,
    ERR_NAME_REQUIRED,
    ERR_PRICE_REQUIRED,
    ERR_PRODUCT_NAME_REQUIRED,
    LBL_CATEGORY,
    LBL_IMPORT_FILE,
    LBL_MAKING_CHARGES,
    LBL_NAME,
    LBL_PRICE,
    LBL_QUANTITY,
    LBL_SEARCH_COMPONENT,
    LBL_SEARCH_PRODUCT,
    LBL_SKU,
    LBL_UNIT,
    MSG_ANALYZE_HINT,
    MSG_COMPONENT_DELETED,
    MSG_COMPONENT_SAVED,
    MSG_IMPORTED,
    MSG_NEED_COMPONENTS,
    MSG_NO_PRODUCTS,
    MSG_PRODUCT_DELETED,
    MSG_PRODUCT_SAVED,
    PAGE_COMPONENTS,
    PAGE_DASHBOARD,
    PAGE_PRODUCTS,
)

settings = get_settings()
configure_logging(settings.log_level)

st.set_page_config(page_title=APP_TITLE, layout="wide")


@st.cache_resource
def get_service() -> DataService:
    return build_data_service(settings)


@st.cache_resource
def get_advisor() -> CostAdvisor:
    return CostAdvisor(settings)


def flash(message: str, kind: str = "success"):
    st.session_state["flash_message"] = message
    st.session_state["flash_type"] = kind


def search_filter(items: List[Any], text: str, keys: List[str]) -> List[Any]:
    if not text.strip():
        return items
    t = text.strip().lower()
    return [i for i in items if any(t in str(getattr(i, k, "")).lower() for k in keys)]


def dashboard_page(products: List[Product], components: List[Component]):
    st.header(PAGE_DASHBOARD)
    symbol = settings.currency_symbol
    summary = dashboard_summary(products, components)
    ui.metric_row(
        [
            {"label": "Total Products", "value": summary["total_products"]},
            {"label": "Total Components", "value": summary["total_components"]},
            {"label": "Portfolio Value", "value": ui.money(summary["portfolio_value"], symbol)},
        ]
    )

    rows: List[Dict[str, Any]] = [
        {
            "Product": p["name"],
            "SKU": p["sku"],
            "Material": ui.money(p["material_cost"], symbol),
            "Making": ui.money(p["making_charges"], symbol),
            "Total": ui.money(p["total_cost"], symbol),
        }
        for p in summary["products"]
    ]
    ui.render_table("Product Costs", rows, ["Product", "SKU", "Material", "Making", "Total"])
    st.download_button(
        label=BTN_DOWNLOAD_REPORT,
        data=build_cost_report_excel(summary, symbol).getvalue(),
        file_name="cost_report.xlsx",
        mime=XLSX_MIME,
        key="cost_report_download",
    )

    st.markdown("---")
    st.subheader("✨ AI Cost Advisor")
    if st.button(BTN_ANALYZE, disabled=not products, key="advisor_run"):
        with st.spinner("Analyzing..."):
            st.session_state["analysis"] = get_advisor().analyze(products, components)
    analysis = st.session_state.get("analysis")
    if analysis is None:
        ui.info(MSG_ANALYZE_HINT)
    else:
        st.write(analysis.analysis)
        for i, suggestion in enumerate(analysis.suggestions, start=1):
            st.markdown(f"{i}. {suggestion}")


def add_component_form(service: DataService, components: List[Component]):
    st.subheader("Quick Add")
    cols = st.columns([3, 1, 1, 2])
    name = cols[0].text_input(LBL_NAME, placeholder="e.g. 2mm Gold Bead", key="component_name")
    price = cols[1].number_input(LBL_PRICE, min_value=0.0, value=0.0, step=0.5, key="component_price")
    unit = cols[2].selectbox(LBL_UNIT, DEFAULT_UNITS, key="component_unit")
    category = cols[3].text_input(LBL_CATEGORY, value="General", key="component_category")
    if st.button(BTN_ADD, key="component_add"):
        if not name.strip():
            ui.error(ERR_NAME_REQUIRED)
            return
        if price <= 0:
            ui.error(ERR_PRICE_REQUIRED)
            return
        component = Component(
            id=new_id(),
            name=name.strip(),
            price=price,
            unit=unit,
            category=category.strip() or "General",
        )
        try:
            service.add_component(component)
        except DataServiceError as exc:
            ui.error(f"Component could not be saved: {exc}")
            return
        components.append(component)
        flash(MSG_COMPONENT_SAVED)
        st.rerun()


def import_block(service: DataService, components: List[Component]):
    cols = st.columns(3)
    cols[0].download_button(
        BTN_COMPONENT_TEMPLATE,
        data=build_template("component").getvalue(),
        file_name="component_template.xlsx",
        mime=XLSX_MIME,
        key="component_template",
    )
    cols[1].download_button(
        BTN_PRODUCT_TEMPLATE,
        data=build_template("product").getvalue(),
        file_name="product_template.xlsx",
        mime=XLSX_MIME,
        key="product_template",
    )
    upload = st.file_uploader(LBL_IMPORT_FILE, type=["xlsx", "csv"], key="component_upload")
    if upload is not None and st.button(BTN_IMPORT, key="component_import"):
        try:
            imported = import_components_file(service, upload.getvalue(), upload.name)
        except (ImportParseError, DataServiceError):
            ui.error(ERR_IMPORT)
            return
        components.extend(imported)
        flash(MSG_IMPORTED.format(count=len(imported)))
        st.rerun()


def components_page(service: DataService, components: List[Component]):
    st.header(PAGE_COMPONENTS)
    st.caption("Manage raw materials and their unit prices.")
    import_block(service, components)
    st.markdown("---")
    add_component_form(service, components)
    st.markdown("---")

    search = st.text_input(LBL_SEARCH_COMPONENT, key="component_search")
    filtered = search_filter(components, search, ["name", "category"])
    if not filtered:
        ui.info("No components found.")
        return
    for comp in filtered:
        cols = st.columns([3, 2, 1, 2, 1])
        cols[0].write(f"**{comp.name}**")
        cols[1].write(comp.category)
        cols[2].write(comp.unit)
        new_price = cols[3].number_input(
            LBL_PRICE, min_value=0.0, value=float(comp.price), step=0.5, key=f"price_{comp.id}",
            label_visibility="collapsed",
        )
        if new_price != comp.price:
            updated = comp.model_copy(update={"price": new_price})
            try:
                service.update_component(updated)
            except DataServiceError as exc:
                ui.error(f"Price could not be updated: {exc}")
            else:
                components[components.index(comp)] = updated
                st.rerun()
        if cols[4].button(BTN_DELETE, key=f"delete_component_{comp.id}"):
            try:
                service.delete_component(comp.id)
            except DataServiceError as exc:
                ui.error(f"Component could not be deleted: {exc}")
            else:
                components.remove(comp)
                flash(MSG_COMPONENT_DELETED, "warning")
                st.rerun()


def _recipe_qty_key(component_id: str) -> str:
    return f"recipe_qty_{component_id}"


def _add_recipe_line(by_label: Dict[str, Component]):
    component_id = by_label[st.session_state["recipe_pick"]].id
    recipe = add_to_recipe(st.session_state["recipe"], component_id)
    st.session_state["recipe"] = recipe
    # The quantity input reads its value from this key
    for line in recipe:
        if line.component_id == component_id:
            st.session_state[_recipe_qty_key(component_id)] = float(line.quantity)


def _set_recipe_line_quantity(component_id: str):
    quantity = st.session_state[_recipe_qty_key(component_id)]
    st.session_state["recipe"] = set_recipe_quantity(st.session_state["recipe"], component_id, quantity)


def _remove_recipe_line(component_id: str):
    st.session_state["recipe"] = remove_from_recipe(st.session_state["recipe"], component_id)
    st.session_state.pop(_recipe_qty_key(component_id), None)


def product_builder(service: DataService, products: List[Product], components: List[Component]):
    st.subheader("Product Builder")
    if not components:
        ui.warning(MSG_NEED_COMPONENTS)
        return
    st.session_state.setdefault("recipe", [])

    cols = st.columns(3)
    name = cols[0].text_input("Product Name", placeholder="e.g. Bridal Necklace Set", key="product_name")
    sku = cols[1].text_input(LBL_SKU, key="product_sku")
    making_charges = cols[2].number_input(LBL_MAKING_CHARGES, min_value=0.0, value=0.0, key="product_making")

    by_label = {f"{c.name} ({ui.money(c.price, settings.currency_symbol)}/{c.unit})": c for c in components}
    pick_cols = st.columns([4, 1])
    pick_cols[0].selectbox("Component", list(by_label.keys()), key="recipe_pick")
    pick_cols[1].button(BTN_ADD, key="recipe_add", on_click=_add_recipe_line, args=(by_label,))

    names = {c.id: c.name for c in components}
    recipe: List[ProductComponent] = st.session_state["recipe"]
    for line in recipe:
        qty_key = _recipe_qty_key(line.component_id)
        st.session_state.setdefault(qty_key, float(line.quantity))
        line_cols = st.columns([4, 2, 1])
        line_cols[0].write(names.get(line.component_id, line.component_id))
        line_cols[1].number_input(
            LBL_QUANTITY,
            min_value=0.01,
            key=qty_key,
            on_change=_set_recipe_line_quantity,
            args=(line.component_id,),
        )
        line_cols[2].button(
            BTN_DELETE,
            key=f"recipe_remove_{line.component_id}",
            on_click=_remove_recipe_line,
            args=(line.component_id,),
        )

    breakdown = compute_cost(recipe, components, making_charges)
    st.metric("Total Estimated Cost", ui.money(breakdown.total_cost, settings.currency_symbol))

    if st.button(BTN_SAVE_PRODUCT, type="primary", key="product_save"):
        if not name.strip():
            ui.error(ERR_PRODUCT_NAME_REQUIRED)
            return
        product = Product(
            id=new_id(),
            name=name.strip(),
            sku=sku.strip(),
            making_charges=making_charges,
            components=list(recipe),
        )
        try:
            service.add_product(product)
        except DataServiceError as exc:
            ui.error(f"Product could not be saved: {exc}")
            return
        products.append(product)
        st.session_state["recipe"] = []
        flash(MSG_PRODUCT_SAVED)
        st.rerun()


def products_page(service: DataService, products: List[Product], components: List[Component]):
    st.header(PAGE_PRODUCTS)
    st.caption("Build recipes and track costs automatically.")
    with st.expander("New Product", expanded=False):
        product_builder(service, products, components)

    search = st.text_input(LBL_SEARCH_PRODUCT, key="product_search")
    filtered = search_filter(products, search, ["name", "sku"])
    if not filtered:
        ui.info(MSG_NO_PRODUCTS)
        return
    for product in filtered:
        breakdown = product_cost(product, components)
        title = f"{product.name} ({product.sku or '-'}): {ui.money(breakdown.total_cost, settings.currency_symbol)}"
        with st.expander(title):
            ui.cost_breakdown_block(breakdown, settings.currency_symbol)
            if st.button(BTN_DELETE, key=f"delete_product_{product.id}"):
                try:
                    service.delete_product(product.id)
                except DataServiceError as exc:
                    ui.error(f"Product could not be deleted: {exc}")
                else:
                    products.remove(product)
                    flash(MSG_PRODUCT_DELETED)
                    st.rerun()


def main():
    service = get_service()
    if "components" not in st.session_state:
        initial = load_initial_data(service)
        st.session_state["components"] = initial.components
        st.session_state["products"] = initial.products

    flash_msg = st.session_state.pop("flash_message", None)
    flash_type = st.session_state.pop("flash_type", None)
    if flash_msg:
        if flash_type == "success":
            ui.success(flash_msg)
        elif flash_type == "warning":
            ui.warning(flash_msg)
        else:
            ui.info(flash_msg)

    components = st.session_state["components"]
    products = st.session_state["products"]

    st.sidebar.title(f"💎 {APP_TITLE}")
    ui.status_badge(service.online)

    tabs = st.tabs([PAGE_DASHBOARD, PAGE_COMPONENTS, PAGE_PRODUCTS])
    with tabs[0]:
        dashboard_page(products, components)
    with tabs[1]:
        components_page(service, components)
    with tabs[2]:
        products_page(service, products, components)


if __name__ == "__main__":
    main()
