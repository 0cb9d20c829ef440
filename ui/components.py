from typing import Any, Dict, List

import pandas as pd
import streamlit as st

from modules.costing.service import CostBreakdown


def money(value: float, symbol: str) -> str:
    return f"{symbol}{value:,.2f}"


def metric_row(metrics: List[Dict[str, Any]]):
    cols = st.columns(len(metrics))
    for col, m in zip(cols, metrics):
        col.metric(m["label"], m["value"])


def render_table(title: str, data: List[Dict[str, Any]], columns: List[str]):
    st.markdown(f"**{title}**")
    if not data:
        st.info("No records")
        return
    df = pd.DataFrame(data)
    st.dataframe(df[columns], use_container_width=True, hide_index=True)


def status_badge(online: bool):
    if online:
        st.sidebar.success("🟢 Connected to backend")
    else:
        st.sidebar.warning("🟠 Offline: saving to local storage")


def cost_breakdown_block(breakdown: CostBreakdown, symbol: str):
    rows = [
        {
            "Component": line.component_name or f"Missing ({line.component_id})",
            "Unit": line.unit or "-",
            "Quantity": line.quantity,
            "Unit Price": money(line.unit_price, symbol),
            "Line Cost": money(line.line_cost, symbol),
        }
        for line in breakdown.lines
    ]
    render_table("Recipe", rows, ["Component", "Unit", "Quantity", "Unit Price", "Line Cost"])
    cols = st.columns(3)
    cols[0].metric("Material Cost", money(breakdown.material_cost, symbol))
    cols[1].metric("Making Charges", money(breakdown.making_charges, symbol))
    cols[2].metric("Total Cost", money(breakdown.total_cost, symbol))
    if breakdown.unresolved_count:
        st.warning(f"{breakdown.unresolved_count} recipe line(s) reference deleted components and count as zero.")


def success(msg: str):
    st.success(msg)


def error(msg: str):
    st.error(msg)


def warning(msg: str):
    st.warning(msg)


def info(msg: str):
    st.info(msg)
