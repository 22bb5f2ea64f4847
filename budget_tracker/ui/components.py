"""
components.py - reusable Streamlit components / forms / displays

This module contains pure-UI helpers used by the dashboard:
 - display_entry_form(on_submit)
 - display_store_totals / display_group_totals / display_alerts
 - display_export / display_import / display_clear

Validation is not done here: the form hands an EntryInput back to the caller,
which passes it through the tracker's EntryValidator and shows any
ValidationError that comes back.
"""

from dataclasses import dataclass
from decimal import Decimal
from io import BytesIO
from typing import Callable, List, Optional
import datetime

import altair as alt
import pandas as pd
import streamlit as st

from budget_tracker.config import BudgetConfig, CategoryGroup
from budget_tracker.errors import BudgetTrackerError
from budget_tracker.models import Alert, PeriodSummary
from budget_tracker.tabular import ImportResult

CURRENCY = "R"


@dataclass
class EntryInput:
    """Lightweight container passed to the on_submit callback."""
    store: str
    amount: str
    date: str  # ISO date string


def _money(value: Decimal) -> str:
    return f"{CURRENCY}{float(value):.2f}"


def display_period(summary: PeriodSummary):
    st.caption(f"Tracking Period: {summary.period.label()}")


def display_entry_form(on_submit: Callable[[EntryInput], Optional[str]]):
    """
    Display the 'Add Spend' form.

    on_submit receives an EntryInput and returns an error message, or None
    when the entry was stored.
    """
    st.header("Add Spend")
    with st.form(key="spend_form", clear_on_submit=True):
        store = st.text_input("Store")
        # kept as text so the validator sees exactly what was typed
        amount = st.text_input("Amount")
        date_val = st.date_input("Date", value=datetime.date.today())
        submit_button = st.form_submit_button("Add")

        if submit_button:
            date_iso = date_val.isoformat() if date_val else ""
            error = on_submit(EntryInput(store=store, amount=amount, date=date_iso))
            if error:
                st.error(error)
            else:
                st.success("Spend added.")


def display_store_totals(summary: PeriodSummary):
    store_totals = summary.store_totals
    st.subheader(f"Store Totals ({_money(summary.total_spent)})")
    if not store_totals:
        st.write("No spend recorded for this period.")
        return
    for store, total in store_totals.items():
        st.markdown(f"- **{store}:** {_money(total)}")


def display_group_totals(summary: PeriodSummary, config: BudgetConfig):
    """Group totals with an overall figure and a bar chart against thresholds."""
    st.subheader(f"Group Totals ({_money(summary.overall_group_total)})")
    rows = []
    for group, total in summary.group_totals.items():
        threshold = config.threshold_for(group)
        marker = " ⚠️" if summary.alert_for(group) else ""
        st.markdown(f"- **{group.value}:** {_money(total)}{marker}")
        rows.append({
            "group": group.value,
            "total": float(total),
            "threshold": float(threshold) if threshold is not None else None,
        })

    df = pd.DataFrame(rows, columns=["group", "total", "threshold"])
    if df.empty or df["total"].sum() <= 0:
        return

    bars = alt.Chart(df).mark_bar().encode(
        x=alt.X("group:N", title="Group", sort=[g.value for g in CategoryGroup]),
        y=alt.Y("total:Q", title=f"Spent ({CURRENCY})"),
        tooltip=[
            alt.Tooltip("group:N", title="Group"),
            alt.Tooltip("total:Q", title="Spent", format=".2f"),
            alt.Tooltip("threshold:Q", title="Threshold", format=".2f"),
        ],
    )
    limits = alt.Chart(df.dropna(subset=["threshold"])).mark_tick(
        color="#d62728", thickness=3, size=40
    ).encode(x=alt.X("group:N", sort=[g.value for g in CategoryGroup]), y="threshold:Q")
    st.altair_chart((bars + limits).properties(height=300), use_container_width=True)


def display_alerts(alerts: List[Alert]):
    for alert in alerts:
        st.warning(f"⚠️ {alert.message}")


def _summary_xlsx(summary: PeriodSummary) -> bytes:
    stores = pd.DataFrame(
        [{"store": s, "total": float(t)} for s, t in summary.store_totals.items()],
        columns=["store", "total"],
    )
    groups = pd.DataFrame(
        [{"group": g.value, "total": float(t)} for g, t in summary.group_totals.items()],
        columns=["group", "total"],
    )
    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        stores.to_excel(writer, index=False, sheet_name="store_totals")
        groups.to_excel(writer, index=False, sheet_name="group_totals")
    buffer.seek(0)
    return buffer.getvalue()


def display_export(export_csv: Callable[[], str], summary: PeriodSummary):
    """CSV download of all entries plus an XLSX of the current period's totals."""
    st.header("Export")
    try:
        csv_text = export_csv()
    except BudgetTrackerError as exc:
        st.error(str(exc))
    else:
        st.download_button(
            label="Download CSV",
            data=csv_text,
            file_name="spend_data.csv",
            mime="text/csv",
        )
    st.download_button(
        label="Download period totals (XLSX)",
        data=_summary_xlsx(summary),
        file_name=f"spend_totals_{summary.period.start.isoformat()}.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )


def display_import(on_import: Callable[[bytes], ImportResult]):
    st.header("Import CSV")
    uploaded = st.file_uploader("Store,Amount,Date file", type=["csv", "txt"])
    if uploaded is None:
        return
    if not st.button("Import"):
        return
    try:
        # bytes are decoded by the importer so a bad encoding is reported like a bad header
        result = on_import(uploaded.getvalue())
    except BudgetTrackerError as exc:
        st.error(str(exc))
        return
    st.success(f"Imported {len(result.entries)} entries.")
    if result.skipped:
        st.warning(f"Skipped {result.skipped_count} invalid row(s).")
        st.dataframe(
            pd.DataFrame(
                [{"line": s.line_number, "row": s.line, "problem": str(s.error)} for s in result.skipped]
            ),
            use_container_width=True,
        )


def display_clear(on_clear: Callable[[], None]):
    st.header("Clear Data")
    confirm = st.checkbox("I understand this removes all spend data and cannot be undone")
    if st.button("Clear all spend data") and confirm:
        try:
            on_clear()
        except BudgetTrackerError as exc:
            st.error(f"Could not clear spend data: {exc}")
            return
        st.success("Spend data cleared.")
