"""
dashboard.py - Streamlit UI entrypoint and orchestration

This module wires the UI components (budget_tracker.ui.components) with the
business logic (budget_tracker.tracker). The main() function builds the
sidebar menu and routes actions to components and tracker methods.

Design notes:
 - Keep the dashboard responsible only for UI orchestration and presentation.
 - All persistence and business rules live in budget_tracker.tracker.
 - Components return lightweight data objects (EntryInput) to keep wiring simple.
"""

import logging

import streamlit as st

from budget_tracker.errors import BudgetTrackerError
from budget_tracker.logging_setup import configure_logging
from budget_tracker.tracker import SpendTracker
from budget_tracker.ui import components
from budget_tracker.validation import is_valid

logger = logging.getLogger(__name__)


def _show_storage_status(tracker: SpendTracker):
    backend_name, backend_msg = tracker.storage_status()
    if backend_name == "google_sheets":
        st.sidebar.success(backend_msg)
    else:
        st.sidebar.warning(backend_msg)
        st.sidebar.caption(
            "For cloud persistence, set GOOGLE_SHEET_ID and "
            "GOOGLE_SERVICE_ACCOUNT_JSON in Streamlit app Secrets."
        )
    if tracker.load_error:
        st.sidebar.error(f"Stored data could not be loaded: {tracker.load_error}")
    if tracker.skipped_on_load:
        st.sidebar.warning(
            f"{len(tracker.skipped_on_load)} stored entries are invalid. They are kept in storage "
            "but left out of the totals until the data is cleared."
        )


def main():
    """
    Streamlit page: sidebar menu controls which view is shown.
    Actions:
      - Summary: add form, period totals and alerts
      - Import / Export: CSV upload and downloads
      - Clear All Data: reset data (with checkbox confirmation)
    """
    configure_logging()
    st.title("Spend Tracker")
    try:
        tracker = SpendTracker()
    except BudgetTrackerError as exc:
        # bad BUDGET_CONFIG_FILE
        st.error(str(exc))
        return
    _show_storage_status(tracker)

    menu = ["Summary", "Import / Export", "Clear All Data"]
    choice = st.sidebar.selectbox("Select an option", menu)

    if choice == "Summary":
        def on_submit(entry_input: components.EntryInput):
            try:
                result = tracker.add_entry(entry_input.store, entry_input.amount, entry_input.date)
            except BudgetTrackerError as exc:
                logger.error("Could not save entry: %s", exc)
                return str(exc)
            if not is_valid(result):
                return result.message
            return None

        components.display_entry_form(on_submit)
        summary = tracker.summary()
        components.display_period(summary)
        components.display_alerts(summary.alerts)
        components.display_store_totals(summary)
        components.display_group_totals(summary, tracker.config)

    elif choice == "Import / Export":
        components.display_export(tracker.export_csv, tracker.summary())
        components.display_import(tracker.import_csv)

    elif choice == "Clear All Data":
        components.display_clear(tracker.clear)


if __name__ == "__main__":
    main()
