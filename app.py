"""
app.py - minimal entrypoint for Streamlit app

Keep this file tiny so streamlit can import it without side-effects.
Run the app with:
    streamlit run app.py

Streamlit secrets for the Google Sheets backend are copied into environment
variables, then control passes to budget_tracker.ui.dashboard.main().
"""
import json as _json
import os

import streamlit as _st

from budget_tracker.ui import dashboard


def _export_secrets():
    try:
        _secrets = dict(_st.secrets)
    except FileNotFoundError:
        # no secrets.toml; run from env vars only
        return
    for _k in ("GOOGLE_SHEET_ID", "GOOGLE_SERVICE_ACCOUNT_JSON", "GOOGLE_SERVICE_ACCOUNT_FILE",
               "BUDGET_CONFIG_FILE", "BUDGET_DATA_FILE"):
        if _secrets.get(_k) and _k not in os.environ:
            os.environ[_k] = str(_secrets[_k])
    # Also support the standard Streamlit table-style service account secret:
    # [gcp_service_account] ...fields...
    if "GOOGLE_SERVICE_ACCOUNT_JSON" not in os.environ and _secrets.get("gcp_service_account"):
        os.environ["GOOGLE_SERVICE_ACCOUNT_JSON"] = _json.dumps(dict(_secrets["gcp_service_account"]))


def main():
    _export_secrets()
    dashboard.main()


if __name__ == "__main__":
    main()
