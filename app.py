"""
app.py - minimal entrypoint for Streamlit app

Keep this file tiny so streamlit can import it without side-effects.
Run the app with:
    streamlit run app.py

This module simply delegates to expense_ledger.ui.dashboard.main().

"""
import os

import streamlit as st

from expense_ledger.config import ENV_KEYS
from expense_ledger.ui import dashboard


def _export_secrets_to_env():
    # On Streamlit Cloud, settings come from app secrets; copy them to env vars
    # so expense_ledger.config can read them. No secrets file is fine.
    try:
        secrets = dict(st.secrets)
    except FileNotFoundError:
        return
    for key in ENV_KEYS:
        if secrets.get(key) and key not in os.environ:
            os.environ[key] = str(secrets[key])


def main():
    _export_secrets_to_env()
    dashboard.main()


if __name__ == "__main__":
    main()
