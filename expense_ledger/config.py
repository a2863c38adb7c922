"""
config.py - environment-driven settings and logging setup

Settings come from environment variables. On Streamlit Cloud, app.py copies
matching entries from st.secrets into the environment before this is read.

  EXPENSE_LEDGER_DATA_DIR      directory holding the JSON key-value files
  EXPENSE_LEDGER_STORAGE_KEY   key of the slot holding the expense list
  EXPENSE_LEDGER_LOG_LEVEL     logging level name (INFO, DEBUG, ...)
"""

from dataclasses import dataclass
import logging
import os

ENV_KEYS = (
    "EXPENSE_LEDGER_DATA_DIR",
    "EXPENSE_LEDGER_STORAGE_KEY",
    "EXPENSE_LEDGER_LOG_LEVEL",
)

DEFAULT_DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "data")
DEFAULT_STORAGE_KEY = "expenses"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    data_dir: str = DEFAULT_DATA_DIR
    storage_key: str = DEFAULT_STORAGE_KEY
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings() -> Settings:
    return Settings(
        data_dir=(os.getenv("EXPENSE_LEDGER_DATA_DIR") or "").strip() or DEFAULT_DATA_DIR,
        storage_key=(os.getenv("EXPENSE_LEDGER_STORAGE_KEY") or "").strip() or DEFAULT_STORAGE_KEY,
        log_level=(os.getenv("EXPENSE_LEDGER_LOG_LEVEL") or "").strip().upper() or DEFAULT_LOG_LEVEL,
    )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> logging.Logger:
    """
    Attach a stream handler to the package logger once.
    Repeated calls (Streamlit reruns the script on every interaction) only
    update the level.
    """
    logger = logging.getLogger("expense_ledger")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
        logger.addHandler(handler)
    resolved = logging.getLevelName(level)
    logger.setLevel(resolved if isinstance(resolved, int) else logging.INFO)
    return logger
