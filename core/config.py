"""Environment setup for paperlens.

Loads ``.env`` on import and decides whether LangSmith tracing is on.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def is_dev_mode() -> bool:
    """True if PAPERLENS_MODE is set to 'dev'."""
    return os.getenv("PAPERLENS_MODE", "prod").lower() == "dev"


def configure_langsmith() -> None:
    """Enable LangSmith tracing in dev mode, disable it otherwise.

    Dev mode traces into the 'paperlens-dev' project unless
    LANGSMITH_PROJECT is already set. Idempotent.
    """
    if is_dev_mode():
        os.environ.setdefault("LANGSMITH_TRACING", "true")
        os.environ.setdefault("LANGSMITH_PROJECT", "paperlens-dev")
    else:
        os.environ["LANGSMITH_TRACING"] = "false"
