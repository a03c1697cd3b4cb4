"""Install the per-module log handlers on the root logger."""

import logging
import os
from pathlib import Path

from core.logging.handlers import ModuleDispatchHandler, ThirdPartyHandler
from core.logging.run_manager import start_run

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_DIR = "logs"


def get_log_dir() -> Path:
    """Log directory from PAPERLENS_LOG_DIR, defaulting to ./logs."""
    return Path(os.getenv("PAPERLENS_LOG_DIR", DEFAULT_LOG_DIR))


def configure_logging(
    run_id: str | None = None,
    log_dir: Path | str | None = None,
    level: int = logging.INFO,
) -> tuple[ModuleDispatchHandler, ThirdPartyHandler]:
    """Attach module and third-party handlers to the root logger.

    Handlers installed by an earlier call are replaced, so this is safe to
    call more than once. If ``run_id`` is given a run is started as well.

    Returns:
        The two installed handlers
    """
    directory = Path(log_dir) if log_dir is not None else get_log_dir()
    directory.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, (ModuleDispatchHandler, ThirdPartyHandler)):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    module_handler = ModuleDispatchHandler(directory)
    third_party_handler = ThirdPartyHandler(directory)
    for handler in (module_handler, third_party_handler):
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level)

    if run_id:
        start_run(run_id)
    return module_handler, third_party_handler
