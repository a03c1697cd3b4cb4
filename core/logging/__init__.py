"""Module-based logging with run-based rotation.

Usage:
    from core.logging import configure_logging, end_run

    configure_logging(run_id="batch-42")
    try:
        ...  # analyses log through logging.getLogger(__name__)
    finally:
        end_run()

Log files are created in logs/ (or $PAPERLENS_LOG_DIR):
    - logs/analysis.log, logs/providers.log, logs/documents.log, ...
    - logs/run-3p.log (all third-party libraries)
    - logs/*.previous.log (previous run's logs)
"""

from core.logging.handlers import ModuleDispatchHandler, ThirdPartyHandler
from core.logging.run_manager import (
    MODULE_TO_LOG,
    end_run,
    get_current_run_id,
    is_first_party,
    module_to_log_name,
    start_run,
)
from core.logging.configure import configure_logging

__all__ = [
    "configure_logging",
    "start_run",
    "end_run",
    "get_current_run_id",
    "is_first_party",
    "module_to_log_name",
    "ModuleDispatchHandler",
    "ThirdPartyHandler",
    "MODULE_TO_LOG",
]
