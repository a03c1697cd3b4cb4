"""Run lifecycle and module-to-log-file resolution.

A "run" is one logical unit of work (a batch of analyses, a test module).
The first record written to each log file within a run rotates that file,
so every log holds exactly one run and ``*.previous.log`` the one before.
"""

from contextvars import ContextVar

# ContextVars so concurrent async runs don't share rotation state
_current_run_id: ContextVar[str | None] = ContextVar("current_run_id", default=None)
_rotated_this_run: ContextVar[set[str] | None] = ContextVar("rotated_this_run", default=None)

_module_log_cache: dict[str, str] = {}

# Longest matching prefix wins; unmapped first-party modules go to misc.log
MODULE_TO_LOG = {
    "core.analysis.providers": "providers",
    "core.analysis.fallback": "fallback",
    "core.analysis": "analysis",
    "core.documents": "documents",
    "core.config": "config",
    "core.logging": "logging-internal",
    "testing": "testing",
}

# Logger name roots that belong to this project
FIRST_PARTY_ROOTS = ("core", "testing")

_SORTED_PREFIXES = sorted(MODULE_TO_LOG.keys(), key=len, reverse=True)


def start_run(run_id: str) -> None:
    """Begin a run; each log file rotates on its first write afterwards."""
    _current_run_id.set(run_id)
    _rotated_this_run.set(set())


def end_run() -> None:
    """End the current run. Missing calls are harmless."""
    _current_run_id.set(None)
    _rotated_this_run.set(None)


def get_current_run_id() -> str | None:
    return _current_run_id.get()


def should_rotate(log_name: str) -> bool:
    """Return True once per log file per run, marking it rotated."""
    rotated = _rotated_this_run.get()
    if _current_run_id.get() is None or rotated is None:
        return False
    if log_name in rotated:
        return False
    rotated.add(log_name)
    return True


def is_first_party(logger_name: str) -> bool:
    """Whether a logger name belongs to one of this project's packages."""
    root = logger_name.split(".", 1)[0]
    return root in FIRST_PARTY_ROOTS


def module_to_log_name(module_name: str) -> str:
    """Resolve a module's ``__name__`` to its log file name (cached).

    Example:
        module_to_log_name("core.analysis.providers.openai") -> "providers"
    """
    if module_name not in _module_log_cache:
        _module_log_cache[module_name] = _compute_log_name(module_name)
    return _module_log_cache[module_name]


def _compute_log_name(module_name: str) -> str:
    for prefix in _SORTED_PREFIXES:
        if module_name == prefix or module_name.startswith(prefix + "."):
            return MODULE_TO_LOG[prefix]
    return "misc"
