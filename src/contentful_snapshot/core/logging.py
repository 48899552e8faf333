import os
import sys
from contextlib import AbstractContextManager
from typing import Any, Literal, Optional

import structlog

LogFormat = Literal["json", "plain", "auto"]


def _should_use_json_format() -> bool:
    """Determine if JSON format should be used based on environment."""
    ci_vars = ["CI", "CONTINUOUS_INTEGRATION", "GITHUB_ACTIONS", "JENKINS_URL"]
    if any(os.environ.get(var) for var in ci_vars):
        return True

    # Redirected stdout (not a TTY) gets machine-readable lines
    return bool(not sys.stdout.isatty())


def setup_logging(format_type: LogFormat = "auto") -> None:
    """
    Setup structured logging with format control.

    Args:
        format_type: "json" for JSON output, "plain" for human-readable,
                "auto" to auto-detect based on TTY/CI.
    """
    use_json = format_type == "json" or (format_type == "auto" and _should_use_json_format())

    renderer: Any = structlog.processors.JSONRenderer() if use_json else structlog.dev.ConsoleRenderer(colors=False)
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        renderer,
    ]

    # Logs go to stderr so the CLI can keep stdout for results
    structlog.configure(
        processors=processors,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def space_context(space_id: Optional[str], environment: Optional[str]) -> AbstractContextManager[Any]:
    """Bind the space being fetched into every log line emitted inside the block."""
    return structlog.contextvars.bound_contextvars(space_id=space_id, environment=environment)


log = structlog.get_logger()
