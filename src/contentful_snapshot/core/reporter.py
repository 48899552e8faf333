from typing import Any, NoReturn, Optional

from .errors import FetchAborted
from .logging import log


class Reporter:
    """Progress and fatal-abort sink for a fetch run.

    Informational messages go to the structured log. ``panic`` logs the
    diagnostic and raises ``FetchAborted``; it never returns.
    """

    def __init__(self, logger: Any = None):
        self.log = logger or log

    def info(self, event: str, **kwargs: Any) -> None:
        self.log.info(event, **kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        self.log.warning(event, **kwargs)

    def panic(self, diagnostic: str, error: Optional[BaseException] = None) -> NoReturn:
        self.log.error(
            "reporter.panic",
            diagnostic=diagnostic,
            error=str(error) if error else None,
            error_type=type(error).__name__ if error else None,
        )
        raise FetchAborted(diagnostic, cause=error)
