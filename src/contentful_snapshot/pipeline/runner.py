import time
from typing import Any, List, NoReturn, Optional

from ..adapters.contentful_api import client_from_config
from ..core.errors import ContentTypeFetchError, FailurePolicy, RemoteError, classify_remote_error
from ..core.logging import log, space_context
from ..core.models import FetchResult, Locale, Record, SyncSnapshot
from ..core.plugin_options import format_plugin_options_for_cli
from ..core.reporter import Reporter
from .dag import STAGE_POLICIES, FetchStage, validate_transition
from .steps.ingest.locales import bootstrap_locales
from .steps.ingest.normalize import normalize_records
from .steps.ingest.pagination import fetch_all_pages
from .steps.ingest.space import fetch_all_entries_and_assets

BOOTSTRAP_FAILED = "Accessing your Contentful space failed."
BOOTSTRAP_HINT = "Try running again with a valid configuration; check the settings below."
FETCH_SPACE_FAILED = "Fetching contentful data failed"


def bootstrap_diagnostic(error: RemoteError, plugin_config: Any) -> str:
    """Multi-line message shown when the space cannot be reached."""
    details = f"\n{error.details}\n" if error.details else ""
    options = format_plugin_options_for_cli(plugin_config.get_original_plugin_options(), error.errors)
    return f"{BOOTSTRAP_FAILED}\n{BOOTSTRAP_HINT}\n{details}\nUsed options:\n{options}"


def fetch_space_diagnostic(error: RemoteError) -> str:
    if error.details:
        return f"{FETCH_SPACE_FAILED}\n\n{error.details}"
    return FETCH_SPACE_FAILED


class FetchRun:
    """One full fetch of a space, tracked as a sequence of stages.

    ``stage`` is the current stage and ``history`` every stage entered, in
    order. A fatal remote failure moves the run to ``FAILED`` and panics
    through the reporter; a degraded failure is logged and the run goes on.
    """

    def __init__(
        self,
        plugin_config: Any,
        reporter: Optional[Reporter] = None,
        client: Any = None,
        workers: int = 1,
    ):
        self.plugin_config = plugin_config
        self.reporter = reporter or Reporter()
        self.client = client
        self.workers = workers
        self.stage = FetchStage.BOOTSTRAP
        self.history: List[FetchStage] = [FetchStage.BOOTSTRAP]
        self.error: Optional[RemoteError] = None

    def _advance(self, target: FetchStage) -> None:
        log.info("phase.end", phase=self.stage.value)
        self.stage = validate_transition(self.stage, target)
        self.history.append(target)
        log.info("phase.start", phase=target.value)

    def _fail(self, error: RemoteError, diagnostic: str) -> NoReturn:
        self.error = error
        self.stage = validate_transition(self.stage, FetchStage.FAILED)
        self.history.append(FetchStage.FAILED)
        self.reporter.panic(diagnostic, error)

    def _classify(self, exc: Exception) -> RemoteError:
        error = classify_remote_error(exc)
        if error is not exc:
            error.__cause__ = exc
        log.warning(
            "ingest.contentful.remote_error",
            stage=self.stage.value,
            policy=STAGE_POLICIES[self.stage].value,
            error_class=type(error).__name__,
            error=str(exc),
        )
        return error

    def run(self) -> FetchResult:
        started = time.monotonic()
        owns_client = self.client is None
        if owns_client:
            self.client = client_from_config(self.plugin_config)
        try:
            with space_context(self.plugin_config.get("spaceId"), self.plugin_config.get("environment")):
                return self._run(started)
        finally:
            if owns_client:
                self.client.close()

    def _run(self, started: float) -> FetchResult:
        self.reporter.info("ingest.contentful.start", message="Starting to fetch data from Contentful")
        log.info("phase.start", phase=self.stage.value)

        try:
            boot = bootstrap_locales(self.client, self.plugin_config.get("localeFilter"))
        except Exception as e:
            error = self._classify(e)
            self._fail(error, bootstrap_diagnostic(error, self.plugin_config))
        self.reporter.info("ingest.contentful.default_locale", default_locale=boot.default_locale)

        self._advance(FetchStage.FETCH_SPACE)
        try:
            snapshot = fetch_all_entries_and_assets(self.client, workers=self.workers)
        except Exception as e:
            error = self._classify(e)
            self._fail(error, fetch_space_diagnostic(error))

        self._advance(FetchStage.FETCH_CONTENT_TYPES)
        content_types = self._fetch_content_types()

        self._advance(FetchStage.NORMALIZE)
        content_type_items, snapshot = normalize_snapshot(content_types, snapshot)

        self._advance(FetchStage.ASSEMBLE)
        result = assemble_result(snapshot, content_type_items, boot.default_locale, boot.locales)

        self._advance(FetchStage.DONE)
        log.info(
            "ingest.contentful.done",
            elapsed_seconds=round(time.monotonic() - started, 2),
            **result.counts(),
        )
        return result

    def _fetch_content_types(self) -> List[Record]:
        page_limit = self.plugin_config.get("pageLimit") or 1000
        try:
            content_types = fetch_all_pages(self.client.get_content_types, page_limit)
        except Exception as e:
            if STAGE_POLICIES[self.stage] is FailurePolicy.FATAL:
                raise
            error = ContentTypeFetchError(str(e))
            error.__cause__ = e
            self.error = error
            log.error("ingest.contentful.content_types.failed", error=str(e), degraded=True)
            return []
        self.reporter.info("ingest.contentful.content_types.fetched", count=len(content_types))
        return content_types


def normalize_snapshot(content_types: List[Record], snapshot: SyncSnapshot) -> tuple[List[Record], SyncSnapshot]:
    """Fix ids on every collection; entries and assets share one memo so links stay shared."""
    content_type_items = [ct for ct in normalize_records(list(content_types)) if ct is not None]
    memo: dict[int, Any] = {}
    normalized = SyncSnapshot(
        entries=normalize_records(snapshot.entries, memo),
        assets=normalize_records(snapshot.assets, memo),
        deleted_entries=normalize_records(snapshot.deleted_entries),
        deleted_assets=normalize_records(snapshot.deleted_assets),
    )
    return content_type_items, normalized


def assemble_result(
    snapshot: SyncSnapshot,
    content_type_items: List[Record],
    default_locale: str,
    locales: List[Locale],
) -> FetchResult:
    return FetchResult(
        current_sync_data=snapshot,
        content_type_items=content_type_items,
        default_locale=default_locale,
        locales=locales,
    )


def fetch_contentful_data(
    plugin_config: Any,
    reporter: Optional[Reporter] = None,
    client: Any = None,
    workers: int = 1,
) -> FetchResult:
    """
    Fetch locales, every entry and asset, and content types for one space.

    Args:
        plugin_config: Object with ``get(key)`` and ``get_original_plugin_options()``
        reporter: Receives progress and fatal aborts (default: structlog-backed)
        client: Delivery API client; built from ``plugin_config`` when omitted
        workers: 2 or more fetches entries and assets concurrently

    Returns:
        FetchResult with normalized ids

    Raises:
        FetchAborted: locales or entries/assets could not be fetched
    """
    return FetchRun(plugin_config, reporter=reporter, client=client, workers=workers).run()
