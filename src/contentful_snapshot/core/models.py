from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Entries, assets and content types stay as the decoded JSON dicts the
# Delivery API returns: {"sys": {...}, "fields": {name: {locale: value}}}.
Record = dict[str, Any]


class Locale(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    code: str
    name: str | None = None
    default: bool = False
    fallback_code: str | None = Field(default=None, alias="fallbackCode")
    optional: bool | None = None


@dataclass
class LocaleBootstrap:
    locales: list[Locale]
    default_locale: str


# Snapshot and result hold resolved (possibly cyclic) record graphs, so they
# are plain dataclasses: never validated, copied or dumped recursively.
@dataclass
class SyncSnapshot:
    entries: list[Record | None] = field(default_factory=list)
    assets: list[Record | None] = field(default_factory=list)
    deleted_entries: list[Record | None] = field(default_factory=list)  # always empty on full fetch
    deleted_assets: list[Record | None] = field(default_factory=list)  # always empty on full fetch


@dataclass
class FetchResult:
    current_sync_data: SyncSnapshot
    content_type_items: list[Record]
    default_locale: str
    locales: list[Locale]

    def counts(self) -> dict[str, int]:
        """Collection sizes, for logging and CLI summaries."""
        return {
            "entries": len(self.current_sync_data.entries),
            "assets": len(self.current_sync_data.assets),
            "deleted_entries": len(self.current_sync_data.deleted_entries),
            "deleted_assets": len(self.current_sync_data.deleted_assets),
            "content_types": len(self.content_type_items),
            "locales": len(self.locales),
        }
