"""Textual application entry point for sqlpad."""

from __future__ import annotations

import logging

from textual.app import App, ComposeResult
from textual.widgets import Footer, Header

from .config import AppConfig, load_config, save_config
from .sqlintel import (
    ColumnInfo,
    FileStore,
    KeyValueStore,
    MetadataCache,
    SchemaProvider,
    SqlIntelService,
    StaticSchemaProvider,
    UsageTracker,
)
from .widgets import QueryPad

LOG = logging.getLogger(__name__)

DEMO_SCHEMA: dict[str, dict[str, tuple[ColumnInfo, ...]]] = {
    "shop": {
        "accounts": (
            ColumnInfo("id", "UInt64"),
            ColumnInfo("email", "String"),
            ColumnInfo("last_login", "DateTime"),
        ),
        "orders": (
            ColumnInfo("id", "UInt64"),
            ColumnInfo("account_id", "UInt64"),
            ColumnInfo("total", "Decimal(18, 2)"),
        ),
        "payments": (
            ColumnInfo("id", "UInt64"),
            ColumnInfo("order_id", "UInt64"),
            ColumnInfo("amount", "Decimal(18, 2)"),
        ),
    },
    "analytics": {
        "sessions": (
            ColumnInfo("id", "UUID"),
            ColumnInfo("user_id", "UInt64"),
            ColumnInfo("started_at", "DateTime"),
        ),
        "events": (
            ColumnInfo("id", "UUID"),
            ColumnInfo("session_id", "UUID"),
            ColumnInfo("name", "LowCardinality(String)"),
        ),
    },
}


def _load_app_config() -> AppConfig:
    """Load configuration with a small wrapper for future overrides."""

    return load_config()


class SqlpadApp(App[None]):
    """Terminal SQL editor with context-aware completion."""

    CSS = """
    Screen {
        layout: vertical;
    }
    """

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+r", "refresh", "Refresh Metadata"),
    ]

    def __init__(
        self,
        *,
        config: AppConfig | None = None,
        provider: SchemaProvider | None = None,
        store: KeyValueStore | None = None,
    ) -> None:
        super().__init__()
        self._app_config = config or _load_app_config()
        settings = self._app_config.autocomplete
        self._tracker: UsageTracker | None = None
        if settings.track_usage:
            self._tracker = UsageTracker(
                self._app_config.active_connection,
                store if store is not None else FileStore(self._app_config.usage_directory()),
            )
        self._sql_service = SqlIntelService(
            MetadataCache(provider or StaticSchemaProvider(DEMO_SCHEMA)),
            tracker=self._tracker,
            max_suggestions=settings.max_suggestions,
            dialect=settings.dialect,
        )
        self._query_pad: QueryPad | None = None
        LOG.debug(
            "Starting sqlpad",
            extra={"connection": self._app_config.active_connection, "track_usage": settings.track_usage},
        )

    def compose(self) -> ComposeResult:
        """Compose the root layout."""

        yield Header(show_clock=True)
        self._query_pad = QueryPad(
            self._sql_service,
            selected_database=self._app_config.selected_database,
            debounce_seconds=self._app_config.autocomplete.debounce_seconds,
        )
        yield self._query_pad
        yield Footer()

    @property
    def config(self) -> AppConfig:
        return self._app_config

    @property
    def sql_service(self) -> SqlIntelService:
        """Expose the completion service for tests."""

        return self._sql_service

    @property
    def tracker(self) -> UsageTracker | None:
        return self._tracker

    @property
    def query_pad(self) -> QueryPad | None:
        return self._query_pad

    def action_refresh(self) -> None:
        self._sql_service.refresh_metadata()
        self.notify("Metadata cache cleared.", severity="information")

    def switch_connection(self, name: str, provider: SchemaProvider | None = None) -> None:
        """Activate another connection's usage data (and schema) and persist the choice."""

        if self._tracker is not None:
            self._tracker.set_connection(name)
        if provider is not None:
            self._sql_service.set_provider(provider)
        self._app_config = self._app_config.with_connection(name)
        save_config(self._app_config)

    def select_database(self, database: str | None) -> None:
        """Change the database used for unqualified table and column suggestions."""

        self._app_config = self._app_config.with_selected_database(database)
        if self._query_pad is not None:
            self._query_pad.set_selected_database(database)
        save_config(self._app_config)


def main() -> None:
    """Invoke the Textual application."""

    SqlpadApp().run()


if __name__ == "__main__":
    main()
