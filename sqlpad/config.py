"""App configuration loading helpers."""

from __future__ import annotations

from pathlib import Path

import tomllib

from pydantic import BaseModel, Field

from .sqlintel.storage import DEFAULT_STORE_DIR

CONFIG_FILE = Path.home() / ".config" / "sqlpad" / "config.toml"


class AutocompleteSettings(BaseModel):
    """Tuning knobs for the completion engine."""

    max_suggestions: int = 50
    debounce_seconds: float = 0.15
    dialect: str = "clickhouse"
    track_usage: bool = True


class AppConfig(BaseModel):
    """Shape of the application configuration file."""

    theme: str = "dark"
    active_connection: str = "default"
    selected_database: str | None = None
    usage_dir: Path | None = None
    autocomplete: AutocompleteSettings = Field(default_factory=AutocompleteSettings)

    def usage_directory(self) -> Path:
        """Directory holding the per-connection usage records."""

        return self.usage_dir or DEFAULT_STORE_DIR

    def with_connection(self, name: str) -> AppConfig:
        """Return a copy with the active connection updated."""

        return self.model_copy(update={"active_connection": name})

    def with_selected_database(self, database: str | None) -> AppConfig:
        """Return a copy with the selected database updated."""

        return self.model_copy(update={"selected_database": database})

    def with_autocomplete(self, **updates: object) -> AppConfig:
        """Return a copy with autocomplete settings changes applied."""

        settings = self.autocomplete.model_copy(update=updates)
        return self.model_copy(update={"autocomplete": settings})


def load_config() -> AppConfig:
    """Load configuration from disk; fall back to defaults if missing."""

    try:
        data = _read_config_file()
    except FileNotFoundError:
        return AppConfig()
    except (tomllib.TOMLDecodeError, OSError):
        return AppConfig()

    return AppConfig(
        theme=data.get("theme", AppConfig.model_fields["theme"].default),
        active_connection=data.get(
            "active_connection", AppConfig.model_fields["active_connection"].default
        ),
        selected_database=data.get("selected_database"),
        usage_dir=data.get("usage_dir"),
        autocomplete=data.get("autocomplete", AutocompleteSettings()),
    )


def save_config(config: AppConfig) -> None:
    """Persist configuration to disk."""

    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    lines: list[str] = [
        f'theme = "{config.theme}"',
        f'active_connection = "{config.active_connection}"',
    ]
    if config.selected_database:
        lines.append(f'selected_database = "{config.selected_database}"')
    if config.usage_dir is not None:
        lines.append(f'usage_dir = "{config.usage_dir.as_posix()}"')
    settings = config.autocomplete
    lines.append("")
    lines.append("[autocomplete]")
    lines.append(f"max_suggestions = {settings.max_suggestions}")
    lines.append(f"debounce_seconds = {settings.debounce_seconds}")
    lines.append(f'dialect = "{settings.dialect}"')
    lines.append(f"track_usage = {str(settings.track_usage).lower()}")
    CONFIG_FILE.write_text("\n".join(lines) + "\n")


def _read_config_file() -> dict[str, object]:
    with CONFIG_FILE.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    if isinstance(raw, dict):
        for key in ("theme", "active_connection", "selected_database"):
            value = raw.get(key)
            if isinstance(value, str):
                data[key] = value
        usage_dir = raw.get("usage_dir")
        if isinstance(usage_dir, str) and usage_dir:
            data["usage_dir"] = Path(usage_dir).expanduser()
        autocomplete = raw.get("autocomplete")
        if isinstance(autocomplete, dict):
            settings: dict[str, object] = {}
            max_suggestions = autocomplete.get("max_suggestions")
            if isinstance(max_suggestions, int) and not isinstance(max_suggestions, bool) and max_suggestions > 0:
                settings["max_suggestions"] = max_suggestions
            debounce = autocomplete.get("debounce_seconds")
            if isinstance(debounce, (int, float)) and not isinstance(debounce, bool) and debounce >= 0:
                settings["debounce_seconds"] = float(debounce)
            dialect = autocomplete.get("dialect")
            if isinstance(dialect, str) and dialect:
                settings["dialect"] = dialect
            track_usage = autocomplete.get("track_usage")
            if isinstance(track_usage, bool):
                settings["track_usage"] = track_usage
            data["autocomplete"] = AutocompleteSettings(**settings)
    return data
