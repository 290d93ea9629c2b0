"""Configuration loading and defaults for mdview."""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path


def get_config_dir() -> Path:
    """Get the mdview config directory (XDG-style)."""
    return Path.home() / ".config" / "mdview"


def get_config_path() -> Path:
    """Get the config file path."""
    return get_config_dir() / "config.toml"


def get_default_data_dir() -> Path:
    """Get the default data directory for logs."""
    return Path.home() / ".local" / "share" / "mdview"


@dataclass
class Config:
    """Application configuration."""

    history_directory: Path = field(default_factory=get_config_dir)
    open_directory: Path = field(default_factory=lambda: Path.home() / "Documents")
    export_directory: Path = field(default_factory=lambda: Path.home() / "Downloads")
    auto_reload: bool = True
    restore_last_document: bool = True
    save_history_on_change: bool = True
    log_file: Path = field(default_factory=lambda: get_default_data_dir() / "mdview.log")
    log_level: str = "WARNING"

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from file or create defaults."""
        config_path = get_config_path()

        if not config_path.exists():
            default_config = cls()
            default_config.save()
            return default_config

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        defaults = cls()

        def _path(key: str, default: Path) -> Path:
            return Path(data.get(key, str(default))).expanduser()

        return cls(
            history_directory=_path("history_directory", defaults.history_directory),
            open_directory=_path("open_directory", defaults.open_directory),
            export_directory=_path("export_directory", defaults.export_directory),
            auto_reload=data.get("auto_reload", defaults.auto_reload),
            restore_last_document=data.get(
                "restore_last_document", defaults.restore_last_document
            ),
            save_history_on_change=data.get(
                "save_history_on_change", defaults.save_history_on_change
            ),
            log_file=_path("log_file", defaults.log_file),
            log_level=str(data.get("log_level", defaults.log_level)).upper(),
        )

    def save(self) -> None:
        """Save configuration to file."""
        config_path = get_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        # Build TOML content manually (tomllib is read-only)
        lines = [
            '# mdview Configuration',
            '',
            '# Directory where history.json is stored',
            f'history_directory = "{self.history_directory}"',
            '',
            '# Starting directory for the open prompt',
            f'open_directory = "{self.open_directory}"',
            '',
            '# Directory for exported HTML files',
            f'export_directory = "{self.export_directory}"',
            '',
            '# Reload the open document when it changes on disk',
            f'auto_reload = {str(self.auto_reload).lower()}',
            '',
            '# Reopen the last viewed document when started without a path',
            f'restore_last_document = {str(self.restore_last_document).lower()}',
            '',
            '# Save history after every navigation (otherwise only on exit)',
            f'save_history_on_change = {str(self.save_history_on_change).lower()}',
            '',
            '# Log file and level (DEBUG, INFO, WARNING, ERROR)',
            f'log_file = "{self.log_file}"',
            f'log_level = "{self.log_level}"',
        ]

        config_path.write_text("\n".join(lines) + "\n")
