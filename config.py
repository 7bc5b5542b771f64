"""Configuration management for Spendwise.

Reads configuration from ~/.config/spendwise.toml and creates default config if needed.
"""

from pathlib import Path
from dataclasses import dataclass
from datetime import tzinfo
import tomllib
import tomli_w
from dateutil import tz


@dataclass
class Config:
    """Application configuration."""

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    timezone: str = "Asia/Kolkata"
    currency_symbol: str = "₹"
    category_limit: int = 7
    top_categories: int = 5
    dispatcher: str = "log"

    @property
    def db_path(self) -> Path:
        """Get the full database path (data_dir/filename)."""
        return self.db_data_dir / self.db_filename

    @property
    def tzinfo(self) -> tzinfo:
        """Resolve the configured timezone.

        All day boundaries (periods, budget instances, report buckets) are
        computed in this zone.

        Raises:
            ValueError: If the timezone name is unknown.
        """
        zone = tz.gettz(self.timezone)
        if zone is None:
            raise ValueError(f"Unknown timezone: {self.timezone}")
        return zone

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        home = Path.home()
        base_dir = home / "data" / "spendwise"
        return cls(
            base_dir=base_dir,
            db_data_dir=base_dir / "db",
            db_filename="spendwise.db",
            log_level="INFO",
            log_dir=base_dir / "logs",
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    return Path.home() / ".config" / "spendwise.toml"


def get_migrations_dir() -> Path:
    """Get the path to the migrations directory.

    This is always relative to the code location, not configurable.
    """
    return Path(__file__).parent / "db" / "migrations"


def load_config() -> Config:
    """Load configuration from file, creating default if it doesn't exist.

    Returns:
        Config object with loaded or default values.
    """
    config_path = get_config_path()

    if not config_path.exists():
        config = Config.default()
        _write_config(config)
        return config

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    defaults = Config.default()
    base_dir = Path(data.get("base_dir", defaults.base_dir))

    db_config = data.get("database", {})
    db_data_dir = Path(db_config.get("data_dir", base_dir / "db"))
    db_filename = db_config.get("filename", defaults.db_filename)

    log_config = data.get("logging", {})
    log_level = log_config.get("level", defaults.log_level)
    log_dir = Path(log_config.get("log_dir", base_dir / "logs"))

    locale_config = data.get("locale", {})
    reports_config = data.get("reports", {})
    notifications_config = data.get("notifications", {})

    return Config(
        base_dir=base_dir,
        db_data_dir=db_data_dir,
        db_filename=db_filename,
        log_level=log_level,
        log_dir=log_dir,
        timezone=locale_config.get("timezone", defaults.timezone),
        currency_symbol=locale_config.get(
            "currency_symbol", defaults.currency_symbol
        ),
        category_limit=reports_config.get("category_limit", defaults.category_limit),
        top_categories=reports_config.get("top_categories", defaults.top_categories),
        dispatcher=notifications_config.get("dispatcher", defaults.dispatcher),
    )


def _write_config(config: Config) -> None:
    """Write config to the config file.

    Args:
        config: Config object to write.
    """
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "base_dir": str(config.base_dir),
        "database": {
            "data_dir": str(config.db_data_dir),
            "filename": config.db_filename,
        },
        "logging": {
            "level": config.log_level,
            "log_dir": str(config.log_dir),
        },
        "locale": {
            "timezone": config.timezone,
            "currency_symbol": config.currency_symbol,
        },
        "reports": {
            "category_limit": config.category_limit,
            "top_categories": config.top_categories,
        },
        "notifications": {
            "dispatcher": config.dispatcher,
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
