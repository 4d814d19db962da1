"""Configuration management for Kassza.

Reads configuration from ~/.config/kassza.toml and creates default config if needed.
"""

from pathlib import Path
from dataclasses import dataclass
from decimal import Decimal
import tomllib
import tomli_w

DEFAULT_MONTHLY_BUDGET = Decimal("500000")

# How unsorted expenses count toward the spent total, see tools.budget.SpendBasis
DEFAULT_SPEND_BASIS = "all"


@dataclass
class Config:
    """Application configuration."""

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    export_dir: Path
    default_monthly_budget: Decimal = DEFAULT_MONTHLY_BUDGET
    spend_basis: str = DEFAULT_SPEND_BASIS

    @property
    def db_path(self) -> Path:
        """Get the full database path (data_dir/filename)."""
        return self.db_data_dir / self.db_filename

    @property
    def session_path(self) -> Path:
        """Get the path of the file holding the signed-in session."""
        return self.base_dir / "session.toml"

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        home = Path.home()
        base_dir = home / "data" / "kassza"
        return cls(
            base_dir=base_dir,
            db_data_dir=base_dir / "db",
            db_filename="kassza.db",
            log_level="INFO",
            log_dir=base_dir / "logs",
            export_dir=base_dir / "exports",
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    return Path.home() / ".config" / "kassza.toml"


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

    # If config doesn't exist, create it with defaults
    if not config_path.exists():
        config = Config.default()
        _write_config(config)
        return config

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    return parse_config(data)


def parse_config(data: dict) -> Config:
    """Build a Config from parsed TOML data, with defaults for missing values.

    Args:
        data: Dictionary as produced by tomllib.

    Returns:
        Config object.

    Raises:
        ValueError: If budget settings are invalid.
    """
    base_dir = Path(data.get("base_dir", Path.home() / "data" / "kassza"))

    db_config = data.get("database", {})
    db_data_dir = Path(db_config.get("data_dir", base_dir / "db"))
    db_filename = db_config.get("filename", "kassza.db")

    log_config = data.get("logging", {})
    log_level = log_config.get("level", "INFO")
    log_dir = Path(log_config.get("log_dir", base_dir / "logs"))

    export_config = data.get("export", {})
    export_dir = Path(export_config.get("export_dir", base_dir / "exports"))

    budget_config = data.get("budget", {})
    default_monthly_budget = Decimal(
        str(budget_config.get("default_monthly_budget", DEFAULT_MONTHLY_BUDGET))
    )
    spend_basis = budget_config.get("spend_basis", DEFAULT_SPEND_BASIS)
    if spend_basis not in ("all", "sorted"):
        raise ValueError(
            f"Invalid budget.spend_basis '{spend_basis}' (expected 'all' or 'sorted')"
        )

    return Config(
        base_dir=base_dir,
        db_data_dir=db_data_dir,
        db_filename=db_filename,
        log_level=log_level,
        log_dir=log_dir,
        export_dir=export_dir,
        default_monthly_budget=default_monthly_budget,
        spend_basis=spend_basis,
    )


def _write_config(config: Config) -> None:
    """Write config to the config file.

    Args:
        config: Config object to write.
    """
    config_path = get_config_path()

    # Ensure config directory exists
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
        "export": {
            "export_dir": str(config.export_dir),
        },
        "budget": {
            "default_monthly_budget": str(config.default_monthly_budget),
            "spend_basis": config.spend_basis,
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
