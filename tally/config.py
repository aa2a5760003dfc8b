"""Configuration file management for tally."""

import os
import tomllib
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path
from typing import Any

import tomli_w

from tally.domain.budget import DEFAULT_BUDGETS, BudgetCategory
from tally.domain.models import ZERO, CategoryName, Month
from tally.domain.report import DEFAULT_CHART_PLACEHOLDER
from tally.domain.transactions import parse_amount

DEFAULT_WINDOW_MONTHS = 6
DEFAULT_ALERT_TTL_SECONDS = 5


@dataclass(frozen=True)
class Settings:
    """Typed view of the configuration file."""

    budgets: tuple[BudgetCategory, ...] = DEFAULT_BUDGETS
    window_start: Month | None = None
    window_months: int = DEFAULT_WINDOW_MONTHS
    loss_alert_ttl: timedelta = field(default_factory=lambda: timedelta(seconds=DEFAULT_ALERT_TTL_SECONDS))
    chart_placeholder: Decimal = DEFAULT_CHART_PLACEHOLDER


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "tally" / "config.toml"


def budgets_to_config(budgets: tuple[BudgetCategory, ...] | list[BudgetCategory]) -> list[dict[str, Any]]:
    """Serialize budget categories for the TOML file (spent is never stored)."""
    return [
        {"name": budget.name, "limit": str(budget.limit), "notifications": budget.notifications_enabled}
        for budget in budgets
    ]


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    default_config: dict[str, Any] = {
        "window_months": DEFAULT_WINDOW_MONTHS,
        "loss_alert_ttl_seconds": DEFAULT_ALERT_TTL_SECONDS,
        "chart_placeholder": str(DEFAULT_CHART_PLACEHOLDER),
        "budgets": budgets_to_config(DEFAULT_BUDGETS),
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(default_config, f)

    os.chmod(config_path, 0o600)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def parse_budgets(raw_budgets: list[Any]) -> tuple[BudgetCategory, ...]:
    """Build budget categories from config entries.

    Entries without a name are skipped; a bad limit becomes 0.
    """
    budgets: list[BudgetCategory] = []
    for entry in raw_budgets:
        if not isinstance(entry, dict):
            continue
        name = str(entry.get("name") or "").strip()
        if not name:
            continue
        limit = parse_amount(entry.get("limit"))
        budgets.append(
            BudgetCategory(
                name=CategoryName(name),
                limit=limit if limit is not None else ZERO,
                notifications_enabled=bool(entry.get("notifications", True)),
            )
        )
    return tuple(budgets)


def settings_from_config(config: dict[str, Any]) -> Settings:
    """Convert a raw configuration dictionary into Settings."""
    raw_budgets = config.get("budgets")
    budgets = parse_budgets(raw_budgets) if isinstance(raw_budgets, list) else DEFAULT_BUDGETS

    placeholder = parse_amount(config.get("chart_placeholder"))
    window_start = config.get("window_start")
    if window_start:
        # Raises ValueError for anything but YYYY-MM
        datetime.strptime(str(window_start), "%Y-%m")

    return Settings(
        budgets=budgets,
        window_start=Month(str(window_start)) if window_start else None,
        window_months=int(config.get("window_months", DEFAULT_WINDOW_MONTHS)),
        loss_alert_ttl=timedelta(seconds=int(config.get("loss_alert_ttl_seconds", DEFAULT_ALERT_TTL_SECONDS))),
        chart_placeholder=placeholder if placeholder else DEFAULT_CHART_PLACEHOLDER,
    )


def load_settings(config_path: Path | None = None) -> Settings:
    """Load and convert the configuration file.

    Raises:
        FileNotFoundError: If config file doesn't exist.
    """
    return settings_from_config(load_config(config_path))


def save_budget_categories(budgets: list[BudgetCategory], config_path: Path | None = None) -> None:
    """Write budget configuration back, leaving other keys untouched.

    Args:
        budgets: Budget categories to store.
        config_path: Path to config file. If None, uses default location.
    """
    config = load_config(config_path)
    config["budgets"] = budgets_to_config(budgets)
    save_config(config, config_path)
