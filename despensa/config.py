"""TOML configuration loader for the food tracker."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

from .models import UserPlan


@dataclass
class GeminiGatewayConfig:
    api_key: str = ""
    model: str = "gemini-2.0-flash"


@dataclass
class ClaudeGatewayConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"


@dataclass
class GatewayConfig:
    backend: str = "gemini"
    timeout: float = 30.0
    gemini: GeminiGatewayConfig = field(default_factory=GeminiGatewayConfig)
    claude: ClaudeGatewayConfig = field(default_factory=ClaudeGatewayConfig)


@dataclass
class DatabaseConfig:
    path: str = "~/.config/despensa/despensa.db"


@dataclass
class ProfileConfig:
    name: str = ""
    plan: UserPlan = UserPlan.FREE
    alert_days_before: int = 3


@dataclass
class SchedulerConfig:
    enabled: bool = False
    sweep_schedule: str = "0 * * * *"


@dataclass
class TrackerConfig:
    gateway: GatewayConfig = field(default_factory=GatewayConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    profile: ProfileConfig = field(default_factory=ProfileConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)


def load_config(path: str | Path | None = None) -> TrackerConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    API keys can be overridden via environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    gw = raw.get("gateway", {})
    db = raw.get("database", {})
    prf = raw.get("profile", {})
    sch = raw.get("scheduler", {})

    gemini_cfg = gw.get("gemini", {})
    claude_cfg = gw.get("claude", {})

    # Resolve API keys: config file → environment variable
    gemini_api_key = gemini_cfg.get("api_key", "") or os.environ.get(
        "GEMINI_API_KEY", ""
    )
    claude_api_key = claude_cfg.get("api_key", "") or os.environ.get(
        "ANTHROPIC_API_KEY", ""
    )

    return TrackerConfig(
        gateway=GatewayConfig(
            backend=gw.get("backend", "gemini"),
            timeout=float(gw.get("timeout", 30.0)),
            gemini=GeminiGatewayConfig(
                api_key=gemini_api_key,
                model=gemini_cfg.get("model", "gemini-2.0-flash"),
            ),
            claude=ClaudeGatewayConfig(
                api_key=claude_api_key,
                model=claude_cfg.get("model", "claude-sonnet-4-5-20250929"),
            ),
        ),
        database=DatabaseConfig(
            path=db.get("path", "~/.config/despensa/despensa.db"),
        ),
        profile=ProfileConfig(
            name=prf.get("name", ""),
            plan=UserPlan(prf.get("plan", "free")),
            alert_days_before=prf.get("alert_days_before", 3),
        ),
        scheduler=SchedulerConfig(
            enabled=sch.get("enabled", False),
            sweep_schedule=sch.get("sweep_schedule", "0 * * * *"),
        ),
    )
