"""Configuration loader for SheetPulse runtime settings.

Settings come from a YAML file (``SHEETPULSE_CONFIG`` or the packaged
``settings.yaml``), with ``${VAR}`` expansion and a handful of environment
overrides applied on top.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from sheetpulse.core.errors import ConfigError


load_dotenv(override=False)

CONFIG_DIR = Path(__file__).resolve().parent
DEFAULT_SETTINGS_PATH = CONFIG_DIR / "settings.yaml"

DEFAULT_TIMEOUT = 20.0
DEFAULT_USER_AGENT = "SheetPulse/1.0"

CONFIG_PATH_ENV = "SHEETPULSE_CONFIG"
DEFAULT_LINK_ENV = "SHEETPULSE_DEFAULT_LINK"
DEFAULT_TAB_ENV = "SHEETPULSE_DEFAULT_TAB"
TIMEOUT_ENV = "SHEETPULSE_TIMEOUT_SEC"
VERIFY_TLS_ENV = "SHEETPULSE_VERIFY_TLS"
STATE_ROOT_ENV = "SHEETPULSE_STATE_ROOT"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(slots=True)
class StatusKeywords:
    """Keyword sets used to bucket free-text RAG values, in priority order."""

    on_track: tuple[str, ...] = ("on track", "on-track", "ontrack", "green", "completed", "healthy")
    at_risk: tuple[str, ...] = ("at risk", "at-risk", "atrisk", "amber", "yellow", "caution", "watch")
    delayed: tuple[str, ...] = ("delayed", "delay", "off track", "off-track", "blocked", "overdue", "running late", "red")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "StatusKeywords":
        if not data:
            return cls()
        defaults = cls()

        def _terms(key: str, fallback: tuple[str, ...]) -> tuple[str, ...]:
            raw = data.get(key)
            if raw is None:
                return fallback
            if isinstance(raw, str) or not isinstance(raw, (list, tuple)):
                raise ConfigError(f"status_keywords.{key} must be a list of strings")
            terms = tuple(str(item).strip().casefold() for item in raw if str(item).strip())
            if not terms:
                raise ConfigError(f"status_keywords.{key} must not be empty")
            return terms

        return cls(
            on_track=_terms("on_track", defaults.on_track),
            at_risk=_terms("at_risk", defaults.at_risk),
            delayed=_terms("delayed", defaults.delayed),
        )


@dataclass(slots=True)
class Settings:
    """Resolved runtime settings."""

    default_link: str | None = None
    default_tab: str | None = None
    timeout_sec: float | None = DEFAULT_TIMEOUT
    verify_tls: bool = True
    trust_env: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    proxies: Mapping[str, str] | None = None
    state_root: Path | None = None
    mapping_path: Path | None = None
    status_keywords: StatusKeywords = field(default_factory=StatusKeywords)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, base_dir: Path | None = None) -> "Settings":
        """Create a settings instance from a mapping (usually parsed YAML)."""

        proxies_raw = data.get("proxies")
        proxies: Mapping[str, str] | None = None
        if isinstance(proxies_raw, Mapping):
            proxies = {str(k): _expand_env(v) for k, v in proxies_raw.items()}
        elif proxies_raw is not None:
            raise ConfigError("proxies must be a mapping of scheme -> proxy URL")

        keywords_raw = data.get("status_keywords")
        if keywords_raw is not None and not isinstance(keywords_raw, Mapping):
            raise ConfigError("status_keywords must be a mapping")

        return cls(
            default_link=_optional_str(_expand_env(data.get("default_link"))),
            default_tab=_optional_str(_expand_env(data.get("default_tab"))),
            timeout_sec=_parse_timeout(data.get("timeout_sec", DEFAULT_TIMEOUT), "timeout_sec"),
            verify_tls=_parse_bool(data.get("verify_tls", True), "verify_tls"),
            trust_env=_parse_bool(data.get("trust_env", True), "trust_env"),
            user_agent=str(data.get("user_agent") or DEFAULT_USER_AGENT),
            proxies=proxies,
            state_root=_optional_path(_expand_env(data.get("state_root")), base_dir),
            mapping_path=_optional_path(_expand_env(data.get("mapping_path")), base_dir),
            status_keywords=StatusKeywords.from_mapping(keywords_raw),
        )


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from YAML and apply environment overrides.

    Args:
        path: Optional explicit settings file. Falls back to ``SHEETPULSE_CONFIG``
            and then the packaged ``settings.yaml``.

    Returns:
        Parsed ``Settings`` instance.

    Raises:
        ConfigError: If the file is missing, unreadable, or holds invalid values.
    """

    cfg_path = Path(path) if path else Path(os.getenv(CONFIG_PATH_ENV) or DEFAULT_SETTINGS_PATH)
    data = _load_yaml(cfg_path)
    base = Settings.from_mapping(data, base_dir=cfg_path.parent)
    return _apply_env_overrides(base)


def _apply_env_overrides(base: Settings) -> Settings:
    link = _read_env(DEFAULT_LINK_ENV)
    if link:
        base.default_link = link
    tab = _read_env(DEFAULT_TAB_ENV)
    if tab:
        base.default_tab = tab
    timeout = _read_env(TIMEOUT_ENV)
    if timeout:
        base.timeout_sec = _parse_timeout(timeout, TIMEOUT_ENV)
    verify = _read_env(VERIFY_TLS_ENV)
    if verify:
        base.verify_tls = _parse_bool(verify, VERIFY_TLS_ENV)
    root = _read_env(STATE_ROOT_ENV)
    if root:
        base.state_root = Path(root).expanduser()
    return base


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"settings file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"settings file is not valid YAML: {path}") from exc
    if not isinstance(data, dict):
        raise ConfigError("settings file must contain a mapping")
    return data


def _read_env(key: str) -> str | None:
    value = os.getenv(key)
    if value is None:
        return None
    return value.strip()


def _expand_env(value: Any) -> Any:
    if isinstance(value, str):
        expanded = os.path.expandvars(value)
        if "${" in value and "}" in value and expanded == value:
            raise ConfigError(f"Environment variable not set for value: {value}")
        return expanded
    return value


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_path(value: Any, base_dir: Path | None) -> Path | None:
    text = _optional_str(value)
    if text is None:
        return None
    path = Path(text).expanduser()
    if not path.is_absolute() and base_dir is not None:
        path = base_dir / path
    return path


def _parse_timeout(value: Any, name: str) -> float | None:
    if value is None:
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number") from exc
    if timeout < 0:
        raise ConfigError(f"{name} must not be negative")
    # 0 means "no explicit timeout", leaving the transport default in place
    return timeout or None


def _parse_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean")


__all__ = [
    "Settings",
    "StatusKeywords",
    "load_settings",
    "CONFIG_PATH_ENV",
    "DEFAULT_LINK_ENV",
    "DEFAULT_TAB_ENV",
    "TIMEOUT_ENV",
    "VERIFY_TLS_ENV",
    "STATE_ROOT_ENV",
]
