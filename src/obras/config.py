"""Obras configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site — not in this module)
  2. Environment variables  (OBRAS_ADVISORY_MODEL, OBRAS_DB)
  3. Per-project obras.yaml  (current directory)
  4. Global ~/.obras/config.yaml  (model defaults only — no API keys)
  5. Hardcoded defaults

Global config must never contain API keys; use environment variables instead.
A ``units:`` list replaces the built-in unit list as a whole.
All YAML reads use yaml.safe_load() — never yaml.load().
"""

from __future__ import annotations

import os
import re
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from obras.models import Unit
from obras.units import DEFAULT_UNITS

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".obras"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
PROJECT_CONFIG_NAME: str = "obras.yaml"

# Fields that suggest an API key — forbidden in global config.
# Does NOT match legitimate config keys like max_tokens.
_API_KEY_RE: re.Pattern[str] = re.compile(
    r"api[_\-]?(?:key|secret)"  # api_key, api-key, api_secret, apikey
    r"|_token$"                  # github_token, access_token (suffix)
    r"|^token$"                  # exactly "token"
    r"|_secret$"                 # client_secret (suffix)
    r"|^secret$"                 # exactly "secret"
    r"|passw(?:ord|d)"           # password, passwd
    r"|credential",              # credential, credentials
    re.IGNORECASE,
)

_KNOWN_SECTIONS: frozenset[str] = frozenset(["company", "advisory", "database", "units"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid or forbidden value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class CompanyCfg:
    """Company shown in headers and advisory prompts (obras.yaml: company:)."""

    name: str = "GP7 Distribuidora"


@dataclass
class AdvisoryCfg:
    """LLM advisory configuration (obras.yaml: advisory:)."""

    model: str = "gemini/gemini-2.5-flash"
    max_tokens: int = 256
    temperature: float = 0.2
    num_retries: int = 2


@dataclass
class DatabaseCfg:
    """Snapshot database location (obras.yaml: database:)."""

    path: str = ".obras.db"


@dataclass
class ObrasConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    company: CompanyCfg = field(default_factory=CompanyCfg)
    advisory: AdvisoryCfg = field(default_factory=AdvisoryCfg)
    database: DatabaseCfg = field(default_factory=DatabaseCfg)
    units: list[Unit] = field(default_factory=lambda: list(DEFAULT_UNITS))


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _check_no_api_keys(data: dict[str, Any], source: Path) -> None:
    """Raise ConfigError if *data* contains any API-key-like key names."""

    def _scan(obj: Any, path: str) -> None:
        if isinstance(obj, dict):
            for k, v in obj.items():
                full = f"{path}.{k}" if path else k
                if _API_KEY_RE.search(str(k)):
                    raise ConfigError(
                        f"Global config '{source}' contains a forbidden key '{full}'.\n"
                        f"  API keys must be set via environment variables, not config files.\n"
                        f"  Remove '{full}' from {source.name} and use:\n"
                        f"    export {str(k).upper().replace('-', '_')}=<value>"
                    )
                _scan(v, full)

    _scan(data, "")


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}' — ignored.",
                UserWarning,
                stacklevel=4,
            )


def _parse_units(raw: Any) -> list[Unit]:
    """Build the unit list from a ``units:`` YAML sequence.

    Raises:
        ConfigError: On a non-list value, a missing id/name, or a duplicate id.
    """
    if not isinstance(raw, list) or not raw:
        raise ConfigError("'units' must be a non-empty list of {id, name, city, state}.")

    units: list[Unit] = []
    seen: set[str] = set()
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict) or not entry.get("id") or not entry.get("name"):
            raise ConfigError(f"units[{i}] must define at least 'id' and 'name'.")
        unit_id = str(entry["id"])
        if unit_id in seen:
            raise ConfigError(f"Duplicate unit id '{unit_id}' in 'units'.")
        seen.add(unit_id)

        coordinates = None
        if entry.get("lat") is not None and entry.get("lng") is not None:
            coordinates = (
                _coerce(float, entry["lat"], f"units[{i}].lat"),
                _coerce(float, entry["lng"], f"units[{i}].lng"),
            )

        units.append(
            Unit(
                id=unit_id,
                name=str(entry["name"]),
                city=str(entry.get("city", "")),
                state=str(entry.get("state", "")),
                coordinates=coordinates,
            )
        )
    return units


def _coerce(kind: type, value: Any, key: str) -> Any:
    """Convert a scalar config value, reporting the offending key on failure."""
    if isinstance(value, bool):
        raise ConfigError(f"'{key}' must be a number, got {value!r}.")
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ConfigError(f"'{key}' must be a number, got {value!r}.") from None


def _require_mapping(value: Any, section: str) -> None:
    if not isinstance(value, dict):
        raise ConfigError(f"'{section}' must be a mapping, got {value!r}.")


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _cfg_from_dict(data: dict[str, Any]) -> ObrasConfig:
    """Build an *ObrasConfig* from a merged raw YAML dict."""
    cfg = ObrasConfig()

    if "company" in data:
        c = data["company"] or {}
        _require_mapping(c, "company")
        cfg.company = CompanyCfg(name=str(c.get("name", cfg.company.name)))

    if "advisory" in data:
        a = data["advisory"] or {}
        _require_mapping(a, "advisory")
        cfg.advisory = AdvisoryCfg(
            model=str(a.get("model", cfg.advisory.model)),
            max_tokens=_coerce(int, a.get("max_tokens", cfg.advisory.max_tokens), "advisory.max_tokens"),
            temperature=_coerce(
                float, a.get("temperature", cfg.advisory.temperature), "advisory.temperature"
            ),
            num_retries=_coerce(int, a.get("num_retries", cfg.advisory.num_retries), "advisory.num_retries"),
        )

    if "database" in data:
        d = data["database"] or {}
        _require_mapping(d, "database")
        cfg.database = DatabaseCfg(path=str(d.get("path", cfg.database.path)))

    if "units" in data:
        cfg.units = _parse_units(data["units"])

    return cfg


def _apply_env_overrides(cfg: ObrasConfig) -> ObrasConfig:
    """Apply OBRAS_* environment variable overrides."""
    if model := os.environ.get("OBRAS_ADVISORY_MODEL"):
        cfg.advisory.model = model
    if db_path := os.environ.get("OBRAS_DB"):
        cfg.database.path = db_path
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> ObrasConfig:
    """Load and return a merged *ObrasConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *obras.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Raises:
        ConfigError: If global config contains API-key-like fields, or if the
            ``units`` list is malformed.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    # Layer 1: global config
    if global_path.exists():
        raw_global = yaml.safe_load(global_path.read_text(encoding="utf-8")) or {}
        _check_no_api_keys(raw_global, global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    # Layer 2: per-project config
    project_cfg_path = search_dir / PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = yaml.safe_load(project_cfg_path.read_text(encoding="utf-8")) or {}
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)

    # Layer 3: env var overrides
    return _apply_env_overrides(cfg)


def ensure_global_config(
    global_config_path: Path | None = None,
) -> Path:
    """Create ``~/.obras/config.yaml`` with defaults if it does not exist.

    Creates parent directory with mode 0o700 and the config file with
    mode 0o600 (owner-readable only).

    Returns:
        Path to the global config file.
    """
    target = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    if not target.exists():
        content = (
            "# Obras global configuration — model defaults only.\n"
            "# NEVER store API keys here — use environment variables:\n"
            "#   export GEMINI_API_KEY=...\n"
            "\n"
            "advisory:\n"
            "  model: gemini/gemini-2.5-flash\n"
        )
        target.write_text(content, encoding="utf-8")
        target.chmod(0o600)

    return target
