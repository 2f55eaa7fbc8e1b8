"""Heuristics configuration for the import and normalization pipeline.

The thresholds below were tuned by inspection against real résumés, not
derived from a labelled corpus. They are exposed as configuration so they
can be adjusted without touching the heuristics themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, FrozenSet

logger = logging.getLogger(__name__)

#: Consumer mail providers whose bare domain is routinely mis-extracted as
#: a personal URL from the e-mail address on the header line.
EMAIL_PROVIDER_DENYLIST: FrozenSet[str] = frozenset(
    {
        "gmail.com",
        "googlemail.com",
        "outlook.com",
        "hotmail.com",
        "live.com",
        "yahoo.com",
        "icloud.com",
        "proton.me",
        "protonmail.com",
    }
)

#: Maximum number of items built per section kind.
ITEM_CAPS: Dict[str, int] = {
    "experience": 40,
    "education": 20,
    "certifications": 30,
    "projects": 30,
    "custom": 30,
}


@dataclass(frozen=True)
class HeuristicsConfig:
    """Tunable constants shared by the parser and the description normalizer."""

    heading_max_length: int = 72
    sentence_punctuation: str = ".!?"
    email_provider_denylist: FrozenSet[str] = EMAIL_PROVIDER_DENYLIST
    header_scan_lines: int = 40
    location_scan_lines: int = 16
    name_scan_lines: int = 7
    fallback_line_cap: int = 200
    item_caps: Dict[str, int] = field(default_factory=lambda: dict(ITEM_CAPS))
    default_skill_level: int = 4

    def item_cap(self, kind: str) -> int:
        return self.item_caps.get(kind, ITEM_CAPS["custom"])


DEFAULT_CONFIG = HeuristicsConfig()


# ---------------------------------------------------------------------------
# YAML loading
# ---------------------------------------------------------------------------

_REPO_ROOT = Path(__file__).resolve().parents[2]
_LOCAL_CONFIG_NAME = "config.local.yaml"


def _locate(candidate: Path) -> Path:
    """Resolve *candidate* against the working directory, then the checkout root."""
    if candidate.exists() or candidate.is_absolute():
        return candidate
    in_repo = _REPO_ROOT / candidate
    return in_repo if in_repo.exists() else candidate


def _read_mapping(path: Path) -> Dict[str, Any]:
    import yaml

    if not path.is_file():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must be a mapping: {path}")
    return data


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            value = _deep_merge(merged[key], value)
        merged[key] = value
    return merged


def load_raw_config(config_path: str = f"config/{_LOCAL_CONFIG_NAME}") -> dict:
    """Read the raw YAML mapping.

    A ``config.local.yaml`` path is an overlay: the sibling ``config.yaml``
    is read first and the local file is deep-merged over it, and either may
    be missing. Any other path is read on its own.
    """
    requested = Path(config_path)
    layers = [requested]
    if requested.name == _LOCAL_CONFIG_NAME:
        layers.insert(0, requested.with_name("config.yaml"))

    merged: Dict[str, Any] = {}
    for layer in layers:
        merged = _deep_merge(merged, _read_mapping(_locate(layer)))

    if not merged:
        tried = ", ".join(str(layer) for layer in layers)
        raise FileNotFoundError(f"Config file not found: {tried}")
    return merged


def config_from_dict(data: Dict[str, Any]) -> HeuristicsConfig:
    """Build a :class:`HeuristicsConfig` from a ``heuristics:`` mapping.

    Unknown keys are ignored; missing keys keep their defaults.
    """
    known = {f.name for f in fields(HeuristicsConfig)}
    kwargs: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            logger.debug("Ignoring unknown heuristics key: %s", key)
            continue
        kwargs[key] = value

    if "email_provider_denylist" in kwargs:
        kwargs["email_provider_denylist"] = frozenset(
            str(domain).strip().lower() for domain in kwargs["email_provider_denylist"] or []
        )
    if "item_caps" in kwargs:
        caps = dict(ITEM_CAPS)
        caps.update({str(k): int(v) for k, v in (kwargs["item_caps"] or {}).items()})
        kwargs["item_caps"] = caps

    return HeuristicsConfig(**kwargs)


def load_config(config_path: str = f"config/{_LOCAL_CONFIG_NAME}") -> HeuristicsConfig:
    """Load and validate heuristics configuration from YAML.

    Raises:
        ValueError: when the ``heuristics:`` mapping has invalid values.
    """
    from .config_validator import Severity, has_errors, validate_config

    raw = load_raw_config(config_path)
    issues = validate_config(raw)
    for issue in issues:
        if issue.severity == Severity.WARNING:
            logger.warning("Config [%s] %s", issue.field, issue.message)
    if has_errors(issues):
        details = "; ".join(f"[{i.field}] {i.message}" for i in issues if i.severity == Severity.ERROR)
        raise ValueError(f"Invalid heuristics configuration in {config_path}: {details}")
    return config_from_dict(raw.get("heuristics") or {})
