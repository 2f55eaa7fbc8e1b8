"""Configuration validator for heuristics settings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List

from .config import ITEM_CAPS


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class ConfigError:
    """A single configuration issue."""

    field: str
    message: str
    severity: Severity


_POSITIVE_INT_FIELDS = (
    "heading_max_length",
    "header_scan_lines",
    "location_scan_lines",
    "name_scan_lines",
    "fallback_line_cap",
)


def validate_config(raw_config: Dict[str, Any]) -> List[ConfigError]:
    """Validate raw configuration and return a list of issues.

    Args:
        raw_config: Raw config dict from YAML

    Returns:
        List of ConfigError (empty = valid)
    """
    errors: List[ConfigError] = []
    heuristics = raw_config.get("heuristics", {})
    if heuristics is None:
        heuristics = {}
    if not isinstance(heuristics, dict):
        errors.append(
            ConfigError(
                field="heuristics",
                message="heuristics must be a mapping",
                severity=Severity.ERROR,
            )
        )
        return errors

    # --- Integer thresholds ---
    for name in _POSITIVE_INT_FIELDS:
        if name not in heuristics:
            continue
        value = heuristics[name]
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            errors.append(
                ConfigError(
                    field=f"heuristics.{name}",
                    message=f"{name} must be a positive integer, got {value!r}",
                    severity=Severity.ERROR,
                )
            )

    # --- Sentence punctuation ---
    punctuation = heuristics.get("sentence_punctuation", ".!?")
    if not isinstance(punctuation, str) or not punctuation:
        errors.append(
            ConfigError(
                field="heuristics.sentence_punctuation",
                message="sentence_punctuation must be a non-empty string",
                severity=Severity.ERROR,
            )
        )

    # --- Denylist ---
    denylist = heuristics.get("email_provider_denylist", [])
    if not isinstance(denylist, list) or not all(isinstance(d, str) for d in denylist):
        errors.append(
            ConfigError(
                field="heuristics.email_provider_denylist",
                message="email_provider_denylist must be a list of domain strings",
                severity=Severity.ERROR,
            )
        )
    elif "email_provider_denylist" in heuristics and not denylist:
        errors.append(
            ConfigError(
                field="heuristics.email_provider_denylist",
                message="email_provider_denylist is empty; provider domains may be extracted as URLs",
                severity=Severity.WARNING,
            )
        )

    # --- Item caps ---
    caps = heuristics.get("item_caps", {})
    if not isinstance(caps, dict):
        errors.append(
            ConfigError(
                field="heuristics.item_caps",
                message="item_caps must be a mapping of section kind to integer",
                severity=Severity.ERROR,
            )
        )
    else:
        for kind, cap in caps.items():
            if kind not in ITEM_CAPS:
                errors.append(
                    ConfigError(
                        field=f"heuristics.item_caps.{kind}",
                        message=f"Unknown section kind '{kind}'. Expected one of: {', '.join(ITEM_CAPS)}",
                        severity=Severity.WARNING,
                    )
                )
            if not isinstance(cap, int) or isinstance(cap, bool) or cap <= 0:
                errors.append(
                    ConfigError(
                        field=f"heuristics.item_caps.{kind}",
                        message=f"item cap must be a positive integer, got {cap!r}",
                        severity=Severity.ERROR,
                    )
                )

    # --- Skill level ---
    level = heuristics.get("default_skill_level", 4)
    if not isinstance(level, int) or isinstance(level, bool) or not 1 <= level <= 5:
        errors.append(
            ConfigError(
                field="heuristics.default_skill_level",
                message=f"default_skill_level must be an integer between 1 and 5, got {level!r}",
                severity=Severity.ERROR,
            )
        )

    return errors


def has_errors(issues: List[ConfigError]) -> bool:
    """Check if any issues are errors (not just warnings)."""
    return any(e.severity == Severity.ERROR for e in issues)
