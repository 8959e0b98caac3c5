"""Configuration loading for altlang (.altlang.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".altlang.yml"

LOOKUPS_ATTRIBUTE = "alternative_language_lookups"
REPORT_ATTRIBUTE = "alternative_language_report"
SUMMARY_ATTRIBUTE = "alternative_language_summary"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LookupConfig:
    """One ``source_lang -> alternative_lang`` directory mapping from .altlang.yml."""

    source_lang: str
    alternative_lang: str
    directory: Path

    def as_record(self) -> str:
        return f"{self.source_lang},{self.alternative_lang},{self.directory}"


@dataclass
class AltLangConfig:
    """Represents the settings defined in .altlang.yml."""

    root: Path
    lookups: List[LookupConfig] = field(default_factory=list)
    report: Optional[Path] = None
    summary: Optional[Path] = None
    attributes: Dict[str, str] = field(default_factory=dict)

    def to_attributes(self) -> Dict[str, str]:
        """Return document attributes equivalent to this configuration.

        Lookups are rendered back to the record format understood by the
        lookup resolver so directory and duplicate checks happen in one place.
        """
        attributes = dict(self.attributes)
        if self.lookups:
            attributes[LOOKUPS_ATTRIBUTE] = "\n".join(
                lookup.as_record() for lookup in self.lookups
            )
        if self.report is not None:
            attributes[REPORT_ATTRIBUTE] = str(self.report)
        if self.summary is not None:
            attributes[SUMMARY_ATTRIBUTE] = str(self.summary)
        return attributes


def load_config(config_path: Path) -> AltLangConfig:
    """Load configuration from disk.

    ``config_path`` may name the file itself or the directory holding
    ``.altlang.yml``. A missing file yields an empty configuration.
    """
    location = config_path.expanduser()
    config_file = (location / CONFIG_FILENAME if location.is_dir() else location).resolve()
    root = config_file.parent

    if not config_file.exists():
        return AltLangConfig(root=root)

    data = _load_mapping(config_file)
    report = _scalar(data.get("report"))
    summary = _scalar(data.get("summary"))
    raw_attributes = data.get("attributes")
    attributes = {
        str(key): text
        for key, value in (raw_attributes.items() if isinstance(raw_attributes, dict) else ())
        if (text := _scalar(value)) is not None
    }

    return AltLangConfig(
        root=root,
        lookups=_lookup_entries(data.get("lookups"), root),
        report=_resolve_path(root, report) if report else None,
        summary=_resolve_path(root, summary) if summary else None,
        attributes=attributes,
    )


def parse_attribute_overrides(values: Sequence[str]) -> Dict[str, str]:
    """Parse ``NAME=VALUE`` pairs (``NAME`` alone sets an empty value)."""
    attributes: Dict[str, str] = {}
    for value in values:
        name, _, text = value.partition("=")
        name = name.strip()
        if not name:
            raise ConfigError(f"Invalid attribute override: {value!r}")
        attributes[name] = text
    return attributes


def _lookup_entries(raw_lookups: Any, root: Path) -> List[LookupConfig]:
    if raw_lookups is None:
        return []
    if not isinstance(raw_lookups, list):
        raise ConfigError("lookups must be a list of mappings")
    lookups: List[LookupConfig] = []
    for position, raw in enumerate(raw_lookups, start=1):
        fields = raw if isinstance(raw, dict) else {}
        source_lang, alternative_lang, directory = (
            _scalar(fields.get(key)) for key in ("source_lang", "alternative_lang", "directory")
        )
        if not (source_lang and alternative_lang and directory):
            raise ConfigError(
                f"lookup #{position} needs source_lang, alternative_lang and directory"
            )
        lookups.append(
            LookupConfig(source_lang, alternative_lang, _resolve_path(root, directory))
        )
    return lookups


def _resolve_path(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    return (path if path.is_absolute() else root / path).resolve()


def _load_mapping(path: Path) -> Dict[str, Any]:
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")
    return loaded


def _scalar(value: Any) -> Optional[str]:
    # YAML booleans are written back the way AsciiDoc attributes spell them.
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


__all__ = [
    "AltLangConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "LOOKUPS_ATTRIBUTE",
    "LookupConfig",
    "REPORT_ATTRIBUTE",
    "SUMMARY_ATTRIBUTE",
    "load_config",
    "parse_attribute_overrides",
]
