"""
Loading of severity configuration documents.

A document partitions inspection identifiers into three tiers::

    <inspections>
      <errors>
        <error class="org.example.UnusedSymbolInspection"/>
      </errors>
      <warnings/>
      <infos/>
    </inspections>

``${name}`` tokens in an entry's ``class`` value are substituted from the
task's configuration properties once the document has been parsed.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .errors import ConfigParseError
from .models import Severity, SeverityClassification

logger = logging.getLogger(__name__)

SECTIONS = {
    Severity.ERROR: "errors",
    Severity.WARNING: "warnings",
    Severity.INFO: "infos",
}
ID_ATTRIBUTE = "class"

_PROPERTY_PATTERN = re.compile(r"\$\{([^}]+)\}")


def substitute_properties(
    text: str, properties: Mapping[str, Any] | None, source: str | Path | None = None
) -> str:
    """Replace ``${name}`` tokens with configuration property values."""
    properties = properties or {}

    def replace(match: re.Match) -> str:
        name = match.group(1)
        if name not in properties:
            raise ConfigParseError(f"Property '{name}' is referenced but not defined", source)
        return str(properties[name])

    return _PROPERTY_PATTERN.sub(replace, text)


def parse_classification(
    text: str,
    properties: Mapping[str, Any] | None = None,
    source: str | Path | None = None,
) -> SeverityClassification:
    """Parse a severity document from its text."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise ConfigParseError(f"Malformed severity document: {e}", source) from e

    tiers: dict[Severity, tuple[str, ...]] = {}
    for severity, section_name in SECTIONS.items():
        section = root.find(section_name)
        if section is None:
            raise ConfigParseError(f"Missing required section '{section_name}'", source)

        identifiers = []
        for entry in section:
            identifier = entry.get(ID_ATTRIBUTE)
            if not identifier:
                raise ConfigParseError(
                    f"Entry <{entry.tag}> in '{section_name}' has no '{ID_ATTRIBUTE}' attribute",
                    source,
                )
            identifiers.append(substitute_properties(identifier, properties, source))
        tiers[severity] = tuple(identifiers)

    _check_disjoint(tiers, source)

    classification = SeverityClassification(
        errors=tiers[Severity.ERROR],
        warnings=tiers[Severity.WARNING],
        infos=tiers[Severity.INFO],
    )
    logger.debug(
        "Loaded %d error, %d warning and %d info inspections",
        len(classification.errors),
        len(classification.warnings),
        len(classification.infos),
    )
    return classification


def load_classification(
    path: str | Path, properties: Mapping[str, Any] | None = None
) -> SeverityClassification:
    """Read and parse the severity document at ``path``."""
    path = Path(path)
    if not path.is_file():
        raise ConfigParseError("Severity document does not exist", path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigParseError(f"Cannot read severity document: {e}", path) from e
    return parse_classification(text, properties, source=path)


def _check_disjoint(tiers: dict[Severity, tuple[str, ...]], source: str | Path | None):
    seen: dict[str, Severity] = {}
    conflicts = []
    for severity, identifiers in tiers.items():
        for identifier in identifiers:
            other = seen.setdefault(identifier, severity)
            if other != severity:
                conflicts.append(f"{identifier} ({other.value}, {severity.value})")
    if conflicts:
        raise ConfigParseError(
            "Inspections listed in more than one severity section: " + ", ".join(conflicts),
            source,
        )
