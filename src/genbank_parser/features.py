"""Reconstruction of the FEATURES table."""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .models import Feature

logger = logging.getLogger(__name__)

# Qualifiers copied up to the record under their upper-cased name
PROMOTED_QUALIFIERS = frozenset(['mol_type', 'cultivar', 'variety', 'strain'])

TAXON_RE = re.compile(r"taxon:(\d+)\Z")


@dataclass
class FeatureTable:
    """Everything the feature table contributes to a record."""

    features: List[Feature] = field(default_factory=list)
    promoted_attributes: Dict[str, str] = field(default_factory=dict)
    ncbi_taxon_id: Optional[str] = None


def unquote(value: str) -> str:
    """Strip one leading and one trailing double quote."""
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def has_open_quote(raw_value: str) -> bool:
    """Check if a raw qualifier value opened a quote it has not closed yet.

    Embedded quotes are written doubled (``""``), so the quote is still open
    while the count of ``"`` characters is odd.
    """
    return raw_value.startswith('"') and raw_value.count('"') % 2 == 1


class FeatureTableParser:
    """Parses the indented body of a FEATURES section.

    The table is read line by line with three pieces of state: the open
    feature (name and location), and the qualifier currently being filled,
    which may continue over further lines.
    """

    HEADER = 'Location/Qualifiers'
    QUALIFIER_RE = re.compile(r"/(\w+)(?:=(.*))?\Z", re.DOTALL)
    FEATURE_RE = re.compile(r"(\S+)\s+(.+)\Z", re.DOTALL)

    def parse(self, body: str) -> FeatureTable:
        """
        Parse a FEATURES body.

        Args:
            body: Text following the FEATURES keyword, up to the next section

        Returns:
            FeatureTable with features in text order
        """
        table = FeatureTable()

        name: Optional[str] = None
        location = ''
        qualifiers: Dict[str, str] = {}
        current_key: Optional[str] = None
        raw_value = ''
        qualifier_indent = 0

        for raw_line in body.split('\n'):
            line = raw_line.strip()
            if not line or line == self.HEADER:
                continue
            indent = len(raw_line) - len(raw_line.lstrip())

            qualifier = self.QUALIFIER_RE.match(line)

            # Inside a quoted value, lines at the qualifier column belong to it
            if current_key and has_open_quote(raw_value):
                if not qualifier and indent >= qualifier_indent:
                    raw_value += line
                    self._set_qualifier(table, qualifiers, current_key, raw_value)
                    continue
                logger.warning(f"Unterminated quoted value for /{current_key} ended by: {line}")

            if qualifier:
                if name is None:
                    logger.debug(f"Qualifier outside of any feature ignored: {line}")
                    continue
                current_key = qualifier.group(1)
                raw_value = qualifier.group(2) or ''
                qualifier_indent = indent
                self._set_qualifier(table, qualifiers, current_key, raw_value)
                continue

            feature = self.FEATURE_RE.match(line)
            if feature:
                if name is not None:
                    table.features.append(Feature(name=name, location=location, qualifiers=qualifiers))
                name, location = feature.group(1), feature.group(2)
                qualifiers = {}
                current_key = None
                raw_value = ''
                continue

            if current_key:
                raw_value += line
                self._set_qualifier(table, qualifiers, current_key, raw_value)
            elif name is not None:
                # Wrapped location, e.g. join(...) split over lines
                location += line
            else:
                logger.debug(f"Stray line before the first feature ignored: {line}")

        if name is not None:
            table.features.append(Feature(name=name, location=location, qualifiers=qualifiers))

        return table

    def _set_qualifier(self, table: FeatureTable, qualifiers: Dict[str, str], key: str, raw_value: str) -> None:
        value = unquote(raw_value)
        qualifiers[key] = value

        if key in PROMOTED_QUALIFIERS:
            table.promoted_attributes[key.upper()] = value

        if key == 'db_xref':
            taxon = TAXON_RE.match(value)
            if taxon:
                table.ncbi_taxon_id = taxon.group(1)


def parse_feature_table(body: str) -> FeatureTable:
    """Parse a FEATURES body with a fresh parser."""
    return FeatureTableParser().parse(body)
