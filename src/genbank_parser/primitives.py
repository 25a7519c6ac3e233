"""Token-level parsers shared by the section parsers."""

import re
from datetime import date, datetime
from typing import Optional

from .errors import StructuralError
from .models import Division

# Longest forms first so alternation never settles on a prefix
ACCESSION = r"(?:[A-Z]{4,6}\d{8,10}|[A-Z]{2}_\d{6,9}|[A-Z]{2}\d{8}|[A-Z]{2}\d{6}|[A-Z]\d{5})"

ACCESSION_RE = re.compile(rf"{ACCESSION}\Z")
VERSIONED_ACCESSION_RE = re.compile(rf"{ACCESSION}\.\d+\Z")
GI_RE = re.compile(r"GI:\d+\Z")
NUMBER_RE = re.compile(r"\d+\Z")
DATE_RE = re.compile(r"(\d{1,2})-([A-Z]{3})-(\d{4})\Z")

MONTHS = ('JAN', 'FEB', 'MAR', 'APR', 'MAY', 'JUN',
          'JUL', 'AUG', 'SEP', 'OCT', 'NOV', 'DEC')


def is_accession(token: str) -> bool:
    return ACCESSION_RE.match(token) is not None


def parse_accession(token: str, section: str = "ACCESSION", line: Optional[int] = None) -> str:
    """Validate a bare accession identifier such as ``AB123456``."""
    if not is_accession(token):
        raise StructuralError(f"malformed accession {token!r}", section, line)
    return token


def parse_synonym(token: str, section: str = "VERSION", line: Optional[int] = None) -> str:
    """Validate a versioned accession (``AB123456.1``) or GI identifier (``GI:123``)."""
    if VERSIONED_ACCESSION_RE.match(token) or GI_RE.match(token):
        return token
    raise StructuralError(
        f"expected versioned accession or GI identifier, found {token!r}", section, line
    )


def parse_number(token: str, section: str, what: str = "number", line: Optional[int] = None) -> int:
    if not NUMBER_RE.match(token):
        raise StructuralError(f"malformed {what} {token!r}", section, line)
    return int(token)


def parse_date(token: str, section: str = "LOCUS", line: Optional[int] = None) -> date:
    """Parse a ``DD-MON-YYYY`` date such as ``01-JAN-2000``."""
    match = DATE_RE.match(token)
    if not match or match.group(2) not in MONTHS:
        raise StructuralError(f"malformed modification date {token!r}", section, line)

    day, month, year = match.groups()
    try:
        return datetime(int(year), MONTHS.index(month) + 1, int(day)).date()
    except ValueError as e:
        raise StructuralError(f"malformed modification date {token!r}: {e}", section, line) from e


def parse_division(token: str, section: str = "LOCUS", line: Optional[int] = None) -> Division:
    try:
        return Division(token)
    except ValueError:
        raise StructuralError(f"malformed division code {token!r}", section, line) from None
