"""Errors raised while parsing a GenBank record."""

from typing import Optional


class GenbankParseError(ValueError):
    """Base class for all record parsing failures.

    Attributes:
        section: Keyword of the section being parsed, if known
        line: 1-based line number in the record text, if known
    """

    def __init__(self, message: str, section: Optional[str] = None, line: Optional[int] = None):
        self.section = section
        self.line = line
        self.reason = message

        prefix = f"{section}: " if section else ""
        suffix = f" (line {line})" if line else ""
        super().__init__(f"{prefix}{message}{suffix}")


class StructuralError(GenbankParseError):
    """Raised when a section is missing, out of order or has a malformed token"""


class IncompleteRecordError(GenbankParseError):
    """Raised when the input ends in the middle of a section"""


class UnrecognizedSectionError(GenbankParseError):
    """Raised when text at section level does not start with a known keyword"""
