"""GenBank flat-file record parser.

Parses the text of a GenBank record into an immutable
:class:`GenbankRecord`, and reads multi-record files one record at a time.
"""

__version__ = "1.0.0"

from .assembler import RecordAssembler, parse
from .errors import (
    GenbankParseError,
    IncompleteRecordError,
    StructuralError,
    UnrecognizedSectionError,
)
from .models import Division, Feature, GenbankRecord, Locus, Reference
from .reader import GenBankReader, read_records

__all__ = [
    "parse",
    "RecordAssembler",
    "GenBankReader",
    "read_records",
    "GenbankRecord",
    "Locus",
    "Reference",
    "Feature",
    "Division",
    "GenbankParseError",
    "StructuralError",
    "IncompleteRecordError",
    "UnrecognizedSectionError",
]
