"""Per-parse state shared by the section parsers."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .models import Feature, Locus, Reference


@dataclass
class ParserContext:
    """The record in progress for one ``parse`` call.

    A context is created at the start of a parse, handed to every section
    parser and dropped when the record is assembled, so nothing leaks
    between calls or threads.
    """

    text: str
    accession: Optional[str] = None
    version_entries: List[str] = field(default_factory=list)
    locus: Optional[Locus] = None
    definition: str = ""
    keywords: List[str] = field(default_factory=list)
    source: str = ""
    organism: str = ""
    classification: List[str] = field(default_factory=list)
    references: List[Reference] = field(default_factory=list)
    features: List[Feature] = field(default_factory=list)
    promoted_attributes: Dict[str, str] = field(default_factory=dict)
    ncbi_taxon_id: Optional[str] = None
    origin_raw: str = ""
    sequence_fragments: List[str] = field(default_factory=list)
    comment: Optional[str] = None
    dblink: List[str] = field(default_factory=list)
    base_count: Dict[str, int] = field(default_factory=dict)
    next_reference_number: int = 1

    def line_of(self, remaining: str) -> int:
        """Get the 1-based line number where ``remaining`` starts in the record text."""
        offset = len(self.text) - len(remaining)
        return self.text.count('\n', 0, max(offset, 0)) + 1

    def take_reference_number(self) -> int:
        number = self.next_reference_number
        self.next_reference_number += 1
        return number
