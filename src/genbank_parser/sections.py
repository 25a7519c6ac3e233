"""Section parsers and the section dispatch table.

Every parser takes the text that follows its keyword and the
:class:`ParserContext` of the current parse. It writes its fields into the
context and returns the text that is left after its body.
"""

import logging
import re
from enum import Enum
from typing import Callable, Dict

from .context import ParserContext
from .errors import IncompleteRecordError, StructuralError
from .features import FeatureTableParser
from .models import Locus, Reference
from .primitives import parse_accession, parse_date, parse_division, parse_number, parse_synonym
from .splitter import (
    JOURNAL_END,
    KEYWORD_LINE,
    RECORD_DELIMITER,
    SUBKEYWORD_LINE,
    Split,
)

logger = logging.getLogger(__name__)

MOLECULE_WORD_RE = re.compile(r"[\w-]+\Z")
REFERENCE_LINE_RE = re.compile(r"[ \t]*(?P<number>\d+)?[ \t]*(?:\((?P<note>[^)]*)\))?[ \t]*(?=\n|\Z)")
BASE_COUNT_RE = re.compile(r"(\d+)\s+([A-Za-z]+)")
NUCLEOTIDE_RUN_RE = re.compile(r"[actg]+")


class SectionKind(Enum):
    """Sections a record is made of, keyed by their keyword."""

    HEADER = "header"
    LOCUS = "LOCUS"
    DEFINITION = "DEFINITION"
    ACCESSION = "ACCESSION"
    VERSION = "VERSION"
    DBLINK = "DBLINK"
    KEYWORDS = "KEYWORDS"
    SOURCE = "SOURCE"
    ORGANISM = "ORGANISM"
    REFERENCE = "REFERENCE"
    COMMENT = "COMMENT"
    FEATURES = "FEATURES"
    BASE_COUNT = "BASE COUNT"
    ORIGIN = "ORIGIN"
    DELIMITER = "//"

    @property
    def rank(self) -> int:
        return SECTION_RANK[self]

    @property
    def repeatable(self) -> bool:
        return self is SectionKind.REFERENCE


# Sections of equal rank may come in any order relative to each other
SECTION_RANK = {
    SectionKind.HEADER: 0,
    SectionKind.LOCUS: 1,
    SectionKind.DEFINITION: 2,
    SectionKind.ACCESSION: 2,
    SectionKind.VERSION: 2,
    SectionKind.DBLINK: 2,
    SectionKind.KEYWORDS: 2,
    SectionKind.SOURCE: 2,
    SectionKind.ORGANISM: 2,
    SectionKind.REFERENCE: 2,
    SectionKind.COMMENT: 2,
    SectionKind.FEATURES: 3,
    SectionKind.BASE_COUNT: 4,
    SectionKind.ORIGIN: 5,
    SectionKind.DELIMITER: 6,
}

MANDATORY_SECTIONS = (SectionKind.LOCUS, SectionKind.FEATURES, SectionKind.ORIGIN)


def fold_lines(text: str) -> str:
    """Join continuation lines with a single space."""
    return re.sub(r"\s*\n\s*", " ", text).strip()


def collapse_whitespace(text: str) -> str:
    """Replace every run of whitespace with a single space."""
    return re.sub(r"\s+", " ", text).strip()


def _require_terminated(split: Split, section: str, context: ParserContext, text: str) -> None:
    if not split.terminated:
        raise IncompleteRecordError(
            "input ends before the section is complete", section, context.line_of(text)
        )


def _first_line(text: str):
    """Split text into its first line and the rest (starting at the newline)."""
    end = text.find('\n')
    if end == -1:
        return text, ''
    return text[:end], text[end:]


def parse_locus(text: str, context: ParserContext) -> str:
    line, rest = _first_line(text)
    lineno = context.line_of(text)
    tokens = line.split()

    def missing(what: str):
        if not rest.strip():
            raise IncompleteRecordError(f"input ends before {what}", 'LOCUS', lineno)
        raise StructuralError(f"expected {what}", 'LOCUS', lineno)

    if not tokens:
        missing("accession")
    accession = parse_accession(tokens[0], 'LOCUS', lineno)

    if len(tokens) < 2:
        missing("sequence length")
    length = parse_number(tokens[1], 'LOCUS', 'sequence length', lineno)

    if len(tokens) < 3:
        missing("'bp' unit")
    if tokens[2] != 'bp':
        raise StructuralError(f"expected 'bp' after sequence length, found {tokens[2]!r}", 'LOCUS', lineno)

    tail = tokens[3:]
    if len(tail) < 3:
        missing("molecule type, division and modification date")

    molecule = tail[:-2]
    if len(molecule) > 2 or not all(MOLECULE_WORD_RE.match(word) for word in molecule):
        raise StructuralError(f"malformed molecule type {' '.join(molecule)!r}", 'LOCUS', lineno)

    context.locus = Locus(
        accession=accession,
        sequence_length=length,
        molecule_type=' '.join(molecule),
        division=parse_division(tail[-2], 'LOCUS', lineno),
        modification_date=parse_date(tail[-1], 'LOCUS', lineno),
    )
    logger.debug(f"LOCUS {accession}, {length} bp")
    return rest


def parse_definition(text: str, context: ParserContext) -> str:
    split = KEYWORD_LINE.split(text)
    _require_terminated(split, 'DEFINITION', context, text)
    context.definition = collapse_whitespace(split.body)
    return split.rest


def parse_accession_line(text: str, context: ParserContext) -> str:
    split = KEYWORD_LINE.split(text)
    _require_terminated(split, 'ACCESSION', context, text)

    lineno = context.line_of(text)
    accessions = [parse_accession(token, 'ACCESSION', lineno) for token in split.body.split()]

    # A single accession is the primary one; a list only adds synonyms
    if len(accessions) == 1:
        context.accession = accessions[0]
    elif accessions:
        context.version_entries.extend(accessions)
    return split.rest


def parse_version_line(text: str, context: ParserContext) -> str:
    split = KEYWORD_LINE.split(text)
    _require_terminated(split, 'VERSION', context, text)

    lineno = context.line_of(text)
    tokens = split.body.split()
    if not tokens:
        raise StructuralError("expected versioned accession or GI identifier", 'VERSION', lineno)

    context.version_entries.extend(parse_synonym(token, 'VERSION', lineno) for token in tokens)
    return split.rest


def parse_dblink(text: str, context: ParserContext) -> str:
    split = KEYWORD_LINE.split(text)
    _require_terminated(split, 'DBLINK', context, text)
    context.dblink.extend(line.strip() for line in split.body.split('\n') if line.strip())
    return split.rest


def parse_keywords(text: str, context: ParserContext) -> str:
    split = KEYWORD_LINE.split(text)
    _require_terminated(split, 'KEYWORDS', context, text)

    value = fold_lines(split.body)
    if value.endswith('.'):
        value = value[:-1]
    context.keywords = [keyword for keyword in re.split(r",\s*", value) if keyword]
    return split.rest


def parse_source(text: str, context: ParserContext) -> str:
    # Ends at a keyword indented by up to two spaces, i.e. usually ORGANISM
    split = SUBKEYWORD_LINE.split(text)
    _require_terminated(split, 'SOURCE', context, text)
    context.source = split.body.strip()
    return split.rest


def parse_organism(text: str, context: ParserContext) -> str:
    name, rest = _first_line(text)
    lineno = context.line_of(text)

    if not name.strip():
        raise StructuralError("expected organism name", 'ORGANISM', lineno)
    if not rest:
        raise IncompleteRecordError("input ends before the classification", 'ORGANISM', lineno)

    split = SUBKEYWORD_LINE.split(rest)
    _require_terminated(split, 'ORGANISM', context, rest)

    lineage = split.body.strip()
    if not lineage.endswith('.'):
        raise StructuralError("expected a classification ending in a period", 'ORGANISM', lineno + 1)

    context.organism = name.strip()
    context.classification = [
        re.sub(r"\s+", " ", taxon).strip()
        for taxon in re.split(r";\s*", lineage[:-1])
        if taxon.strip()
    ]
    return split.rest


def _expect_subsection(text: str, keyword: str, context: ParserContext) -> str:
    """Consume a mandatory REFERENCE sub-keyword and return what follows it."""
    stripped = text.lstrip()
    if not stripped:
        raise IncompleteRecordError(f"input ends before {keyword}", 'REFERENCE', context.line_of(text))
    if not re.match(rf"{keyword}\b", stripped):
        raise StructuralError(f"expected {keyword}", 'REFERENCE', context.line_of(stripped))
    return stripped[len(keyword):]


def _has_subsection(text: str, keyword: str) -> bool:
    return re.match(rf"\s*{keyword}\b", text) is not None


def _parse_authors(body: str):
    authors = []
    for token in body.split():
        if token.endswith(','):
            token = token[:-1]
        if token and token != 'and':
            authors.append(token)
    return authors


def parse_reference(text: str, context: ParserContext) -> str:
    header = REFERENCE_LINE_RE.match(text)
    if not header:
        raise StructuralError("malformed reference line", 'REFERENCE', context.line_of(text))

    number = header.group('number')
    note = header.group('note')

    rest = _expect_subsection(text[header.end():], 'AUTHORS', context)
    split = SUBKEYWORD_LINE.split(rest)
    _require_terminated(split, 'REFERENCE', context, rest)
    authors = _parse_authors(split.body)

    rest = _expect_subsection(split.rest, 'TITLE', context)
    split = SUBKEYWORD_LINE.split(rest)
    _require_terminated(split, 'REFERENCE', context, rest)
    title = fold_lines(split.body)

    rest = _expect_subsection(split.rest, 'JOURNAL', context)
    split = JOURNAL_END.split(rest)
    _require_terminated(split, 'REFERENCE', context, rest)
    journal = fold_lines(split.body)
    rest = split.rest

    pubmed = None
    if _has_subsection(rest, 'PUBMED'):
        stripped = rest.lstrip()
        value, rest = _first_line(stripped[len('PUBMED'):])
        pubmed = parse_number(value.strip(), 'REFERENCE', 'PUBMED id', context.line_of(stripped))

    remark = None
    if _has_subsection(rest, 'REMARK'):
        after = rest.lstrip()[len('REMARK'):]
        split = SUBKEYWORD_LINE.split(after)
        _require_terminated(split, 'REFERENCE', context, after)
        remark = fold_lines(split.body)
        rest = split.rest

    reference = Reference(
        number=int(number) if number is not None else context.take_reference_number(),
        authors=tuple(authors),
        title=title,
        journal=journal,
        pubmed=pubmed,
        note=fold_lines(note) if note is not None else None,
        remark=remark,
    )
    context.references.append(reference)
    logger.debug(f"REFERENCE {reference.number}: {len(reference.authors)} authors")
    return rest


def parse_comment(text: str, context: ParserContext) -> str:
    split = KEYWORD_LINE.split(text)
    _require_terminated(split, 'COMMENT', context, text)
    context.comment = split.body.strip()
    return split.rest


def parse_features(text: str, context: ParserContext) -> str:
    split = KEYWORD_LINE.split(text)
    _require_terminated(split, 'FEATURES', context, text)

    table = FeatureTableParser().parse(split.body)
    context.features.extend(table.features)
    context.promoted_attributes.update(table.promoted_attributes)
    if table.ncbi_taxon_id is not None:
        context.ncbi_taxon_id = table.ncbi_taxon_id

    logger.debug(f"FEATURES: {len(table.features)} features")
    return split.rest


def parse_base_count(text: str, context: ParserContext) -> str:
    line, rest = _first_line(text)
    counts = BASE_COUNT_RE.findall(line)
    if not counts:
        raise StructuralError("malformed base count", 'BASE COUNT', context.line_of(text))
    context.base_count = {base.lower(): int(count) for count, base in counts}
    return rest


def parse_origin(text: str, context: ParserContext) -> str:
    # Without a trailing delimiter the sequence runs to end of input
    split = RECORD_DELIMITER.split(text)
    body = split.body.strip()

    context.origin_raw = body
    context.sequence_fragments = NUCLEOTIDE_RUN_RE.findall(body)
    logger.debug(f"ORIGIN: {len(context.sequence_fragments)} sequence runs")
    return split.rest


def parse_delimiter(text: str, context: ParserContext) -> str:
    return text


SectionParser = Callable[[str, ParserContext], str]

SECTION_PARSERS: Dict[SectionKind, SectionParser] = {
    SectionKind.LOCUS: parse_locus,
    SectionKind.DEFINITION: parse_definition,
    SectionKind.ACCESSION: parse_accession_line,
    SectionKind.VERSION: parse_version_line,
    SectionKind.DBLINK: parse_dblink,
    SectionKind.KEYWORDS: parse_keywords,
    SectionKind.SOURCE: parse_source,
    SectionKind.ORGANISM: parse_organism,
    SectionKind.REFERENCE: parse_reference,
    SectionKind.COMMENT: parse_comment,
    SectionKind.FEATURES: parse_features,
    SectionKind.BASE_COUNT: parse_base_count,
    SectionKind.ORIGIN: parse_origin,
    SectionKind.DELIMITER: parse_delimiter,
}
