"""Record assembly: drives the section parsers over one record's text."""

import logging
import re
from typing import List

from .context import ParserContext
from .errors import StructuralError, UnrecognizedSectionError
from .models import GenbankRecord
from .sections import MANDATORY_SECTIONS, SECTION_PARSERS, SectionKind
from .splitter import LOCUS_LINE

logger = logging.getLogger(__name__)


class RecordAssembler:
    """Parses the text of one GenBank record into a :class:`GenbankRecord`.

    The assembler keeps no state between calls; every call to
    :meth:`assemble` works on its own :class:`ParserContext`, so one
    instance can be shared by any number of threads.
    """

    KEYWORD_RE = re.compile(r"(BASE COUNT|[A-Z]+|//)(?=\s|\Z)")

    def assemble(self, text: str) -> GenbankRecord:
        """
        Parse a single record.

        Args:
            text: Raw text of one record, with or without the ``//`` line

        Returns:
            The parsed record

        Raises:
            StructuralError: Missing, misplaced or malformed sections
            IncompleteRecordError: Input ends inside a section
            UnrecognizedSectionError: Unknown text at section level
        """
        if not isinstance(text, str):
            raise TypeError(f"expected record text as str, got {type(text).__name__}")
        if not text.strip():
            raise StructuralError("no input to parse")

        context = ParserContext(text=text)
        seen: List[SectionKind] = []
        remaining = text

        while True:
            remaining = remaining.lstrip()
            if not remaining:
                break

            if not seen and not remaining.startswith('LOCUS'):
                split = LOCUS_LINE.split(remaining)
                if split.terminated:
                    logger.debug(f"Skipping {len(split.body)} characters of header text")
                    seen.append(SectionKind.HEADER)
                    remaining = split.rest
                    continue

            kind, body = self._identify(remaining, context)
            self._check_order(kind, seen, context.line_of(remaining))
            seen.append(kind)

            remaining = SECTION_PARSERS[kind](body, context)

            if kind is SectionKind.DELIMITER:
                if remaining.strip():
                    raise StructuralError(
                        "unexpected content after record delimiter", '//',
                        context.line_of(remaining.lstrip())
                    )
                break

        for kind in MANDATORY_SECTIONS:
            if kind not in seen:
                raise StructuralError(f"missing mandatory {kind.value} section")

        return self._build_record(context)

    def _identify(self, remaining: str, context: ParserContext):
        """Identify the section at the head of the text and return it with its body."""
        match = self.KEYWORD_RE.match(remaining)
        line = context.line_of(remaining)
        if not match:
            excerpt = remaining.split('\n', 1)[0][:40]
            raise UnrecognizedSectionError(f"no section keyword at {excerpt!r}", line=line)

        keyword = match.group(1)
        try:
            kind = SectionKind(keyword)
        except ValueError:
            raise UnrecognizedSectionError(f"unknown section keyword {keyword!r}", line=line) from None

        return kind, remaining[match.end():]

    def _check_order(self, kind: SectionKind, seen: List[SectionKind], line: int) -> None:
        if SectionKind.LOCUS not in seen and kind is not SectionKind.LOCUS:
            raise StructuralError(f"expected LOCUS section, found {kind.value}", kind.value, line)

        if kind in seen and not kind.repeatable:
            raise StructuralError(f"duplicate {kind.value} section", kind.value, line)

        if not seen:
            return

        last = seen[-1]
        if kind.rank < last.rank:
            raise StructuralError(f"{kind.value} section out of order after {last.value}", kind.value, line)

    def _build_record(self, context: ParserContext) -> GenbankRecord:
        locus = context.locus
        accession = context.accession
        if not accession:
            logger.debug(f"No ACCESSION; using {locus.accession} from LOCUS")
            accession = locus.accession

        return GenbankRecord(
            accession=accession,
            locus=locus,
            version_entries=tuple(context.version_entries),
            definition=context.definition,
            keywords=tuple(context.keywords),
            source=context.source,
            organism=context.organism,
            classification=tuple(context.classification),
            references=tuple(context.references),
            features=tuple(context.features),
            promoted_attributes=dict(context.promoted_attributes),
            ncbi_taxon_id=context.ncbi_taxon_id,
            origin_raw=context.origin_raw,
            sequence=''.join(context.sequence_fragments),
            comment=context.comment,
            dblink=tuple(context.dblink),
            base_count=dict(context.base_count),
        )


_assembler = RecordAssembler()


def parse(text: str) -> GenbankRecord:
    """Parse the text of one GenBank record."""
    return _assembler.assemble(text)
