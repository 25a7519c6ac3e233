"""Output formatting for parsed records."""

import csv
import json
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import IO, Any, Dict, Iterator, List, Sequence, Union

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from . import __version__
from .models import GenbankRecord

FORMATS = ('json', 'tsv', 'csv', 'fasta')

Output = Union[str, Path, IO[str]]


class OutputFormatter:
    """Writes parsed records as JSON, TSV/CSV summaries or FASTA."""

    # Column headers of the summary formats
    COLUMNS = [
        "Accession",
        "Version",
        "Locus",
        "Length",
        "Molecule Type",
        "Division",
        "Modification Date",
        "Definition",
        "Organism",
        "Taxon ID",
        "References",
        "Features",
        "Sequence Length",
    ]

    def __init__(self, include_origin_raw: bool = True, indent: int = 2):
        """
        Initialize the formatter.

        Args:
            include_origin_raw: Keep the ORIGIN text verbatim in JSON output
            indent: JSON indentation
        """
        self.include_origin_raw = include_origin_raw
        self.indent = indent

    def format_records(self,
                       records: Sequence[GenbankRecord],
                       output: Output,
                       format: str = 'json') -> None:
        """
        Format and write records.

        Args:
            records: Parsed records
            output: Output file path or open text stream
            format: Output format ('json', 'tsv', 'csv', 'fasta')
        """
        if format not in FORMATS:
            raise ValueError(f"Unsupported format: {format}")

        with self._open(output) as handle:
            if format == 'json':
                self._write_json(records, handle)
            elif format == 'tsv':
                self._write_table(records, handle, delimiter='\t')
            elif format == 'csv':
                self._write_table(records, handle, delimiter=',')
            else:
                self._write_fasta(records, handle)

    def record_to_dict(self, record: GenbankRecord) -> Dict[str, Any]:
        """Get the JSON form of one record."""
        data = record.to_dict()
        if not self.include_origin_raw:
            data.pop('origin_raw', None)
        return data

    def summary_row(self, record: GenbankRecord) -> Dict[str, Any]:
        """Format a single record as a summary row."""
        return {
            'Accession': record.accession,
            'Version': '; '.join(record.version_entries),
            'Locus': record.locus.accession,
            'Length': record.locus.sequence_length,
            'Molecule Type': record.locus.molecule_type,
            'Division': record.locus.division.value,
            'Modification Date': record.locus.modification_date.isoformat(),
            'Definition': record.definition,
            'Organism': record.organism,
            'Taxon ID': record.ncbi_taxon_id or '',
            'References': len(record.references),
            'Features': len(record.features),
            'Sequence Length': len(record.sequence),
        }

    @contextmanager
    def _open(self, output: Output) -> Iterator[IO[str]]:
        if isinstance(output, (str, Path)):
            path = Path(output)
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8', newline='') as f:
                yield f
        else:
            yield output

    def _write_json(self, records: Sequence[GenbankRecord], handle: IO[str]) -> None:
        output = {
            'metadata': {
                'generated': datetime.now().isoformat(),
                'generator': f"genbank-parser {__version__}",
                'total_records': len(records),
            },
            'records': [self.record_to_dict(record) for record in records]
        }

        # Dates are written as ISO strings
        json.dump(output, handle, indent=self.indent, ensure_ascii=False, default=str)
        handle.write('\n')

    def _write_table(self, records: Sequence[GenbankRecord], handle: IO[str], delimiter: str) -> None:
        writer = csv.DictWriter(handle, fieldnames=self.COLUMNS, delimiter=delimiter, lineterminator='\n')
        writer.writeheader()
        writer.writerows(self.summary_row(record) for record in records)

    def _write_fasta(self, records: Sequence[GenbankRecord], handle: IO[str]) -> None:
        seq_records: List[SeqRecord] = [
            SeqRecord(Seq(record.sequence), id=record.accession, description=record.definition)
            for record in records
        ]
        SeqIO.write(seq_records, handle, 'fasta')
