"""Reading GenBank files one record at a time."""

import logging
from pathlib import Path
from typing import IO, Iterator, List, Optional, Union

from .assembler import parse
from .models import GenbankRecord

logger = logging.getLogger(__name__)

RECORD_DELIMITER = '//'


class GenBankReader:
    """Reads records from a GenBank flat file.

    Example:
        with GenBankReader('sequences.gb') as reader:
            for record in reader:
                print(record.accession)
    """

    # Common encodings to try
    ENCODINGS = ['utf-8', 'utf-8-sig', 'latin-1']

    def __init__(self, path: Optional[Union[str, Path]] = None, encoding: Optional[str] = None):
        """
        Initialize the reader.

        Args:
            path: GenBank file to read from (can also be set later with ``open``)
            encoding: File encoding (auto-detected if None)
        """
        self.path: Optional[Path] = None
        self.encoding = encoding
        self._handle: Optional[IO[str]] = None
        self._records: Optional[Iterator[str]] = None
        self._current_record: Optional[str] = None

        if path is not None:
            self.open(path)

    def open(self, path: Union[str, Path]) -> None:
        """
        Start reading sequentially from a file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the path is not a regular, non-empty file
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"GenBank file not found: {path}")
        if not path.is_file() or path.stat().st_size == 0:
            raise ValueError(f"Empty or unreadable GenBank file: {path}")

        self.close()
        self.encoding = self.encoding or self._detect_encoding(path)
        self.path = path
        self._handle = open(path, 'r', encoding=self.encoding)
        self._records = self.iter_raw_records(self._handle)
        logger.debug(f"Opened {path} (encoding: {self.encoding})")

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
        self._handle = None
        self._records = None

    @property
    def current_record(self) -> Optional[str]:
        """Raw text of the record most recently handed to ``parse``."""
        return self._current_record

    def parse(self, text: str) -> GenbankRecord:
        """Parse one record's text and remember it as the current record."""
        self._current_record = text
        return parse(text)

    def next_raw_record(self) -> Optional[str]:
        """Get the raw text of the next record, or None at end of file."""
        if self._records is None:
            raise RuntimeError("Can't read records without an open file")
        return next(self._records, None)

    def raw_records(self) -> Iterator[str]:
        """Iterate over the raw text of the remaining records."""
        while True:
            text = self.next_raw_record()
            if text is None:
                return
            yield text

    def next_record(self) -> Optional[GenbankRecord]:
        """Parse and return the next record, or None at end of file."""
        text = self.next_raw_record()
        if text is None:
            return None
        return self.parse(text)

    @staticmethod
    def iter_raw_records(lines: Iterator[str]) -> Iterator[str]:
        """
        Split a stream of lines into raw record texts.

        Each record keeps its text verbatim, including the ``//`` line. A
        final record without a delimiter is yielded as well; chunks holding
        only whitespace are skipped.
        """
        buffer: List[str] = []

        for line in lines:
            buffer.append(line)
            if line.rstrip('\r\n') == RECORD_DELIMITER:
                yield ''.join(buffer)
                buffer = []

        text = ''.join(buffer)
        if text.strip():
            yield text

    def __iter__(self) -> Iterator[GenbankRecord]:
        while True:
            record = self.next_record()
            if record is None:
                return
            yield record

    def __enter__(self) -> 'GenBankReader':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _detect_encoding(self, path: Path) -> str:
        """Detect file encoding."""
        with open(path, 'rb') as f:
            if f.read(3) == b'\xef\xbb\xbf':  # UTF-8 BOM
                return 'utf-8-sig'

        # Decode the whole file; a bad byte may sit in any record
        for encoding in self.ENCODINGS:
            try:
                with open(path, 'r', encoding=encoding) as f:
                    while f.read(65536):
                        pass
                return encoding
            except UnicodeDecodeError:
                continue

        return 'utf-8'


def read_raw_records(path: Union[str, Path], encoding: Optional[str] = None) -> List[str]:
    """Get the raw text of every record in a file."""
    with GenBankReader(path, encoding=encoding) as reader:
        return list(reader.raw_records())


def read_records(path: Union[str, Path], encoding: Optional[str] = None) -> List[GenbankRecord]:
    """Parse every record in a file."""
    with GenBankReader(path, encoding=encoding) as reader:
        return list(reader)
