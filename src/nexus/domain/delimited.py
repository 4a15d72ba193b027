"""Delimited-text parsing with delimiter auto-detection."""

import csv
from dataclasses import dataclass, field

import chardet

from nexus.domain.column_classifier import build_record, classify_headers
from nexus.domain.errors import ParseError, undecodable_file
from nexus.domain.import_record import ImportRecord
from nexus.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ParsedTable:
    """Header names and mapped rows of a delimited file."""

    headers: list[str] = field(default_factory=list)
    rows: list[ImportRecord] = field(default_factory=list)
    delimiter: str = ","

    @property
    def is_empty(self) -> bool:
        return not self.headers


def decode_text(raw: bytes) -> str:
    """Decode file bytes to text.

    UTF-8 (with or without BOM) is tried first. Other files, typically
    Windows-1252 exports from banks and ERPs, are decoded with the encoding
    chardet detects.

    Raises:
        ParseError: If no encoding is detected or the bytes do not decode
    """
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        detected = chardet.detect(raw)

    encoding = detected.get("encoding")
    if not encoding:
        raise ParseError(undecodable_file())
    logger.debug("Detected %s encoding (confidence %.2f)", encoding, detected.get("confidence") or 0.0)
    try:
        return raw.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise ParseError(undecodable_file(encoding)) from e


def detect_delimiter(header_line: str) -> str:
    """Semicolon when the header line has one, comma otherwise."""
    return ";" if ";" in header_line else ","


def parse_delimited(text: str) -> ParsedTable:
    """Split raw text into a header and classified rows.

    The delimiter is decided once from the header line. Quoted values may
    contain the delimiter. Blank lines are dropped, and fewer than two
    non-blank lines yield an empty table; reporting that is up to the caller.

    Args:
        text: Raw file contents

    Returns:
        ParsedTable with rows numbered as in a spreadsheet (header is row 1)
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) < 2:
        return ParsedTable()

    delimiter = detect_delimiter(lines[0])
    reader = csv.reader(lines, delimiter=delimiter, quotechar='"', skipinitialspace=True)

    headers = [header.strip() for header in next(reader)]
    classifications = classify_headers(headers)

    rows = []
    for row_num, values in enumerate(reader, start=2):
        rows.append(build_record(row_num, headers, values, classifications))

    return ParsedTable(headers=headers, rows=rows, delimiter=delimiter)
