"""
Tab-separated sheet parser

Turns the raw text exported from a letter-pair sheet into an index of
letter pair -> entries. Accepted row layouts:

    note<TAB>key<TAB>value
    <TAB>key<TAB>value
    key<TAB>value

Rows that do not yield a two-character key and a non-empty value are
dropped without raising; the counts end up in a ParseReport.
"""

from typing import Tuple

from .models import KEY_LENGTH, Entry, Index, ParseReport

FIELD_DELIMITER = "\t"


def parse_tsv_with_report(text: str) -> Tuple[Index, ParseReport]:
    """
    Parse sheet text into an index and collect line diagnostics

    Args:
        text: Raw tab-separated text

    Returns:
        Tuple of (index, report)
    """
    index: Index = {}
    report = ParseReport()

    for line in text.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]

        if not line.strip():
            report.blank += 1
            continue

        cols = line.split(FIELD_DELIMITER)

        if len(cols) < 2:
            report.malformed += 1
            continue

        if len(cols) >= 3:
            note, key, value = cols[0], cols[1], cols[2]
        else:
            # Two columns are always key then value
            note, key, value = "", cols[0], cols[1]

        note = note.strip()
        key = key.strip().upper()
        value = value.strip()

        if len(key) != KEY_LENGTH or not value:
            report.rejected += 1
            continue

        index.setdefault(key, []).append(Entry(note, value))
        report.accepted += 1

    report.keys = len(index)
    return index, report


def parse_tsv(text: str) -> Index:
    """Parse sheet text into an index of letter pair -> entries"""
    index, _ = parse_tsv_with_report(text)
    return index
