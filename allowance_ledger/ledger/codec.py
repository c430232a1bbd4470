r"""
Line Codec

One record is one line of text:

    date,amount,memo

The line is split on ',' at most twice, so the memo may itself contain
commas. There is no header and no version tag; the ledger blob is the
newline-joined sequence of record lines and an empty ledger is "".

DESIGN DECISION: A raw line break inside a memo would be read back as a
record boundary. With `escape_memo` on (the default) a memo that contains
a line break, or that starts with a backslash, is written as a backslash
marker followed by the memo with backslash, LF and CR turned into
two-character escapes. Every other memo is written exactly as in the
unescaped format, so ordinary files stay readable by older versions.

On decode, a memo is only unescaped when it carries the marker AND the
rest is a well-formed escaped body holding at least one escape. Memos
from unescaped files (which cannot contain line breaks) therefore load
untouched, e.g. `C:\new`. The one remaining ambiguity is an unescaped
memo that itself starts with a backslash and is a well-formed escaped
body, such as `\a\nb`; set `escape_memo` off for files written that way.
"""

import re
from typing import Iterable, Iterator, Optional

from allowance_ledger.models.record import LedgerRecord

DELIMITER = ","
FIELD_COUNT = 3
ESCAPE_MARKER = "\\"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_ESCAPE_SEQUENCE = re.compile(r"\\([\\nr])")
_ESCAPED_BODY = re.compile(r"(?:[^\\]|\\[\\nr])*", re.DOTALL)
_UNESCAPES = {"\\": "\\", "n": "\n", "r": "\r"}


class MalformedRecordError(ValueError):
    """A persisted line does not have the date,amount,memo shape."""

    def __init__(self, line: str, line_number: Optional[int] = None):
        where = f" at line {line_number}" if line_number is not None else ""
        super().__init__(
            f"Malformed ledger line{where}: expected {FIELD_COUNT} "
            f"'{DELIMITER}'-separated fields, got {line!r}"
        )
        self.line = line
        self.line_number = line_number


def escape_memo(memo: str) -> str:
    return memo.replace("\\", "\\\\").replace("\n", "\\n").replace("\r", "\\r")


def unescape_memo(memo: str) -> str:
    return _ESCAPE_SEQUENCE.sub(lambda m: _UNESCAPES[m.group(1)], memo)


def needs_escaping(memo: str) -> bool:
    return memo.startswith(ESCAPE_MARKER) or "\n" in memo or "\r" in memo


def encode_memo(memo: str) -> str:
    """Write a memo field, marking and escaping it only when it needs it."""
    if needs_escaping(memo):
        return ESCAPE_MARKER + escape_memo(memo)
    return memo


def decode_memo(field: str) -> str:
    """Reverse encode_memo(); unmarked or irregular fields come back as-is."""
    if not field.startswith(ESCAPE_MARKER):
        return field
    body = field[len(ESCAPE_MARKER):]
    if "\\" not in body or not _ESCAPED_BODY.fullmatch(body):
        return field
    return unescape_memo(body)


def split_lines(blob: str) -> Iterator[tuple[int, str]]:
    """
    Yield (line_number, line) for every non-blank line of a blob.

    Line numbers are 1-based positions in the blob, blank lines included,
    so they match what an editor shows.
    """
    if not blob:
        return
    for number, line in enumerate(_LINE_BREAK.split(blob), start=1):
        if line.strip():
            yield number, line


class RecordCodec:
    """Encodes records to lines and back."""

    def __init__(self, escape_memo: bool = True):
        self.escape_memo = escape_memo

    def encode(self, record: LedgerRecord) -> str:
        """Join date, amount and memo with ','. Never fails."""
        memo = encode_memo(record.memo) if self.escape_memo else record.memo
        return DELIMITER.join((record.date, record.amount, memo))

    def decode(self, line: str, line_number: Optional[int] = None) -> LedgerRecord:
        """
        Split one line into a record.

        Field contents are not re-validated: a well-shaped line with a
        non-numeric amount decodes fine and is dealt with by the totals.

        Raises:
            MalformedRecordError: If the line has fewer than three fields
        """
        parts = line.split(DELIMITER, FIELD_COUNT - 1)
        if len(parts) < FIELD_COUNT:
            raise MalformedRecordError(line, line_number)
        date, amount, memo = parts
        if self.escape_memo:
            memo = decode_memo(memo)
        return LedgerRecord(date=date, amount=amount, memo=memo)

    def encode_ledger(self, records: Iterable[LedgerRecord]) -> str:
        """Serialize a whole ledger; an empty ledger is ''."""
        return "\n".join(self.encode(record) for record in records)
