"""
Row labels for markdown-rendering front ends.

Streamlit renders button labels as markdown, so memo and date text
coming from the ledger is escaped before it is shown.
"""

import re

from allowance_ledger.models.record import RowDisplay, SignState

NEGATIVE_MARKER = "🔴"
DEFAULT_MARKER = "⚪"

_MARKDOWN_SPECIAL = re.compile(r"([\\`*_{}\[\]()#+\-.!|~<>$:&])")


def escape_markdown(text: str) -> str:
    """Backslash-escape every character markdown would interpret."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


def row_label(row: RowDisplay) -> str:
    """One-line, markdown-safe button label for a ledger row."""
    marker = NEGATIVE_MARKER if row.sign_state == SignState.NEGATIVE else DEFAULT_MARKER
    text = " | ".join(part.strip() for part in row.text.splitlines())
    return f"{marker} {escape_markdown(text)}"
