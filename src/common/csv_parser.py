"""
Quote-aware CSV tokenizer for spreadsheet exports.

Turns raw CSV text into rows of trimmed string fields in a single
left-to-right scan. Parsing never fails: malformed quoting degrades into
best-effort tokenization and an unterminated quote is closed at end of
input.

Known limitation: fields are trimmed after boundary detection, so
leading/trailing whitespace inside quotes is not preserved.

Usage:
    from src.common.csv_parser import parse_csv

    rows = parse_csv('name,email\\n"Doe, Jane",jane@co.com\\n')
    # [["name", "email"], ["Doe, Jane", "jane@co.com"]]
"""

from typing import List

from src.common.types import RawRow

_BOM = "\ufeff"


def parse_csv(text: str) -> List[RawRow]:
    """
    Parse CSV text into rows of trimmed fields.

    Rules:
    - `"` toggles quote mode; `""` inside quotes is a literal quote
    - `,` outside quotes ends the field
    - `\\n` or `\\r` outside quotes ends the row (`\\r\\n` counts once)
    - blank lines produce no row, so a trailing newline adds nothing

    Args:
        text: Raw CSV text

    Returns:
        Rows in source order (empty list for empty input)

    Examples:
        >>> parse_csv('a,"b,c",d')
        [['a', 'b,c', 'd']]
        >>> parse_csv('"a ""b"" c",d')
        [['a "b" c', 'd']]
        >>> parse_csv('')
        []
    """
    if not text:
        return []
    if text.startswith(_BOM):
        text = text[1:]

    rows: List[RawRow] = []
    current_row: RawRow = []
    current_field: List[str] = []
    in_quotes = False

    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        next_char = text[i + 1] if i + 1 < length else ""

        if char == '"':
            if in_quotes and next_char == '"':
                # Escaped quote
                current_field.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            current_row.append("".join(current_field).strip())
            current_field = []
        elif char in ("\n", "\r") and not in_quotes:
            if current_field or current_row:
                current_row.append("".join(current_field).strip())
                rows.append(current_row)
                current_row = []
                current_field = []
            if char == "\r" and next_char == "\n":
                i += 1
        else:
            current_field.append(char)
        i += 1

    # Flush the last field and row
    if current_field or current_row:
        current_row.append("".join(current_field).strip())
        rows.append(current_row)

    return rows


def serialize_csv(rows: List[RawRow]) -> str:
    """
    Serialize rows back to CSV text, quoting fields that need it.

    Inverse of parse_csv for rows whose fields carry no surrounding whitespace.
    """
    lines = []
    for row in rows:
        fields = []
        for value in row:
            if any(ch in value for ch in (",", '"', "\n", "\r")):
                value = '"' + value.replace('"', '""') + '"'
            fields.append(value)
        lines.append(",".join(fields))
    return "\n".join(lines) + ("\n" if lines else "")
