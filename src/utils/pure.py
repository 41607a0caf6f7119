from datetime import datetime
from typing import List, Literal, Optional, Sequence

ALIGN_MARKERS = {"l": ":---", "c": ":---:", "r": "---:"}


def money(amount: float) -> str:
    return f"${amount:,.2f}"


def short_date(when: Optional[datetime], empty: str = "N/A") -> str:
    return when.strftime("%Y-%m-%d") if when else empty


def generate_markdown_table(
    headers: Optional[Sequence[object]],
    rows: List[Sequence[object]],
    aligns: Optional[List[Literal["l", "c", "r"]]] = None,
) -> str:
    """
    Render rows as a Markdown table.

    Args:
        headers: column headers, or None to promote the first row.
        rows: table body; cells are converted with str().
        aligns: 'l', 'c' or 'r' per column, default left.

    Returns:
        str: the table, or "" when there is nothing to show.
    """
    if not rows and not headers:
        return ""
    if headers is None:
        headers, rows = rows[0], rows[1:]

    width = len(headers)
    aligns = aligns or ["l"] * width
    if len(aligns) != width:
        raise ValueError("Length of aligns must match number of headers.")

    def line(cells) -> str:
        # pipes inside a cell would split the column
        return "| " + " | ".join(str(c).replace("|", "\\|") for c in cells) + " |"

    out = [line(headers), "| " + " | ".join(ALIGN_MARKERS[a] for a in aligns) + " |"]
    out.extend(line(row) for row in rows)
    return "\n".join(out)
