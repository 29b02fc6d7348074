from typing import Iterable, List, Literal, Optional, Sequence, Tuple, TypeVar

ALL_CATEGORIES = "All"

T = TypeVar("T")


def generate_markdown_table(
    headers: Optional[List[str]],
    rows: List[List[str]],
    aligns: Optional[List[Literal["l", "c", "r"]]] = None,
) -> str:
    """
    Generate a Markdown table.

    Args:
        headers: List of column headers, or None to use first row as headers.
        rows: List of rows, each a list of strings.
        aligns: List of alignments ('l', 'c', 'r') for each column.
                Defaults to all center ('c').

    Returns:
        str: Markdown formatted table.
    """
    if not rows:
        return ""

    # If no headers, take the first row as header and remove it from rows
    if not headers:
        headers, rows = rows[0], rows[1:]

    headers = list(map(str, headers))
    rows = [[_escape_cell(str(c)) for c in row] for row in rows]

    num_cols = len(headers)
    if aligns is None:
        aligns = ["c"] * num_cols
    elif len(aligns) != num_cols:
        raise ValueError("Length of aligns must match number of headers.")

    align_map = {
        "l": ":---",
        "c": ":---:",
        "r": "---:",
    }

    header_line = "| " + " | ".join(headers) + " |"
    align_line = "| " + " | ".join(align_map[a] for a in aligns) + " |"
    row_lines = ["| " + " | ".join(row) + " |" for row in rows]

    return "\n".join([header_line, align_line, *row_lines])


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def distinct_categories(categories: Iterable[str]) -> List[str]:
    """Distinct categories in first-seen order."""
    seen: List[str] = []
    for cat in categories:
        if cat not in seen:
            seen.append(cat)
    return seen


def category_options(categories: Iterable[str]) -> List[Tuple[str, Optional[str]]]:
    """
    (label, value) pairs for the category filter: "All" with value None,
    then each distinct category. None is never a category, so a product
    filed under a category named "All" can still be picked out on its own.
    """
    return [(ALL_CATEGORIES, None), *((cat, cat) for cat in distinct_categories(categories))]


def filter_by_category(
    items: Sequence[T], selected: Optional[str], key=lambda p: p.category
) -> List[T]:
    """Exact-match filter; None returns everything."""
    if selected is None:
        return list(items)
    return [item for item in items if key(item) == selected]


def short_id(value: Optional[str], length: int = 8) -> str:
    return (value or "")[:length]


def format_money(amount: float, symbol: str = "$") -> str:
    return f"{symbol}{amount:.2f}"


def format_timestamp(value: Optional[str]) -> str:
    """'2025-10-10T12:00:00.000000+00:00' -> '2025-10-10 12:00'"""
    if not value:
        return "-"
    text = str(value).replace("T", " ")
    return text[:16]
