from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence, Union

from app.services.content.categories import CATEGORY_ORDER, ContentCategory

Row = Dict[str, Any]

DEFAULT_SORT_ORDER = 999.0
DEFAULT_CAP = 8


@dataclass
class ChatContext:
    """Published rows per category for a single chat request."""

    rows: Dict[ContentCategory, List[Row]] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "ChatContext":
        return cls(rows={category: [] for category in CATEGORY_ORDER})

    def get(self, category: ContentCategory) -> List[Row]:
        return self.rows.get(category, [])

    def sizes(self) -> Dict[str, int]:
        return {category.value: len(self.get(category)) for category in CATEGORY_ORDER}

    def to_payload(self) -> Dict[str, List[Row]]:
        return {category.value: list(self.get(category)) for category in CATEGORY_ORDER}


def sort_key(row: Mapping[str, Any]) -> float:
    value = row.get("sort_order")
    if isinstance(value, bool) or value is None:
        return DEFAULT_SORT_ORDER
    try:
        return float(value)
    except (TypeError, ValueError):
        return DEFAULT_SORT_ORDER


def is_published(row: Mapping[str, Any]) -> bool:
    # Only an explicit false hides a row; a missing flag means published.
    return row.get("published") is not False


def select_rows(rows: Sequence[Row], cap: int) -> List[Row]:
    published = [row for row in rows if is_published(row)]
    # sorted() is stable, so equal sort_order keeps fetch order
    ordered = sorted(published, key=sort_key)
    return ordered[: max(0, cap)]


def build_context(
    raw_by_category: Mapping[ContentCategory, Sequence[Row]],
    caps: Union[int, Mapping[ContentCategory, int]] = DEFAULT_CAP,
) -> ChatContext:
    """
    Filter, order and bound the raw rows of every category.

    Pure: the same input always yields an equal context and the input
    sequences are not modified. Categories missing from ``raw_by_category``
    come out empty.
    """
    rows: Dict[ContentCategory, List[Row]] = {}
    for category in CATEGORY_ORDER:
        cap = caps if isinstance(caps, int) else caps.get(category, DEFAULT_CAP)
        rows[category] = select_rows(list(raw_by_category.get(category) or []), cap)
    return ChatContext(rows=rows)
