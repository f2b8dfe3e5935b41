"""
Order index rules shared by projects, products, work stages and
specification rows.
"""

from __future__ import annotations

from typing import Any, Dict, List
from uuid import UUID

from domain.shared.exceptions import ValidationException


def next_order_index(current_max) -> int:
    """New rows are appended after the current maximum."""
    return 0 if current_max is None else current_max + 1


def parse_order_entries(entries: Any, field: str) -> Dict[UUID, int]:
    """
    Validate a bulk reorder payload: a non-empty list of
    {"id": <uuid>, "order_index": <int >= 0>}.

    Returns a mapping id -> order_index. Later duplicates win.
    """
    if not isinstance(entries, list) or not entries:
        raise ValidationException(f"Поле '{field}' должно быть непустым списком", field=field)

    orders: Dict[UUID, int] = {}
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValidationException(
                f"Элемент {position} в '{field}' должен быть объектом", field=field
            )
        try:
            entry_id = UUID(str(entry.get('id')))
        except (TypeError, ValueError):
            raise ValidationException(
                f"Элемент {position} в '{field}': некорректный id", field=field, value=entry.get('id')
            )
        order_index = entry.get('order_index')
        if isinstance(order_index, bool) or not isinstance(order_index, int) or order_index < 0:
            raise ValidationException(
                f"Элемент {position} в '{field}': order_index должен быть целым числом >= 0",
                field=field,
                value=order_index,
            )
        orders[entry_id] = order_index
    return orders


def find_missing_ids(requested: List[UUID], found: List[UUID]) -> List[str]:
    found_set = set(found)
    return [str(i) for i in requested if i not in found_set]
