"""
Units of measure - alias normalization.

Aliases let users type "шт.", "Шт" or "штук" and still resolve the same unit.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Tuple

_PUNCTUATION_RE = re.compile(r'[.,;:]')
_WHITESPACE_RE = re.compile(r'\s+')


def normalize_alias(value: str) -> str:
    """Lower-case, drop `.,;:` and collapse whitespace."""
    if value is None:
        return ''
    value = str(value).strip().lower()
    value = _PUNCTUATION_RE.sub('', value)
    value = _WHITESPACE_RE.sub(' ', value)
    return value.strip()


def prepare_aliases(name: str, aliases: Iterable[str] = ()) -> List[Tuple[str, str]]:
    """
    Build the alias set stored for a unit.

    Returns (alias, normalized_alias) pairs, de-duplicated by normalized
    form. The unit name itself is always the first alias.
    """
    result: List[Tuple[str, str]] = []
    seen = set()
    for raw in [name, *(aliases or [])]:
        alias = (raw or '').strip()
        normalized = normalize_alias(alias)
        if not normalized or normalized in seen:
            continue
        seen.add(normalized)
        result.append((alias, normalized))
    return result
