from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from pyuca import Collator


# Unicode Collation Algorithm（DUCET 默认表），与语言环境无关，保证排序可复现
_COLLATOR: Optional[Collator] = None


def _collator() -> Collator:
    global _COLLATOR
    if _COLLATOR is None:
        _COLLATOR = Collator()
    return _COLLATOR


def sort_key(text: str) -> Tuple[Tuple[int, ...], str]:
    # 相同 collation key 的不同字符串再按码点排序，保证全序
    return tuple(_collator().sort_key(text)), text


def sorted_keys(items: Iterable[str]) -> List[str]:
    return sorted(items, key=sort_key)
