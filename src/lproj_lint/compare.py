from __future__ import annotations

from typing import Callable, Iterable, Optional, Sequence, Set, Union

from .collation import sorted_keys
from .diagnostics import Diagnostics
from .models import ParsedPluralTable, ParsedStringTable, ReferenceBinding, ResourceFile, ResourceGroup


Parsed = Union[ParsedStringTable, ParsedPluralTable]


def bind(group: ResourceGroup, development_language: str, diagnostics: Diagnostics) -> Optional[ReferenceBinding]:
    """
    选出 development language 对应的文件作为参照：
    - 未配置语言：第一个文件
    - 配置了但找不到：报 error，整组跳过
    """
    if not group.files:
        return None

    if not development_language:
        return ReferenceBinding(group=group, reference=group.files[0], others=tuple(group.files[1:]))

    for f in group.files:
        if f.locale == development_language:
            others = tuple(x for x in group.files if x.locale != development_language)
            return ReferenceBinding(group=group, reference=f, others=others)

    diagnostics.error(f'"{group.name}" is missing for development language ({development_language})')
    return None


def _line(parsed: Parsed, key: str) -> Optional[int]:
    if isinstance(parsed, ParsedStringTable):
        return parsed.line_for(key)
    return None


def report_missing_locales(group: ResourceGroup, languages: Iterable[str], diagnostics: Diagnostics) -> Set[str]:
    missing = set(languages) - group.locales
    for locale in sorted_keys(missing):
        diagnostics.warning(f'"{group.name}" is missing for {locale} language')
    return missing


def compare(
    binding: ReferenceBinding,
    reference: Parsed,
    others: Sequence[Parsed],
    languages: Iterable[str],
    diagnostics: Diagnostics,
) -> None:
    report_missing_locales(binding.group, languages, diagnostics)

    main_keys = reference.keys
    for other in others:
        other_keys = other.keys
        for key in sorted_keys(main_keys - other_keys):
            diagnostics.warning(
                f'"{key}" is missing from "{other.file.full_name}" file',
                reference.file.path,
                _line(reference, key),
            )
        for key in sorted_keys(other_keys - main_keys):
            diagnostics.warning(
                f'"{key}" is redundant in "{other.file.full_name}" file',
                other.file.path,
                _line(other, key),
            )


def check_group(
    group: ResourceGroup,
    process: Callable[[ResourceFile], Parsed],
    *,
    development_language: str,
    languages: Iterable[str],
    diagnostics: Diagnostics,
) -> Optional[ReferenceBinding]:
    """bind -> 解析/规范化参照与其它语言文件 -> 比较。"""
    binding = bind(group, development_language, diagnostics)
    if binding is None:
        return None

    reference = process(binding.reference)
    others = [process(f) for f in binding.others]
    compare(binding, reference, others, languages, diagnostics)
    return binding
