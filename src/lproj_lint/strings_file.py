"""
.strings 解析 / 规范化写回

规范格式：
- 头部注释（// 连续行 或 /* */ 块）原样保留在最前面
- key 按 collation 排序，按第一个 '.' 之前的前缀分组；无前缀的组排最前
- 每组前空一行；非空组带 `// MARK: <Group>` 分隔（第一个 mark 不带 "- "）
- 同一文件内重复的 key 只保留第一次出现，其余报 error
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from . import fs
from .collation import sort_key, sorted_keys
from .diagnostics import Diagnostics
from .models import Entry, ParsedStringTable, ResourceFile, key_group


_ENTRY_RE = re.compile(r'^\s*"((?:\\.|[^"\\])+)"\s*=\s*"((?:\\.|[^"\\])+)"\s*;')

# MARK 行每次都会重新生成，不能算进头部注释
_SINGLE_LINE_HEADER_RE = re.compile(r"\A\s*(//(?!\s*MARK:)[^\n]*(?:\n[\t ]*//(?!\s*MARK:)[^\n]*)*)")
_MULTI_LINE_HEADER_RE = re.compile(r"\A\s*(/\*(?:[^*]|\*(?!/))*\*/)")
_HEADER_CONTINUATION_RE = re.compile(r"\n[\t ]*//")


@dataclass(frozen=True)
class RawEntry:
    key: str
    value: str
    source_line: int


@dataclass(frozen=True)
class RawStrings:
    header: Optional[str]
    entries: Tuple[RawEntry, ...]
    # 以 `"` 开头但不是合法 entry 的行号
    malformed: Tuple[int, ...]


def extract_header(text: str) -> Tuple[Optional[str], int]:
    """返回 (header, header 在原文中的结束位置)。"""
    m = _MULTI_LINE_HEADER_RE.match(text)
    if m:
        return m.group(1), m.end(1)
    m = _SINGLE_LINE_HEADER_RE.match(text)
    if m:
        return _HEADER_CONTINUATION_RE.sub("\n//", m.group(1)), m.end(1)
    return None, 0


def read_strings(text: str) -> RawStrings:
    header, end = extract_header(text)
    first_line = text[:end].count("\n") + 1

    entries: List[RawEntry] = []
    malformed: List[int] = []
    for offset, line in enumerate(text[end:].splitlines()):
        if not line:
            continue
        m = _ENTRY_RE.match(line)
        if m:
            entries.append(RawEntry(key=m.group(1), value=m.group(2), source_line=first_line + offset))
        elif line.lstrip().startswith('"'):
            malformed.append(first_line + offset)

    return RawStrings(header=header, entries=tuple(entries), malformed=tuple(malformed))


def group_title(group: str) -> str:
    return group[:1].upper() + group[1:].replace("-", " ")


def canonicalize(
    file: ResourceFile,
    raw: RawStrings,
    diagnostics: Diagnostics,
) -> Tuple[ParsedStringTable, str]:
    """
    生成规范文本，同时记录每个 key 写回后的行号（诊断定位用）。
    """
    ordered = sorted(raw.entries, key=lambda e: sort_key(e.key))
    grouped: Dict[str, List[RawEntry]] = {}
    for e in ordered:
        grouped.setdefault(key_group(e.key), []).append(e)

    table = ParsedStringTable(file=file, header=raw.header)
    content: List[str] = raw.header.split("\n") if raw.header else []

    is_first_mark = True
    for group in sorted_keys(grouped.keys()):
        content.append("")
        if group:
            content.append(f"// MARK: {'' if is_first_mark else '- '}{group_title(group)}")
            content.append("")
            is_first_mark = False

        for e in grouped[group]:
            if e.key in table.lines:
                diagnostics.error(
                    f'"{e.key}" is duplicated in "{file.full_name}" file',
                    file.path,
                    len(content) + 1,
                )
                continue
            content.append(f'"{e.key}" = "{e.value}";')
            table.lines[e.key] = len(content)
            table.entries.append(Entry(key=e.key, value=e.value, line=len(content)))

    content.append("")
    return table, "\n".join(content)


def process(
    file: ResourceFile,
    diagnostics: Diagnostics,
    *,
    dry_run: bool = False,
    warn_malformed: bool = True,
) -> ParsedStringTable:
    """读取 -> 规范化 -> 写回（没有任何 entry 的文件不动）。"""
    text = fs.read_text(file.path)
    raw = read_strings(text)
    if not raw.entries:
        return ParsedStringTable(file=file, header=raw.header)

    if warn_malformed:
        for line in raw.malformed:
            diagnostics.warning(
                f'line is not a valid "key" = "value"; entry and is dropped from "{file.full_name}" file',
                file.path,
                line,
            )

    table, new_text = canonicalize(file, raw, diagnostics)
    if new_text != text:
        table.changed = True
        if not dry_run:
            fs.write_text(file.path, new_text)
    return table
