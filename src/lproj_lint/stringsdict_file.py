"""
.stringsdict 解析 / 规范化写回

按行解析成结构（不做字符区间替换）：
- 顶层 entry：`\t<key>K</key>` + `\t<dict>` ... `\t</dict>`
- entry 内的 plural rule dict：`\t\t<dict>` ... `\t\t</dict>`，只包含 PluralRule 字段时才会重排
- 其余行原样保留
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from . import fs
from .collation import sorted_keys
from .diagnostics import Diagnostics
from .models import (
    REQUIRED_PLURAL_RULES,
    ParsedPluralTable,
    PluralBlock,
    PluralField,
    PluralRule,
    PluralRuleDict,
    ResourceFile,
)


_TOP_KEY_RE = re.compile(r"^\t<key>(.*)</key>$")
_TOP_DICT_OPEN_RE = re.compile(r"^\t<dict>$")
_TOP_DICT_CLOSE_RE = re.compile(r"^\t</dict>$")

_RULE_DICT_OPEN_RE = re.compile(r"^\t\t<dict>$")
_RULE_DICT_CLOSE_RE = re.compile(r"^\t\t</dict>$")
_FIELD_KEY_RE = re.compile(r"^\t{3}<key>(.*)</key>$")
_FIELD_VALUE_RE = re.compile(r"^\t{3}<string>.*</string>$")

_RULE_NAMES = {r.value for r in PluralRule}


def _find(lines: Sequence[str], start: int, pattern: "re.Pattern[str]") -> Optional[int]:
    for i in range(start, len(lines)):
        if pattern.match(lines[i]):
            return i
    return None


def read_rule_dict(lines: Sequence[str]) -> Optional[PluralRuleDict]:
    """lines 包含首尾 <dict> 行；出现非 PluralRule 内容时返回 None（原样保留）。"""
    fields: List[PluralField] = []
    seen = set()
    children = [x for x in lines[1:-1] if x != ""]
    if len(children) % 2:
        return None

    for i in range(0, len(children), 2):
        m = _FIELD_KEY_RE.match(children[i])
        if not m or m.group(1) not in _RULE_NAMES or not _FIELD_VALUE_RE.match(children[i + 1]):
            return None
        name = m.group(1)
        if name in seen:
            continue
        seen.add(name)
        fields.append(PluralField(name=name, key_line=children[i], value_line=children[i + 1]))

    return PluralRuleDict(open_line=lines[0], close_line=lines[-1], fields=tuple(fields))


def read_block(key: str, lines: Sequence[str]) -> PluralBlock:
    body: List[object] = []
    inner = lines[2:-1]
    i = 0
    while i < len(inner):
        line = inner[i]
        if _RULE_DICT_OPEN_RE.match(line):
            end = _find(inner, i + 1, _RULE_DICT_CLOSE_RE)
            if end is not None:
                rule = read_rule_dict(inner[i:end + 1])
                if rule is not None:
                    body.append(rule)
                else:
                    body.extend(inner[i:end + 1])
                i = end + 1
                continue
        body.append(line)
        i += 1

    return PluralBlock(key=key, key_line=lines[0], open_line=lines[1], close_line=lines[-1], body=tuple(body))


def read_stringsdict(file: ResourceFile, text: str, diagnostics: Diagnostics) -> ParsedPluralTable:
    table = ParsedPluralTable(file=file)
    lines = text.split("\n")

    i = 0
    while i < len(lines):
        m = _TOP_KEY_RE.match(lines[i])
        if m and i + 1 < len(lines) and _TOP_DICT_OPEN_RE.match(lines[i + 1]):
            end = _find(lines, i + 2, _TOP_DICT_CLOSE_RE)
            if end is not None:
                block = read_block(m.group(1), lines[i:end + 1])
                if block.key in table.values:
                    diagnostics.error(f'"{block.key}" is duplicated in "{file.full_name}" file', file.path)
                else:
                    table.layout.append(len(table.blocks))
                    table.blocks.append(block)
                    table.values[block.key] = block
                i = end + 1
                continue
        table.layout.append(lines[i])
        i += 1

    return table


def render_rule_dict(rule: PluralRuleDict, key: str, file: ResourceFile, diagnostics: Diagnostics) -> List[str]:
    out = [rule.open_line]
    for name in PluralRule:
        f = rule.find(name)
        if f is None:
            if name in REQUIRED_PLURAL_RULES:
                diagnostics.error(
                    f'"{name.value}" is required for key "{key}" in "{file.full_name}" file',
                    file.path,
                )
            continue
        out.append(f.key_line)
        out.append(f.value_line)
    out.append(rule.close_line)
    return out


def render_block(block: PluralBlock, file: ResourceFile, diagnostics: Diagnostics) -> List[str]:
    out = [block.key_line, block.open_line]
    for item in block.body:
        if isinstance(item, PluralRuleDict):
            out.extend(render_rule_dict(item, block.key, file, diagnostics))
        else:
            out.append(str(item))
    out.append(block.close_line)
    return out


def canonicalize(table: ParsedPluralTable, diagnostics: Diagnostics) -> str:
    """顶层 entry 按 collation 排序后依次填回原来的位置。"""
    ordered = [table.values[k] for k in sorted_keys(table.values.keys())]
    out: List[str] = []
    for item in table.layout:
        if isinstance(item, int):
            out.extend(render_block(ordered[item], table.file, diagnostics))
        else:
            out.append(item)
    return "\n".join(out)


def process(file: ResourceFile, diagnostics: Diagnostics, *, dry_run: bool = False) -> ParsedPluralTable:
    text = fs.read_text(file.path)
    table = read_stringsdict(file, text, diagnostics)
    if not table.values:
        return table

    new_text = canonicalize(table, diagnostics)
    if new_text != text:
        table.changed = True
        if not dry_run:
            fs.write_text(file.path, new_text)
    return table
