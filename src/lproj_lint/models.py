from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple


# =========================
# Constants / Conventions
# =========================

LPROJ_SUFFIX = ".lproj"
STRINGS_SUFFIX = ".strings"
STRINGSDICT_SUFFIX = ".stringsdict"


class PluralRule(str, Enum):
    """plural rule dict 内允许出现的字段，定义顺序即写回顺序。"""
    SPEC_TYPE = "NSStringFormatSpecTypeKey"
    VALUE_TYPE = "NSStringFormatValueTypeKey"
    ZERO = "zero"
    ONE = "one"
    TWO = "two"
    FEW = "few"
    MANY = "many"
    OTHER = "other"


REQUIRED_PLURAL_RULES: Tuple[PluralRule, ...] = (
    PluralRule.SPEC_TYPE,
    PluralRule.VALUE_TYPE,
    PluralRule.OTHER,
)


# =========================
# Layout Models
# =========================

@dataclass(frozen=True)
class ResourceFile:
    """A resource file found on disk."""
    path: Path
    name: str
    locale: Optional[str] = None

    @property
    def locale_tag(self) -> str:
        return self.locale or ""

    @property
    def full_name(self) -> str:
        """Errors.strings -> Errors (fr).strings（无 locale 时原样返回）"""
        if not self.locale:
            return self.name
        stem, dot, ext = self.name.rpartition(".")
        if not dot:
            return f"{self.name} ({self.locale})"
        return f"{stem} ({self.locale}).{ext}"


@dataclass(frozen=True)
class ResourceGroup:
    """
    All files sharing one base name across locales.
    Files keep discovery order; the first one is the reference when no
    development language is configured.
    """
    name: str
    files: Tuple[ResourceFile, ...] = field(default_factory=tuple)

    @property
    def locales(self) -> Set[str]:
        return {f.locale_tag for f in self.files}


@dataclass(frozen=True)
class ReferenceBinding:
    group: ResourceGroup
    reference: ResourceFile
    others: Tuple[ResourceFile, ...] = field(default_factory=tuple)


# =========================
# Parsed Models
# =========================

def key_group(key: str) -> str:
    # 规则：第一个 '.' 之前的段；没有 '.' 则为空组
    if "." in key:
        return key.split(".", 1)[0]
    return ""


@dataclass(frozen=True)
class Entry:
    key: str
    value: str
    # 写回后所在行（1-based）
    line: int = 0


@dataclass
class ParsedStringTable:
    file: ResourceFile
    header: Optional[str] = None
    entries: List[Entry] = field(default_factory=list)
    lines: Dict[str, int] = field(default_factory=dict)
    changed: bool = False

    @property
    def keys(self) -> Set[str]:
        return set(self.lines.keys())

    def line_for(self, key: str) -> Optional[int]:
        return self.lines.get(key)


@dataclass(frozen=True)
class PluralField:
    name: str
    key_line: str
    value_line: str


@dataclass(frozen=True)
class PluralRuleDict:
    """A nested dict made only of plural rule fields."""
    open_line: str
    close_line: str
    fields: Tuple[PluralField, ...] = field(default_factory=tuple)

    def find(self, rule: PluralRule) -> Optional[PluralField]:
        for f in self.fields:
            if f.name == rule.value:
                return f
        return None


@dataclass(frozen=True)
class PluralBlock:
    """
    One top-level entry of a stringsdict file.
    `body` mixes raw lines (str) and plural rule dicts, in source order.
    """
    key: str
    key_line: str
    open_line: str
    close_line: str
    body: Tuple[object, ...] = field(default_factory=tuple)


@dataclass
class ParsedPluralTable:
    file: ResourceFile
    # raw lines (str) and block slot indexes (int)
    layout: List[object] = field(default_factory=list)
    blocks: List[PluralBlock] = field(default_factory=list)
    values: Dict[str, PluralBlock] = field(default_factory=dict)
    changed: bool = False

    @property
    def keys(self) -> Set[str]:
        return set(self.values.keys())
