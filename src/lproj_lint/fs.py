from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from .collation import sorted_keys
from .diagnostics import FatalError
from .models import LPROJ_SUFFIX, STRINGS_SUFFIX, STRINGSDICT_SUFFIX, ResourceFile, ResourceGroup


def read_text(path: Path) -> str:
    # utf-8-sig：Xcode / 翻译平台导出的文件可能带 BOM
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError):
        raise FatalError(f"Couldn't read file from path: {path}") from None


def write_text(path: Path, text: str) -> None:
    # 非原子写入：失败不回滚
    try:
        path.write_text(text, encoding="utf-8")
    except OSError:
        raise FatalError(f"Couldn't write file to path: {path}") from None


def locale_of(rel_path: Path) -> Optional[str]:
    """取最近一层 *.lproj 目录名作为 locale；没有则为 None。"""
    for part in reversed(rel_path.parts[:-1]):
        if part.endswith(LPROJ_SUFFIX):
            return part[: -len(LPROJ_SUFFIX)]
    return None


def resource_file(root: Path, rel_path: Path) -> ResourceFile:
    return ResourceFile(path=root / rel_path, name=rel_path.name, locale=locale_of(rel_path))


def _walk(root: Path) -> Iterable[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for fn in sorted(filenames):
            yield (Path(dirpath) / fn).relative_to(root)


def _group(files: List[ResourceFile]) -> Tuple[ResourceGroup, ...]:
    by_name: Dict[str, List[ResourceFile]] = {}
    for f in files:
        by_name.setdefault(f.name, []).append(f)
    return tuple(ResourceGroup(name=n, files=tuple(by_name[n])) for n in sorted_keys(by_name.keys()))


def discover(root: Path) -> Tuple[Tuple[ResourceGroup, ...], Tuple[ResourceGroup, ...]]:
    """
    扫描 root 下所有 .strings / .stringsdict，按文件名分组（组按名称排序）。
    返回：(strings_groups, stringsdict_groups)
    """
    if not root.exists():
        raise FatalError(f"Invalid configuration: {root} doesn't exist.")

    strings: List[ResourceFile] = []
    stringsdict: List[ResourceFile] = []
    for rel in _walk(root):
        if rel.name.endswith(STRINGS_SUFFIX):
            strings.append(resource_file(root, rel))
        elif rel.name.endswith(STRINGSDICT_SUFFIX):
            stringsdict.append(resource_file(root, rel))

    return _group(strings), _group(stringsdict)


def filter_groups(groups: Iterable[ResourceGroup], only: Optional[Iterable[str]]) -> Tuple[ResourceGroup, ...]:
    if not only:
        return tuple(groups)
    wanted = set(only)
    return tuple(g for g in groups if g.name in wanted)


def project_locales(*group_lists: Iterable[ResourceGroup]) -> set:
    out: set = set()
    for groups in group_lists:
        for g in groups:
            out |= g.locales
    return out
