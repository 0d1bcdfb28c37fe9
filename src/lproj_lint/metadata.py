from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from . import fs


# Xcode 工程 / SwiftPM 清单里的开发语言声明
_PROJECT_RE = re.compile(r"developmentRegion = ([a-zA-Z-]+);")
_PACKAGE_RE = re.compile(r'defaultLocalization:\s*"([a-zA-Z-]+)"')


def _pattern_for(path: Path) -> "re.Pattern[str]":
    if path.name == "Package.swift":
        return _PACKAGE_RE
    return _PROJECT_RE


def find_project_file(root: Path) -> Optional[Path]:
    """Package.swift 优先，其次 *.xcodeproj/project.pbxproj。"""
    package = root / "Package.swift"
    if package.is_file():
        return package
    for proj in sorted(root.glob("*.xcodeproj")):
        pbx = proj / "project.pbxproj"
        if pbx.is_file():
            return pbx
    return None


def development_language_from(path: Path) -> Optional[str]:
    m = _pattern_for(path).search(fs.read_text(path))
    return m.group(1) if m else None
