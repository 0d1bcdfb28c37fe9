from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

from rich.console import Console


# =========================
# Errors
# =========================

class FatalError(RuntimeError):
    """不可继续的错误：根目录不存在 / 文件无法按 UTF-8 读取。"""
    pass


# =========================
# Issue
# =========================

class IssueLevel(str, Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Issue:
    level: IssueLevel
    message: str
    path: Optional[Path] = None
    line: Optional[int] = None

    def location(self) -> Optional[str]:
        if self.path is None:
            return None
        if self.line:
            return f"{self.path}:{self.line}:"
        return f"{self.path}:"

    def render(self) -> str:
        # Xcode 可识别的格式：<path>:<line>: warning: <message>
        parts = [self.location(), f"{self.level.value}:", self.message]
        return " ".join(p for p in parts if p)


def plain_console(*, stderr: bool = False) -> Console:
    # 输出需保持单行可解析：关闭 markup/高亮/自动换行
    return Console(stderr=stderr, markup=False, highlight=False, emoji=False, soft_wrap=True)


class Diagnostics:
    """
    诊断收集器：每条 issue 立即打印，同时保留下来给 driver 统计 exit code。
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or plain_console()
        self.issues: List[Issue] = []

    def report(self, level: IssueLevel, message: str, path: Optional[Path] = None, line: Optional[int] = None) -> Issue:
        issue = Issue(level=level, message=message, path=path, line=line)
        self.issues.append(issue)
        self.console.print(issue.render(), soft_wrap=True)
        return issue

    def warning(self, message: str, path: Optional[Path] = None, line: Optional[int] = None) -> Issue:
        return self.report(IssueLevel.WARNING, message, path, line)

    def error(self, message: str, path: Optional[Path] = None, line: Optional[int] = None) -> Issue:
        return self.report(IssueLevel.ERROR, message, path, line)

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.level == IssueLevel.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.level == IssueLevel.WARNING)

    @property
    def ok(self) -> bool:
        return self.error_count == 0

    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def print_summary(self, files: int, changed: int = 0, *, dry_run: bool = False, console: Optional[Console] = None) -> None:
        # 走 stderr，不混进可解析的诊断流
        out = console or Console(stderr=True, highlight=False)
        style = "bold green" if self.ok else "bold red"
        verb = "to rewrite" if dry_run else "rewritten"
        out.print(
            f"[{style}]localization[/{style}]: {files} files ({changed} {verb}), "
            f"{self.error_count} errors, {self.warning_count} warnings"
        )
