#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
lproj_lint tool.py
CLI 入口：参数解析 + 配置解析 + 按资源组执行 + exit code
"""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from functools import partial
from typing import List, Optional

from . import compare, fs, strings_file, stringsdict_file
from .config import CONFIG_FILE, ConfigError, LintConfig, load_config
from .diagnostics import Diagnostics, FatalError, plain_console


BOX_TOOL = {
    "id": "ios.lproj_lint",
    "name": "lproj_lint",
    "category": "iOS",
    "summary": "iOS/Xcode .strings / .stringsdict：规范化排序写回（幂等）+ 多语言 key 一致性检查（Xcode warning/error 输出）",
    "usage": [
        "lproj_lint",
        "lproj_lint Resources",
        "lproj_lint Resources --language en",
        "lproj_lint --project-root path/to/project --only Localizable.strings",
        "lproj_lint --dry-run",
    ],
    "options": [
        {"flag": "directory", "desc": "相对 SRCROOT/TARGET_NAME 的资源目录（可选）"},
        {"flag": "-l, --language", "desc": "开发语言（默认读 DEVELOPMENT_LANGUAGE；都没有时以每组第一个文件为参照）"},
        {"flag": "--project-root", "desc": "项目根目录（默认 SRCROOT 或当前目录）"},
        {"flag": "--config", "desc": f"配置文件路径（默认 {CONFIG_FILE}，存在才读取）"},
        {"flag": "--project-file", "desc": "从 Package.swift / project.pbxproj 读取开发语言（auto：自动查找）"},
        {"flag": "--only", "desc": "只处理指定资源组（文件名，可重复）"},
        {"flag": "--dry-run", "desc": "只检查不写回"},
        {"flag": "--no-malformed-warnings", "desc": "不提示无法识别的 entry 行"},
    ],
    "dependencies": [
        "PyYAML>=6.0",
        "rich>=13.0.0",
        "pyuca>=1.2",
    ],
    "docs": "README.md",
}


EXIT_FAIL = 1
EXIT_BAD = 2


@dataclass
class RunStats:
    files: int = 0
    changed: int = 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="lproj_lint",
        description="Keeps your localization files clean：排序/分组写回 .strings、重排 .stringsdict、检查多语言 key 一致性",
    )
    p.add_argument("directory", nargs="?", default=None, help="资源目录（相对 SRCROOT/TARGET_NAME）")
    p.add_argument("-l", "--language", default=None, help="开发语言（development language）")
    p.add_argument("--project-root", default=None, help="项目根目录（默认 SRCROOT 或当前目录）")
    p.add_argument("--config", default=None, help=f"配置文件路径（默认 {CONFIG_FILE}）")
    p.add_argument("--project-file", default=None, help="Package.swift 或 project.pbxproj（用于读取开发语言；auto 自动查找）")
    p.add_argument("--only", action="append", default=None, metavar="NAME", help="只处理指定资源组（可重复）")
    p.add_argument("--dry-run", action="store_true", help="预览模式（不写入任何文件）")
    p.add_argument("--no-malformed-warnings", action="store_true", help="关闭无法识别 entry 行的 warning")
    return p


def run(cfg: LintConfig, diagnostics: Diagnostics) -> RunStats:
    """
    处理顺序：所有 .strings 组，然后所有 .stringsdict 组（组内按名称排序）。
    locale 全集来自项目内发现的所有文件（不受 --only 影响）。
    """
    strings_groups, stringsdict_groups = fs.discover(cfg.root)
    languages = fs.project_locales(strings_groups, stringsdict_groups)

    stats = RunStats()

    def _track(process, file):
        parsed = process(file)
        stats.files += 1
        if parsed.changed:
            stats.changed += 1
        return parsed

    plans = [
        (strings_groups, partial(strings_file.process, diagnostics=diagnostics, dry_run=cfg.dry_run,
                                 warn_malformed=cfg.warn_malformed)),
        (stringsdict_groups, partial(stringsdict_file.process, diagnostics=diagnostics, dry_run=cfg.dry_run)),
    ]
    for groups, process in plans:
        for group in fs.filter_groups(groups, cfg.groups):
            compare.check_group(
                group,
                partial(_track, process),
                development_language=cfg.development_language,
                languages=languages,
                diagnostics=diagnostics,
            )
    return stats


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    args = build_parser().parse_args(argv)
    console = plain_console()

    try:
        cfg = load_config(
            directory=args.directory,
            language=args.language,
            project_root=args.project_root,
            config_path=args.config,
            project_file=args.project_file,
            groups=tuple(args.only) if args.only else None,
            dry_run=bool(args.dry_run),
            warn_malformed=False if args.no_malformed_warnings else None,
            env=os.environ,
        )
    except ConfigError as e:
        console.print(f"error: {e}")
        return EXIT_BAD
    except FatalError as e:
        console.print(f"error: {e}")
        return EXIT_FAIL

    diagnostics = Diagnostics(console)
    try:
        stats = run(cfg, diagnostics)
    except FatalError as e:
        console.print(f"error: {e}")
        return EXIT_FAIL

    diagnostics.print_summary(stats.files, stats.changed, dry_run=cfg.dry_run)
    return diagnostics.exit_code()


if __name__ == "__main__":
    raise SystemExit(main())
