from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from . import metadata


CONFIG_FILE = "localization.yaml"

# 构建宿主（Xcode / SwiftPM plugin）注入的环境变量
ENV_ROOT = "SRCROOT"
ENV_TARGET = "TARGET_NAME"
ENV_LANGUAGE = "DEVELOPMENT_LANGUAGE"

# project_file: auto -> 在项目根目录下自动查找 Package.swift / *.xcodeproj
PROJECT_FILE_AUTO = "auto"


# =========================
# Errors
# =========================

class ConfigError(RuntimeError):
    """配置错误（启动阶段抛出，带解决建议）"""
    pass


# =========================
# Model
# =========================

@dataclass(frozen=True)
class LintConfig:
    root: Path
    development_language: str = ""
    groups: Optional[Tuple[str, ...]] = None
    dry_run: bool = False
    warn_malformed: bool = True


# =========================
# Helpers
# =========================

def _as_str(x: object, default: str = "") -> str:
    if x is None:
        return default
    s = str(x).strip()
    return s if s else default


_FIELDS: Dict[str, type] = {
    "development_language": str,
    "directory": str,
    "groups": list,
    "dry_run": bool,
    "warn_malformed": bool,
    "project_file": str,
}


def validate_config(raw: Any) -> Dict[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError("顶层必须是 object（mapping）")

    for k, v in raw.items():
        if k not in _FIELDS:
            raise ValueError(f"未知字段：{k}（可选：{', '.join(_FIELDS)}）")
        if v is None:
            continue
        if not isinstance(v, _FIELDS[k]):
            raise ValueError(f"{k} 类型错误：期望 {_FIELDS[k].__name__}，实际 {type(v).__name__}")

    groups = raw.get("groups")
    if groups is not None and not all(isinstance(g, str) and g.strip() for g in groups):
        raise ValueError("groups 必须是非空字符串数组")
    return dict(raw)


def read_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(
            f"配置文件不存在：{path}\n"
            f"解决方法：去掉 --config 使用默认值，或创建 {CONFIG_FILE}。"
        )
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"配置文件无法解析为 YAML：{path}\n原因：{e}") from None

    try:
        return validate_config(raw)
    except ValueError as e:
        raise ConfigError(f"配置文件校验失败：{path}\n原因：{e}") from None


def resource_root(base: Path, target: Optional[str], directory: Optional[str]) -> Path:
    """<SRCROOT>/<TARGET_NAME>/<directory>，缺省的部分跳过。"""
    root = base
    if target:
        root = root / target
    directory = (directory or "").strip("/")
    if directory:
        root = root / directory
    return root


def load_config(
    *,
    directory: Optional[str] = None,
    language: Optional[str] = None,
    project_root: Optional[str] = None,
    config_path: Optional[str] = None,
    project_file: Optional[str] = None,
    groups: Optional[Tuple[str, ...]] = None,
    dry_run: bool = False,
    warn_malformed: Optional[bool] = None,
    env: Optional[Mapping[str, str]] = None,
    cwd: Optional[Path] = None,
) -> LintConfig:
    """
    优先级：命令行 > 环境变量 > 配置文件 > 默认值
    开发语言都没有时才会去 project_file（Package.swift / project.pbxproj）里找。
    """
    env = env if env is not None else {}
    cwd = cwd or Path.cwd()

    base = Path(_as_str(project_root) or _as_str(env.get(ENV_ROOT)) or str(cwd)).expanduser()
    if not base.is_absolute():
        base = (cwd / base)

    if config_path:
        cfg_file = Path(config_path).expanduser()
        if not cfg_file.is_absolute():
            cfg_file = cwd / cfg_file
        raw = read_config_file(cfg_file)
    elif (base / CONFIG_FILE).is_file():
        raw = read_config_file(base / CONFIG_FILE)
    else:
        raw = {}

    lang = _as_str(language) or _as_str(env.get(ENV_LANGUAGE)) or _as_str(raw.get("development_language"))

    if not lang:
        pf = _as_str(project_file) or _as_str(raw.get("project_file"))
        pf_path: Optional[Path] = None
        if pf == PROJECT_FILE_AUTO:
            pf_path = metadata.find_project_file(base)
        elif pf:
            pf_path = Path(pf).expanduser()
            if not pf_path.is_absolute():
                pf_path = base / pf_path
        if pf_path is not None:
            lang = _as_str(metadata.development_language_from(pf_path))

    only = tuple(groups) if groups else None
    if only is None and raw.get("groups"):
        only = tuple(str(g).strip() for g in raw["groups"])

    if warn_malformed is None:
        warn_malformed = raw.get("warn_malformed", True) is not False

    return LintConfig(
        root=resource_root(base, _as_str(env.get(ENV_TARGET)) or None, directory or _as_str(raw.get("directory"))),
        development_language=lang,
        groups=only,
        dry_run=bool(dry_run or raw.get("dry_run")),
        warn_malformed=bool(warn_malformed),
    )
