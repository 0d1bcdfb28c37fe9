import sys
from pathlib import Path

import pytest


# Ensure 'src/' is on sys.path so 'lproj_lint' can be imported when running tests from repo root.
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture(autouse=True)
def clean_build_env(monkeypatch):
    """Xcode 构建环境变量会影响根目录/开发语言的解析，测试里统一清掉。"""
    for name in ("SRCROOT", "TARGET_NAME", "DEVELOPMENT_LANGUAGE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def chdir_tmp(tmp_path, monkeypatch):
    """切到临时目录执行（避免污染仓库）。"""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def diagnostics():
    from lproj_lint.diagnostics import Diagnostics

    return Diagnostics()


@pytest.fixture
def write_lproj(tmp_path):
    """write_lproj(locale, name, text) -> tmp_path/<locale>.lproj/<name>（locale 为空则直接放根目录）"""

    def _write(locale: str, name: str, text: str, root: Path = tmp_path) -> Path:
        d = root / f"{locale}.lproj" if locale else root
        d.mkdir(parents=True, exist_ok=True)
        p = d / name
        p.write_text(text, encoding="utf-8")
        return p

    return _write
