from pathlib import Path

import pytest

from lproj_lint import compare
from lproj_lint.diagnostics import IssueLevel
from lproj_lint.models import ParsedPluralTable, ParsedStringTable, ResourceFile, ResourceGroup


def _rf(locale, name="Localizable.strings"):
    return ResourceFile(path=Path(f"/p/{locale}.lproj/{name}"), name=name, locale=locale)


def _table(file, keys):
    return ParsedStringTable(file=file, lines={k: i + 2 for i, k in enumerate(keys)})


@pytest.fixture
def group():
    return ResourceGroup(name="Localizable.strings", files=(_rf("en"), _rf("fr"), _rf("de")))


def test_bind_by_development_language(group, diagnostics):
    b = compare.bind(group, "fr", diagnostics)
    assert b.reference.locale == "fr"
    assert [f.locale for f in b.others] == ["en", "de"]
    assert diagnostics.issues == []


def test_bind_without_language_uses_first_file(group, diagnostics):
    b = compare.bind(group, "", diagnostics)
    assert b.reference.locale == "en"
    assert [f.locale for f in b.others] == ["fr", "de"]


def test_bind_failure_is_one_error_and_no_diff(diagnostics):
    g = ResourceGroup(name="Errors.strings", files=(_rf("fr", "Errors.strings"), _rf("de", "Errors.strings")))
    calls = []

    result = compare.check_group(
        g,
        lambda f: calls.append(f),
        development_language="en",
        languages={"en", "fr", "de"},
        diagnostics=diagnostics,
    )

    assert result is None
    assert calls == []
    assert len(diagnostics.issues) == 1
    assert diagnostics.issues[0].level == IssueLevel.ERROR
    assert diagnostics.issues[0].message == '"Errors.strings" is missing for development language (en)'


def test_missing_and_redundant_keys(diagnostics):
    en, fr = _rf("en"), _rf("fr")
    g = ResourceGroup(name="Localizable.strings", files=(en, fr))
    b = compare.bind(g, "en", diagnostics)
    ref = _table(en, ["x", "y"])
    other = _table(fr, ["y", "z"])

    compare.compare(b, ref, [other], {"en", "fr"}, diagnostics)

    assert diagnostics.error_count == 0
    assert len(diagnostics.issues) == 2
    missing, redundant = diagnostics.issues
    assert missing.message == '"x" is missing from "Localizable (fr).strings" file'
    assert missing.path == en.path
    assert missing.line == 2
    assert redundant.message == '"z" is redundant in "Localizable (fr).strings" file'
    assert redundant.path == fr.path
    assert redundant.line == 3
    assert not any('"y"' in i.message for i in diagnostics.issues)


def test_missing_locale_warning(diagnostics):
    en, fr = _rf("en"), _rf("fr")
    g = ResourceGroup(name="Localizable.strings", files=(en, fr))
    b = compare.bind(g, "en", diagnostics)

    compare.compare(b, _table(en, ["a"]), [_table(fr, ["a"])], {"en", "fr", "de"}, diagnostics)

    assert len(diagnostics.issues) == 1
    assert diagnostics.issues[0].level == IssueLevel.WARNING
    assert diagnostics.issues[0].message == '"Localizable.strings" is missing for de language'


def test_plural_tables_have_no_line(diagnostics):
    en, fr = _rf("en", "Plurals.stringsdict"), _rf("fr", "Plurals.stringsdict")
    g = ResourceGroup(name="Plurals.stringsdict", files=(en, fr))
    b = compare.bind(g, "en", diagnostics)
    ref = ParsedPluralTable(file=en, values={"songs": object()})
    other = ParsedPluralTable(file=fr)

    compare.compare(b, ref, [other], {"en", "fr"}, diagnostics)

    assert len(diagnostics.issues) == 1
    issue = diagnostics.issues[0]
    assert issue.line is None
    assert issue.render() == f'{en.path}: warning: "songs" is missing from "Plurals (fr).stringsdict" file'


def test_check_group_processes_reference_then_others(group, diagnostics):
    seen = []

    def process(f):
        seen.append(f.locale)
        return _table(f, ["k"])

    compare.check_group(group, process, development_language="de", languages={"en", "fr", "de"}, diagnostics=diagnostics)
    assert seen == ["de", "en", "fr"]
    assert diagnostics.issues == []
