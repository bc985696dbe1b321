import pytest

from commenttodo.comments import StructuralBackend, extract_structural, grammar_for

ROOT = "/proj"


@pytest.fixture(scope="module")
def backend():
    return StructuralBackend.create()


def _extract(backend, code, name):
    return extract_structural(code, f"{ROOT}/{name}", ROOT, backend, grammar_for(name.rsplit(".", 1)[1]))


def test_line_comment_is_found(backend):
    res = _extract(backend, "const a = 1;\n// TODO: message\n", "a.ts")
    assert res.ok
    assert len(res.findings) == 1
    f = res.findings[0]
    assert (f.tag, f.file, f.line, f.text, f.meta) == ("TODO", "a.ts", 2, "message", None)


def test_tag_inside_string_literals_is_not_a_comment(backend):
    code = (
        'const a = "TODO: not a comment";\n'
        "const b = 'FIXME later';\n"
        "const c = `HACK ${a}`;\n"
    )
    res = _extract(backend, code, "a.js")
    assert res.ok
    assert res.findings == []


def test_block_comment_interior_line_offset(backend):
    code = "const x = 1;\n/*\n * first line\n * FIXME(@bob): fix race\n */\n"
    res = _extract(backend, code, "a.ts")
    assert res.ok
    assert len(res.findings) == 1
    f = res.findings[0]
    # ブロック開始行(2) + 行インデックス(2)
    assert f.line == 4
    assert f.text == "fix race"
    assert f.meta == {"assignee": "bob"}
    assert f.raw == "* FIXME(@bob): fix race"


def test_single_line_block_comment(backend):
    res = _extract(backend, "let y = 2; /* HACK: temporary */\n", "a.mjs")
    assert [(f.tag, f.line, f.text) for f in res.findings] == [("HACK", 1, "temporary")]


def test_jsx_and_generics(backend):
    code = (
        "function identity<T>(value: T): T { return value; }\n"
        "export const App = () => <div>{/* TODO: jsx comment */}</div>;\n"
    )
    res = _extract(backend, code, "App.tsx")
    assert res.ok
    assert [(f.tag, f.line, f.text) for f in res.findings] == [("TODO", 2, "jsx comment")]


def test_lower_case_tag_and_word_boundary(backend):
    code = "// todo: lower\n// todos are not tags\n"
    res = _extract(backend, code, "a.js")
    assert [(f.tag, f.line) for f in res.findings] == [("TODO", 1)]


def test_comment_without_tag_produces_nothing(backend):
    res = _extract(backend, "// just a note\nconst z = 3;\n", "a.ts")
    assert res.ok
    assert res.findings == []


def test_syntax_error_is_reported_as_failure(backend):
    res = _extract(backend, "const = ;\n// TODO: after error\n", "a.ts")
    assert not res.ok
    assert "syntax error" in res.error
    assert res.findings == []


def test_php_comments_and_docblocks(backend):
    code = (
        "<?php\n"
        "// TODO: php line comment\n"
        '$s = "HACK: inside string";\n'
        "# FIXME: hash comment\n"
        "/**\n"
        " * HACK(assignee: carol) docblock\n"
        " */\n"
        "function f() {}\n"
    )
    res = _extract(backend, code, "index.php")
    assert res.ok
    got = [(f.tag, f.line, f.text, f.meta) for f in res.findings]
    assert got == [
        ("TODO", 2, "php line comment", None),
        ("FIXME", 4, "hash comment", None),
        ("HACK", 6, "docblock", {"assignee": "carol"}),
    ]


def test_grammar_selection():
    assert grammar_for("ts") == "typescript"
    assert grammar_for(".JSX") == "tsx"
    assert grammar_for("php") == "php"
    assert grammar_for("py") is None
