import pytest

from barblocks.manpage import collect_docs, extract_doc, main, render_markdown


def test_extract_doc_demotes_headings_and_stops():
    lines = ["//! Title", "//!", "//! # Config", "use x;", "//! after"]
    assert extract_doc(lines) == "Title\n\n### Config\n"


def test_extract_doc_strips_only_one_space():
    assert extract_doc(["//!  indented\n"]) == " indented\n"


def test_extract_doc_without_doc():
    assert extract_doc(["use x;", "//! late"]) == ""


@pytest.fixture
def src_dir(tmp_path):
    blocks = tmp_path / "blocks"
    blocks.mkdir()
    (blocks / "b.rs").write_text("//! Block B\n//! # Example\nfn x() {}\n")
    (blocks / "a.rs").write_text("//! Block A\r\n\r\nuse y;\n")
    (blocks / "c.rs").write_text("fn nothing() {}\n")
    (blocks / "sub").mkdir()
    (blocks / "sub" / "d.rs").write_text("//! hidden\n")
    return tmp_path


def test_collect_docs_sorted_and_filtered(src_dir):
    docs = collect_docs(src_dir)
    assert [name for name, _ in docs] == ["a", "b"]
    assert docs[0][1] == "Block A\n"
    assert docs[1][1] == "Block B\n### Example\n"


def test_render_markdown():
    assert render_markdown([("a", "x\n")]) == "## a\nx\n\n"
    assert render_markdown([]) == ""


def test_main_usage(capsys):
    assert main(["only-one"]) == 1
    assert "USAGE" in capsys.readouterr().err


def test_main_writes_file(src_dir, tmp_path):
    out = tmp_path / "blocks.md"
    assert main([str(src_dir), str(out)]) == 0
    text = out.read_text(encoding="utf-8")
    assert text == render_markdown(collect_docs(src_dir))
    assert text.index("## a\n") < text.index("## b\n")