"""Tests for rendering include trees.

NO MOCKS - real files under tmp_path.
"""
from __future__ import annotations

import io
import os
from pathlib import Path

import pytest

from docdoc.core.documents import DocFormat
from docdoc.core.exceptions import DocumentIOError, IncludeCycleError
from docdoc.core.resolver import IncludeResolver, render, render_to_string
from helpers.file_utils import include, write_tree


def test_title_body_footer_scenario(tmp_path: Path) -> None:
    files = write_tree(
        tmp_path,
        {
            "main.md": f"# Title\n{include('body.md')}\nFooter\n",
            "body.md": "Hello\nWorld\n",
        },
    )

    assert render_to_string(files["main.md"]) == "# Title\nHello\nWorld\nFooter\n"


def test_line_without_directive_gets_one_terminator(tmp_path: Path) -> None:
    files = write_tree(tmp_path, {"a.md": "just text"})
    assert render_to_string(files["a.md"]) == "just text\n"


def test_blank_lines_are_preserved(tmp_path: Path) -> None:
    files = write_tree(tmp_path, {"a.md": "one\n\n\ntwo\n"})
    assert render_to_string(files["a.md"]) == "one\n\n\ntwo\n"


def test_empty_document_renders_nothing(tmp_path: Path) -> None:
    files = write_tree(tmp_path, {"main.md": f"start\n{include('empty.md')}\nend\n", "empty.md": ""})
    assert render_to_string(files["main.md"]) == "start\nend\n"


def test_crlf_input_is_normalized(tmp_path: Path) -> None:
    files = write_tree(tmp_path, {"a.md": "one\r\ntwo\r\n"})
    assert render_to_string(files["a.md"]) == "one\ntwo\n"


def test_text_segments_around_directive_each_get_a_terminator(tmp_path: Path) -> None:
    files = write_tree(
        tmp_path,
        {
            "main.md": f"See {include('note.md')} here\n",
            "note.md": "NOTE\n",
        },
    )
    assert render_to_string(files["main.md"]) == "See \nNOTE\n here\n"


def test_multiple_directives_on_one_line_resolve_left_to_right(tmp_path: Path) -> None:
    files = write_tree(
        tmp_path,
        {
            "main.md": include("a.md") + include("b.md") + "\n",
            "a.md": "A\n",
            "b.md": "B\n",
        },
    )
    assert render_to_string(files["main.md"]) == "A\nB\n"


def test_includes_are_relative_to_the_including_file(tmp_path: Path) -> None:
    files = write_tree(
        tmp_path,
        {
            "main.md": include("chapters/one.md") + "\n",
            "chapters/one.md": "one\n" + include("../shared/sig.md") + "\n" + include("detail.md") + "\n",
            "chapters/detail.md": "detail\n",
            "shared/sig.md": "-- sig\n",
        },
    )
    assert render_to_string(files["main.md"]) == "one\n-- sig\ndetail\n"


def test_deep_nesting(tmp_path: Path) -> None:
    tree = {f"d{i}.md": f"level {i}\n{include(f'd{i + 1}.md')}\n" for i in range(20)}
    tree["d20.md"] = "bottom\n"
    files = write_tree(tmp_path, tree)

    out = render_to_string(files["d0.md"])

    assert out.splitlines() == [f"level {i}" for i in range(20)] + ["bottom"]


def test_rendering_is_deterministic(tmp_path: Path) -> None:
    files = write_tree(
        tmp_path,
        {
            "main.md": f"{include('a.md')}\n{include('b.md')}\n",
            "a.md": f"a\n{include('c.md')}\n",
            "b.md": f"b\n{include('c.md')}\n",
            "c.md": "c\n",
        },
    )
    assert render_to_string(files["main.md"]) == render_to_string(files["main.md"])


class TestDiamondInclusion:
    def test_shared_leaf_is_rendered_once_per_site(self, tmp_path: Path) -> None:
        files = write_tree(
            tmp_path,
            {
                "A.md": f"A\n{include('B.md')}\n{include('C.md')}\n",
                "B.md": f"B\n{include('D.md')}\n",
                "C.md": f"C\n{include('D.md')}\n",
                "D.md": "D\n",
            },
        )

        assert render_to_string(files["A.md"]) == "A\nB\nD\nC\nD\n"

    def test_same_file_twice_on_one_line(self, tmp_path: Path) -> None:
        files = write_tree(
            tmp_path,
            {"main.md": include("x.md") + " & " + include("x.md") + "\n", "x.md": "x\n"},
        )
        assert render_to_string(files["main.md"]) == "x\n & \nx\n"

    def test_same_file_via_different_spellings(self, tmp_path: Path) -> None:
        files = write_tree(
            tmp_path,
            {
                "main.md": f"{include('x.md')}\n{include('./sub/../x.md')}\n",
                "sub/.keep": "",
                "x.md": "x\n",
            },
        )
        assert render_to_string(files["main.md"]) == "x\nx\n"


class TestCycles:
    def test_self_inclusion_names_the_document(self, tmp_path: Path) -> None:
        files = write_tree(tmp_path, {"self.md": f"top\n{include('self.md')}\n"})

        with pytest.raises(IncludeCycleError) as excinfo:
            render_to_string(files["self.md"])

        assert excinfo.value.path == files["self.md"]
        assert excinfo.value.chain == (files["self.md"], files["self.md"])
        assert "Circular include detected" in str(excinfo.value)

    def test_mutual_inclusion(self, tmp_path: Path) -> None:
        files = write_tree(
            tmp_path,
            {
                "main.md": include("a.md") + "\n",
                "a.md": include("b.md") + "\n",
                "b.md": include("a.md") + "\n",
            },
        )

        with pytest.raises(IncludeCycleError) as excinfo:
            render_to_string(files["main.md"])

        assert excinfo.value.path == files["a.md"]
        assert excinfo.value.chain == (files["main.md"], files["a.md"], files["b.md"], files["a.md"])

    def test_cycle_detected_through_differently_spelled_path(self, tmp_path: Path) -> None:
        files = write_tree(tmp_path, {"docs/self.md": include("../docs/./self.md") + "\n"})

        with pytest.raises(IncludeCycleError) as excinfo:
            render_to_string(files["docs/self.md"])

        assert excinfo.value.path == files["docs/self.md"]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_cycle_detected_through_symlink(self, tmp_path: Path) -> None:
        files = write_tree(tmp_path, {"real.md": include("link.md") + "\n"})
        (tmp_path / "link.md").symlink_to(files["real.md"])

        with pytest.raises(IncludeCycleError) as excinfo:
            render_to_string(files["real.md"])

        assert excinfo.value.path == files["real.md"]

    def test_output_before_the_cycle_is_kept(self, tmp_path: Path) -> None:
        files = write_tree(
            tmp_path,
            {
                "main.md": f"first line\n{include('a.md')}\nnever\n",
                "a.md": f"from a\n{include('main.md')}\n",
            },
        )
        sink = io.StringIO()

        with pytest.raises(IncludeCycleError):
            render(files["main.md"], sink)

        assert sink.getvalue() == "first line\nfrom a\n"


class TestIOErrors:
    def test_missing_entry(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentIOError) as excinfo:
            render_to_string(tmp_path / "nope.md")
        assert isinstance(excinfo.value, OSError)
        assert isinstance(excinfo.value.__cause__, OSError)

    def test_missing_include_target_names_includer(self, tmp_path: Path) -> None:
        files = write_tree(tmp_path, {"main.md": "ok\n" + include("gone.md") + "\n"})

        with pytest.raises(DocumentIOError) as excinfo:
            render_to_string(files["main.md"])

        assert excinfo.value.path == files["main.md"].parent / "gone.md"
        assert str(files["main.md"]) in str(excinfo.value)

    def test_directory_as_include_target(self, tmp_path: Path) -> None:
        files = write_tree(tmp_path, {"main.md": include("sub") + "\n", "sub/x.md": "x\n"})

        with pytest.raises(DocumentIOError):
            render_to_string(files["main.md"])

    def test_undecodable_document(self, tmp_path: Path) -> None:
        files = write_tree(tmp_path, {"main.md": include("bin.md") + "\n"})
        (tmp_path / "bin.md").write_bytes(b"\xff\xfe\x00bad")

        with pytest.raises(DocumentIOError, match="Cannot read document"):
            render_to_string(files["main.md"])

    def test_failed_write_is_an_io_error(self, tmp_path: Path) -> None:
        files = write_tree(tmp_path, {"a.md": "text\n"})

        class BrokenSink(io.StringIO):
            def write(self, s: str) -> int:
                raise BrokenPipeError("pipe closed")

        with pytest.raises(DocumentIOError, match="Failed to write output"):
            render(files["a.md"], BrokenSink())


class TestResolverOptions:
    def test_custom_newline(self, tmp_path: Path) -> None:
        files = write_tree(tmp_path, {"main.md": f"a\n{include('b.md')}\n", "b.md": "b\n"})
        resolver = IncludeResolver(newline="\r\n")
        assert resolver.render_to_string(files["main.md"]) == "a\r\nb\r\n"

    def test_custom_encoding(self, tmp_path: Path) -> None:
        (tmp_path / "latin.md").write_bytes("caf\xe9\n".encode("latin-1"))
        resolver = IncludeResolver(encoding="latin-1")
        assert resolver.render_to_string(tmp_path / "latin.md") == "caf\xe9\n"

    def test_format_is_metadata_only(self, tmp_path: Path) -> None:
        files = write_tree(tmp_path, {"main.adoc": f"= Doc\n{include('part.md')}\n", "part.md": "part\n"})
        as_adoc = render_to_string(files["main.adoc"], doc_format=DocFormat.ASCIIDOC)
        as_md = render_to_string(files["main.adoc"], doc_format=DocFormat.MARKDOWN)
        assert as_adoc == as_md == "= Doc\npart\n"

    def test_relative_entry_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        write_tree(tmp_path, {"docs/main.md": include("part.md") + "\n", "docs/part.md": "part\n"})
        monkeypatch.chdir(tmp_path)
        assert render_to_string("docs/main.md") == "part\n"
