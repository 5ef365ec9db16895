"""Tests for ``docdoc deps``."""
from __future__ import annotations

import json
from pathlib import Path

from helpers.cli import run_docdoc
from helpers.file_utils import include, write_tree


def test_lists_sorted_dependencies(tmp_path: Path) -> None:
    files = write_tree(
        tmp_path,
        {
            "main.md": f"{include('z.md')}\n{include('a/b.md')}\n",
            "z.md": "z\n",
            "a/b.md": include("../z.md") + "\n",
        },
    )

    result = run_docdoc(["deps", "main.md"], cwd=tmp_path)

    assert result.returncode == 0, result.stderr
    expected = sorted([files["main.md"], files["z.md"], files["a/b.md"]])
    assert result.stdout.splitlines() == [str(p) for p in expected]


def test_json_output(tmp_path: Path) -> None:
    files = write_tree(tmp_path, {"main.adoc": include("p.adoc") + "\n", "p.adoc": "p\n"})

    result = run_docdoc(["deps", "main.adoc", "--json", "-f", "asciidoc"], cwd=tmp_path)

    assert result.returncode == 0, result.stderr
    payload = json.loads(result.stdout)
    assert payload["entry"] == str(files["main.adoc"])
    assert payload["format"] == "asciidoc"
    assert payload["dependencies"] == sorted([str(files["main.adoc"]), str(files["p.adoc"])])


def test_unknown_extension_is_fine_without_format(tmp_path: Path) -> None:
    files = write_tree(tmp_path, {"main.txt": "x\n"})

    result = run_docdoc(["deps", "main.txt", "--json"], cwd=tmp_path)

    assert result.returncode == 0, result.stderr
    payload = json.loads(result.stdout)
    assert payload["format"] is None
    assert payload["dependencies"] == [str(files["main.txt"])]


def test_cycle_reports_json_error(tmp_path: Path) -> None:
    files = write_tree(tmp_path, {"main.md": include("main.md") + "\n"})

    result = run_docdoc(["deps", "main.md", "--json"], cwd=tmp_path)

    assert result.returncode == 1
    assert result.stdout == ""
    payload = json.loads(result.stderr)
    assert payload["error"] == "deps_error"
    assert payload["code"] == "IncludeCycleError"
    assert payload["context"]["path"] == str(files["main.md"])
