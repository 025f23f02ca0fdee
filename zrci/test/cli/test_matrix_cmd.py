from __future__ import annotations

import json

import pytest

from zrci.cli.commands.matrix_cmd import matrix


def test_matrix_json(capsys: pytest.CaptureFixture[str]) -> None:
    matrix(json_output=True)

    payload = json.loads(capsys.readouterr().out)
    assert [row["os"] for row in payload["include"]] == [
        "ubuntu-latest",
        "macos-latest",
        "windows-latest",
    ]


def test_matrix_table(capsys: pytest.CaptureFixture[str]) -> None:
    matrix(json_output=False)

    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 3
    assert lines[2].startswith("windows")
    assert "zr-windows.zip" in lines[2]
    assert lines[2].endswith("no-strip")
