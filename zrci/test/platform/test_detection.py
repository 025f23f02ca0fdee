"""Tests for zrci.platform.detection module."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from zrci.platform.detection import Platform, detect_platform


class TestPlatform:
    def test_unix_family(self) -> None:
        assert Platform.LINUX.is_unix
        assert Platform.MACOS.is_unix
        assert not Platform.WINDOWS.is_unix

    def test_exe_name(self) -> None:
        assert Platform.WINDOWS.exe_name("zr") == "zr.exe"
        assert Platform.LINUX.exe_name("zr") == "zr"
        assert Platform.MACOS.exe_name("zr") == "zr"

    def test_runner_labels(self) -> None:
        assert [p.runner_label for p in Platform] == [
            "ubuntu-latest",
            "macos-latest",
            "windows-latest",
        ]

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("linux", Platform.LINUX),
            ("MACOS", Platform.MACOS),
            (" windows ", Platform.WINDOWS),
            ("ubuntu-latest", Platform.LINUX),
        ],
    )
    def test_parse(self, value: str, expected: Platform) -> None:
        assert Platform.parse(value) == expected

    def test_parse_unknown(self) -> None:
        with pytest.raises(ValueError, match="unknown platform"):
            Platform.parse("solaris")


class TestDetectPlatform:
    def setup_method(self) -> None:
        detect_platform.cache_clear()

    def teardown_method(self) -> None:
        detect_platform.cache_clear()

    @pytest.mark.parametrize(
        ("sys_platform", "expected"),
        [
            ("linux", Platform.LINUX),
            ("darwin", Platform.MACOS),
            ("win32", Platform.WINDOWS),
            ("freebsd13", None),
        ],
    )
    def test_detect(
        self, monkeypatch: pytest.MonkeyPatch, sys_platform: str, expected: Platform | None
    ) -> None:
        monkeypatch.setattr("zrci.platform.detection._sys", SimpleNamespace(platform=sys_platform))
        assert detect_platform() == expected
