"""Tests for the critical path deny-list."""

from __future__ import annotations

from pathlib import Path

import pytest

from fugo.core.guard import is_critical_path, normalize_path


class TestIsCriticalPath:
    @pytest.mark.parametrize("path", [
        "/", "/usr", "/bin", "/etc", "/home", "/root", "/var", "/opt",
        "C:\\", "C:\\Windows", "C:\\Program Files", "C:\\Users",
    ])
    def test_roots_are_critical(self, path):
        assert is_critical_path(path) is True

    @pytest.mark.parametrize("path", [
        "/usr/local/go",
        "/home/user/.gvm/gos/go1.21",
        "/usr/lib/golang",
        "/opt/go",
        "C:\\Go",
        "C:\\Program Files\\Go",
    ])
    def test_install_roots_are_not_critical(self, path):
        assert is_critical_path(path) is False

    @pytest.mark.parametrize("path", [
        "/usr/",
        "/usr/local/go/../..",
        "/./etc",
        "//",
        "///",
        "/home/../root/",
    ])
    def test_normalized_before_comparison(self, path):
        assert is_critical_path(path) is True

    def test_windows_paths_case_insensitive(self):
        assert is_critical_path("c:\\windows") is True
        assert is_critical_path("C:/Users/") is True

    def test_accepts_path_objects(self):
        assert is_critical_path(Path("/usr")) is True
        assert is_critical_path(Path("/usr/local/go")) is False

    def test_empty_path_is_not_critical(self):
        assert is_critical_path("") is False

    def test_prefix_is_not_enough(self):
        assert is_critical_path("/usrlocal") is False
        assert is_critical_path("/etc/go") is False


class TestNormalizePath:
    def test_posix(self):
        assert normalize_path("/usr/local/go/") == "/usr/local/go"
        assert normalize_path("/usr/local/./go/bin/..") == "/usr/local/go"

    def test_windows(self):
        assert normalize_path("C:\\Go\\") == "C:\\Go"
        assert normalize_path("C:/Program Files/Go") == "C:\\Program Files\\Go"

    def test_backslash_in_posix_name_stays_posix(self):
        assert normalize_path("/srv/go\\1.22/") == "/srv/go\\1.22"
        assert is_critical_path("/usr/lib\\") is False

    def test_unc(self):
        assert normalize_path("\\\\server\\share\\go\\..") == "\\\\server\\share\\"
