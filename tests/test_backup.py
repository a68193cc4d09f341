"""Tests for pre-deletion backups."""

from __future__ import annotations

import subprocess
import tarfile
from unittest.mock import patch

import pytest

from fugo.core.backup import BackupError, archive_name, backup, create_archive
from fugo.models.installation import Source


@pytest.fixture
def has_tar(monkeypatch):
    monkeypatch.setattr("shutil.which", lambda name: f"/usr/bin/{name}")


class TestArchiveName:
    def test_format(self, tmp_path):
        assert archive_name("20240101_120000", 1, tmp_path / "go") == "go_backup_20240101_120000_01_go.tar.gz"


@pytest.mark.usefixtures("has_tar")
class TestCreateArchive:
    def test_invokes_tar(self, tmp_path):
        src = tmp_path / "go"
        with patch("fugo.core.backup.subprocess.run") as mock_run:
            mock_run.return_value = subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr="")
            create_archive(src, tmp_path / "out.tar.gz")
        assert mock_run.call_args[0][0] == [
            "/usr/bin/tar", "-czf", str(tmp_path / "out.tar.gz"), "-C", str(tmp_path), "go",
        ]

    def test_nonzero_exit(self, tmp_path):
        with patch("fugo.core.backup.subprocess.run") as mock_run:
            mock_run.return_value = subprocess.CompletedProcess(
                args=[], returncode=2, stdout="", stderr="tar: go: Cannot open",
            )
            with pytest.raises(BackupError, match="exit 2"):
                create_archive(tmp_path / "go", tmp_path / "out.tar.gz")

    def test_timeout(self, tmp_path):
        with patch("fugo.core.backup.subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.TimeoutExpired(cmd="tar", timeout=900)
            with pytest.raises(BackupError, match="timed out"):
                create_archive(tmp_path / "go", tmp_path / "out.tar.gz")

    def test_tar_missing(self, tmp_path, monkeypatch):
        monkeypatch.setattr("shutil.which", lambda name: None)
        with pytest.raises(BackupError, match="Could not find"):
            create_archive(tmp_path / "go", tmp_path / "out.tar.gz")


class TestBackup:
    def test_real_archive(self, fake_goroot, tmp_path, make_installation):
        backup_dir = tmp_path / "backups"
        outcome = backup([make_installation(fake_goroot)], backup_dir, timestamp="20240101_120000")

        assert outcome.success
        assert outcome.archives == [backup_dir / "go_backup_20240101_120000_01_go.tar.gz"]
        with tarfile.open(outcome.archives[0]) as tar:
            names = tar.getnames()
        assert "go/VERSION" in names
        assert "go/src/main.go" in names
        # source untouched
        assert (fake_goroot / "VERSION").exists()

    def test_missing_source_skipped(self, tmp_path, make_installation):
        outcome = backup([make_installation(tmp_path / "gone")], tmp_path / "backups")
        assert outcome.success
        assert outcome.archives == []
        assert outcome.skipped == [tmp_path / "gone"]

    @pytest.mark.usefixtures("has_tar")
    def test_stops_at_first_failure_and_keeps_earlier_archives(self, tmp_path, make_installation):
        first, second, third = (tmp_path / n for n in ("a", "b", "c"))
        for d in (first, second, third):
            d.mkdir()
        installs = [make_installation(d) for d in (first, second, third)]

        results = [
            subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr=""),
            subprocess.CompletedProcess(args=[], returncode=1, stdout="", stderr="disk full"),
        ]
        with patch("fugo.core.backup.subprocess.run", side_effect=results) as mock_run:
            outcome = backup(installs, tmp_path / "backups", timestamp="ts")

        assert not outcome.success
        assert outcome.failed_path == second
        assert "disk full" in outcome.error
        assert outcome.archives == [tmp_path / "backups" / "go_backup_ts_01_a.tar.gz"]
        assert mock_run.call_count == 2

    def test_unique_names_within_one_run(self, tmp_path, make_installation):
        gos = tmp_path / "gos"
        for name in ("go1.20", "go1.21"):
            (gos / name).mkdir(parents=True)
            (gos / name / "VERSION").write_text(name)
        installs = [make_installation(gos / n, Source.VERSION_MANAGER) for n in ("go1.20", "go1.21")]

        outcome = backup(installs, tmp_path / "backups", timestamp="ts")

        assert outcome.success
        assert len(set(outcome.archives)) == 2
        assert all(a.exists() for a in outcome.archives)

    def test_backup_dir_not_creatable(self, tmp_path, fake_goroot, make_installation):
        blocker = tmp_path / "file"
        blocker.write_text("")
        outcome = backup([make_installation(fake_goroot)], blocker / "backups")
        assert not outcome.success
        assert "backup directory" in outcome.error
