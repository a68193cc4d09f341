"""Tests for the startup discovery pass."""

from __future__ import annotations

from pathlib import Path

from fugo.core import discovery, prober
from fugo.core.prober import LINUX, DiscoveryError
from fugo.models.installation import Source


def _fail(*args, **kwargs):
    raise AssertionError("should not be probed after a veto")


class TestDiscover:
    def test_veto_short_circuits(self, monkeypatch):
        def vetoed(os_family):
            raise DiscoveryError("refusing to operate on critical system directory: /usr")

        monkeypatch.setattr(discovery, "primary_install_path", vetoed)
        monkeypatch.setattr(discovery, "detect_installations", _fail)
        monkeypatch.setattr(discovery, "permissions_ok", _fail)

        result = discovery.discover(LINUX)
        assert result.error == "refusing to operate on critical system directory: /usr"
        assert result.installations == ()

    def test_collects_everything(self, monkeypatch, fake_goroot, make_installation):
        install = make_installation(fake_goroot)
        seen = {}

        def fake_detect(os_family, extra, derived=None):
            seen["derived"] = derived
            return [install]

        monkeypatch.setattr(discovery, "primary_install_path", lambda os_family: fake_goroot)
        monkeypatch.setattr(discovery, "reported_versions", lambda primary: ["go version go1.22.3"])
        monkeypatch.setattr(discovery, "permissions_ok", lambda root, os_family: False)
        monkeypatch.setattr(discovery, "detect_installations", fake_detect)

        result = discovery.discover(LINUX, extra_paths=[Path("/srv/go")])
        assert result.error == ""
        assert result.primary_path == fake_goroot
        assert seen["derived"] == fake_goroot
        assert result.installations == (install,)
        assert result.versions == ("go version go1.22.3",)
        assert result.permissions_ok is False

    def test_derived_root_is_listed(self, monkeypatch, tmp_path):
        sdk = tmp_path / "sdk" / "go1.22"
        (sdk / "bin").mkdir(parents=True)
        (sdk / "VERSION").write_text("go1.22.0\n")
        real_exists = Path.exists

        monkeypatch.setattr(
            Path, "exists", lambda self: True if str(self) == "/usr/bin/go" else real_exists(self),
        )
        monkeypatch.setattr(prober, "find_go_binary", lambda: str(sdk / "bin" / "go"))
        monkeypatch.setattr(discovery, "reported_versions", lambda primary: [])
        monkeypatch.setattr(discovery, "permissions_ok", lambda root, os_family: True)

        result = discovery.discover(LINUX)
        assert result.primary_path == sdk
        assert sdk in [i.path for i in result.installations]
        assert result.removal_targets[0] == sdk


class TestDeletionTarget:
    def test_existing_primary_kept(self, fake_goroot, make_installation, tmp_path):
        other = make_installation(tmp_path / "elsewhere")
        assert discovery.deletion_target(fake_goroot, [other]) == fake_goroot

    def test_missing_primary_prefers_non_gvm(self, tmp_path, make_installation):
        gvm = make_installation(tmp_path / "gos" / "go1.20", Source.VERSION_MANAGER)
        pkg = make_installation(tmp_path / "golang", Source.PACKAGE_MANAGER)
        assert discovery.deletion_target(tmp_path / "missing", [gvm, pkg]) == pkg.path

    def test_gvm_only_host(self, tmp_path, make_installation):
        gvm = make_installation(tmp_path / "gos" / "go1.20", Source.VERSION_MANAGER)
        assert discovery.deletion_target(tmp_path / "missing", [gvm]) == gvm.path

    def test_nothing_found_keeps_primary(self, tmp_path):
        assert discovery.deletion_target(tmp_path / "missing", []) == tmp_path / "missing"
