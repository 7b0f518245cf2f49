"""
Tests for the post-install tasks (capture group, editor extensions).
"""

import pytest

from hypersoc.core.models.run_config import RunConfig
from hypersoc.core.services.post_install import (
    EDITOR_EXTENSIONS,
    PostInstallConfigurator,
    real_user,
)


def _which(*present: str):
    """Fake shutil.which that finds only the named binaries."""
    return lambda name: f"/usr/bin/{name}" if name in present else None


@pytest.fixture
def sudo_alice(monkeypatch):
    monkeypatch.setenv("SUDO_USER", "alice")
    monkeypatch.setenv("USER", "root")


def _configurator(platform, runner, *, dry_run=False, which=None, group=True):
    return PostInstallConfigurator(
        RunConfig(dry_run=dry_run),
        platform,
        runner=runner,
        which=which or _which("wireshark", "code"),
        group_lookup=lambda name: group,
    )


class TestRealUser:
    def test_prefers_sudo_user(self, sudo_alice):
        assert real_user() == "alice"

    def test_falls_back_to_user(self, monkeypatch):
        monkeypatch.delenv("SUDO_USER", raising=False)
        monkeypatch.setenv("USER", "bob")
        assert real_user() == "bob"


class TestCaptureGroup:
    def test_adds_sudo_user_to_group(self, ubuntu, fake_runner, sudo_alice):
        outcome = _configurator(ubuntu, fake_runner).configure_capture_group()
        assert outcome.status == "success"
        assert ["usermod", "-aG", "wireshark", "alice"] in fake_runner.calls

    def test_debian_family_preseeds_setuid(self, ubuntu, fake_runner, sudo_alice):
        _configurator(ubuntu, fake_runner).configure_capture_group()
        assert fake_runner.calls[0] == ["debconf-set-selections"]
        assert "install-setuid boolean true" in fake_runner.kwargs[0]["input_text"]
        assert fake_runner.calls[1][0] == "dpkg-reconfigure"

    def test_no_preseed_outside_debian(self, fake_runner, sudo_alice):
        from hypersoc.core.models.platform import PlatformContext

        arch = PlatformContext(os="linux", distro="arch", is_elevated=True, family="pacman")
        _configurator(arch, fake_runner).configure_capture_group()
        assert fake_runner.calls == [["usermod", "-aG", "wireshark", "alice"]]

    def test_wireshark_missing_is_skip(self, ubuntu, fake_runner, sudo_alice):
        outcome = _configurator(ubuntu, fake_runner, which=_which("code")).configure_capture_group()
        assert outcome.status == "skipped"
        assert fake_runner.calls == []

    def test_group_missing_is_skip(self, ubuntu, fake_runner, sudo_alice):
        outcome = _configurator(ubuntu, fake_runner, group=False).configure_capture_group()
        assert outcome.status == "skipped"
        assert not any(c[0] == "usermod" for c in fake_runner.calls)

    def test_usermod_failure(self, ubuntu, fake_runner, sudo_alice):
        fake_runner.fail_on = {"usermod"}
        outcome = _configurator(ubuntu, fake_runner).configure_capture_group()
        assert outcome.status == "failed"

    def test_preseed_failure_is_not_fatal(self, ubuntu, fake_runner, sudo_alice):
        fake_runner.fail_on = {"debconf-set-selections"}
        outcome = _configurator(ubuntu, fake_runner).configure_capture_group()
        assert outcome.status == "success"

    def test_dry_run_runs_nothing(self, ubuntu, fake_runner, sudo_alice):
        outcome = _configurator(ubuntu, fake_runner, dry_run=True).configure_capture_group()
        assert outcome.status == "simulated"
        assert fake_runner.calls == []

    def test_windows_skips(self, windows, fake_runner):
        outcome = _configurator(windows, fake_runner).configure_capture_group()
        assert outcome.status == "skipped"


class TestEditorExtensions:
    def test_runs_as_sudo_user(self, ubuntu, fake_runner, sudo_alice):
        outcomes = _configurator(ubuntu, fake_runner).install_editor_extensions()
        assert [o.tool for o in outcomes] == list(EDITOR_EXTENSIONS)
        assert all(o.status == "success" for o in outcomes)
        assert fake_runner.calls[0] == [
            "sudo", "-u", "alice", "/usr/bin/code",
            "--install-extension", "ms-python.python", "--force",
        ]

    def test_no_sudo_prefix_without_sudo_user(self, ubuntu, fake_runner, monkeypatch):
        monkeypatch.delenv("SUDO_USER", raising=False)
        _configurator(ubuntu, fake_runner).install_editor_extensions()
        assert fake_runner.calls[0][0] == "/usr/bin/code"

    def test_one_failure_does_not_stop_the_rest(self, ubuntu, fake_runner, sudo_alice):
        fake_runner.fail_on = {"redhat.vscode-yaml"}
        outcomes = _configurator(ubuntu, fake_runner).install_editor_extensions()
        assert [o.status for o in outcomes] == ["success", "success", "success", "failed"]

    def test_code_missing_is_single_skip(self, ubuntu, fake_runner):
        outcomes = _configurator(
            ubuntu, fake_runner, which=_which("wireshark"),
        ).install_editor_extensions()
        assert len(outcomes) == 1
        assert outcomes[0].status == "skipped"
        assert fake_runner.calls == []

    def test_dry_run_simulates(self, ubuntu, fake_runner, sudo_alice):
        outcomes = _configurator(ubuntu, fake_runner, dry_run=True).install_editor_extensions()
        assert {o.status for o in outcomes} == {"simulated"}
        assert fake_runner.calls == []


class TestRun:
    def test_summary_counts_all_tasks(self, ubuntu, fake_runner, sudo_alice):
        summary = _configurator(ubuntu, fake_runner).run()
        assert summary.success == 1 + len(EDITOR_EXTENSIONS)
        assert summary.failed == 0

    def test_nothing_installed(self, ubuntu, fake_runner, sudo_alice):
        summary = _configurator(ubuntu, fake_runner, which=_which()).run()
        assert summary.skipped == 2
        assert fake_runner.calls == []
