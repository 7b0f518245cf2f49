"""
Post-install configuration — fixed tasks after the main pass.

1. Let the operator capture packets without root: add the invoking
   (or sudo-origin) user to the ``wireshark`` group.
2. Install a fixed set of VS Code extensions.

Neither task is driven by the manifest and neither can fail the run:
a missing binary is a skip, a failing command is a failed outcome.
Presence checks run even under dry-run so the simulated output shows
what would really happen on this machine.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable

from hypersoc.adapters.command import Runner, run_command
from hypersoc.core.models.outcome import InstallOutcome, Summary
from hypersoc.core.models.platform import PlatformContext
from hypersoc.core.models.run_config import RunConfig
from hypersoc.core.observability.logging_config import DRYRUN, SUCCESS

logger = logging.getLogger(__name__)

EDITOR_EXTENSIONS = (
    "ms-python.python",
    "ms-azuretools.vscode-docker",
    "pkief.material-icon-theme",
    "redhat.vscode-yaml",
)

CAPTURE_BINARY = "wireshark"
CAPTURE_GROUP = "wireshark"
_DEBCONF_SETUID = "wireshark-common wireshark-common/install-setuid boolean true\n"


def real_user() -> str | None:
    """The human behind the run: the sudo-origin user if any."""
    return os.environ.get("SUDO_USER") or os.environ.get("USER") or os.environ.get("USERNAME")


def group_exists(name: str) -> bool:
    """Whether a local Unix group exists. Always False on Windows."""
    try:
        import grp
    except ImportError:
        return False
    try:
        grp.getgrnam(name)
    except KeyError:
        return False
    return True


class PostInstallConfigurator:
    """Runs the fixed post-install tasks for one platform."""

    def __init__(
        self,
        config: RunConfig,
        platform: PlatformContext,
        runner: Runner = run_command,
        which: Callable[[str], str | None] = shutil.which,
        group_lookup: Callable[[str], bool] = group_exists,
    ):
        self._config = config
        self._platform = platform
        self._runner = runner
        self._which = which
        self._group_lookup = group_lookup

    def run(self) -> Summary:
        """Run both tasks; each outcome is logged and counted."""
        logger.info("[+] Running Post-Installation Configuration...")
        summary = Summary()
        summary.record(self.configure_capture_group())
        for outcome in self.install_editor_extensions():
            summary.record(outcome)
        return summary

    # ── Packet capture permissions ──────────────────────────────

    def configure_capture_group(self) -> InstallOutcome:
        task = "capture-permissions"
        if self._platform.is_windows:
            logger.info("    Capture group configuration does not apply on Windows")
            return InstallOutcome.skip(task, CAPTURE_BINARY, detail="not applicable on Windows")

        if not self._which(CAPTURE_BINARY):
            logger.info("    %s not found; skipping capture permissions", CAPTURE_BINARY)
            return InstallOutcome.skip(task, CAPTURE_BINARY, detail=f"{CAPTURE_BINARY} not installed")

        user = real_user()
        if not user:
            logger.warning("[!] Cannot tell which user to grant capture rights to")
            return InstallOutcome.skip(task, CAPTURE_BINARY, detail="invoking user unknown")

        if self._config.dry_run:
            logger.log(
                DRYRUN,
                "[DRY RUN] Would configure Wireshark permissions (add %s to group %s)",
                user,
                CAPTURE_GROUP,
            )
            return InstallOutcome.simulate(task, CAPTURE_BINARY, detail=f"add {user} to {CAPTURE_GROUP}")

        logger.info("    Configuring Wireshark group...")
        if self._platform.family == "apt":
            self._preseed_dumpcap_setuid()

        if not self._group_lookup(CAPTURE_GROUP):
            logger.warning("[!] Group '%s' does not exist; skipping", CAPTURE_GROUP)
            return InstallOutcome.skip(task, CAPTURE_BINARY, detail=f"group {CAPTURE_GROUP} missing")

        result = self._runner(["usermod", "-aG", CAPTURE_GROUP, user])
        if not result.ok:
            logger.error("[!] Could not add %s to %s: %s", user, CAPTURE_GROUP, result.detail)
            return InstallOutcome.failure(task, CAPTURE_BINARY, detail=result.detail)

        logger.log(SUCCESS, "    Added %s to %s group.", user, CAPTURE_GROUP)
        return InstallOutcome.success(task, CAPTURE_BINARY, detail=f"added {user}")

    def _preseed_dumpcap_setuid(self) -> None:
        """Debian asks interactively whether non-root users may capture."""
        steps = (
            (["debconf-set-selections"], _DEBCONF_SETUID),
            (["dpkg-reconfigure", "-f", "noninteractive", "wireshark-common"], None),
        )
        for cmd, stdin in steps:
            result = self._runner(
                cmd, input_text=stdin, env_overrides={"DEBIAN_FRONTEND": "noninteractive"},
            )
            if not result.ok:
                logger.warning("[!] %s failed: %s", cmd[0], result.detail)
                return

    # ── Editor extensions ───────────────────────────────────────

    def _editor_command(self) -> str | None:
        if self._platform.is_windows:
            return self._which("code.cmd") or self._which("code")
        return self._which("code")

    def install_editor_extensions(self) -> list[InstallOutcome]:
        code = self._editor_command()
        if not code:
            logger.warning("[!] VS Code CLI ('code') not found; skipping extensions")
            return [InstallOutcome.skip("editor-extensions", "code", detail="code not found")]

        # Extensions belong to the desktop user, not root
        prefix: list[str] = []
        sudo_user = os.environ.get("SUDO_USER")
        if self._platform.is_linux and self._platform.is_elevated and sudo_user:
            prefix = ["sudo", "-u", sudo_user]

        if not self._config.dry_run:
            logger.info("    Installing VS Code extensions for %s...", sudo_user or real_user() or "current user")

        outcomes = []
        for ext in EDITOR_EXTENSIONS:
            cmd = [*prefix, code, "--install-extension", ext, "--force"]
            if self._config.dry_run:
                logger.log(DRYRUN, "[DRY RUN] Would install VS Code extension %s", ext)
                outcomes.append(InstallOutcome.simulate(ext, "code", detail=" ".join(cmd)))
                continue

            result = self._runner(cmd, timeout=300)
            if result.ok:
                logger.log(SUCCESS, "    [+] %s", ext)
                outcomes.append(InstallOutcome.success(ext, "code", duration_ms=result.elapsed_ms))
            else:
                logger.error("[!] Failed to install extension %s: %s", ext, result.detail)
                outcomes.append(InstallOutcome.failure(ext, "code", detail=result.detail))
        return outcomes
