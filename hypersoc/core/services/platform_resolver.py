"""
Platform resolver — which OS, which distro, which package family.

Read-only detection, safe to run under dry-run. Resolution happens
once at startup; the resulting PlatformContext is immutable.
"""

from __future__ import annotations

import logging
import os
import platform as _platform
import shutil
from pathlib import Path

from hypersoc.core.errors import UnsupportedPlatformError
from hypersoc.core.models.platform import PlatformContext

logger = logging.getLogger(__name__)

OS_RELEASE = Path("/etc/os-release")

# Recognized distro IDs → package family
DISTRO_FAMILIES: dict[str, str] = {
    "debian": "apt",
    "ubuntu": "apt",
    "kali": "apt",
    "fedora": "dnf",
    "centos": "dnf",
    "rhel": "dnf",
    "arch": "pacman",
}

# Binary that betrays each family when the distro is unknown
_FAMILY_PROBES = (("apt", "apt-get"), ("dnf", "dnf"), ("pacman", "pacman"))


def family_for(distro: str | None) -> str | None:
    """Package family for a recognized distro ID."""
    if not distro:
        return None
    return DISTRO_FAMILIES.get(distro)


def check_elevation(system: str | None = None) -> bool:
    """Whether the process runs as root / Administrator.

    Raises:
        UnsupportedPlatformError: Elevation cannot be determined.
    """
    system = (system or _platform.system()).lower()
    if system == "windows":
        try:
            import ctypes

            return bool(ctypes.windll.shell32.IsUserAnAdmin())  # type: ignore[attr-defined]
        except (AttributeError, OSError) as e:
            raise UnsupportedPlatformError(f"Cannot determine administrator status: {e}") from e

    geteuid = getattr(os, "geteuid", None)
    if geteuid is None:
        raise UnsupportedPlatformError("Cannot determine effective user id on this platform")
    return geteuid() == 0


def read_os_release(path: Path = OS_RELEASE) -> dict[str, str]:
    """Parse an os-release file into a dict. Missing file → empty dict."""
    info: dict[str, str] = {}
    try:
        with open(path, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                info[key.strip()] = value.strip().strip('"').strip("'")
    except (FileNotFoundError, OSError):
        return {}
    return info


def detect_distro(path: Path = OS_RELEASE) -> str | None:
    """Recognized distro ID from os-release, trying ID then ID_LIKE.

    Returns the raw ID when nothing is recognized, or None when the
    file is missing or has no ID.
    """
    info = read_os_release(path)
    distro_id = info.get("ID", "").lower()
    if not distro_id:
        return None
    if distro_id in DISTRO_FAMILIES:
        return distro_id

    # Derivatives (Mint, Pop!_OS, Rocky, Manjaro...) declare their parent
    for parent in info.get("ID_LIKE", "").lower().split():
        if parent in DISTRO_FAMILIES:
            logger.debug("Treating '%s' as '%s' (ID_LIKE)", distro_id, parent)
            return parent
    return distro_id


def guess_family() -> str | None:
    """Best-effort family from whichever package manager is on PATH."""
    for family, binary in _FAMILY_PROBES:
        if shutil.which(binary):
            return family
    return None


def resolve(
    dry_run: bool = False,
    os_release: Path = OS_RELEASE,
    system: str | None = None,
    is_elevated: bool | None = None,
) -> PlatformContext:
    """Detect the host platform.

    Args:
        dry_run: Degrade unknown distros to a best-effort context
            instead of failing.
        os_release: os-release file to read on Linux.
        system: Override for ``platform.system()`` (tests).
        is_elevated: Pre-computed elevation; checked here when None.

    Raises:
        UnsupportedPlatformError: Unsupported OS, or an unknown Linux
            distribution outside dry-run.
    """
    system = (system or _platform.system()).lower()
    if is_elevated is None:
        is_elevated = check_elevation(system)

    if system == "windows":
        return PlatformContext(os="windows", is_elevated=is_elevated)

    if system != "linux":
        raise UnsupportedPlatformError(f"Unsupported operating system: {system}")

    distro = detect_distro(os_release)
    family = family_for(distro)
    if family is not None:
        return PlatformContext(os="linux", distro=distro, is_elevated=is_elevated, family=family)

    if distro is None:
        message = f"Cannot detect distribution ({os_release} missing or has no ID)"
    else:
        message = f"Unsupported distribution: {distro}"

    if not dry_run:
        raise UnsupportedPlatformError(message)

    guessed = guess_family()
    logger.warning("[!] %s; continuing in dry-run with family '%s'", message, guessed or "none")
    return PlatformContext(os="linux", distro=None, is_elevated=is_elevated, family=guessed)
