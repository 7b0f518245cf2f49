"""
Manifest check use case — validate tools.json and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from hypersoc.core.config.loader import ConfigError, parse_manifest_file
from hypersoc.core.models.manifest import LINUX_FAMILIES, Manifest

# Windows sources the installer knows how to drive
KNOWN_WINDOWS_SOURCES = ("winget", "chocolatey", "choco")


@dataclass
class ManifestCheckResult:
    """Result of manifest validation."""

    valid: bool = False
    manifest: Manifest | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        counts: dict[str, int] = {}
        if self.manifest:
            for family in LINUX_FAMILIES:
                counts[f"{family}_packages"] = len(self.manifest.linux.packages_for(family))
            counts["windows"] = len(self.manifest.windows)
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "counts": counts,
        }


def check_manifest(config_path: Path) -> ManifestCheckResult:
    """Validate a manifest file without installing anything.

    Args:
        config_path: Path to tools.json (or a YAML equivalent).

    Returns:
        ManifestCheckResult with validation status and any issues.
    """
    result = ManifestCheckResult(config_path=config_path)

    if not config_path.is_file():
        result.errors.append(f"Manifest not found: {config_path}")
        return result

    try:
        manifest = parse_manifest_file(config_path)
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    result.manifest = manifest
    result.valid = True

    # Semantic checks
    for entry in manifest.windows:
        if entry.source.strip().lower() not in KNOWN_WINDOWS_SOURCES:
            result.warnings.append(
                f"Windows tool '{entry.name}' has unknown source '{entry.source}' (will be skipped)"
            )

    for family in LINUX_FAMILIES:
        packages = manifest.linux.packages_for(family)
        dupes = sorted({p for p in packages if packages.count(p) > 1})
        if dupes:
            result.warnings.append(f"Duplicate {family} packages: {', '.join(dupes)}")

    if manifest.linux.total == 0 and not manifest.windows:
        result.warnings.append("Manifest declares no tools. The installer has nothing to do.")

    return result
