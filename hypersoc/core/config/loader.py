"""
Manifest loader — reads tools.json into the Manifest model.

This is the primary entry point for loading the tool manifest. It
tries the local file first, falls back to downloading the published
manifest, parses JSON (or YAML, by suffix), validates against the
Pydantic schema, and returns a typed Manifest.
"""

from __future__ import annotations

import json
import logging
import tempfile
import urllib.error
import urllib.request
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from hypersoc.core.errors import InstallerError
from hypersoc.core.models.manifest import Manifest
from hypersoc.core.models.run_config import RunConfig
from hypersoc.core.observability.logging_config import DRYRUN, SUCCESS

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 30
_USER_AGENT = "hypersoc-installer/1.0"
_YAML_SUFFIXES = (".yml", ".yaml")


class ConfigError(InstallerError):
    """Raised when the manifest is missing or invalid."""


class ConfigUnavailableError(ConfigError):
    """Neither the local manifest nor the remote copy could be obtained."""


class ConfigParseError(ConfigError):
    """The manifest was found but its content is malformed."""


def load_manifest(config: RunConfig) -> Manifest:
    """Load and validate the tool manifest for a run.

    Args:
        config: Run options; uses ``config_path``, ``config_url`` and
            ``dry_run``.

    Returns:
        Validated Manifest. Under dry-run a missing manifest yields an
        empty one instead of a download.

    Raises:
        ConfigUnavailableError: Local file absent and the fetch failed.
        ConfigParseError: The content is malformed (even under dry-run).
    """
    path = Path(config.config_path)
    if path.is_file():
        logger.debug("Loading manifest from %s", path)
        return parse_manifest_file(path)

    logger.warning("[!] Configuration not found locally: %s", path)
    logger.info("[*] Attempting to download from %s", config.config_url)

    if config.dry_run:
        logger.log(DRYRUN, "[DRY RUN] Would download %s to a temporary file", config.config_url)
        return Manifest()

    return fetch_manifest(config.config_url)


def fetch_manifest(url: str, timeout: int = FETCH_TIMEOUT) -> Manifest:
    """Download a manifest into a temporary file and parse it.

    One blocking attempt, no retry.
    """
    try:
        req = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            raw = resp.read()
    except (urllib.error.URLError, OSError, ValueError) as e:
        raise ConfigUnavailableError(f"Failed to download configuration from {url}: {e}") from e

    with tempfile.NamedTemporaryFile(
        prefix="hypersoc-tools-", suffix=".json", delete=False,
    ) as tmp:
        tmp.write(raw)
        tmp_path = Path(tmp.name)

    logger.log(SUCCESS, "[+] Configuration downloaded to %s", tmp_path)
    try:
        return parse_manifest_file(tmp_path)
    finally:
        tmp_path.unlink(missing_ok=True)


def parse_manifest_file(path: Path) -> Manifest:
    """Read and parse a manifest file."""
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigParseError(f"Cannot read {path}: {e}") from e

    fmt = "yaml" if path.suffix.lower() in _YAML_SUFFIXES else "json"
    return parse_manifest(raw, fmt=fmt, source=str(path))


def parse_manifest(raw: str, fmt: str = "json", source: str = "<manifest>") -> Manifest:
    """Parse manifest text into a validated Manifest.

    Raises:
        ConfigParseError: Invalid syntax, non-mapping root, or schema
            violation.
    """
    data: Any
    if fmt == "yaml":
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigParseError(f"Invalid YAML in {source}: {e}") from e
    else:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigParseError(f"Invalid JSON in {source}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigParseError(f"Expected a mapping in {source}, got {type(data).__name__}")

    try:
        manifest = Manifest.model_validate(data)
    except ValidationError as e:
        raise ConfigParseError(f"Invalid manifest in {source}: {e}") from e

    logger.info(
        "Loaded manifest: %d Linux packages, %d Windows tools",
        manifest.linux.total,
        len(manifest.windows),
    )
    return manifest
