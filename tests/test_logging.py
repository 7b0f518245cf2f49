"""
Tests for logging setup — custom levels, file format, append mode.
"""

import logging
import re

from hypersoc.adapters.command import CommandResult
from hypersoc.core.engine.orchestrator import log_outcome
from hypersoc.core.models.outcome import InstallOutcome
from hypersoc.core.observability.logging_config import (
    DRYRUN,
    FATAL,
    SUCCESS,
    setup_logging,
)

_LINE = re.compile(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] \[[A-Z]+\] .+$")


def _flush():
    for handler in logging.getLogger().handlers:
        handler.flush()


class TestLevels:
    def test_level_names(self):
        assert logging.getLevelName(DRYRUN) == "DRYRUN"
        assert logging.getLevelName(SUCCESS) == "SUCCESS"
        assert logging.getLevelName(FATAL) == "FATAL"

    def test_ordering(self):
        assert logging.INFO < DRYRUN < SUCCESS < logging.WARNING


class TestLogFile:
    def test_line_format(self, tmp_path):
        path = tmp_path / "install.log"
        setup_logging(level="WARNING", log_file=path)
        log = logging.getLogger("hypersoc.test")
        log.info("[*] plain info")
        log.log(SUCCESS, "[+] nmap installed via apt")
        log.log(DRYRUN, "[DRY RUN] Would install nmap via apt")
        log.critical("[!] out of disk")
        _flush()

        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 4
        assert all(_LINE.match(line) for line in lines)
        assert "[INFO] [*] plain info" in lines[0]
        assert "[SUCCESS] [+] nmap installed via apt" in lines[1]
        assert "[DRYRUN] [DRY RUN] Would install" in lines[2]
        assert "[FATAL] [!] out of disk" in lines[3]

    def test_multiline_event_stays_on_one_line(self, tmp_path):
        path = tmp_path / "install.log"
        setup_logging(level="WARNING", log_file=path)
        detail = CommandResult(
            cmd=["apt-get", "install", "-y", "foo"],
            returncode=100,
            stderr="E: Unable to locate package foo\nE: Couldn't find any package\n",
        ).detail
        log_outcome(InstallOutcome.failure("foo", "apt", detail=detail))
        _flush()

        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        assert _LINE.match(lines[0])
        assert "[ERROR]" in lines[0]
        assert lines[0].endswith("Unable to locate package foo | E: Couldn't find any package")

    def test_traceback_joined_into_the_event(self, tmp_path):
        path = tmp_path / "install.log"
        setup_logging(log_file=path)
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            logging.getLogger("hypersoc.test").exception("[!] unexpected")
        _flush()

        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        assert "[ERROR] [!] unexpected | Traceback" in lines[0]
        assert lines[0].endswith("RuntimeError: boom")

    def test_debug_not_written_by_default(self, tmp_path):
        path = tmp_path / "install.log"
        setup_logging(log_file=path)
        logging.getLogger("hypersoc.test").debug("noise")
        _flush()
        assert path.read_text(encoding="utf-8") == ""

    def test_append_across_runs(self, tmp_path):
        path = tmp_path / "install.log"
        path.write_text("[2020-01-01 00:00:00] [INFO] earlier run\n", encoding="utf-8")

        setup_logging(log_file=path)
        logging.getLogger("hypersoc.test").info("first")
        setup_logging(log_file=path)
        logging.getLogger("hypersoc.test").info("second")
        _flush()

        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0].endswith("earlier run")
        assert lines[1].endswith("first")
        assert lines[2].endswith("second")

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "logs" / "nested" / "install.log"
        setup_logging(log_file=path)
        logging.getLogger("hypersoc.test").warning("hello")
        _flush()
        assert path.exists()


class TestSetup:
    def test_replaces_handlers(self, tmp_path):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_unknown_level_falls_back_to_info(self):
        setup_logging(level="chatty")
        assert logging.getLogger().level == logging.INFO
