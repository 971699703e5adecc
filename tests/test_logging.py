from __future__ import annotations

import logging
import re
from pathlib import Path

import pytest

from pyklaviyo._logging import LOGGER_NAME, configure_logging, remove_handlers
from pyklaviyo.config import KlaviyoConfig

_LINE = re.compile(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] \[(DEBUG|INFO|WARNING|ERROR)\] .+$")


def test_no_handlers_without_debug(tmp_path: Path) -> None:
    config = KlaviyoConfig(api_key="pk_test", log_file=str(tmp_path / "k.log"))

    assert configure_logging(config) == []
    assert not (tmp_path / "k.log").exists()


def test_debug_writes_formatted_lines_and_echoes_errors(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    log_file = tmp_path / "klaviyo.log"
    config = KlaviyoConfig(api_key="pk_test", debug=True, log_file=str(log_file))
    handlers = configure_logging(config)
    logger = logging.getLogger(f"{LOGGER_NAME}.tests")
    try:
        logger.info("Tracking event: %s", "Viewed Product")
        logger.error("Failed to track event: %s", "HTTP 400")
    finally:
        remove_handlers(handlers)

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert all(_LINE.match(line) for line in lines)
    assert lines[0].endswith("[INFO] Tracking event: Viewed Product")
    assert lines[1].endswith("[ERROR] Failed to track event: HTTP 400")

    echoed = capsys.readouterr().out.splitlines()
    assert len(echoed) == 1
    assert echoed[0].endswith("[ERROR] Failed to track event: HTTP 400")


def test_log_file_is_appended(tmp_path: Path) -> None:
    log_file = tmp_path / "klaviyo.log"
    log_file.write_text("[2024-01-01 00:00:00] [INFO] earlier run\n", encoding="utf-8")
    config = KlaviyoConfig(api_key="pk_test", debug=True, log_file=str(log_file))

    handlers = configure_logging(config)
    logging.getLogger(f"{LOGGER_NAME}.tests").warning("second run")
    remove_handlers(handlers)

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert lines[0].endswith("earlier run")
    assert lines[1].endswith("[WARNING] second run")


def test_removed_handlers_stop_writing(tmp_path: Path) -> None:
    log_file = tmp_path / "klaviyo.log"
    config = KlaviyoConfig(api_key="pk_test", debug=True, log_file=str(log_file))

    handlers = configure_logging(config)
    remove_handlers(handlers)
    logging.getLogger(f"{LOGGER_NAME}.tests").error("after removal")

    assert not log_file.exists() or "after removal" not in log_file.read_text(encoding="utf-8")
