from __future__ import annotations

import json
import logging
import sys

from twincosmos.control.digital_twin import DigitalTwin
from twincosmos.io.logging_config import TwinJSONFormatter, setup_twin_logging


def test_twin_json_formatter_includes_context_fields() -> None:
    record = logging.LogRecord(
        name="twincosmos",
        level=logging.INFO,
        pathname=__file__,
        lineno=42,
        msg="unit test message",
        args=(),
        exc_info=None,
    )
    record.twin_context = {"tick": 7}  # type: ignore[attr-defined]
    payload = json.loads(TwinJSONFormatter().format(record))
    assert payload["level"] == "INFO"
    assert payload["line"] == 42
    assert payload["message"] == "unit test message"
    assert payload["twin_context"]["tick"] == 7


def test_twin_json_formatter_records_exceptions() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord(
            name="twincosmos.control",
            level=logging.ERROR,
            pathname=__file__,
            lineno=1,
            msg="tick failed",
            args=(),
            exc_info=sys.exc_info(),
        )
    payload = json.loads(TwinJSONFormatter().format(record))
    assert "twin_context" not in payload
    assert "RuntimeError: boom" in payload["exception"]


def test_setup_twin_logging_emits_json_lines(capsys) -> None:
    logger = logging.getLogger("twincosmos")
    old_handlers = list(logger.handlers)
    old_level = logger.level
    try:
        setup_twin_logging(level=logging.INFO, json_output=True)
        logger.info("tick logged", extra={"twin_context": {"time": 0.5}})
        out = capsys.readouterr().out.strip().splitlines()
        assert out
        first = json.loads(out[0])
        assert first["message"] == "Structured logging initialized"
        parsed = json.loads(out[-1])
        assert parsed["message"] == "tick logged"
        assert parsed["twin_context"]["time"] == 0.5
    finally:
        logger.handlers[:] = old_handlers
        logger.setLevel(old_level)


def test_setup_twin_logging_writes_log_file(tmp_path, capsys) -> None:
    logger = logging.getLogger("twincosmos")
    old_handlers = list(logger.handlers)
    old_level = logger.level
    log_file = tmp_path / "twin.log"
    try:
        setup_twin_logging(level=logging.INFO, json_output=True, log_file=str(log_file))
        logger.getChild("core").warning("cooling")
        for handler in logger.handlers:
            handler.flush()
        lines = log_file.read_text(encoding="utf-8").strip().splitlines()
        assert json.loads(lines[-1])["logger"] == "twincosmos.core"
    finally:
        for handler in logger.handlers:
            if handler not in old_handlers:
                handler.close()
        logger.handlers[:] = old_handlers
        logger.setLevel(old_level)
        capsys.readouterr()


def test_twin_ticks_carry_context(capsys) -> None:
    logger = logging.getLogger("twincosmos")
    old_handlers = list(logger.handlers)
    old_level = logger.level
    try:
        setup_twin_logging(level=logging.DEBUG, json_output=True)
        twin = DigitalTwin().initialize()
        twin.step(0.5)
        twin.step(0.5)
        records = [json.loads(line) for line in capsys.readouterr().out.strip().splitlines()]
        ticks = [r for r in records if r["logger"] == "twincosmos.control.digital_twin" and "twin_context" in r]
        assert [r["twin_context"]["time"] for r in ticks] == [0.5, 1.0]
        assert ticks[0]["twin_context"]["phase"] == "burn"
        assert ticks[0]["twin_context"]["should_act"] is False
        assert ticks[1]["twin_context"]["should_act"] is True
        assert ticks[1]["twin_context"]["memory_key"] == "step_1"
        assert ticks[0]["level"] == "DEBUG"
    finally:
        logger.handlers[:] = old_handlers
        logger.setLevel(old_level)
