from __future__ import annotations

import json
import logging

import pytest

from event_mixin.config import EmitterSettings
from event_mixin.emitter import EventEmitter
from event_mixin.logging import _EventRecordFormatter, get_logger, log_event
from event_mixin.scheduling import DeferredQueue

pytestmark = pytest.mark.unit


def test_get_logger_is_namespaced_and_configured_once() -> None:
    logger = get_logger("unit")
    assert logger.name == "event_mixin.unit"
    handlers = list(logger.handlers)
    assert get_logger("unit").handlers == handlers
    assert len(handlers) == 1


def test_json_formatter_includes_event_extras() -> None:
    record = logging.LogRecord("event_mixin.x", logging.INFO, __file__, 1, "event=emit", None, None)
    record.event = "emit"
    record.payload = {"listeners": 2}
    record.event_name = "ready"
    data = json.loads(_EventRecordFormatter().format(record))

    assert data["level"] == "INFO"
    assert data["event"] == "emit"
    assert data["payload"] == {"listeners": 2}
    assert data["event_name"] == "ready"
    assert data["ts"]


def test_log_event_uses_requested_level(caplog) -> None:
    logger = get_logger("unit.levels")
    logger.setLevel(logging.DEBUG)
    with caplog.at_level(logging.DEBUG, logger="event_mixin.unit.levels"):
        log_event(logger, "probe", {"x": 1}, level=logging.DEBUG)
    record = caplog.records[-1]
    assert record.levelno == logging.DEBUG
    assert record.event == "probe"
    assert record.payload == {"x": 1}


def test_trace_setting_logs_each_emission(caplog) -> None:
    emitter = EventEmitter(scheduler=DeferredQueue(), settings=EmitterSettings(trace=True))
    emitter.on("ready", lambda: None)
    with caplog.at_level(logging.INFO, logger="event_mixin.emitter"):
        emitter.emit("ready")
        emitter.emit("unheard")
    traced = [r for r in caplog.records if getattr(r, "event", None) == "emit"]
    assert len(traced) == 1
    assert traced[0].payload == {"event_name": "ready", "listeners": 1}
