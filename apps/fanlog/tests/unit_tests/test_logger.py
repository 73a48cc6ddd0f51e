"""
Logger facade tests.
"""

import threading
from dataclasses import dataclass

import orjson
import pytest
from pydantic import BaseModel

import fanlog.logger as logger_module
from fanlog.exceptions import LoggerPanic
from fanlog.fanout import FanOut, SinkBinding
from fanlog.formatters import JsonFormatter
from fanlog.levels import Level
from fanlog.logger import Logger, describe
from fanlog.sinks import FileSink


@pytest.fixture
def logger(recording_sink) -> Logger:
    return Logger(FanOut([SinkBinding(recording_sink, JsonFormatter())]), "svc")


def records(sink) -> list[dict]:
    return [orjson.loads(line) for line in sink.lines]


class TestLeveledMethods:
    def test_message_is_prefixed_with_service_name(self, logger, recording_sink):
        logger.info("started", port=8080)

        (record,) = records(recording_sink)
        assert record["message"] == "[svc] started"
        assert record["level"] == "INFO"
        assert record["logger"] == "svc"
        assert record["port"] == 8080

    def test_empty_service_name_leaves_message_alone(self, recording_sink):
        Logger(FanOut([SinkBinding(recording_sink, JsonFormatter())])).info("plain")

        assert records(recording_sink)[0]["message"] == "plain"

    @pytest.mark.parametrize(
        "method, level",
        [("debug", "DEBUG"), ("info", "INFO"), ("warn", "WARN"), ("warning", "WARN"), ("error", "ERROR")],
    )
    def test_levels(self, logger, recording_sink, method, level):
        getattr(logger, method)("x")

        assert records(recording_sink)[0]["level"] == level

    def test_caller_is_application_frame(self, logger, recording_sink):
        logger.info("where")

        assert records(recording_sink)[0]["caller"].startswith("test_logger.py:")

    def test_caller_in_module_sharing_package_prefix(self, logger, recording_sink):
        namespace = {"__name__": "fanlog_demo"}
        source = "def emit(logger):\n    logger.info('from app')\n"
        exec(compile(source, "fanlog_demo.py", "exec"), namespace)

        namespace["emit"](logger)

        assert records(recording_sink)[0]["caller"] == "fanlog_demo.py:2"

    def test_field_named_event_is_delivered(self, logger, recording_sink, capsys):
        logger.info("user action", event="signup")

        (record,) = records(recording_sink)
        assert record["message"] == "[svc] user action"
        assert record["event"] == "signup"
        assert "log call failed" not in capsys.readouterr().err

    def test_fields_named_like_record_keys_survive(self, logger, recording_sink):
        logger.info("uploaded", filename="report.csv", level="high", logger="y", message="body")

        (record,) = records(recording_sink)
        assert record["level"] == "INFO"
        assert record["logger"] == "svc"
        assert record["message"] == "[svc] uploaded"
        assert record["caller"].startswith("test_logger.py:")
        assert record["filename"] == "report.csv"
        assert record["field_level"] == "high"
        assert record["field_logger"] == "y"
        assert record["field_message"] == "body"

    def test_below_every_sink_is_dropped(self, recording_sink):
        logger = Logger(FanOut([SinkBinding(recording_sink, JsonFormatter(), Level.WARN)]), "svc")

        logger.debug("quiet")
        logger.info("quiet")
        logger.warn("loud")

        assert [r["message"] for r in records(recording_sink)] == ["[svc] loud"]

    def test_logger_without_sinks_is_silent(self):
        Logger(FanOut(), "svc").error("nobody listens")

    def test_bind_adds_fields_and_shares_sinks(self, logger, recording_sink):
        zoned = logger.bind(zone_name="eu-1")

        zoned.info("with zone")
        logger.info("without zone")

        first, second = records(recording_sink)
        assert first["zone_name"] == "eu-1"
        assert "zone_name" not in second

    def test_initial_fields(self, recording_sink):
        logger = Logger(FanOut([SinkBinding(recording_sink, JsonFormatter())]), "svc", initial_fields={"zone": "a"})
        logger.info("x")

        assert records(recording_sink)[0]["zone"] == "a"

    def test_log_call_never_raises(self, logger, recording_sink, capsys):
        class Unprintable:
            def __str__(self) -> str:
                raise RuntimeError("no")

            def __repr__(self) -> str:
                raise RuntimeError("no")

        logger.info("odd", thing=Unprintable())
        logger.info("next")

        assert records(recording_sink)[-1]["message"] == "[svc] next"
        assert "fanlog:" in capsys.readouterr().err


class TestEscalation:
    def test_panic_delivers_then_raises(self, logger, recording_sink):
        with pytest.raises(LoggerPanic) as exc_info:
            logger.panic("invariant broken", key="k")

        assert exc_info.value.message == "[svc] invariant broken"
        assert exc_info.value.fields == {"key": "k"}
        assert records(recording_sink)[0]["level"] == "PANIC"

    def test_fatal_delivers_syncs_and_terminates(self, logger, recording_sink, monkeypatch):
        exit_codes: list[int] = []
        monkeypatch.setattr(logger_module, "_terminate", exit_codes.append)

        logger.fatal("cannot continue")

        assert records(recording_sink)[0]["level"] == "FATAL"
        assert recording_sink.flushed == 1
        assert exit_codes == [1]


class TestConvenience:
    def test_error_err_includes_traceback(self, logger, recording_sink):
        try:
            raise ValueError("bad input")
        except ValueError as exc:
            logger.error_err(exc)

        (record,) = records(recording_sink)
        assert record["message"] == "[svc] An error occurred"
        assert record["level"] == "ERROR"
        assert record["error"] == "bad input"
        assert "Traceback" in record["exception"]

    def test_error_err_without_traceback(self, logger, recording_sink):
        logger.error_err(RuntimeError("never raised"))

        (record,) = records(recording_sink)
        assert record["error"] == "never raised"
        assert "exception" not in record

    def test_info_struct_serializes_value(self, logger, recording_sink):
        @dataclass
        class Order:
            id: int
            item: str

        logger.info_struct("order", Order(7, "book"))

        assert records(recording_sink)[0]["message"] == '[svc] order: {"id":7,"item":"book"}'

    def test_describe_handles_models_and_fallbacks(self):
        class Point(BaseModel):
            x: int
            y: int

        class Opaque:
            def __repr__(self) -> str:
                return "<opaque>"

        assert describe(Point(x=1, y=2)) == '{"x":1,"y":2}'
        assert describe({"p": Opaque()}) == '{"p":"<opaque>"}'
        assert describe("text") == "text"
        assert describe({1: [1, 2]}) == '{"1":[1,2]}'


class TestLifecycle:
    def test_sync_makes_file_writes_durable(self, tmp_path):
        path = tmp_path / "logs" / "svc.log"
        logger = Logger(FanOut([SinkBinding(FileSink(path), JsonFormatter())]), "svc")

        for i in range(25):
            logger.info("tick", i=i)
        logger.sync()

        lines = path.read_text().splitlines()
        assert [orjson.loads(line)["i"] for line in lines] == list(range(25))
        logger.shutdown()

    def test_shutdown_closes_sinks(self, logger, recording_sink):
        logger.shutdown()

        assert recording_sink.closed

    def test_concurrent_calls_keep_lines_whole(self, tmp_path):
        path = tmp_path / "svc.log"
        logger = Logger(FanOut([SinkBinding(FileSink(path), JsonFormatter())]), "svc")

        def worker(n: int) -> None:
            for i in range(50):
                logger.info("work", worker=n, i=i)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        logger.shutdown()

        parsed = [orjson.loads(line) for line in path.read_text().splitlines()]
        assert len(parsed) == 400
        for n in range(8):
            assert [r["i"] for r in parsed if r["worker"] == n] == list(range(50))
