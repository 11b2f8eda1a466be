"""
Tests for log level filtering and the stream and file sinks.
"""

import os

import msgspec
import pytest

from meshprobe.logging import Entry, Logger, LoggingConfig, LogLevel


class ProbeEntry(Entry, kw_only=True):
    destination: str
    level: LogLevel = LogLevel.INFO


class TestLogLevels:

    def test_to_level_is_case_insensitive(self) -> None:
        assert LogLevel.to_level("warn") == LogLevel.WARN
        assert LogLevel.to_level("ERROR") == LogLevel.ERROR

    def test_unknown_level_raises(self) -> None:
        with pytest.raises(ValueError):
            LogLevel.to_level("verbose")

    def test_enabled_respects_level(self) -> None:
        config = LoggingConfig()
        config.update(log_level="warn")

        assert config.enabled("tester", LogLevel.ERROR) is True
        assert config.enabled("tester", LogLevel.WARN) is True
        assert config.enabled("tester", LogLevel.INFO) is False

    def test_disable_and_enable_logger(self) -> None:
        config = LoggingConfig()
        config.update(log_level="debug")

        config.disable("scheduler")

        assert config.enabled("scheduler", LogLevel.ERROR) is False
        assert config.enabled("tester", LogLevel.ERROR) is True

        config.enable("scheduler")

        assert config.enabled("scheduler", LogLevel.ERROR) is True


class TestEntryTemplate:

    def test_template_includes_fields_and_context(self) -> None:
        entry = ProbeEntry(message="probe failed", destination="10.0.0.1")

        line = entry.to_template(
            "{level} {logger} {destination} {message}",
            context={"logger": "tester"},
        )

        assert line == "INFO tester 10.0.0.1 probe failed"


class TestLoggerOutput:

    @pytest.mark.asyncio
    async def test_logs_to_stderr(self, capsys) -> None:
        LoggingConfig().update(log_level="info", log_output="stderr")
        logger = Logger()

        await logger.log(
            ProbeEntry(message="udp probe lost packets", destination="10.0.0.1"),
            name="tester",
        )
        await logger.close()

        captured = capsys.readouterr()

        assert "udp probe lost packets" in captured.err
        assert "tester" in captured.err
        assert "test_logs_to_stderr" in captured.err

    @pytest.mark.asyncio
    async def test_entries_below_level_are_dropped(self, capsys) -> None:
        LoggingConfig().update(log_level="error", log_output="stderr")
        logger = Logger()

        await logger.log(
            ProbeEntry(message="routine cycle", destination="10.0.0.1"),
            name="tester",
        )
        await logger.close()

        assert "routine cycle" not in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_filter_drops_entries(self, capsys) -> None:
        LoggingConfig().update(log_level="info", log_output="stderr")
        logger = Logger()

        await logger.log(
            ProbeEntry(message="filtered", destination="10.0.0.1"),
            name="tester",
            filter=lambda entry: entry.destination != "10.0.0.1",
        )
        await logger.close()

        assert "filtered" not in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_logs_json_lines_to_file(self, temp_log_directory) -> None:
        LoggingConfig().update(log_level="info")
        logger = Logger()
        path = os.path.join(temp_log_directory, "tester.json")
        logger.configure(name="tester", path=path)

        await logger.log(
            ProbeEntry(message="first", destination="10.0.0.1"),
            name="tester",
        )
        await logger.log(
            ProbeEntry(message="second", destination="10.0.0.2"),
            name="tester",
        )
        await logger.close()

        with open(path, "rb") as logfile:
            lines = [
                msgspec.json.decode(line)
                for line in logfile.read().splitlines()
            ]

        assert [line["entry"]["message"] for line in lines] == ["first", "second"]
        assert lines[0]["entry"]["destination"] == "10.0.0.1"
        assert lines[0]["entry"]["level"] == "INFO"
        assert lines[0]["logger"] == "tester"
        assert lines[0]["function_name"] == "test_logs_json_lines_to_file"

    @pytest.mark.asyncio
    async def test_unopenable_logfile_falls_back_to_stream(
        self,
        tmp_path,
        capfd,
    ) -> None:
        LoggingConfig().update(log_level="info", log_output="stderr")

        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        logger = Logger()
        logger.configure(name="tester", path=str(blocker / "tester.json"))

        await logger.log(
            ProbeEntry(message="still reported", destination="10.0.0.1"),
            name="tester",
        )
        await logger.close()

        err = capfd.readouterr().err

        assert "unable to open logfile tester.json" in err
        assert "still reported" in err
