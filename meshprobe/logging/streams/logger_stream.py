import asyncio
import datetime
import io
import os
import pathlib
import sys
from collections import defaultdict
from typing import (
    Callable,
    Dict,
    TypeVar,
)

import msgspec

from meshprobe.logging.config.logging_config import LoggingConfig
from meshprobe.logging.config.stream_type import StreamType
from meshprobe.logging.models import Entry, Log

T = TypeVar('T', bound=Entry)


DEFAULT_TEMPLATE = "{timestamp} - {level} - {logger} - {filename}:{function_name}.{line_number} - {message}"
ERROR_TEMPLATE = "{timestamp} - {level} - {logger} - {filename}:{function_name}.{line_number} - {error}"


class LoggerStream:
    def __init__(
        self,
        name: str | None = None,
        template: str | None = None,
        filename: str | None = None,
        directory: str | None = None,
    ) -> None:
        if name is None:
            name = "default"

        if directory and filename is None:
            filename = "logs.json"

        self._name = name
        self._default_template = template
        self._default_logfile = filename
        self._default_log_directory = directory

        self._init_lock = asyncio.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None

        self._files: Dict[str, io.FileIO] = {}
        self._file_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._cwd: str | None = None
        self._default_logfile_path: str | None = None

        self._config = LoggingConfig()
        self._initialized: bool = False

    @property
    def name(self):
        return self._name

    async def initialize(self):

        async with self._init_lock:

            if self._initialized:
                return

            if self._loop is None:
                self._loop = asyncio.get_running_loop()

            if self._cwd is None:
                self._cwd = await self._loop.run_in_executor(
                    None,
                    os.getcwd,
                )

            if self._default_logfile:
                try:
                    await self.open_file(
                        self._default_logfile,
                        directory=self._default_log_directory,
                        is_default=True,
                    )

                except Exception as err:
                    # Entries go to the output stream until a file opens.
                    self._write_to_stream(
                        sys.__stderr__,
                        f"{datetime.datetime.now(datetime.UTC).isoformat()} - ERROR - {self._name} - "
                        f"unable to open logfile {self._default_logfile} - {err}",
                    )

            self._initialized = True

    async def open_file(
        self,
        filename: str,
        directory: str | None = None,
        is_default: bool = False,
    ):
        if self._loop is None:
            self._loop = asyncio.get_running_loop()

        if self._cwd is None:
            self._cwd = await self._loop.run_in_executor(
                None,
                os.getcwd,
            )

        logfile_path = self._to_logfile_path(filename, directory=directory)

        async with self._file_locks[logfile_path]:
            await self._loop.run_in_executor(
                None,
                self._open_file,
                logfile_path,
            )

        if is_default:
            self._default_logfile_path = logfile_path

        return logfile_path

    def _open_file(
        self,
        logfile_path: str,
    ):
        resolved_path = pathlib.Path(logfile_path).absolute().resolve()
        logfile_directory = str(resolved_path.parent)
        path = str(resolved_path)

        if not os.path.exists(logfile_directory):
            os.makedirs(logfile_directory)

        if not os.path.exists(path):
            resolved_path.touch()

        self._files[logfile_path] = open(path, "ab+")

    async def close(self):
        await asyncio.gather(
            *[self._close_file(logfile_path) for logfile_path in self._files]
        )

        self._initialized = False

    async def _close_file(self, logfile_path: str):
        async with self._file_locks[logfile_path]:
            await self._loop.run_in_executor(
                None,
                self._close_file_at_path,
                logfile_path,
            )

    def _close_file_at_path(self, logfile_path: str):
        if (
            logfile := self._files.get(logfile_path)
        ) and logfile.closed is False:
            logfile.close()

    def _to_logfile_path(
        self,
        filename: str,
        directory: str | None = None,
    ):
        filename_path = pathlib.Path(filename)

        assert (
            filename_path.suffix == ".json"
        ), "Err. - file must be JSON file for logs."

        if self._config.directory:
            directory = self._config.directory

        elif directory is None:
            directory: str = os.path.join(self._cwd)

        return os.path.join(directory, filename_path)

    async def log(
        self,
        log: Log,
        template: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        if self._initialized is False:
            await self.initialize()

        if template is None:
            template = self._default_template

        if self._default_logfile_path:
            await self._log_to_file(
                log,
                filter=filter,
            )

        else:
            await self._log(
                log,
                template=template,
                filter=filter,
            )

    async def _log(
        self,
        log: Log,
        template: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        entry = log.entry

        if self._config.enabled(self._name, entry.level) is False:
            return

        if filter and filter(entry) is False:
            return

        if template is None:
            template = DEFAULT_TEMPLATE

        context = {
            "logger": self._name,
            "filename": log.filename,
            "function_name": log.function_name,
            "line_number": log.line_number,
            "thread_id": log.thread_id,
            "timestamp": log.timestamp,
        }

        stream = sys.stdout if self._config.output == StreamType.STDOUT else sys.stderr

        try:
            await self._loop.run_in_executor(
                None,
                self._write_to_stream,
                stream,
                entry.to_template(
                    template,
                    context=context,
                ),
            )

        except Exception as err:
            context["error"] = str(err)
            self._write_to_stream(
                sys.__stderr__,
                entry.to_template(
                    ERROR_TEMPLATE,
                    context=context,
                ),
            )

    async def _log_to_file(
        self,
        log: Log,
        filter: Callable[[T], bool] | None = None,
    ):
        entry = log.entry

        if self._config.enabled(self._name, entry.level) is False:
            return

        if filter and filter(entry) is False:
            return

        logfile_path = self._default_logfile_path

        try:
            if self._files.get(logfile_path) is None or self._files[logfile_path].closed:
                await self.open_file(
                    self._default_logfile,
                    directory=self._default_log_directory,
                    is_default=True,
                )

            async with self._file_locks[logfile_path]:
                await self._loop.run_in_executor(
                    None,
                    self._write_to_file,
                    log,
                    logfile_path,
                )

        except Exception as err:
            self._write_to_stream(
                sys.__stderr__,
                entry.to_template(
                    ERROR_TEMPLATE,
                    context={
                        "logger": self._name,
                        "filename": log.filename,
                        "function_name": log.function_name,
                        "line_number": log.line_number,
                        "error": str(err),
                        "timestamp": log.timestamp,
                    },
                ),
            )

    def _write_to_stream(
        self,
        stream: io.TextIOBase | None,
        line: str,
    ):
        if stream is None or stream.closed:
            return

        stream.write(line + "\n")
        stream.flush()

    def _write_to_file(
        self,
        log: Log,
        logfile_path: str,
    ):
        if (
            logfile := self._files.get(logfile_path)
        ) and (
            logfile.closed is False
        ):

            logfile.write(msgspec.json.encode(log) + b"\n")
            logfile.flush()
