import asyncio
import io
import os
import pathlib
import sys

import msgspec

from .entries import Entry, Log
from .logging_config import LoggingConfig, StreamType

DEFAULT_TEMPLATE = "{timestamp} - {level} - {thread_id} - {filename}:{function_name}.{line_number} - {message}"


class RelayLogger:
    """
    Renders entries through ``template`` to stdout or stderr, and when
    ``path`` names a ``.json`` file also appends each ``Log`` record to
    it as one msgspec-encoded line. Writes run in the default executor
    under a lock so lines from concurrent connections never interleave.
    """

    def __init__(
        self,
        template: str = DEFAULT_TEMPLATE,
        path: str | None = None,
    ) -> None:
        if path is not None and pathlib.Path(path).suffix != ".json":
            raise ValueError(f"Log file {path} must be a .json file")

        self.template = template
        self.path = path

        self._config = LoggingConfig()
        self._lock = asyncio.Lock()
        self._logfile: io.BufferedWriter | None = None

    async def log(self, entry: Entry):
        if self._config.enabled(entry.level) is False:
            return

        frame = sys._getframe(1)
        log = Log(
            entry=entry,
            filename=frame.f_code.co_filename,
            function_name=frame.f_code.co_name,
            line_number=frame.f_lineno,
        )

        # The executor thread does not see this task's context.
        output = self._config.output

        async with self._lock:
            await asyncio.get_running_loop().run_in_executor(
                None,
                self._write,
                log,
                output,
            )

    async def close(self):
        async with self._lock:
            if self._logfile is not None:
                await asyncio.get_running_loop().run_in_executor(
                    None,
                    self._logfile.close,
                )
                self._logfile = None

    def _write(self, log: Log, output: StreamType):
        line = log.entry.render(
            self.template,
            filename=log.filename,
            function_name=log.function_name,
            line_number=log.line_number,
            thread_id=log.thread_id,
            timestamp=log.timestamp,
        )

        stream = sys.stdout if output == StreamType.STDOUT else sys.stderr
        stream.write(line + "\n")
        stream.flush()

        if self.path is None:
            return

        try:
            if self._logfile is None:
                os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
                self._logfile = open(self.path, "ab")

            self._logfile.write(msgspec.json.encode(log) + b"\n")
            self._logfile.flush()

        except OSError as err:
            sys.stderr.write(f"Could not write log file {self.path}: {err}\n")
            sys.stderr.flush()
