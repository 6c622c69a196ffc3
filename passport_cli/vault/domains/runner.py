"""Run a process and stream its output live."""
import logging
import subprocess
import sys
import threading
from typing import BinaryIO, List, Optional

from .errors import ProcessError, RunError, SpawnError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 128


class _OutputPump(threading.Thread):
    """Copies the child's pipe to output until EOF, flushing each chunk."""

    def __init__(self, source: BinaryIO, output: BinaryIO):
        super().__init__(daemon=True)
        self.source = source
        self.output = output
        self.error: Optional[BaseException] = None

    def run(self) -> None:
        with self.source:
            for chunk in iter(lambda: self.source.read1(CHUNK_SIZE), b""):
                if self.error is not None:
                    # output is broken, drain and discard the rest
                    continue
                try:
                    self.output.write(chunk)
                    self.output.flush()
                except (OSError, ValueError) as e:
                    self.error = e


def run(argv: List[str], output: Optional[BinaryIO] = None, cwd: Optional[str] = None) -> int:
    """
    Run argv[0] with argv[1:] and stream its output.

    The child runs in cwd, or in the current working directory when cwd is
    None. Its stdout and stderr are merged and written to output (the binary
    stdout of this process by default) as they arrive. A background thread
    drains the pipe while this call waits for the child to exit.

    Returns:
        The child's exit code

    Raises:
        SpawnError: If the executable could not be started
        ProcessError: If the child was terminated by a signal
        RunError: If the child's output could not be written to output
    """
    if output is None:
        output = sys.stdout.buffer

    executable = argv[0]
    try:
        process = subprocess.Popen(
            argv,
            stdin=None,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            cwd=cwd,
        )
    except OSError as e:
        raise SpawnError(f"run: failed to start '{executable}': {e.strerror or e}") from e

    logger.info(f"Started '{executable}' (pid {process.pid})")

    pump = _OutputPump(process.stdout, output)
    pump.start()

    exit_code = process.wait()
    pump.join()

    logger.info(f"'{executable}' exited with code {exit_code}")

    if pump.error is not None:
        raise RunError(
            f"run: failed to write output of '{executable}': {pump.error}", exit_code=exit_code
        ) from pump.error

    if exit_code < 0:
        raise ProcessError(f"run: '{executable}' terminated by signal {-exit_code}", exit_code=exit_code)

    return exit_code
