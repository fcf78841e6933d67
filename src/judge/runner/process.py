from __future__ import annotations
import functools
import os
import selectors
import signal
import subprocess
import threading
import time
from pathlib import Path

import structlog

from ..core.errors import ProcessSpawnError
from ..core.models import OUTPUT_LIMIT_EXIT_CODE, OUTPUT_LIMIT_MESSAGE, ProcessResult

log = structlog.get_logger(__name__)

DEFAULT_MAX_BUFFER = 10 * 1024 * 1024
_CHUNK = 64 * 1024
_POLL_S = 0.1


class _Pump:
    """
    Feeds stdin and drains stdout/stderr of one child on a single thread.
    Each output stream keeps at most ``limit`` bytes; going over calls ``on_overflow``.
    """

    def __init__(self, proc: subprocess.Popen, data: bytes, limit: int, on_overflow):
        self.proc = proc
        self.data = memoryview(data)
        self.limit = limit
        self.on_overflow = on_overflow
        self.out = bytearray()
        self.err = bytearray()
        self.overflow = False
        self.stop = threading.Event()
        self.thread = threading.Thread(target=self._loop, daemon=True)

    def _loop(self):
        sel = selectors.DefaultSelector()
        try:
            if self.data:
                os.set_blocking(self.proc.stdin.fileno(), False)
                sel.register(self.proc.stdin, selectors.EVENT_WRITE)
            sel.register(self.proc.stdout, selectors.EVENT_READ)
            sel.register(self.proc.stderr, selectors.EVENT_READ)
            while sel.get_map() and not self.stop.is_set():
                for key, _ in sel.select(_POLL_S):
                    if key.fileobj is self.proc.stdin:
                        self._write(sel)
                    else:
                        self._read(sel, key.fileobj)
        finally:
            sel.close()
            for f in (self.proc.stdin, self.proc.stdout, self.proc.stderr):
                try:
                    f.close()
                except OSError:
                    pass

    def _write(self, sel):
        try:
            n = os.write(self.proc.stdin.fileno(), self.data[:_CHUNK])
        except BlockingIOError:
            return
        except OSError:
            # child exited without reading its input
            n = len(self.data)
        self.data = self.data[n:]
        if not self.data:
            sel.unregister(self.proc.stdin)
            self.proc.stdin.close()

    def _read(self, sel, stream):
        try:
            chunk = os.read(stream.fileno(), _CHUNK)
        except OSError:
            chunk = b""
        if not chunk:
            sel.unregister(stream)
            return
        buf = self.out if stream is self.proc.stdout else self.err
        room = self.limit - len(buf)
        if len(chunk) > room:
            buf += chunk[:room]
            self.overflow = True
            sel.unregister(stream)
            self.on_overflow()
            return
        buf += chunk

    def finish(self, grace_s: float = 2.0):
        # a grandchild that left the group can hold a pipe open: stop waiting
        # after the grace period, the loop then closes every pipe
        self.thread.join(grace_s)
        if self.thread.is_alive():
            self.stop.set()
            self.thread.join()

    @staticmethod
    def text(buf: bytearray) -> str:
        return bytes(buf).decode("utf-8", errors="replace")


class ProcessRunner:
    """
    Run a shell command in a directory: stdin injection, wall-clock deadline,
    bounded stdout/stderr capture. One attempt per call, no retries.
    """

    def __init__(self, max_buffer: int = DEFAULT_MAX_BUFFER, shell: str = "/bin/sh"):
        self.max_buffer = max_buffer
        self.shell = shell

    @staticmethod
    def _kill_group(proc: subprocess.Popen):
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except (ProcessLookupError, PermissionError):
            # group already gone
            pass

    def run(self, command: str, cwd: Path, timeout_ms: int, input_text: str = "") -> ProcessResult:
        start = time.monotonic()
        try:
            proc = subprocess.Popen(
                [self.shell, "-c", command],
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=str(cwd),
                start_new_session=True,  # own process group, killed as a whole
            )
        except OSError as e:
            raise ProcessSpawnError(f"cannot start {command!r} in {cwd}: {e}") from e

        data = input_text.encode("utf-8") if input_text else b""
        if not data:
            proc.stdin.close()
        pump = _Pump(proc, data, self.max_buffer, functools.partial(self._kill_group, proc))
        pump.thread.start()

        try:
            proc.wait(timeout=max(timeout_ms, 0) / 1000)
        except subprocess.TimeoutExpired:
            self._kill_group(proc)
            proc.wait()
            elapsed = int((time.monotonic() - start) * 1000)
            pump.finish()
            log.info("process_timeout", command=command, timeout_ms=timeout_ms, time_ms=elapsed)
            return ProcessResult.time_limit(elapsed)

        elapsed = int((time.monotonic() - start) * 1000)
        # reap background leftovers so they cannot hold the pipes open
        self._kill_group(proc)
        pump.finish()

        rc = proc.returncode
        # killed by a signal: no exit code to report, fall back to 0
        code = rc if rc is not None and rc >= 0 else 0
        stderr = pump.text(pump.err)
        if pump.overflow:
            log.warning("process_output_limit", command=command, limit=self.max_buffer)
            # the kill is ours, never report it as success
            code = code or OUTPUT_LIMIT_EXIT_CODE
            stderr = stderr + ("\n" if stderr and not stderr.endswith("\n") else "") + OUTPUT_LIMIT_MESSAGE
        return ProcessResult(code=code, stdout=pump.text(pump.out), stderr=stderr, time_ms=elapsed)
