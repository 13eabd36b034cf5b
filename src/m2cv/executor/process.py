"""Deadlock-free subprocess execution with process-tree cancellation.

stdin is fed and stdout/stderr are drained by helper threads that start right
after spawn, so a child producing more output than the OS pipe buffer never
blocks on a parent that is waiting for it to exit. The calling thread only
supervises: it polls for exit, cancellation and the deadline.
"""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import threading
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from m2cv.errors import (
    ProcessCancelledError,
    ProcessFailedError,
    ProcessStartError,
    ProcessTimeoutError,
)

logger = logging.getLogger(__name__)

DEFAULT_KILL_GRACE_SECONDS = 2.0
_POLL_INTERVAL_SECONDS = 0.1
_READ_CHUNK_BYTES = 64 * 1024

_CANCELLED = "cancelled"
_TIMED_OUT = "timed_out"


@dataclass(slots=True)
class CapturedOutput:
    """Full output of a successful child process."""

    exit_code: int
    stdout: str
    stderr: str


class _StreamCollector:
    """Drain one pipe into memory on a background thread."""

    def __init__(self, stream: IO[bytes], *, name: str) -> None:
        self._stream = stream
        self._chunks: list[bytes] = []
        self._thread = threading.Thread(target=self._drain, name=name, daemon=True)
        self._thread.start()

    def _drain(self) -> None:
        try:
            for chunk in iter(lambda: self._stream.read1(_READ_CHUNK_BYTES), b""):
                self._chunks.append(chunk)
        except (OSError, ValueError) as error:
            logger.debug("Stream %s closed while reading: %s", self._thread.name, error)
        finally:
            self._stream.close()

    @property
    def alive(self) -> bool:
        return self._thread.is_alive()

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)

    def text(self) -> str:
        return b"".join(self._chunks).decode("utf-8", errors="replace")


def run_captured(  # noqa: PLR0913
    args: Sequence[str | os.PathLike[str]],
    *,
    stdin_data: str | bytes | None = None,
    cwd: str | os.PathLike[str] | None = None,
    env: Mapping[str, str] | None = None,
    timeout_seconds: float | None = None,
    cancel_requested: Callable[[], bool] | None = None,
    kill_grace_seconds: float = DEFAULT_KILL_GRACE_SECONDS,
    label: str | None = None,
) -> CapturedOutput:
    """Run ``args`` to completion and return its captured output.

    Raises ``ProcessStartError`` when the process cannot be spawned,
    ``ProcessCancelledError``/``ProcessTimeoutError`` when it was stopped,
    and ``ProcessFailedError`` for a non-zero exit. Every failure after spawn
    embeds the trimmed stderr text.
    """

    command = [os.fspath(arg) for arg in args]
    name = label or Path(command[0]).name
    payload = stdin_data.encode("utf-8") if isinstance(stdin_data, str) else stdin_data

    try:
        process = subprocess.Popen(  # noqa: S603
            command,
            stdin=subprocess.PIPE if payload is not None else subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            cwd=cwd,
            env=dict(env) if env is not None else None,
            **_new_process_group_kwargs(),
        )
    except OSError as error:
        raise ProcessStartError(
            f"failed to start {name}: {error} (not found or not executable)",
            command=command,
        ) from error

    logger.debug("Started %s (pid=%s, cwd=%s)", name, process.pid, cwd or os.getcwd())
    stdout = _StreamCollector(process.stdout, name=f"{name}-stdout")
    stderr = _StreamCollector(process.stderr, name=f"{name}-stderr")
    if payload is not None:
        threading.Thread(
            target=_feed_stdin,
            args=(process.stdin, payload),
            name=f"{name}-stdin",
            daemon=True,
        ).start()

    deadline = time.monotonic() + timeout_seconds if timeout_seconds else None
    try:
        interruption = _supervise(
            process,
            collectors=(stdout, stderr),
            deadline=deadline,
            cancel_requested=cancel_requested,
            kill_grace_seconds=kill_grace_seconds,
        )
    except BaseException:
        _terminate_process_tree(process, kill_grace_seconds)
        raise

    if interruption is not None:
        _terminate_process_tree(process, kill_grace_seconds)
        for collector in (stdout, stderr):
            collector.join(kill_grace_seconds)
        stderr_text = stderr.text().strip()
        if interruption == _CANCELLED:
            raise ProcessCancelledError(
                _with_stderr(f"{name} cancelled; process tree terminated", stderr_text),
                command=command,
                exit_code=process.returncode,
                stderr=stderr_text,
            )
        raise ProcessTimeoutError(
            _with_stderr(
                f"{name} timed out after {timeout_seconds:g}s; process tree terminated",
                stderr_text,
            ),
            command=command,
            exit_code=process.returncode,
            stderr=stderr_text,
        )

    exit_code = process.returncode
    stderr_text = stderr.text().strip()
    logger.debug("%s exited with status %s", name, exit_code)
    if exit_code != 0:
        raise ProcessFailedError(
            _with_stderr(f"{name} failed: {_describe_exit(exit_code)}", stderr_text),
            command=command,
            exit_code=exit_code,
            stderr=stderr_text,
        )
    return CapturedOutput(exit_code=exit_code, stdout=stdout.text(), stderr=stderr_text)


def _supervise(
    process: subprocess.Popen[bytes],
    *,
    collectors: tuple[_StreamCollector, ...],
    deadline: float | None,
    cancel_requested: Callable[[], bool] | None,
    kill_grace_seconds: float,
) -> str | None:
    """Block until exit and drained streams; return an interruption marker if stopped."""

    drain_deadline: float | None = None
    while True:
        if cancel_requested is not None and cancel_requested():
            return _CANCELLED
        now = time.monotonic()
        if deadline is not None and now >= deadline:
            return _TIMED_OUT

        if process.poll() is None:
            try:
                process.wait(timeout=_POLL_INTERVAL_SECONDS)
            except subprocess.TimeoutExpired:
                pass
            continue

        pending = [collector for collector in collectors if collector.alive]
        if not pending:
            return None

        # The direct child is gone but a descendant still holds the pipes open.
        if drain_deadline is None:
            drain_deadline = now + kill_grace_seconds
        elif now >= drain_deadline:
            logger.debug("Descendants of pid %s still hold output pipes", process.pid)
            _terminate_process_tree(process, kill_grace_seconds)
            for collector in pending:
                collector.join(kill_grace_seconds)
            return None
        pending[0].join(_POLL_INTERVAL_SECONDS)


def _feed_stdin(stream: IO[bytes], payload: bytes) -> None:
    try:
        stream.write(payload)
    except BrokenPipeError:
        logger.debug("Child closed stdin before consuming %d bytes of input", len(payload))
    except OSError as error:
        logger.debug("Writing child stdin failed: %s", error)
    finally:
        try:
            stream.close()
        except OSError:
            logger.debug("Child stdin already closed")


def _new_process_group_kwargs() -> dict[str, object]:
    if os.name == "nt":
        return {"creationflags": subprocess.CREATE_NEW_PROCESS_GROUP}
    return {"start_new_session": True}


def _terminate_process_tree(process: subprocess.Popen[bytes], grace_seconds: float) -> None:
    """Terminate the child and every descendant sharing its process group."""

    if os.name == "nt":
        _terminate_windows_tree(process, grace_seconds)
        return

    _signal_group(process.pid, signal.SIGTERM)
    try:
        process.wait(timeout=grace_seconds)
    except subprocess.TimeoutExpired:
        logger.debug("pid %s ignored SIGTERM, sending SIGKILL", process.pid)
    # Descendants may outlive a leader that exited on SIGTERM.
    _signal_group(process.pid, signal.SIGKILL)
    try:
        process.wait(timeout=grace_seconds)
    except subprocess.TimeoutExpired:
        logger.warning("pid %s did not exit after SIGKILL", process.pid)


def _signal_group(pgid: int, signum: signal.Signals) -> None:
    try:
        os.killpg(pgid, signum)
    except ProcessLookupError:
        return
    except PermissionError as error:
        logger.warning("Cannot signal process group %s: %s", pgid, error)


def _terminate_windows_tree(process: subprocess.Popen[bytes], grace_seconds: float) -> None:
    subprocess.run(  # noqa: S603
        ["taskkill", "/F", "/T", "/PID", str(process.pid)],  # noqa: S607
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        check=False,
    )
    try:
        process.wait(timeout=grace_seconds)
    except subprocess.TimeoutExpired:
        process.kill()
        process.wait(timeout=grace_seconds)


def _describe_exit(exit_code: int) -> str:
    if exit_code < 0:
        return f"killed by signal {-exit_code}"
    return f"exit status {exit_code}"


def _with_stderr(message: str, stderr_text: str) -> str:
    if stderr_text:
        return f"{message}\nstderr: {stderr_text}"
    return message
