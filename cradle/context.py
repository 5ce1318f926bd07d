"""
Output sink context for invocations.

A Context bundles the two sinks that relayed child output is written to,
plus the environment and working directory children inherit. Production
code relays to the real terminal; tests use in-memory sinks and can share
one Context between several threads.
"""

import os
import sys
import threading
from typing import Dict, Optional


class Sink:
    """
    Append-only byte sink. Each write is atomic with respect to other writers
    and flushed before the lock is released.
    """

    def __init__(self):
        self._lock = threading.Lock()

    def write(self, data: bytes) -> None:
        with self._lock:
            self._write(data)

    def _write(self, data: bytes) -> None:
        raise NotImplementedError


class StreamSink(Sink):
    """Sink relaying to a file object such as sys.stdout."""

    def __init__(self, stream):
        super().__init__()
        self.stream = stream

    def _write(self, data: bytes) -> None:
        binary = getattr(self.stream, "buffer", None)
        if binary is None:
            self.stream.write(data.decode("utf-8", errors="replace"))
            self.stream.flush()
            return
        # Flush pending text first so relayed bytes keep their position
        self.stream.flush()
        binary.write(data)
        binary.flush()


class StandardStreamSink(StreamSink):
    """
    Sink for sys.stdout or sys.stderr.

    The stream is looked up on every write, so redirecting sys.stdout (as
    pytest's capsys does) is honoured by a long-lived sink.
    """

    def __init__(self, name: str):
        Sink.__init__(self)
        self.name = name

    @property
    def stream(self):
        return getattr(sys, self.name)


class MemorySink(Sink):
    """In-memory sink; the collected bytes can be read back at any time."""

    def __init__(self):
        super().__init__()
        self._buffer = bytearray()

    def _write(self, data: bytes) -> None:
        self._buffer.extend(data)

    def getvalue(self) -> bytes:
        with self._lock:
            return bytes(self._buffer)

    def text(self) -> str:
        """Collected bytes decoded as UTF-8, with replacement characters for invalid bytes."""
        return self.getvalue().decode("utf-8", errors="replace")


class Context:
    """
    Where relayed output goes and what the child inherits.

    Attributes:
        stdout: Sink receiving relayed child stdout
        stderr: Sink receiving relayed child stderr and '+ command' log lines
        environment: Base environment for children (None inherits os.environ
            at spawn time)
        working_directory: Base working directory (None inherits the
            parent's)
    """

    def __init__(
        self,
        stdout: Sink,
        stderr: Sink,
        environment: Optional[Dict[str, str]] = None,
        working_directory: Optional[str] = None,
    ):
        self.stdout = stdout
        self.stderr = stderr
        self.environment = environment
        self.working_directory = working_directory

    @classmethod
    def production(cls) -> 'Context':
        """
        Context relaying to the process's real stdout and stderr.

        Every call returns the same instance, so concurrent invocations share
        one lock per stream.
        """
        global _production_context
        with _production_lock:
            if _production_context is None:
                _production_context = Context(
                    stdout=StandardStreamSink("stdout"),
                    stderr=StandardStreamSink("stderr"),
                )
            return _production_context

    @classmethod
    def test(cls) -> 'Context':
        """Context collecting relayed output in memory."""
        return cls(stdout=MemorySink(), stderr=MemorySink())

    def child_environment(self) -> Dict[str, str]:
        """Copy of the environment a child starts from, before overrides."""
        if self.environment is None:
            return os.environ.copy()
        return dict(self.environment)


_production_context: Optional[Context] = None
_production_lock = threading.Lock()
