"""Line input sources and output sinks the runtime is driven through."""

from __future__ import annotations
import sys
from typing import Iterable, List, Optional, Protocol, TextIO


class LineSource(Protocol):
    def read_line(self) -> Optional[str]:
        """Block for one line. Returns None once the source is closed."""
        ...


class LineSink(Protocol):
    def write(self, text: str) -> None:
        ...

    def report(self, text: str) -> None:
        """Write a diagnostic line (invalid input and similar)."""
        ...


class ConsoleSource:
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdin

    def read_line(self) -> Optional[str]:
        line = self.stream.readline()
        return line if line else None


class ConsoleSink:
    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        self.out = out or sys.stdout
        self.err = err or sys.stderr

    def write(self, text: str) -> None:
        self.out.write(text)
        self.out.flush()

    def report(self, text: str) -> None:
        self.err.write(text + "\n")
        self.err.flush()

    def __enter__(self) -> "ConsoleSink":
        return self

    def __exit__(self, *exc) -> None:
        self.out.flush()
        self.err.flush()


class ScriptedSource:
    """Replays a fixed list of answers, then reports end of stream."""

    def __init__(self, lines: Iterable[str]):
        self.pending: List[str] = list(lines)
        self.consumed = 0

    def read_line(self) -> Optional[str]:
        if self.consumed >= len(self.pending):
            return None
        line = self.pending[self.consumed]
        self.consumed += 1
        return line

    @property
    def exhausted(self) -> bool:
        return self.consumed >= len(self.pending)


class BufferSink:
    """Collects everything written, for tests and embedding."""

    def __init__(self):
        self.chunks: List[str] = []
        self.reports: List[str] = []

    def write(self, text: str) -> None:
        self.chunks.append(text)

    def report(self, text: str) -> None:
        self.reports.append(text)

    @property
    def text(self) -> str:
        return "".join(self.chunks)
