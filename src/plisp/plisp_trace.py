"""Pocket Lisp trace watchers.

With `trace_execution` enabled the evaluator sends one message per evaluation
step to a trace watcher.  Messages start with "[TRACE] " and are indented two
spaces per closure call in progress, so the shape of the call tree is visible.
"""

import sys
from collections import deque
from typing import Any, Deque, List, Protocol, TextIO


class PLispTraceWatcher(Protocol):
    """Protocol for Pocket Lisp trace watchers."""
    def on_trace(self, message: str) -> None:
        """
        Called for every evaluation step while tracing.

        Args:
            message: The formatted trace line, without a trailing newline
        """


class PLispStreamTraceWatcher:
    """Watcher writing each trace message as a line on a text stream."""

    def __init__(self, stream: TextIO | None = None):
        """
        Initialize stream trace watcher.

        Args:
            stream: Stream to write to; stdout at the time of each message if omitted
        """
        self._stream = stream

    def on_trace(self, message: str) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(message + '\n')


class PLispFileTraceWatcher(PLispStreamTraceWatcher):
    """
    Watcher writing trace messages to a file, as `plisp --trace-file` does.

    Use it as a context manager so the file is closed when the run ends.
    """

    def __init__(self, filepath: str):
        """
        Open the trace file, replacing any previous contents.

        Args:
            filepath: Path of the file to write traces to

        Raises:
            OSError: If the file cannot be opened
        """
        self.filepath = filepath
        self.file = open(filepath, 'w', encoding='utf-8')  # pylint: disable=consider-using-with
        super().__init__(self.file)

    def close(self) -> None:
        """Close the trace file."""
        self.file.close()

    def __enter__(self) -> 'PLispFileTraceWatcher':
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class PLispBufferingTraceWatcher:
    """
    Watcher keeping trace messages in memory for programmatic access.

    With a `limit`, only the most recent messages are kept, which bounds memory
    when tracing long-running programs.
    """

    def __init__(self, limit: int | None = None):
        """
        Initialize buffering trace watcher.

        Args:
            limit: Maximum number of messages kept, or None to keep all of them
        """
        self.traces: Deque[str] = deque(maxlen=limit)

    def on_trace(self, message: str) -> None:
        self.traces.append(message)

    def get_traces(self) -> List[str]:
        """Return a copy of the buffered messages, oldest first."""
        return list(self.traces)

    def get_steps(self) -> List[str]:
        """Return the buffered messages without their prefix and indentation."""
        return [trace.removeprefix("[TRACE]").strip() for trace in self.traces]

    def clear(self) -> None:
        """Clear all buffered messages."""
        self.traces.clear()
