# ui/stream_reader.py

"""
Incremental reader for the chat endpoint's event stream.

The endpoint sends newline-delimited frames::

    : keep-alive
    data: {"choices": [{"delta": {"content": "Hel"}}]}
    data: [DONE]

Network chunks can end anywhere, including inside a multi-byte character or
halfway through a JSON payload, so bytes are decoded incrementally and only
complete lines are interpreted. Each text fragment found under
``choices[0].delta.content`` is handed to ``on_delta`` in arrival order.
"""

import codecs
import json
from enum import Enum
from typing import Any, Callable, Optional

DATA_PREFIX = "data: "
DONE_TOKEN = "[DONE]"


class StreamState(Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    DONE = "done"


def extract_delta(payload: Any) -> Optional[str]:
    """Return ``choices[0].delta.content`` when it is a non-empty string."""
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    delta = first.get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    if isinstance(content, str) and content:
        return content
    return None


class _Incomplete(Exception):
    """A data line whose payload is not valid JSON (yet)."""


class StreamReader:
    """
    Turns raw response bytes into ordered text deltas.

    ``feed`` takes each chunk as it arrives, ``close`` is called once the
    body has ended. ``on_done`` is called exactly once: at the ``[DONE]``
    frame, or from ``close`` when the stream ends without one.
    """

    def __init__(self, on_delta: Callable[[str], None], on_done: Optional[Callable[[], None]] = None):
        self._on_delta = on_delta
        self._on_done = on_done
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self.state = StreamState.IDLE

    @property
    def done(self) -> bool:
        return self.state is StreamState.DONE

    def feed(self, chunk: bytes) -> None:
        if self.done:
            return
        self.state = StreamState.STREAMING
        self._buffer += self._decoder.decode(chunk)

        while not self.done:
            newline = self._buffer.find("\n")
            if newline == -1:
                break
            line = self._buffer[:newline]
            self._buffer = self._buffer[newline + 1:]
            try:
                self._process_line(line)
            except _Incomplete:
                # Put it back and wait for more bytes.
                self._buffer = line + "\n" + self._buffer
                break

    def close(self) -> None:
        """Handle end of body: flush what is buffered, best effort, then finish."""
        if not self.done:
            self._buffer += self._decoder.decode(b"", final=True)
            if self._buffer.strip():
                for line in self._buffer.split("\n"):
                    try:
                        self._process_line(line)
                    except _Incomplete:
                        continue
                    if self.done:
                        break
            self._buffer = ""
        self._finish()

    def _process_line(self, line: str) -> None:
        if line.endswith("\r"):
            line = line[:-1]
        if not line.strip() or line.startswith(":"):
            return
        if not line.startswith(DATA_PREFIX):
            return

        data = line[len(DATA_PREFIX):].strip()
        if data == DONE_TOKEN:
            self._finish()
            return

        try:
            payload = json.loads(data)
        except ValueError:
            raise _Incomplete(data)

        content = extract_delta(payload)
        if content:
            self._on_delta(content)

    def _finish(self) -> None:
        if self.done:
            return
        self.state = StreamState.DONE
        self._buffer = ""
        if self._on_done is not None:
            self._on_done()
