"""
Event-stream framing.

A content frame is ``data: `` + the JSON-encoded fragment + a blank line.
JSON encoding keeps quotes, newlines and control characters inside one
logical line. The diagnostic frame is plain text and deliberately left
unterminated, so it can never be mistaken for a content frame.
"""

import json
import re
from dataclasses import dataclass

from quickstream.domain.exceptions import FrameDecodeError
from quickstream.domain.models import Fragment

FRAME_PREFIX = "data: "
FRAME_TERMINATOR = "\n\n"
DIAGNOSTIC_MESSAGE = "an error occurred while streaming response."

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def encode_frame(fragment: Fragment) -> str:
    """Build the wire frame for one fragment."""
    return f"{FRAME_PREFIX}{json.dumps(fragment.text, ensure_ascii=False)}{FRAME_TERMINATOR}"


def encode_diagnostic(message: str = DIAGNOSTIC_MESSAGE) -> str:
    """Build the best-effort error notice sent before closing a failed stream."""
    return FRAME_PREFIX + _LINE_BREAK.sub(" ", message)


def decode_payload(data: str) -> str:
    """Decode a content frame payload back into fragment text."""
    try:
        value = json.loads(data)
    except json.JSONDecodeError as exc:
        raise FrameDecodeError("Frame payload is not valid JSON", payload=data) from exc
    if not isinstance(value, str):
        raise FrameDecodeError(
            "Frame payload is not a JSON string",
            payload=data,
            details={"type": type(value).__name__},
        )
    return value


@dataclass(frozen=True)
class SSEEvent:
    """One dispatched Server-Sent Event.

    ``terminated`` is False for a trailing event that the stream ended
    without closing with a blank line.
    """

    data: str
    event: str = "message"
    id: str | None = None
    terminated: bool = True


class SSEDecoder:
    """Incremental Server-Sent Events parser.

    Feed it decoded text in arbitrary chunks; it returns every event
    completed by that chunk. Call ``flush`` once the connection closes to
    collect an unterminated trailing event.
    """

    def __init__(self) -> None:
        self._buffer = ""
        self._data: list[str] = []
        self._event = ""
        self._last_id: str | None = None

    def feed(self, chunk: str) -> list[SSEEvent]:
        self._buffer += chunk
        events: list[SSEEvent] = []
        while True:
            match = _LINE_BREAK.search(self._buffer)
            if match is None:
                break
            # A lone trailing CR may be the first half of a CRLF.
            if match.group() == "\r" and match.end() == len(self._buffer):
                break
            line = self._buffer[: match.start()]
            self._buffer = self._buffer[match.end() :]
            event = self._process_line(line)
            if event is not None:
                events.append(event)
        return events

    def flush(self) -> SSEEvent | None:
        if self._buffer:
            line = self._buffer.rstrip("\r")
            self._buffer = ""
            self._process_line(line)
        if not self._data:
            self._event = ""
            return None
        return self._dispatch(terminated=False)

    def _process_line(self, line: str) -> SSEEvent | None:
        if not line:
            if not self._data:
                self._event = ""
                return None
            return self._dispatch(terminated=True)
        if line.startswith(":"):
            return None

        field_name, sep, value = line.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]

        if field_name == "data":
            self._data.append(value)
        elif field_name == "event":
            self._event = value
        elif field_name == "id" and "\0" not in value:
            self._last_id = value
        return None

    def _dispatch(self, terminated: bool) -> SSEEvent:
        event = SSEEvent(
            data="\n".join(self._data),
            event=self._event or "message",
            id=self._last_id,
            terminated=terminated,
        )
        self._data = []
        self._event = ""
        return event
