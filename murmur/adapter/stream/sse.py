"""Server-sent events codec.

Only the subset of the event-stream format the comment channel uses:
named events, (multi-line) data, ids, retry hints and ``:`` comments.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ServerSentEvent:
    """A single dispatched event-stream frame."""

    event: str = "message"
    data: str = ""
    id: Optional[str] = None
    retry: Optional[int] = None


def encode_event(event: str, data: str, event_id: Optional[str] = None) -> str:
    """Encode one named event as event-stream text.

    Newlines in ``data`` are split across several ``data:`` lines.
    """
    lines = [f"event: {event}"]
    if event_id is not None:
        lines.append(f"id: {event_id}")
    lines.extend(f"data: {line}" for line in data.split("\n"))
    return "\n".join(lines) + "\n\n"


def encode_comment(text: str) -> str:
    """Encode a ``:`` comment line, used as a keep-alive."""
    return f": {text}\n\n"


class SSEDecoder:
    """Incremental, line-oriented event-stream decoder.

    Feed lines without their terminators; a blank line dispatches the
    event accumulated so far. A named event with no data lines is still
    dispatched, since ``connected`` frames carry no payload.
    """

    def __init__(self) -> None:
        self._event = ""
        self._data: list[str] = []
        self._id: Optional[str] = None
        self._retry: Optional[int] = None

    def feed_line(self, line: str) -> Optional[ServerSentEvent]:
        """Consume one line.

        Returns:
            The dispatched event when ``line`` is blank and something was
            accumulated, otherwise None
        """
        if not line:
            return self._dispatch()

        if line.startswith(":"):
            return None

        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]

        if field == "event":
            self._event = value
        elif field == "data":
            self._data.append(value)
        elif field == "id":
            if "\0" not in value:
                self._id = value
        elif field == "retry":
            if value.isdigit():
                self._retry = int(value)
        # Unknown fields are ignored
        return None

    def _dispatch(self) -> Optional[ServerSentEvent]:
        if not self._event and not self._data:
            return None
        event = ServerSentEvent(
            event=self._event or "message",
            data="\n".join(self._data),
            id=self._id,
            retry=self._retry,
        )
        self._event = ""
        self._data = []
        self._retry = None
        # The last event id persists across events
        return event
