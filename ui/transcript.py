# ui/transcript.py

from typing import List, Optional
from models.schema import ChatMessage

class TurnInProgressError(Exception):
    """A new message was submitted while the previous reply is still streaming."""

class Transcript:
    """
    Ordered chat history as shown to the user.

    Deltas of one reply all land in the single trailing assistant message,
    so the list never holds two assistant messages in a row. Only one turn
    can stream at a time.
    """

    def __init__(self, messages: Optional[List[ChatMessage]] = None):
        self.messages: List[ChatMessage] = list(messages or [])
        self.streaming = False

    def start_turn(self, text: str) -> List[ChatMessage]:
        """Append the user's message and return the history to send upstream."""
        if self.streaming:
            raise TurnInProgressError("Wait for the current reply to finish.")
        text = (text or "").strip()
        if not text:
            raise ValueError("Message is empty")

        self.messages.append(ChatMessage(role="user", content=text))
        self.streaming = True
        return list(self.messages)

    def append_delta(self, chunk: str) -> None:
        last = self.messages[-1] if self.messages else None
        if last is not None and last.role == "assistant":
            last.content += chunk
        else:
            self.messages.append(ChatMessage(role="assistant", content=chunk))

    def finish_turn(self) -> None:
        self.streaming = False

    # Partial reply text, if any, stays visible.
    abort_turn = finish_turn

    def to_dicts(self) -> List[dict]:
        return [m.model_dump() for m in self.messages]
