"""Ordered transcript of conversation messages."""

from collections.abc import Iterator

from ..errors import TranscriptStoreError
from .models import Message, Role


class ConversationStore:
    """Append-only transcript.

    The only permitted in-place change is replacing the content of the
    last message when it is an assistant message.
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []

    @property
    def messages(self) -> tuple[Message, ...]:
        """Read-only view of the transcript."""
        return tuple(self._messages)

    def append(self, message: Message) -> int:
        """Append a message and return its index."""
        self._messages.append(message)
        return len(self._messages) - 1

    def update_content(self, index: int, content: str) -> Message:
        """Replace the content of the assistant message at ``index``.

        Raises:
            TranscriptStoreError: If ``index`` is not the last message or the
                message there is not an assistant message
        """
        if index != len(self._messages) - 1:
            raise TranscriptStoreError(
                f"Only the last message can be updated (got index {index}, "
                f"transcript length {len(self._messages)})"
            )
        current = self._messages[index]
        if current.role is not Role.ASSISTANT:
            raise TranscriptStoreError("Only assistant messages can be updated")

        updated = current.model_copy(update={"content": content})
        self._messages[index] = updated
        return updated

    def clear(self) -> None:
        self._messages = []

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))
