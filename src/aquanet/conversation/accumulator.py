"""Buffer for the text of the response currently being streamed."""

from ..errors import AlreadyActiveError


class StreamAccumulator:
    """Accumulates chunks for a single in-flight response.

    Only one stream may be active at a time.
    """

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    @property
    def current(self) -> str:
        """Text accumulated so far."""
        return "".join(self._parts)

    def begin(self) -> None:
        """Start a new stream with an empty buffer.

        Raises:
            AlreadyActiveError: If a stream is already active
        """
        if self._active:
            raise AlreadyActiveError()
        self._parts = []
        self._active = True

    def append(self, chunk: str) -> None:
        """Add a chunk; ignored when no stream is active."""
        if self._active:
            self._parts.append(chunk)

    def finish(self) -> str:
        """End the stream and return its text."""
        text = self.current
        self._active = False
        return text

    def abort(self) -> None:
        """End the stream and discard its text."""
        self._parts = []
        self._active = False
