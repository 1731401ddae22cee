"""Response framing for reads that arrive in arbitrary chunks.

ClientQuery responses are not length-prefixed. A response is complete when either:

1. a read returns fewer bytes than the buffer holds (the socket had nothing more buffered), or
2. the accumulated text holds the status marker and ends with the line terminator.
"""

import codecs

from ts_clientquery.querystring import TERMINATOR

COMPLETION_MARKER = "error id="


class ResponseAccumulator:
    """Collects chunks of one response and reports when it is complete."""

    def __init__(self, buffer_size: int) -> None:
        """Initialize an empty accumulator.

        Args:
            buffer_size: Capacity of one read; a shorter chunk ends the response.

        """
        self._buffer_size = buffer_size
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._parts: list[str] = []
        self._complete = False
        self.bytes_received = 0

    @property
    def complete(self) -> bool:
        return self._complete

    @property
    def text(self) -> str:
        return "".join(self._parts)

    def feed(self, chunk: bytes) -> bool:
        """Append one chunk and return True once the response is complete."""
        if self._complete:
            msg = "Response already complete."
            raise RuntimeError(msg)
        self.bytes_received += len(chunk)
        short_read = len(chunk) < self._buffer_size
        self._parts.append(self._decoder.decode(chunk, final=short_read))
        if short_read:
            self._complete = True
        else:
            text = self.text
            if COMPLETION_MARKER in text and text.endswith(TERMINATOR):
                self._parts = [text, self._decoder.decode(b"", final=True)]
                self._complete = True
        return self._complete
