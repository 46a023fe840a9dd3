from __future__ import annotations
import logging
import re
from typing import BinaryIO, Optional

INITIAL_BUFFER_SIZE = 512
# bytes of every capacity kept free; a chunk never fills the last two slots
RESERVED_BYTES = 2

_TERMINATOR_RE = re.compile(rb"[\r\n]")


class GrowableBuffer:
    """Byte buffer with a read cursor that survives refills and growth.

    ``next_line`` marks the start of unconsumed data and ``buffer_end`` the end
    of loaded data. Bytes between the two are kept across :meth:`refill`.
    """

    def __init__(
        self,
        initial_capacity: int = INITIAL_BUFFER_SIZE,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if initial_capacity <= RESERVED_BYTES:
            raise ValueError(f"initial_capacity must be greater than {RESERVED_BYTES}")
        self.capacity = initial_capacity
        self.data = bytearray(initial_capacity)
        self.next_line = 0
        self.buffer_end = 0
        self.more_data_available = False
        self.growth_count = 0
        self.logger = logger or logging.getLogger(__name__)

    @property
    def usable_capacity(self) -> int:
        return self.capacity - RESERVED_BYTES

    @property
    def remaining(self) -> int:
        return self.buffer_end - self.next_line

    def refill(self, stream: BinaryIO) -> int:
        """Compact kept bytes to the front and load as much new data as fits.

        The buffer doubles when the kept bytes already occupy all usable space.
        Returns the number of bytes read from ``stream``.
        """
        keep = self.remaining
        to_load = self.usable_capacity - keep
        if to_load == 0:
            self._grow()
            to_load = self.usable_capacity - keep
        if keep:
            self.data[0:keep] = self.data[self.next_line:self.buffer_end]
        self.next_line = 0
        self.buffer_end = keep

        chunk = stream.read(to_load) or b""
        bytes_read = len(chunk)
        self.data[keep:keep + bytes_read] = chunk
        self.more_data_available = bytes_read == to_load
        self.buffer_end = keep + bytes_read
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                "Refill kept=%d requested=%d read=%d capacity=%d",
                keep,
                to_load,
                bytes_read,
                self.capacity,
            )
        return bytes_read

    def _grow(self) -> None:
        new_capacity = self.capacity * 2
        grown = bytearray(new_capacity)
        grown[0:self.buffer_end] = self.data[0:self.buffer_end]
        self.data = grown
        self.capacity = new_capacity
        self.growth_count += 1
        self.logger.debug("Buffer grown to %d bytes", new_capacity)

    def find_terminator(self, start: int) -> int:
        """Index of the first CR or LF in ``[start, buffer_end)``, or -1."""
        match = _TERMINATOR_RE.search(self.data, start, self.buffer_end)
        return match.start() if match else -1

    def byte_at(self, index: int) -> Optional[int]:
        if self.next_line <= index < self.buffer_end:
            return self.data[index]
        return None

    def view(self, start: int, stop: int) -> bytes:
        return bytes(self.data[start:stop])

    def sample(self) -> bytes:
        return self.view(self.next_line, self.buffer_end)

    def release(self) -> None:
        self.data = bytearray()
        self.next_line = 0
        self.buffer_end = 0
        self.more_data_available = False
