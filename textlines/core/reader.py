from __future__ import annotations
import logging
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from .buffer import INITIAL_BUFFER_SIZE, GrowableBuffer
from .detect import detect_encoding, detect_newline
from .models import Encoding, NewlineStyle

DEFAULT_LOGGER_NAME = "textlines"
READ_MODES = ("r", "rb")

_CR = 0x0D
_LF = 0x0A
# second byte that completes a pair started by the first one
_PAIR_COMPLEMENT = {_CR: _LF, _LF: _CR}


class LineReadError(OSError):
    """The underlying stream failed while loading more data."""


class TextFile:
    """Reads lines of text from a binary stream, one buffer chunk at a time.

    Encoding and newline convention are detected once, from the first chunk.
    Only UTF-8 (with or without BOM) produces lines; every other encoding is
    reported through :attr:`encoding` and reads as an empty file.

    Lines come back as ``bytes`` with the terminator removed. ``\\r``, ``\\n``,
    ``\\r\\n`` and ``\\n\\r`` all end a line, whatever the dominant style is.
    """

    def __init__(
        self,
        stream: BinaryIO,
        *,
        path: Optional[Path] = None,
        initial_capacity: int = INITIAL_BUFFER_SIZE,
        strict: bool = False,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        base_logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.logger = base_logger.getChild(self.__class__.__name__.lower())
        self.path = path
        self.strict = strict
        self._stream: Optional[BinaryIO] = stream
        self._buffer = GrowableBuffer(initial_capacity, logger=self.logger)
        self._done = False
        self._closed = False
        # byte to swallow at the start of the next call, see _take_line
        self._pending_pair: Optional[int] = None

        self._refill()
        sample = self._buffer.sample()
        encoding, bom_length = detect_encoding(sample)
        self._buffer.next_line += bom_length
        self._encoding = encoding
        self._sample = sample[bom_length:]
        self._newline = detect_newline(self._sample, encoding)
        if not encoding.is_supported:
            self._done = True
        self.logger.debug(
            "Detected %s / %s for %s",
            encoding.label,
            self._newline.label,
            path if path is not None else "<stream>",
        )

    # Metadata

    @property
    def encoding(self) -> Encoding:
        return self._encoding

    @property
    def newline(self) -> NewlineStyle:
        return self._newline

    @property
    def is_supported(self) -> bool:
        return self._encoding.is_supported

    @property
    def sample(self) -> bytes:
        """Post-BOM bytes of the first chunk, as seen by the detectors."""
        return self._sample

    @property
    def done(self) -> bool:
        return self._done

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def capacity(self) -> int:
        return self._buffer.capacity

    @property
    def growth_count(self) -> int:
        return self._buffer.growth_count

    # Reading

    def next_line(self) -> Optional[bytes]:
        """Return the next line without its terminator, or None at the end."""
        if self._done:
            return None
        self._skip_pending_pair()
        return self._take_line()

    def next_line_into(self, buffer: bytearray, bufsize: int) -> Optional[bytearray]:
        """Copy the next line into ``buffer`` the way ``fgets`` would.

        At most ``bufsize - 2`` bytes of the line are kept; a ``\\n`` and a NUL
        byte always follow them, whatever terminator the file used.
        """
        if bufsize <= 2:
            raise ValueError("bufsize must be greater than 2")
        if len(buffer) < bufsize:
            raise ValueError(f"buffer holds {len(buffer)} bytes, fewer than bufsize={bufsize}")
        line = self.next_line()
        if line is None:
            return None
        length = min(len(line), bufsize - 2)
        buffer[0:length] = line[:length]
        buffer[length] = _LF
        buffer[length + 1] = 0
        return buffer

    def lines(self, errors: str = "replace") -> Iterator[str]:
        for raw in self:
            yield raw.decode("utf-8", errors=errors)

    def __iter__(self) -> Iterator[bytes]:
        while True:
            line = self.next_line()
            if line is None:
                return
            yield line

    def _skip_pending_pair(self) -> None:
        if self._pending_pair is None:
            return
        expected, self._pending_pair = self._pending_pair, None
        buf = self._buffer
        if buf.remaining == 0 and buf.more_data_available:
            self._refill()
        if buf.byte_at(buf.next_line) == expected:
            buf.next_line += 1

    def _take_line(self) -> Optional[bytes]:
        buf = self._buffer
        scan_from = buf.next_line
        while True:
            end = buf.find_terminator(scan_from)
            if end >= 0:
                line = buf.view(buf.next_line, end)
                first = buf.data[end]
                follow = end + 1
                if follow < buf.buffer_end:
                    if buf.data[follow] == _PAIR_COMPLEMENT[first]:
                        follow += 1
                elif buf.more_data_available:
                    self._pending_pair = _PAIR_COMPLEMENT[first]
                buf.next_line = follow
                return line
            if buf.more_data_available:
                # rescan only the freshly loaded bytes
                scanned = buf.remaining
                self._refill()
                scan_from = buf.next_line + scanned
                continue
            self._done = True
            if buf.remaining == 0:
                return None
            line = buf.view(buf.next_line, buf.buffer_end)
            buf.next_line = buf.buffer_end
            return line

    def _refill(self) -> None:
        if self._stream is None:
            self._buffer.more_data_available = False
            return
        try:
            self._buffer.refill(self._stream)
        except OSError as exc:
            self._buffer.more_data_available = False
            if self.strict:
                raise LineReadError(f"Failed reading {self.path or '<stream>'}: {exc}") from exc
            self.logger.warning("Read error on %s: %s", self.path or "<stream>", exc)

    # Lifecycle

    def close(self) -> int:
        if self._closed:
            return 0
        self._closed = True
        self._done = True
        stream, self._stream = self._stream, None
        self._buffer.release()
        if stream is not None:
            stream.close()
        return 0

    def __enter__(self) -> "TextFile":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"TextFile(path={str(self.path)!r}, encoding={self._encoding.name}, "
            f"newline={self._newline.name}, capacity={self.capacity})"
        )


def open_textfile(
    path: Union[str, Path],
    mode: str = "r",
    *,
    initial_capacity: int = INITIAL_BUFFER_SIZE,
    strict: bool = False,
    logger: Optional[logging.Logger] = None,
) -> Optional[TextFile]:
    """Open ``path`` for line reading, or return None if it cannot be opened."""
    if mode not in READ_MODES:
        raise ValueError(f"Unsupported mode {mode!r}; text files are opened read-only ('r')")
    path = Path(path)
    base_logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
    try:
        stream = path.open("rb")
    except OSError as exc:
        base_logger.warning("Unable to open %s: %s", path, exc)
        return None
    try:
        return TextFile(
            stream,
            path=path,
            initial_capacity=initial_capacity,
            strict=strict,
            logger=base_logger,
        )
    except BaseException:
        stream.close()
        raise


def close_textfile(textfile: Optional[TextFile]) -> int:
    if textfile is None:
        return 0
    return textfile.close()
