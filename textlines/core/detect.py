from __future__ import annotations
import re
from typing import Dict, Optional, Tuple, Union

import chardet  # type: ignore

from .models import Encoding, NewlineStyle

UTF8_BOM = b"\xef\xbb\xbf"
UTF16_BE_BOM = b"\xfe\xff"
UTF16_LE_BOM = b"\xff\xfe"

# checked in order; the UTF-8 mark is the longest
_BOMS: Tuple[Tuple[bytes, Encoding], ...] = (
    (UTF8_BOM, Encoding.UTF8_BOM),
    (UTF16_BE_BOM, Encoding.UTF16_BE_BOM),
    (UTF16_LE_BOM, Encoding.UTF16_LE_BOM),
)

# control bytes that never show up in text; TAB, LF, VT, FF and CR are allowed
NON_TEXT_BYTES = frozenset(list(range(1, 9)) + list(range(14, 32)))

_NEWLINE_RE = re.compile(rb"\r\n|\n\r|\r|\n")
_NEWLINE_TEXT_RE = re.compile("\r\n|\n\r|\r|\n")

_NEWLINE_BY_TOKEN = {
    "\r\n": NewlineStyle.WINDOWS,
    "\n\r": NewlineStyle.ACORN,
    "\r": NewlineStyle.CLASSIC_MAC,
    "\n": NewlineStyle.UNIX,
}

# equal tallies go to the first style listed here
NEWLINE_PRECEDENCE = (
    NewlineStyle.CLASSIC_MAC,
    NewlineStyle.WINDOWS,
    NewlineStyle.UNIX,
    NewlineStyle.ACORN,
)


def detect_encoding(sample: bytes) -> Tuple[Encoding, int]:
    """Classify ``sample`` and return ``(encoding, bom_length)``.

    A byte-order mark decides immediately. Without one, the sample is read as
    consecutive byte pairs: text that is mostly ASCII encoded as UTF-16 has its
    zero bytes concentrated on one side of each pair, and that side tells the
    byte order. Otherwise any non-text control byte marks the data as binary.
    """
    for bom, encoding in _BOMS:
        if sample.startswith(bom):
            return encoding, len(bom)

    even_zeros = odd_zeros = non_text = 0
    pairs = len(sample) // 2
    for offset in range(0, pairs * 2, 2):
        first, second = sample[offset], sample[offset + 1]
        if first == 0:
            even_zeros += 1
        elif first in NON_TEXT_BYTES:
            non_text += 1
        if second == 0:
            odd_zeros += 1
        elif second in NON_TEXT_BYTES:
            non_text += 1

    if even_zeros < odd_zeros // 8:
        return Encoding.UTF16_LE, 0
    if odd_zeros < even_zeros // 8:
        return Encoding.UTF16_BE, 0
    if non_text == 0:
        return Encoding.UTF8, 0
    return Encoding.BINARY, 0


def count_newlines(sample: Union[bytes, str]) -> Dict[NewlineStyle, int]:
    """Tally every terminator in ``sample``; pairs count once."""
    counts = {style: 0 for style in NEWLINE_PRECEDENCE}
    if isinstance(sample, str):
        tokens = _NEWLINE_TEXT_RE.findall(sample)
    else:
        tokens = [t.decode("ascii") for t in _NEWLINE_RE.findall(sample)]
    for token in tokens:
        counts[_NEWLINE_BY_TOKEN[token]] += 1
    return counts


def select_newline(counts: Dict[NewlineStyle, int]) -> NewlineStyle:
    best = NewlineStyle.UNKNOWN
    best_count = 0
    for style in NEWLINE_PRECEDENCE:
        count = counts.get(style, 0)
        if count > best_count:
            best, best_count = style, count
    return best


def detect_newline(sample: bytes, encoding: Encoding) -> NewlineStyle:
    """Dominant newline convention of a post-BOM ``sample``."""
    if encoding.is_supported:
        return select_newline(count_newlines(sample))
    if encoding.is_utf16:
        codec = "utf-16-be" if encoding.is_big_endian else "utf-16-le"
        even = sample[: len(sample) - len(sample) % 2]
        units = even.decode(codec, errors="surrogatepass")
        return select_newline(count_newlines(units))
    return NewlineStyle.UNKNOWN


def guess_charset(sample: bytes) -> Optional[str]:
    """chardet's best guess for a BOM-less sample, or None when it has none."""
    if not sample:
        return None
    return chardet.detect(sample).get("encoding")
