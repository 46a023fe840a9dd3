from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional


class Encoding(Enum):
    UTF8 = "UTF-8"  # also ASCII and 8-bit code pages such as Windows-1252
    UTF8_BOM = "UTF-8 with BOM"
    UTF16_LE = "UTF-16 LE"
    UTF16_BE = "UTF-16 BE"
    UTF16_LE_BOM = "UTF-16 LE with BOM"
    UTF16_BE_BOM = "UTF-16 BE with BOM"
    BINARY = "Binary"

    @property
    def label(self) -> str:
        return self.value

    @property
    def is_supported(self) -> bool:
        return self in (Encoding.UTF8, Encoding.UTF8_BOM)

    @property
    def is_utf16(self) -> bool:
        return self in _UTF16_ENCODINGS

    @property
    def is_big_endian(self) -> bool:
        return self in (Encoding.UTF16_BE, Encoding.UTF16_BE_BOM)


_UTF16_ENCODINGS = frozenset(
    {Encoding.UTF16_LE, Encoding.UTF16_BE, Encoding.UTF16_LE_BOM, Encoding.UTF16_BE_BOM}
)


class NewlineStyle(Enum):
    WINDOWS = ("Windows", b"\r\n")
    UNIX = ("Unix", b"\n")
    CLASSIC_MAC = ("Classic Mac", b"\r")
    ACORN = ("Acorn BBC", b"\n\r")
    UNKNOWN = ("-", None)

    def __init__(self, label: str, terminator: Optional[bytes]) -> None:
        self.label = label
        self.terminator = terminator


@dataclass
class LineRecord:
    line_num: int
    text: str


@dataclass
class FileReport:
    path: Path
    encoding: Optional[Encoding] = None
    newline: NewlineStyle = NewlineStyle.UNKNOWN
    charset_hint: Optional[str] = None
    line_count: Optional[int] = None
    error: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def supported(self) -> bool:
        return self.encoding is not None and self.encoding.is_supported

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": str(self.path),
            "encoding": self.encoding.label if self.encoding is not None else None,
            "newline": self.newline.label,
            "supported": self.supported,
            "charset_hint": self.charset_hint,
            "line_count": self.line_count,
            "error": self.error,
            **self.meta,
        }
