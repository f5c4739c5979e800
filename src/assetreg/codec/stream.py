"""Forward-only binary reader/writer used by every registry codec.

All multi-byte integers are little-endian except the name table length
prefixes, which the format stores big-endian (``u16_be``).
"""

from __future__ import annotations

import io
import struct
from typing import BinaryIO, Callable, Iterable, List, TypeVar

from .errors import IoFailure, TruncatedInput, E_IO, E_TRUNCATED_INPUT

__all__ = ["RegistryReader", "RegistryWriter"]

T = TypeVar("T")

# Upper bound for a single read; sizes come from untrusted headers.
_READ_CHUNK = 1 << 16

_U8 = struct.Struct("<B")
_U16 = struct.Struct("<H")
_U16_BE = struct.Struct(">H")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")


class RegistryReader:
    """Sequential reader over a binary stream or an in-memory buffer."""

    def __init__(self, source: BinaryIO | bytes | bytearray | memoryview):
        if isinstance(source, (bytes, bytearray, memoryview)):
            source = io.BytesIO(bytes(source))
        self._stream = source
        self._offset = 0

    def tell(self) -> int:
        return self._offset

    def read_exact(self, size: int, label: str = "bytes") -> bytes:
        chunks: List[bytes] = []
        remaining = size
        while remaining > 0:
            try:
                chunk = self._stream.read(min(remaining, _READ_CHUNK))
            except OSError as e:
                raise IoFailure(
                    code=E_IO,
                    message=f"Read failed inside {label}: {e}",
                    context={"offset": self._offset},
                ) from e
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        data = b"".join(chunks)
        if len(data) != size:
            raise TruncatedInput(
                code=E_TRUNCATED_INPUT,
                message=(
                    f"Stream ended inside {label}: wanted {size} bytes, "
                    f"got {len(data)}"
                ),
                context={"offset": self._offset, "label": label},
            )
        self._offset += size
        return data

    def _unpack(self, st: struct.Struct, label: str) -> int:
        return st.unpack(self.read_exact(st.size, label))[0]

    def u8(self, label: str = "u8") -> int:
        return self._unpack(_U8, label)

    def u16(self, label: str = "u16") -> int:
        return self._unpack(_U16, label)

    def u16_be(self, label: str = "u16_be") -> int:
        return self._unpack(_U16_BE, label)

    def u32(self, label: str = "u32") -> int:
        return self._unpack(_U32, label)

    def u64(self, label: str = "u64") -> int:
        return self._unpack(_U64, label)

    def read_array(
        self, count: int, fn: Callable[["RegistryReader"], T]
    ) -> List[T]:
        return [fn(self) for _ in range(count)]


class RegistryWriter:
    """Sequential writer; defaults to an in-memory buffer."""

    def __init__(self, sink: BinaryIO | None = None):
        self._stream = sink if sink is not None else io.BytesIO()
        self._written = 0

    @property
    def bytes_written(self) -> int:
        return self._written

    def getvalue(self) -> bytes:
        if not isinstance(self._stream, io.BytesIO):
            raise TypeError("getvalue() requires an in-memory writer")
        return self._stream.getvalue()

    def write_bytes(self, data: bytes, label: str = "bytes") -> None:
        try:
            self._stream.write(data)
        except OSError as e:
            raise IoFailure(
                code=E_IO,
                message=f"Write failed inside {label}: {e}",
                context={"offset": self._written},
            ) from e
        self._written += len(data)

    def _pack(self, st: struct.Struct, value: int, label: str) -> None:
        try:
            raw = st.pack(value)
        except struct.error as e:
            raise ValueError(f"{label} out of range: {value!r}") from e
        self.write_bytes(raw, label)

    def u8(self, value: int, label: str = "u8") -> None:
        self._pack(_U8, value, label)

    def u16(self, value: int, label: str = "u16") -> None:
        self._pack(_U16, value, label)

    def u16_be(self, value: int, label: str = "u16_be") -> None:
        self._pack(_U16_BE, value, label)

    def u32(self, value: int, label: str = "u32") -> None:
        self._pack(_U32, value, label)

    def u64(self, value: int, label: str = "u64") -> None:
        self._pack(_U64, value, label)

    def write_array(
        self, items: Iterable[T], fn: Callable[["RegistryWriter", T], None]
    ) -> None:
        for item in items:
            fn(self, item)
