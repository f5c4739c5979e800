"""Deduplicated value store backing every tag map in the registry.

Layout (all little-endian)::

    u32 start magic
    u32 x 12 headers: numberless names, names, numberless export paths,
        export paths, texts, ansi strings, wide strings, ansi chars,
        wide units, numberless pairs, numbered pairs, text bytes
    texts (u32 length+1, utf-8 bytes, NUL)
    numberless names, names           (NameIndexFlagged)
    numberless export paths, export paths
    ansi offsets, wide offsets        (u32 each, derived)
    ansi strings (NUL-terminated), wide strings (u16 NUL-terminated)
    pairs
    u32 end magic

Only the table contents and the numbered pair count are kept in memory; all
other headers and both offset tables are recomputed by :meth:`Store.write`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ..logging import get_logger
from .constants import STORE_MAGIC_START, STORE_MAGIC_END
from .errors import index_out_of_range, malformed_framing
from .primitives import (
    ExportPath,
    MapHandle,
    NameIndexFlagged,
    Pair,
    ValueId,
    ValueType,
)
from .stream import RegistryReader, RegistryWriter

__all__ = ["Store"]

_TABLE_FOR_TYPE = {
    ValueType.ANSI_STRING: "ansi_strings",
    ValueType.WIDE_STRING: "wide_strings",
    ValueType.NUMBERLESS_NAME: "nbl_names",
    ValueType.NAME: "names",
    ValueType.NUMBERLESS_EXPORT_PATH: "nbl_export_paths",
    ValueType.EXPORT_PATH: "export_paths",
    ValueType.LOCALIZED_TEXT: "texts",
}


def _read_text(reader: RegistryReader) -> str:
    size = reader.u32("text length")
    if size == 0:
        return ""
    raw = reader.read_exact(size - 1, "text")
    reader.u8("text terminator")
    return raw.decode("utf-8", errors="replace")


def _write_text(writer: RegistryWriter, text: str) -> None:
    raw = text.encode("utf-8")
    writer.u32(len(raw) + 1, "text length")
    writer.write_bytes(raw, "text")
    writer.u8(0, "text terminator")


def _read_ansi(reader: RegistryReader) -> str:
    raw = bytearray()
    while True:
        b = reader.u8("ansi string")
        if b == 0:
            break
        raw.append(b)
    return raw.decode("utf-8", errors="replace")


def _read_wide(reader: RegistryReader) -> str:
    raw = bytearray()
    while True:
        unit = reader.read_exact(2, "wide string")
        if unit == b"\x00\x00":
            break
        raw += unit
    return raw.decode("utf-16-le", errors="replace")


def _ansi_bytes(value: str) -> bytes:
    return value.encode("utf-8")


def _wide_bytes(value: str) -> bytes:
    return value.encode("utf-16-le", errors="surrogatepass")


def _text_bytes(value: str) -> int:
    # length prefix + payload + terminator
    return 4 + len(value.encode("utf-8")) + 1


@dataclass
class Store:
    texts: List[str] = field(default_factory=list)
    nbl_names: List[NameIndexFlagged] = field(default_factory=list)
    names: List[NameIndexFlagged] = field(default_factory=list)
    nbl_export_paths: List[ExportPath] = field(default_factory=list)
    export_paths: List[ExportPath] = field(default_factory=list)
    ansi_strings: List[str] = field(default_factory=list)
    wide_strings: List[str] = field(default_factory=list)
    pairs: List[Pair] = field(default_factory=list)
    # Count header for numbered-key pairs; their payload is not modelled.
    numbered_pair_count: int = 0

    # Decode ----------------------------------------------------------------
    @classmethod
    def read(cls, reader: RegistryReader) -> "Store":
        start = reader.tell()
        magic = reader.u32("store start magic")
        if magic != STORE_MAGIC_START:
            raise malformed_framing(
                f"Store start magic mismatch: {magic:#010x}",
                {"offset": start, "expected": STORE_MAGIC_START},
            )

        nbl_names_count = reader.u32("numberless name count")
        names_count = reader.u32("name count")
        nbl_export_path_count = reader.u32("numberless export path count")
        export_path_count = reader.u32("export path count")
        texts_count = reader.u32("text count")
        ansi_count = reader.u32("ansi string count")
        wide_count = reader.u32("wide string count")
        reader.u32("ansi string chars")
        reader.u32("wide string units")
        nbl_pair_count = reader.u32("numberless pair count")
        numbered_pair_count = reader.u32("numbered pair count")
        reader.u32("text bytes")

        texts = reader.read_array(texts_count, _read_text)
        nbl_names = reader.read_array(nbl_names_count, NameIndexFlagged.read)
        names = reader.read_array(names_count, NameIndexFlagged.read)
        nbl_export_paths = reader.read_array(
            nbl_export_path_count, ExportPath.read
        )
        export_paths = reader.read_array(export_path_count, ExportPath.read)

        # Offset tables are derived from the string payloads that follow.
        reader.read_exact(4 * ansi_count, "ansi string offsets")
        reader.read_exact(4 * wide_count, "wide string offsets")

        ansi_strings = reader.read_array(ansi_count, _read_ansi)
        wide_strings = reader.read_array(wide_count, _read_wide)
        pairs = reader.read_array(nbl_pair_count, Pair.read)

        end_offset = reader.tell()
        magic = reader.u32("store end magic")
        if magic != STORE_MAGIC_END:
            raise malformed_framing(
                f"Store end magic mismatch: {magic:#010x}",
                {"offset": end_offset, "expected": STORE_MAGIC_END},
            )
        get_logger().debug(
            "Read store: %d bytes texts=%d names=%d/%d export_paths=%d/%d "
            "ansi=%d wide=%d pairs=%d",
            reader.tell() - start,
            texts_count,
            nbl_names_count,
            names_count,
            nbl_export_path_count,
            export_path_count,
            ansi_count,
            wide_count,
            nbl_pair_count,
        )
        return cls(
            texts=texts,
            nbl_names=nbl_names,
            names=names,
            nbl_export_paths=nbl_export_paths,
            export_paths=export_paths,
            ansi_strings=ansi_strings,
            wide_strings=wide_strings,
            pairs=pairs,
            numbered_pair_count=numbered_pair_count,
        )

    # Encode ----------------------------------------------------------------
    def write(self, writer: RegistryWriter) -> None:
        ansi_payloads = [_ansi_bytes(s) for s in self.ansi_strings]
        wide_payloads = [_wide_bytes(s) for s in self.wide_strings]

        writer.u32(STORE_MAGIC_START, "store start magic")
        writer.u32(len(self.nbl_names), "numberless name count")
        writer.u32(len(self.names), "name count")
        writer.u32(len(self.nbl_export_paths), "numberless export path count")
        writer.u32(len(self.export_paths), "export path count")
        writer.u32(len(self.texts), "text count")
        writer.u32(len(self.ansi_strings), "ansi string count")
        writer.u32(len(self.wide_strings), "wide string count")
        writer.u32(
            sum(len(p) + 1 for p in ansi_payloads), "ansi string chars"
        )
        writer.u32(
            sum(len(p) // 2 + 1 for p in wide_payloads), "wide string units"
        )
        writer.u32(len(self.pairs), "numberless pair count")
        writer.u32(self.numbered_pair_count, "numbered pair count")
        writer.u32(sum(_text_bytes(t) for t in self.texts), "text bytes")

        writer.write_array(self.texts, _write_text)
        writer.write_array(self.nbl_names, lambda w, n: n.write(w))
        writer.write_array(self.names, lambda w, n: n.write(w))
        writer.write_array(self.nbl_export_paths, lambda w, p: p.write(w))
        writer.write_array(self.export_paths, lambda w, p: p.write(w))

        offset = 0
        for payload in ansi_payloads:
            writer.u32(offset, "ansi string offset")
            offset += len(payload) + 1
        offset = 0
        for payload in wide_payloads:
            writer.u32(offset, "wide string offset")
            offset += len(payload) // 2 + 1

        for payload in ansi_payloads:
            writer.write_bytes(payload + b"\x00", "ansi string")
        for payload in wide_payloads:
            writer.write_bytes(payload + b"\x00\x00", "wide string")

        writer.write_array(self.pairs, lambda w, p: p.write(w))
        writer.u32(STORE_MAGIC_END, "store end magic")

    # Lookup ----------------------------------------------------------------
    def table_for(self, value_type: ValueType) -> list:
        return getattr(self, _TABLE_FOR_TYPE[value_type])

    def resolve(self, value: ValueId):
        """Return the raw table entry a value id points at."""
        table = self.table_for(value.value_type)
        if value.index >= len(table):
            raise index_out_of_range(
                f"{value.value_type.name} index {value.index} outside "
                f"table of {len(table)}",
                {"type": value.value_type.name, "index": value.index},
            )
        return table[value.index]

    def pairs_for(self, handle: MapHandle) -> List[Pair]:
        if handle.pair_end > len(self.pairs):
            raise index_out_of_range(
                f"Map range {handle.pair_begin}+{handle.num} outside "
                f"{len(self.pairs)} pairs",
                {"pair_begin": handle.pair_begin, "num": handle.num},
            )
        return self.pairs[handle.pair_begin : handle.pair_end]
