"""Error definitions for the asset registry codec."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_MALFORMED_FRAMING = "E_MALFORMED_FRAMING"
E_INVALID_TYPE_TAG = "E_INVALID_TYPE_TAG"
E_TRUNCATED_INPUT = "E_TRUNCATED_INPUT"
E_NO_ROOT_EXPORT = "E_NO_ROOT_EXPORT"
E_BAD_IMPORT_REFERENCE = "E_BAD_IMPORT_REFERENCE"
E_IO = "E_IO"
E_INDEX_OUT_OF_RANGE = "E_INDEX_OUT_OF_RANGE"
E_INVALID_LOGICAL_PATH = "E_INVALID_LOGICAL_PATH"
E_UNMAPPED_PATH = "E_UNMAPPED_PATH"


@dataclass
class RegistryError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class MalformedFraming(RegistryError):
    pass


class InvalidTypeTag(RegistryError):
    pass


class TruncatedInput(RegistryError):
    pass


class NoRootExport(RegistryError):
    pass


class BadImportReference(RegistryError):
    pass


class IoFailure(RegistryError):
    pass


class IndexOutOfRange(RegistryError):
    pass


class InvalidLogicalPath(RegistryError):
    pass


class UnmappedPath(RegistryError):
    pass


def malformed_framing(
    message: str, context: Optional[Dict[str, Any]] = None
) -> MalformedFraming:
    return MalformedFraming(
        code=E_MALFORMED_FRAMING, message=message, context=context
    )


def index_out_of_range(
    message: str, context: Optional[Dict[str, Any]] = None
) -> IndexOutOfRange:
    return IndexOutOfRange(
        code=E_INDEX_OUT_OF_RANGE, message=message, context=context
    )


__all__ = [
    "RegistryError",
    "MalformedFraming",
    "InvalidTypeTag",
    "TruncatedInput",
    "NoRootExport",
    "BadImportReference",
    "IoFailure",
    "IndexOutOfRange",
    "InvalidLogicalPath",
    "UnmappedPath",
    "malformed_framing",
    "index_out_of_range",
    "E_MALFORMED_FRAMING",
    "E_INVALID_TYPE_TAG",
    "E_TRUNCATED_INPUT",
    "E_NO_ROOT_EXPORT",
    "E_BAD_IMPORT_REFERENCE",
    "E_IO",
    "E_INDEX_OUT_OF_RANGE",
    "E_INVALID_LOGICAL_PATH",
    "E_UNMAPPED_PATH",
]
