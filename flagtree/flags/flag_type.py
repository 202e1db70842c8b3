# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `FlagType`, the enum naming every concrete flag kind.

The value of each member is the short type label shown in help output
(`"int"`, `"[]string"`, ...). Lookups accept a few config-friendly aliases.

Example:
    FlagType("int")      → FlagType.INT
    FlagType("integer")  → FlagType.INT (via alias)
    FlagType("list")     → FlagType.STRING_SLICE (via alias)
"""
from __future__ import annotations

from enum import Enum


class FlagType(Enum):
    """
    Kind of value stored by a flag.

    Aliases:
        - "integer" → "int"
        - "boolean" → "bool"
        - "float"   → "float64"
        - "list"    → "[]string"
        - "dict"    → "map"
    """

    UNKNOWN = "unknown"
    STRING = "string"
    BOOL = "bool"
    INT = "int"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT64 = "float64"
    ENUM = "enum"
    DURATION = "duration"
    TIME = "time"
    SIZE = "size"
    PATH = "path"
    IP = "ip"
    IP4 = "ip4"
    IP6 = "ip6"
    URL = "url"
    MAP = "map"
    STRING_SLICE = "[]string"
    INT_SLICE = "[]int"

    @classmethod
    def choices(cls) -> list[FlagType]:
        """Return a list of all flag types."""
        return list(cls)

    @classmethod
    def _get_alias(cls, value: str) -> str:
        aliases = {
            "integer": "int",
            "boolean": "bool",
            "float": "float64",
            "list": "[]string",
            "dict": "map",
        }
        return aliases.get(value, value)

    @classmethod
    def _missing_(cls, value: object) -> FlagType:
        if not isinstance(value, str):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        normalized = value.strip().lower()
        alias = cls._get_alias(normalized)
        for member in cls:
            if member.value == alias:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__}: '{value}'. Must be one of: {valid}")

    @property
    def is_numeric(self) -> bool:
        return self in (
            FlagType.INT,
            FlagType.INT64,
            FlagType.UINT,
            FlagType.UINT8,
            FlagType.UINT16,
            FlagType.UINT32,
            FlagType.UINT64,
            FlagType.FLOAT64,
            FlagType.SIZE,
        )

    @property
    def is_collection(self) -> bool:
        return self in (FlagType.STRING_SLICE, FlagType.INT_SLICE, FlagType.MAP)

    def __str__(self) -> str:
        """Return the string representation of the flag type."""
        return self.value
