# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""Flag abstraction and the concrete flag kinds."""
from .base_flag import UNSET, BaseFlag, Validator
from .basic import (
    BoolFlag,
    FloatFlag,
    Int64Flag,
    IntFlag,
    StringFlag,
    Uint8Flag,
    Uint16Flag,
    Uint32Flag,
    Uint64Flag,
    UintFlag,
)
from .collection import IntSliceFlag, MapFlag, StringSliceFlag
from .flag import Flag
from .flag_type import FlagType
from .special import (
    DurationFlag,
    EnumFlag,
    IPFlag,
    IPv4Flag,
    IPv6Flag,
    PathFlag,
    SizeFlag,
    TimeFlag,
    URLFlag,
)

__all__ = [
    "UNSET",
    "BaseFlag",
    "Validator",
    "Flag",
    "FlagType",
    "StringFlag",
    "BoolFlag",
    "IntFlag",
    "Int64Flag",
    "UintFlag",
    "Uint8Flag",
    "Uint16Flag",
    "Uint32Flag",
    "Uint64Flag",
    "FloatFlag",
    "StringSliceFlag",
    "IntSliceFlag",
    "MapFlag",
    "EnumFlag",
    "DurationFlag",
    "TimeFlag",
    "SizeFlag",
    "PathFlag",
    "IPFlag",
    "IPv4Flag",
    "IPv6Flag",
    "URLFlag",
]
