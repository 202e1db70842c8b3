# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Collection flag kinds: `StringSliceFlag`, `IntSliceFlag` and `MapFlag`.

Every `set()` replaces the whole collection; values are not appended across
repeated occurrences. An empty string stores an empty collection.

Example:
    tags = StringSliceFlag("tags", "t", "Tags to apply")
    tags.set("a, b,,c")
    tags.get()  # ["a", "b", "c"]

    labels = MapFlag("labels", "l", "Key/value labels")
    labels.set("env=prod,tier = web")
    labels.get()  # {"env": "prod", "tier": "web"}
"""
from __future__ import annotations

from typing import Any

from flagtree.flags.coercion import coerce_int, split_items
from flagtree.flags.flag import Flag
from flagtree.flags.flag_type import FlagType


class _SliceFlag(Flag[list]):
    def __init__(
        self,
        long_name: str = "",
        short_name: str = "",
        description: str = "",
        default: Any = None,
        *,
        delimiter: str = ",",
        **kwargs: Any,
    ) -> None:
        if not delimiter:
            raise ValueError("delimiter cannot be empty")
        self.delimiter = delimiter
        super().__init__(long_name, short_name, description, default, **kwargs)

    def normalize_default(self, default: Any) -> list:
        return [] if default is None else list(default)

    def format_value(self, value: list) -> str:
        return self.delimiter.join(str(item) for item in value)

    def length(self) -> int:
        return len(self.get())

    def is_empty(self) -> bool:
        return self.length() == 0

    def contains(self, item: Any) -> bool:
        return item in self.get()


class StringSliceFlag(_SliceFlag):
    flag_type = FlagType.STRING_SLICE

    def parse(self, text: str) -> list[str]:
        return split_items(text, self.delimiter)


class IntSliceFlag(_SliceFlag):
    flag_type = FlagType.INT_SLICE

    def normalize_default(self, default: Any) -> list:
        return [] if default is None else [int(item) for item in default]

    def parse(self, text: str) -> list[int]:
        return [coerce_int(item) for item in split_items(text, self.delimiter)]


class MapFlag(Flag[dict]):
    """
    `key=value` pairs separated by `,`. Keys and values are trimmed,
    empty pairs are skipped and an empty key is rejected.
    """

    flag_type = FlagType.MAP

    def __init__(
        self,
        long_name: str = "",
        short_name: str = "",
        description: str = "",
        default: Any = None,
        *,
        pair_delimiter: str = ",",
        key_delimiter: str = "=",
        **kwargs: Any,
    ) -> None:
        if not pair_delimiter or not key_delimiter:
            raise ValueError("map delimiters cannot be empty")
        if pair_delimiter == key_delimiter:
            raise ValueError("pair and key delimiters must differ")
        self.pair_delimiter = pair_delimiter
        self.key_delimiter = key_delimiter
        super().__init__(long_name, short_name, description, default, **kwargs)

    def normalize_default(self, default: Any) -> dict:
        return {} if default is None else dict(default)

    def parse(self, text: str) -> dict[str, str]:
        result: dict[str, str] = {}
        for pair in split_items(text, self.pair_delimiter):
            if self.key_delimiter not in pair:
                raise ValueError(f"invalid map entry '{pair}', expected key{self.key_delimiter}value")
            key, value = pair.split(self.key_delimiter, 1)
            key = key.strip()
            if not key:
                raise ValueError(f"empty key in map entry '{pair}'")
            result[key] = value.strip()
        return result

    def format_value(self, value: dict) -> str:
        return self.pair_delimiter.join(
            f"{key}{self.key_delimiter}{item}" for key, item in sorted(value.items())
        )

    def get_key(self, key: str, default: str | None = None) -> str | None:
        return self.get().get(key, default)

    def has_key(self, key: str) -> bool:
        return bool(key) and key in self.get()

    def keys(self) -> list[str]:
        return sorted(self.get())

    def length(self) -> int:
        return len(self.get())

    def is_empty(self) -> bool:
        return self.length() == 0
