"""Prefix and delimiter matching for bucket listings."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Mapping, Sequence


@dataclass(frozen=True)
class CommonPrefix:
    """A delimited pseudo-directory in a listing."""

    prefix: str


def _first(query: Mapping[str, Sequence[str]], name: str) -> str:
    values = query.get(name)
    if not values:
        return ""
    if isinstance(values, str):
        return values
    return values[0]


def _split(value: str, sep: str) -> list[str]:
    if not sep:
        return list(value)
    return value.split(sep)


def _quote(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


@dataclass(frozen=True)
class PrefixMatch:
    """Result of matching a key against a Prefix."""

    key: str
    common_prefix: bool = False
    matched_part: str = ""

    def as_common_prefix(self) -> CommonPrefix:
        return CommonPrefix(self.matched_part)


@dataclass(frozen=True)
class Prefix:
    has_prefix: bool = False
    prefix: str = ""
    has_delimiter: bool = False
    delimiter: str = ""

    @classmethod
    def from_query(cls, query: Mapping[str, Sequence[str]]) -> "Prefix":
        """Build from 'prefix' and 'delimiter' query values; empty counts as absent."""
        prefix = _first(query, "prefix")
        delimiter = _first(query, "delimiter")
        return cls(
            has_prefix="prefix" in query and prefix != "",
            prefix=prefix,
            has_delimiter="delimiter" in query and delimiter != "",
            delimiter=delimiter,
        )

    def file_prefix(self) -> tuple[str, str, bool]:
        """Split the prefix into (path, remaining, ok) when the delimiter is '/'."""
        if not self.has_prefix or not self.has_delimiter or self.delimiter != "/":
            return "", "", self.delimiter == "/"
        path, sep, remaining = self.prefix.rpartition("/")
        if not sep:
            return "", self.prefix, True
        return path, remaining, True

    def match(self, key: str) -> PrefixMatch | None:
        """Match ``key`` against this prefix; None when it does not match.

        Compare ``common_prefix`` of the result to tell whether the key belongs
        in the contents or in the common prefixes of a listing.
        """
        if not self.has_prefix and not self.has_delimiter:
            return PrefixMatch(key=key, matched_part=key)

        if not self.has_delimiter:
            if key.startswith(self.prefix):
                return PrefixMatch(key=key, matched_part=self.prefix)
            return None

        delim = self.delimiter
        key_parts = _split(key.lstrip(delim), delim)
        pre_parts = _split(self.prefix.lstrip(delim), delim)

        if len(key_parts) < len(pre_parts) or not pre_parts:
            return None

        append_delim = len(key_parts) != len(pre_parts)
        *leading, last = pre_parts
        if key_parts[: len(leading)] != leading:
            return None
        if not key_parts[len(leading)].startswith(last):
            return None

        out = delim.join(key_parts[: len(pre_parts)])
        if append_delim:
            out += delim
        return PrefixMatch(key=key, common_prefix=out != key, matched_part=out)

    def __str__(self) -> str:
        if self.has_delimiter:
            return f"prefix:{_quote(self.prefix)}, delim:{_quote(self.delimiter)}"
        return f"prefix:{_quote(self.prefix)}"


def new_prefix(prefix: str | None, delimiter: str | None) -> Prefix:
    """Build a Prefix; None means the part is absent."""
    return Prefix(
        has_prefix=prefix is not None,
        prefix=prefix or "",
        has_delimiter=delimiter is not None,
        delimiter=delimiter or "",
    )


def new_folder_prefix(prefix: str) -> Prefix:
    """Build a Prefix delimited by '/'."""
    return Prefix(has_prefix=True, prefix=prefix, has_delimiter=True, delimiter="/")