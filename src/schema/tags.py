"""
Struct tag parsing.

Go struct tags are conventionally a space-separated list of key:"value"
pairs. Only two keys matter here: `enum` restricts a field to a list of
values and `required` can mark a struct field optional.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Iterator, Optional

from ..config import TranslatorConfig
from .errors import TagSyntaxError

ERR_TAG_SYNTAX = "bad syntax for struct tag pair"
ERR_TAG_KEY_SYNTAX = "bad syntax for struct tag key"
ERR_TAG_VALUE_SYNTAX = "bad syntax for struct tag value"


@dataclass(frozen=True)
class Tag:
    """One key:"name,opt1,opt2" pair."""

    key: str
    name: str
    options: tuple[str, ...] = ()

    @property
    def values(self) -> list[str]:
        return [self.name, *self.options]


class Tags:
    """Ordered collection of parsed tags."""

    def __init__(self, tags: list[Tag]) -> None:
        self._tags = tags

    def __iter__(self) -> Iterator[Tag]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def keys(self) -> list[str]:
        return [t.key for t in self._tags]

    def get(self, key: str) -> Optional[Tag]:
        for tag in self._tags:
            if tag.key == key:
                return tag
        return None


def unquote_literal(literal: str) -> str:
    """Strip the delimiters of a Go raw (`...`) or interpreted ("...") string literal."""
    if len(literal) >= 2 and literal[0] == literal[-1] == "`":
        return literal[1:-1]
    if len(literal) >= 2 and literal[0] == literal[-1] == '"':
        try:
            return json.loads(literal)
        except ValueError as exc:
            raise TagSyntaxError(f"invalid tag literal: {exc}", tag=literal) from exc
    return literal


def parse_tags(tag: str) -> Tags:
    """
    Parse the contents of a struct tag (without literal delimiters).

    Raises TagSyntaxError on malformed input.
    """
    original = tag
    tags: list[Tag] = []
    while tag:
        tag = tag.lstrip(" ")
        if not tag:
            break

        # Scan to colon. A space, a quote or a control character is a syntax error.
        i = 0
        while i < len(tag) and tag[i] > " " and tag[i] not in (":", '"', "\x7f"):
            i += 1
        if i == 0:
            raise TagSyntaxError(ERR_TAG_KEY_SYNTAX, tag=original)
        if i + 1 >= len(tag) or tag[i] != ":":
            raise TagSyntaxError(ERR_TAG_SYNTAX, tag=original)
        if tag[i + 1] != '"':
            raise TagSyntaxError(ERR_TAG_VALUE_SYNTAX, tag=original)
        key = tag[:i]
        tag = tag[i + 1:]

        # Scan the quoted string to find the value.
        i = 1
        while i < len(tag) and tag[i] != '"':
            if tag[i] == "\\":
                i += 1
            i += 1
        if i >= len(tag):
            raise TagSyntaxError(ERR_TAG_VALUE_SYNTAX, tag=original)
        quoted = tag[:i + 1]
        tag = tag[i + 1:]

        try:
            value = json.loads(quoted)
        except ValueError as exc:
            raise TagSyntaxError(ERR_TAG_VALUE_SYNTAX, tag=original) from exc

        name, *options = value.split(",")
        tags.append(Tag(key=key, name=name, options=tuple(options)))
    return Tags(tags)


def parse_tag_literal(literal: Optional[str]) -> Optional[Tags]:
    """Parse a tag as it appears in source, delimiters included. None if absent."""
    if not literal:
        return None
    body = unquote_literal(literal)
    try:
        return parse_tags(body)
    except TagSyntaxError as exc:
        raise TagSyntaxError(exc.reason, tag=body) from exc


def enum_values(tags: Optional[Tags], config: Optional[TranslatorConfig] = None) -> Optional[list[str]]:
    """Values of the enum tag in tag order, or None when there is no enum tag."""
    config = config or TranslatorConfig()
    if tags is None:
        return None
    tag = tags.get(config.enum_tag_key)
    if tag is None:
        return None

    values = tag.values
    seen: set[str] = set()
    for value in values:
        if not value:
            raise TagSyntaxError(f"empty value in '{tag.key}' tag")
        if value in seen:
            raise TagSyntaxError(f"duplicate value {value!r} in '{tag.key}' tag")
        seen.add(value)
    return values


def is_required(tags: Optional[Tags], config: Optional[TranslatorConfig] = None) -> bool:
    """A field is required unless its required tag holds a falsey value."""
    config = config or TranslatorConfig()
    if tags is None:
        return True
    tag = tags.get(config.required_tag_key)
    if tag is None:
        return True
    return not config.is_falsey(tag.name)
