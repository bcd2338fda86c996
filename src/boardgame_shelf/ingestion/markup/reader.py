"""
Tolerant readers for BGG XML fragments.

BGG's XML is regular and shallow, so fields are pulled out with
patterns instead of a full parser. Everything is accessed through
the FragmentReader interface, which keeps the field-extraction
contract independent of how the markup is actually read: a missing
tag or attribute yields None (or an empty list), never an error.
"""

import re
from abc import ABC, abstractmethod
from functools import lru_cache

_ENTITIES = {
    "amp": "&",
    "quot": '"',
    "apos": "'",
    "lt": "<",
    "gt": ">",
}
_ENTITY_RE = re.compile(r"&(amp|quot|apos|lt|gt);")

_ITEM_RE = re.compile(r"<item\b[^>]*>.*?</item>", re.DOTALL)
_START_TAG_RE = re.compile(r"^\s*<[\w:-]+\b([^>]*)>")
_ATTR_RE = re.compile(r'\s([\w:.-]+)\s*=\s*"([^"]*)"')


def decode_entities(text: str) -> str:
    """
    Decode the five predefined XML entities in a single pass.

    Every match is replaced exactly once, so "&amp;quot;" becomes
    the literal text "&quot;" rather than a double quote.
    """
    return _ENTITY_RE.sub(lambda m: _ENTITIES[m.group(1)], text)


def split_items(xml: str) -> list[str]:
    """Split a response body into <item>...</item> fragments (non-nested)."""
    return _ITEM_RE.findall(xml)


def _parse_attrs(tag_text: str) -> dict[str, str]:
    """Parse name="value" pairs of a single tag, decoding values."""
    return {name: decode_entities(value) for name, value in _ATTR_RE.findall(tag_text)}


@lru_cache(maxsize=64)
def _element_re(tag: str) -> re.Pattern[str]:
    return re.compile(rf"<{re.escape(tag)}(?:\s[^>]*)?>(.*?)</{re.escape(tag)}>", re.DOTALL)


@lru_cache(maxsize=64)
def _empty_tag_re(tag: str) -> re.Pattern[str]:
    return re.compile(rf"<{re.escape(tag)}\b[^>]*/>")


@lru_cache(maxsize=64)
def _open_tag_re(tag: str) -> re.Pattern[str]:
    return re.compile(rf"<{re.escape(tag)}\b[^>]*>")


class FragmentReader(ABC):
    """
    Field access over a single markup fragment.

    Implementations must return decoded text, and must return None
    (or an empty list) instead of raising when data is absent.
    """

    @abstractmethod
    def root_attr(self, name: str) -> str | None:
        """Attribute of the fragment's outermost element."""
        ...

    @abstractmethod
    def text(self, tag: str) -> str | None:
        """Trimmed text content of the first <tag>...</tag> element."""
        ...

    @abstractmethod
    def attr(self, tag: str, name: str) -> str | None:
        """Attribute of the first <tag> element."""
        ...

    @abstractmethod
    def tags(self, tag: str) -> list[dict[str, str]]:
        """Attributes of every self-closing <tag .../> element, in source order."""
        ...


class RegexFragmentReader(FragmentReader):
    """
    FragmentReader backed by regular expressions.

    Example:
        >>> reader = RegexFragmentReader('<item id="13"><name value="Catan"/></item>')
        >>> reader.root_attr("id")
        '13'
        >>> reader.tags("name")
        [{'value': 'Catan'}]
    """

    def __init__(self, fragment: str) -> None:
        self._fragment = fragment

    def root_attr(self, name: str) -> str | None:
        match = _START_TAG_RE.match(self._fragment)
        if not match:
            return None
        return _parse_attrs(match.group(1)).get(name)

    def text(self, tag: str) -> str | None:
        match = _element_re(tag).search(self._fragment)
        if not match:
            return None
        return decode_entities(match.group(1).strip())

    def attr(self, tag: str, name: str) -> str | None:
        match = _open_tag_re(tag).search(self._fragment)
        if not match:
            return None
        return _parse_attrs(match.group(0)).get(name)

    def tags(self, tag: str) -> list[dict[str, str]]:
        return [_parse_attrs(m.group(0)) for m in _empty_tag_re(tag).finditer(self._fragment)]
