"""
Category codec.

Articles carry an ordered set of tags.  The store has no list column, so
the tags are persisted as a JSON array inside a TEXT column.  All
conversion happens here: ``CategoryList`` is the column type used by the
ORM, and ``decode`` is the single place where a raw value becomes a tag
list again.
"""
import json
import logging
from collections.abc import Iterable

from sqlalchemy import Text
from sqlalchemy.types import TypeDecorator

from catalog.exceptions import MalformedCategoryError

logger = logging.getLogger(__name__)


def normalize(tags: Iterable[str]) -> list[str]:
    """Strip tags, drop blanks and duplicates, keep first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


def encode(tags: Iterable[str]) -> str:
    return json.dumps(normalize(tags), ensure_ascii=False)


def decode(raw) -> list[str]:
    """
    Return the tag list for *raw*.

    Accepts an already-structured list/tuple, ``None`` / empty string, or
    a JSON array of strings.  Raises ``MalformedCategoryError`` for
    anything else.
    """
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        if not all(isinstance(tag, str) for tag in raw):
            raise MalformedCategoryError(raw, "tags must be strings")
        return normalize(raw)
    if not isinstance(raw, str):
        raise MalformedCategoryError(raw, f"unsupported type {type(raw).__name__}")
    if not raw.strip():
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MalformedCategoryError(raw, str(exc)) from exc
    if not isinstance(value, list):
        raise MalformedCategoryError(raw, "expected a JSON array")
    return decode(value)


class CategoryList(TypeDecorator):
    """
    TEXT column holding a JSON-encoded tag list.

    A row whose stored value cannot be decoded is read back with an empty
    tag list and a warning, so one bad row does not fail a whole query.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, str):
            value = decode(value)
        return encode(value)

    def process_result_value(self, value, dialect):
        try:
            return decode(value)
        except MalformedCategoryError as exc:
            logger.warning("Ignoring undecodable category column: %s", exc)
            return []
