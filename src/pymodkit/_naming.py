"""Identifier casing helpers used to derive generated member names.

Generated mutation/action/getter names follow a camelCase convention
(``saveOrUpdateJob``, ``jobsIndex``, ``setSizeOfAnApple``) whatever casing
the descriptor author used for ``single``, ``plural`` or field names.
"""

from __future__ import annotations

from typing import NamedTuple

from pydantic.alias_generators import to_camel, to_pascal, to_snake

_VOWELS = frozenset("aeiou")


class Cases(NamedTuple):
    camel: str
    pascal: str
    snake: str


def get_cases(name: str) -> Cases:
    """Return camel/pascal/snake spellings of *name*.

    Accepts snake_case, kebab-case, camelCase and PascalCase input.
    """
    snake = to_snake(name.strip().replace("-", "_").replace(" ", "_"))
    return Cases(camel=to_camel(snake), pascal=to_pascal(snake), snake=snake)


def indefinite_article(word: str) -> str:
    """``"An"`` when *word* starts with a vowel (case-insensitive), else ``"A"``."""
    return "An" if word[:1].lower() in _VOWELS else "A"
