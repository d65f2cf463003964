"""
Naming — Casing predicates and converters for identifiers

Supported conventions:
- camel:    myVariable
- pascal:   MyClass
- snake:    my_variable
- constant: MAX_SIZE (only ever used as an exemption)

Leading `_`/`$` and trailing `_` are treated as affixes: they are ignored
when checking and preserved when converting, so `_privateVar` is valid
camelCase and `__init__` is valid snake_case.
"""

import re
from typing import Callable, Dict, List, Optional, Tuple

_CAMEL = re.compile(r'^[a-z][a-zA-Z0-9]*$')
_PASCAL = re.compile(r'^[A-Z][a-zA-Z0-9]*$')
_SNAKE = re.compile(r'^[a-z][a-z0-9]*(_[a-z0-9]+)*$')
_CONSTANT = re.compile(r'^[A-Z][A-Z0-9]*(_[A-Z0-9]+)*$')

# Acronym before a capitalized word | capitalized or lower word | acronym | digits
_WORDS = re.compile(r'[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z0-9]+|[A-Z]+[0-9]*|[0-9]+')
_AFFIXES = re.compile(r'^([_$]*)(.*?)(_*)$', re.DOTALL)
_SEPARATORS = re.compile(r'[_\-]')


def is_camel_case(name: str) -> bool:
    return bool(_CAMEL.match(name))


def is_pascal_case(name: str) -> bool:
    return bool(_PASCAL.match(name))


def is_snake_case(name: str) -> bool:
    return bool(_SNAKE.match(name))


def is_constant_case(name: str) -> bool:
    return bool(_CONSTANT.match(name))


def split_words(name: str) -> List[str]:
    """Split an identifier into words across `_`, `-` and case changes."""
    return _WORDS.findall(name)


def to_camel_case(name: str) -> str:
    words = split_words(name)
    if not words:
        return name
    return words[0].lower() + "".join(w[0].upper() + w[1:].lower() for w in words[1:])


def to_pascal_case(name: str) -> str:
    words = split_words(name)
    if not words:
        return name
    return "".join(w[0].upper() + w[1:].lower() for w in words)


def to_snake_case(name: str) -> str:
    words = split_words(name)
    if not words:
        return name
    return "_".join(w.lower() for w in words)


CONVENTIONS: Dict[str, Tuple[Callable[[str], bool], Callable[[str], str]]] = {
    "camel": (is_camel_case, to_camel_case),
    "pascal": (is_pascal_case, to_pascal_case),
    "snake": (is_snake_case, to_snake_case),
}


def split_affixes(name: str) -> Tuple[str, str, str]:
    """('__', 'init', '__') for '__init__'."""
    match = _AFFIXES.match(name)
    return match.group(1), match.group(2), match.group(3)


def check_name(name: str, convention: str, allow_constant: bool = False) -> Optional[str]:
    """
    Suggested rename if `name` violates `convention`, else None.

    Raises:
        KeyError: Unknown convention
    """
    predicate, convert = CONVENTIONS[convention]
    prefix, core, suffix = split_affixes(name)
    if not core:
        return None
    if predicate(core):
        return None
    if allow_constant and is_constant_case(core):
        return None

    converted = convert(core)
    if not converted or converted == core or not predicate(converted):
        return None
    # Characters outside ASCII words would be lost in conversion
    if _SEPARATORS.sub('', core).lower() != _SEPARATORS.sub('', converted).lower():
        return None
    return f"{prefix}{converted}{suffix}"
