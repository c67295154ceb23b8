"""
Naming utilities for safe code generation.

Derives the identifier casings the generators need from raw, schema-cased
method names, and sanitizes names against target-language keywords.
"""

import re
from typing import Set, Dict, Optional
from enum import Enum

from .errors import InvalidIdentifier

METHOD_CONSTANT_PREFIX = "METHOD_"
ROUTE_CONSTANT_PREFIX = "ROUTE_"


def _require_identifier(name: str, kind: str = "method") -> None:
    """Raise InvalidIdentifier unless name has something to transform."""
    if not name:
        raise InvalidIdentifier(f"{kind} name is empty")
    if not any(ch.isalnum() for ch in name):
        raise InvalidIdentifier(
            f"{kind} name '{name}' contains no transformable characters",
            method_names=(name,) if kind == "method" else (),
        )


def to_lower_camel(name: str) -> str:
    """
    Lower-camel form used as the generated method name.

    The first character is lowered; every later underscore is removed and
    the character after it is upper-cased. A trailing underscore is dropped.

        >>> to_lower_camel("get_user")
        'getUser'
        >>> to_lower_camel("GetUser")
        'getUser'
    """
    _require_identifier(name)

    result = [name[0].lower()]
    after_underscore = False
    for ch in name[1:]:
        if ch == "_":
            after_underscore = True
        else:
            result.append(ch.upper() if after_underscore else ch)
            after_underscore = False
    return "".join(result)


def to_screaming_snake(name: str) -> str:
    """
    Upper-snake form used for generated constant names.

    A delimiter is only inserted where a lowercase letter is immediately
    followed by an uppercase one, so runs like ``HTTPServer`` stay joined.

        >>> to_screaming_snake("getUser")
        'GET_USER'
        >>> to_screaming_snake("ABC")
        'ABC'
    """
    _require_identifier(name)

    result = []
    last = len(name) - 1
    for i, ch in enumerate(name):
        result.append(ch.upper())
        if i < last and ch.islower() and name[i + 1].isupper():
            result.append("_")
    return "".join(result)


def to_upper_camel(name: str) -> str:
    """Upper-camel form, e.g. for ``do<Name>RequestResponse`` handlers."""
    lower = to_lower_camel(name)
    return lower[0].upper() + lower[1:]


def to_snake_case(name: str) -> str:
    """Lowercase snake form, built on the screaming-snake boundaries."""
    snake = to_screaming_snake(name).lower()
    return re.sub(r"_+", "_", snake).strip("_") or snake


def method_constant_name(name: str) -> str:
    """Constant holding the raw method name, e.g. ``METHOD_GET_USER``."""
    return METHOD_CONSTANT_PREFIX + to_screaming_snake(name)


def route_constant_name(name: str) -> str:
    """Constant holding the full route, e.g. ``ROUTE_GET_USER``."""
    return ROUTE_CONSTANT_PREFIX + to_screaming_snake(name)


def validate_service_name(name: str) -> str:
    """Return the service identifier or raise InvalidIdentifier."""
    _require_identifier(name, kind="service")
    return name


class NamingCase(Enum):
    """Different naming case styles."""
    SNAKE_CASE = "snake"      # user_name
    CAMEL_CASE = "camel"      # userName
    PASCAL_CASE = "pascal"    # UserName
    SCREAMING_SNAKE = "screaming_snake"  # USER_NAME


class NameSanitizer:
    """Converts names to a target case and steers clear of reserved words."""

    def __init__(self, reserved_words: Set[str] = None, builtin_types: Set[str] = None):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            builtin_types: Set of builtin type names that might conflict
        """
        self.reserved_words = reserved_words or set()
        self.builtin_types = builtin_types or set()
        self._name_cache: Dict[str, str] = {}

    def sanitize_name(self, name: str, target_case: NamingCase = NamingCase.SNAKE_CASE,
                      suffix_on_conflict: str = "_") -> str:
        """
        Sanitize a name for safe use in the target language.

        Args:
            name: Original schema name
            target_case: Desired case style
            suffix_on_conflict: Suffix appended to reserved words

        Returns:
            Name safe for use as an identifier
        """
        cache_key = f"{name}_{target_case.value}_{suffix_on_conflict}"
        if cache_key in self._name_cache:
            return self._name_cache[cache_key]

        converted = self._convert_case(name, target_case)
        if converted in self.reserved_words or converted in self.builtin_types:
            converted = f"{converted}{suffix_on_conflict}"

        self._name_cache[cache_key] = converted
        return converted

    def is_reserved(self, name: str) -> bool:
        """Check whether name collides with a keyword or builtin."""
        return name in self.reserved_words or name in self.builtin_types

    def _convert_case(self, name: str, target_case: NamingCase) -> str:
        """Convert name to target case style."""
        if target_case == NamingCase.SNAKE_CASE:
            return to_snake_case(name)
        elif target_case == NamingCase.CAMEL_CASE:
            return to_lower_camel(name)
        elif target_case == NamingCase.PASCAL_CASE:
            return to_upper_camel(name)
        elif target_case == NamingCase.SCREAMING_SNAKE:
            return to_screaming_snake(name)
        else:
            return name


def parse_naming_case(value: Optional[str], default: NamingCase) -> NamingCase:
    """Map a config string such as ``"camel"`` to a NamingCase."""
    if not value:
        return default
    try:
        return NamingCase(value)
    except ValueError:
        return default
