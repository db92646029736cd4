"""
Naming utilities for safe code generation.

Identifier transforms shared by every backend (type names, file names,
package paths and qualified references) plus name sanitization against the
reserved words of a target language.
"""

import os
import re
from typing import Set, Dict, Optional
from enum import Enum


TYPE_SUFFIX = "_t"


def to_upper_camel(identifier: str) -> str:
    """
    Convert an underscore separated identifier to UpperCamelCase.

    Each segment gets its first letter capitalized and the remainder
    lower-cased: ``"foo_bar"`` -> ``"FooBar"``.
    """
    return "".join(part[:1].upper() + part[1:].lower() for part in identifier.split("_"))


def strip_type_suffix(identifier: str) -> str:
    """Remove the legacy ``_t`` type suffix if present."""
    if identifier.endswith(TYPE_SUFFIX):
        return identifier[: -len(TYPE_SUFFIX)]
    return identifier


def package_to_path(package: str, separator: str = os.sep) -> str:
    """Project a dotted package name onto a relative directory path."""
    return package.replace(".", separator)


def package_to_scope(package: str, separator: str) -> str:
    """Project a dotted package name onto a language scope reference."""
    return package.replace(".", separator)


def type_identifier(short_name: str, strip_suffix: bool = True) -> str:
    """Type name used by backends for a struct's unqualified name."""
    if strip_suffix:
        short_name = strip_type_suffix(short_name)
    return to_upper_camel(short_name)


def module_identifier(short_name: str, strip_suffix: bool = True) -> str:
    """Base file/module name used by backends for a struct."""
    if strip_suffix:
        return strip_type_suffix(short_name)
    return short_name


class NamingCase(Enum):
    """Different naming case styles."""

    ORIGINAL = "original"  # user_name, unchanged
    SNAKE_CASE = "snake"  # user_name
    CAMEL_CASE = "camel"  # userName
    PASCAL_CASE = "pascal"  # UserName
    SCREAMING_SNAKE = "screaming_snake"  # USER_NAME


class NameSanitizer:
    """Handles name sanitization and case conversion."""

    def __init__(
        self,
        reserved_words: Optional[Set[str]] = None,
        reserved_format: str = "{}_",
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            reserved_format: Format applied to names that collide with a
                reserved word (e.g. ``"{}_"`` or ``"r#{}"``)
        """
        self.reserved_words = reserved_words or set()
        self.reserved_format = reserved_format
        self._name_cache: Dict[str, str] = {}

    def sanitize_name(
        self, name: str, target_case: NamingCase = NamingCase.ORIGINAL
    ) -> str:
        """
        Sanitize a name for safe use in the target language.

        Sanitizing is a pure mapping: the same input always yields the same
        output, so one sanitizer can serve every struct of a schema.
        """
        cache_key = f"{name}_{target_case.value}"
        if cache_key in self._name_cache:
            return self._name_cache[cache_key]

        converted = self._convert_case(name, target_case)
        if converted in self.reserved_words:
            converted = self.reserved_format.format(converted)

        self._name_cache[cache_key] = converted
        return converted

    def _convert_case(self, name: str, target_case: NamingCase) -> str:
        """Convert name to target case style."""
        if target_case == NamingCase.SNAKE_CASE:
            return self._to_snake_case(name)
        elif target_case == NamingCase.CAMEL_CASE:
            return self._to_camel_case(name)
        elif target_case == NamingCase.PASCAL_CASE:
            return self._to_pascal_case(name)
        elif target_case == NamingCase.SCREAMING_SNAKE:
            return self._to_snake_case(name).upper()
        else:
            return name

    def _to_snake_case(self, name: str) -> str:
        """Convert to snake_case."""
        # Insert underscore before uppercase letters
        name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)

        # Convert to lowercase and clean up multiple underscores
        name = name.lower()
        name = re.sub(r"_+", "_", name)

        return name.strip("_") or name

    def _to_camel_case(self, name: str) -> str:
        """Convert to camelCase."""
        parts = self._to_snake_case(name).split("_")
        return parts[0].lower() + "".join(part.capitalize() for part in parts[1:])

    def _to_pascal_case(self, name: str) -> str:
        """Convert to PascalCase."""
        parts = self._to_snake_case(name).split("_")
        return "".join(part.capitalize() for part in parts if part)
