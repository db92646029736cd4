"""
Python-specific naming utilities and sanitization.

Handles Python reserved words and the attribute names every generated
message class already defines.
"""

from ...core.naming import NameSanitizer


# Python reserved keywords
PYTHON_RESERVED_WORDS = {
    "False",
    "None",
    "True",
    "and",
    "as",
    "assert",
    "async",
    "await",
    "break",
    "class",
    "continue",
    "def",
    "del",
    "elif",
    "else",
    "except",
    "finally",
    "for",
    "from",
    "global",
    "if",
    "import",
    "in",
    "is",
    "lambda",
    "nonlocal",
    "not",
    "or",
    "pass",
    "raise",
    "return",
    "try",
    "while",
    "with",
    "yield",
}

# Attributes of generated message classes and module names their bodies use
GENERATED_ATTRIBUTES = {
    "dataclasses",
    "typing",
    "FINGERPRINT",
    "encode",
    "decode",
    "encoded_size",
    "_encode_one",
    "_decode_one",
    "_encoded_size_one",
}


def create_python_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Python."""
    return NameSanitizer(PYTHON_RESERVED_WORDS | GENERATED_ATTRIBUTES, "{}_")
