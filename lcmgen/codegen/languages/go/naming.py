"""
Go-specific naming utilities and sanitization.

Handles Go reserved words, generated method names, and package naming.
"""

from ...core.naming import NameSanitizer


# Go reserved words
GO_RESERVED_WORDS = {
    "break",
    "case",
    "chan",
    "const",
    "continue",
    "default",
    "defer",
    "else",
    "fallthrough",
    "for",
    "func",
    "go",
    "goto",
    "if",
    "import",
    "interface",
    "map",
    "package",
    "range",
    "return",
    "select",
    "struct",
    "switch",
    "type",
    "var",
}

# Methods defined on every generated struct; fields may not share their names
GO_METHOD_NAMES = {
    "Encode",
    "Decode",
    "Size",
    "MarshalBinary",
    "UnmarshalBinary",
}


def create_go_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Go."""
    return NameSanitizer(GO_RESERVED_WORDS | GO_METHOD_NAMES, "{}_")


def validate_go_package_name(name: str) -> list[str]:
    """
    Validate Go package name according to Go naming rules.

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not name:
        errors.append("Package name cannot be empty")
        return errors

    # Check basic identifier rules
    if not name.isidentifier():
        errors.append(f"'{name}' is not a valid Go identifier")

    # Go-specific rules
    if name[0].isupper():
        errors.append("Package names should be lowercase")

    if "_" in name:
        errors.append("Package names should not contain underscores")

    # Check against reserved words
    if name.lower() in GO_RESERVED_WORDS:
        errors.append(f"'{name}' is a Go reserved word")

    return errors
