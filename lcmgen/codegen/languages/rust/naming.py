"""
Rust-specific naming utilities and sanitization.

Keywords are escaped as raw identifiers (``r#type``); the few keywords
that cannot be raw identifiers get a trailing underscore instead.
"""

from ...core.naming import NameSanitizer, NamingCase


# Rust strict and reserved keywords (2018+ editions)
RUST_RESERVED_WORDS = {
    "abstract",
    "as",
    "async",
    "await",
    "become",
    "box",
    "break",
    "const",
    "continue",
    "crate",
    "do",
    "dyn",
    "else",
    "enum",
    "extern",
    "false",
    "final",
    "fn",
    "for",
    "if",
    "impl",
    "in",
    "let",
    "loop",
    "macro",
    "match",
    "mod",
    "move",
    "mut",
    "override",
    "priv",
    "pub",
    "ref",
    "return",
    "self",
    "Self",
    "static",
    "struct",
    "super",
    "trait",
    "true",
    "try",
    "type",
    "typeof",
    "unsafe",
    "unsized",
    "use",
    "virtual",
    "where",
    "while",
    "yield",
}

# Keywords that are not allowed as raw identifiers
RUST_NON_RAW_WORDS = {"crate", "self", "Self", "super"}


class RustNameSanitizer(NameSanitizer):
    """Name sanitizer producing raw identifiers for Rust keywords."""

    def __init__(self):
        super().__init__(RUST_RESERVED_WORDS - RUST_NON_RAW_WORDS, "r#{}")

    def sanitize_name(
        self, name: str, target_case: NamingCase = NamingCase.ORIGINAL
    ) -> str:
        converted = super().sanitize_name(name, target_case)
        if converted in RUST_NON_RAW_WORDS:
            return f"{converted}_"
        return converted


def create_rust_sanitizer() -> RustNameSanitizer:
    """Create a name sanitizer configured for Rust."""
    return RustNameSanitizer()
