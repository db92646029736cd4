"""
Rust code generator module.

Generates Rust structs implementing ``lcm::Message``.
"""

from .generator import RustGenerator, create_rust_generator
from .naming import RustNameSanitizer, create_rust_sanitizer
from .renderer import RustRenderer

__all__ = [
    "RustGenerator",
    "create_rust_generator",
    "RustNameSanitizer",
    "create_rust_sanitizer",
    "RustRenderer",
]
