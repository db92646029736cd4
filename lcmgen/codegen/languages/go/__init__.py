"""
Go code generator module.

Generates Go structs with binary marshalling methods.
"""

from .generator import GoGenerator, create_go_generator
from .naming import create_go_sanitizer, validate_go_package_name
from .renderer import GoRenderer
from .types import GoType, GoTypeMapper

__all__ = [
    "GoGenerator",
    "create_go_generator",
    "GoRenderer",
    "GoType",
    "GoTypeMapper",
    "create_go_sanitizer",
    "validate_go_package_name",
]
