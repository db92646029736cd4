"""
Language-specific code generators.

Bundled backends: Python dataclasses, Rust messages for the `lcm` crate
and Go structs with binary marshalling.
"""

from .go import GoGenerator, create_go_generator
from .python import PythonGenerator, create_python_generator
from .rust import RustGenerator, create_rust_generator

__all__ = [
    "GoGenerator",
    "create_go_generator",
    "PythonGenerator",
    "create_python_generator",
    "RustGenerator",
    "create_rust_generator",
]
