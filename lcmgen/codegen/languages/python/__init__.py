"""
Python code generator module.

Generates Python message dataclasses backed by ``lcmgen.runtime``.
"""

from .generator import PythonGenerator, create_python_generator
from .naming import create_python_sanitizer
from .config import PythonConfig
from .renderer import PythonRenderer

__all__ = [
    # Generator
    "PythonGenerator",
    "create_python_generator",
    "PythonRenderer",
    # Naming
    "create_python_sanitizer",
    # Configuration
    "PythonConfig",
]
