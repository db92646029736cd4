"""
Python-specific configuration and type mappings.

Maps canonical primitive types onto Python annotations, default values and
the codec objects of the runtime module.
"""

from typing import Any, Optional

from ...core.schema import PRIMITIVE_WIDTHS, TypeName


# Python type mappings
PYTHON_TYPE_MAP = {
    "boolean": "bool",
    "byte": "int",
    "int8_t": "int",
    "int16_t": "int",
    "int32_t": "int",
    "int64_t": "int",
    "uint8_t": "int",
    "uint16_t": "int",
    "uint32_t": "int",
    "uint64_t": "int",
    "float": "float",
    "double": "float",
    "string": "str",
}

PYTHON_DEFAULTS = {
    "bool": "False",
    "int": "0",
    "float": "0.0",
    "str": '""',
}

# Codec attribute names in the runtime module
PYTHON_CODECS = {
    "boolean": "BOOLEAN",
    "byte": "BYTE",
    "int8_t": "INT8",
    "int16_t": "INT16",
    "int32_t": "INT32",
    "int64_t": "INT64",
    "uint8_t": "UINT8",
    "uint16_t": "UINT16",
    "uint32_t": "UINT32",
    "uint64_t": "UINT64",
    "float": "FLOAT",
    "double": "DOUBLE",
    "string": "STRING",
}


class PythonConfig:
    """Python-specific configuration."""

    def __init__(self, **kwargs):
        """Initialize Python configuration."""
        self.runtime_module = kwargs.get("runtime_module", "lcmgen.runtime")

        # Dataclass-specific options
        self.dataclass_slots = kwargs.get("dataclass_slots", False)
        self.dataclass_kw_only = kwargs.get("dataclass_kw_only", False)

    @property
    def dataclass_options(self) -> str:
        options = []
        if self.dataclass_slots:
            options.append("slots=True")
        if self.dataclass_kw_only:
            options.append("kw_only=True")
        return ", ".join(options)


def get_python_type(type_name: TypeName) -> str:
    """Annotation for a primitive type."""
    return PYTHON_TYPE_MAP[type_name.short_name]


def get_codec(type_name: TypeName) -> str:
    return PYTHON_CODECS[type_name.short_name]


def get_fixed_width(type_name: TypeName) -> Optional[int]:
    """Wire width of a fixed-size primitive, or None for strings."""
    return PRIMITIVE_WIDTHS.get(type_name.short_name)


def format_constant(value: Any) -> str:
    return repr(value)

