"""
Go-specific type system for code generation.

Maps canonical primitive types onto Go types and the codec helpers emitted
in every package, and builds array and slice types for members.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from ...core.schema import ConstantDimension, Member, PRIMITIVE_WIDTHS, TypeName


@dataclass(frozen=True)
class GoType:
    """
    Immutable representation of a Go primitive type.

    ``codec`` names the helper pair ``write<codec>`` / ``read<codec>``
    generated into each package.
    """

    name: str
    codec: str
    width: Optional[int] = None

    @property
    def writer(self) -> str:
        return f"write{self.codec}"

    @property
    def reader(self) -> str:
        return f"read{self.codec}"


GO_TYPE_MAP: Dict[str, GoType] = {
    "boolean": GoType("bool", "Bool", 1),
    "byte": GoType("byte", "Byte", 1),
    "int8_t": GoType("int8", "Int8", 1),
    "int16_t": GoType("int16", "Int16", 2),
    "int32_t": GoType("int32", "Int32", 4),
    "int64_t": GoType("int64", "Int64", 8),
    "uint8_t": GoType("uint8", "Uint8", 1),
    "uint16_t": GoType("uint16", "Uint16", 2),
    "uint32_t": GoType("uint32", "Uint32", 4),
    "uint64_t": GoType("uint64", "Uint64", 8),
    "float": GoType("float32", "Float32", 4),
    "double": GoType("float64", "Float64", 8),
    "string": GoType("string", "String"),
}


def go_primitive(type_name: TypeName) -> GoType:
    return GO_TYPE_MAP[type_name.short_name]


def numeric_types() -> List[GoType]:
    """Fixed-width types whose codecs go through encoding/binary."""
    return [
        go_type
        for name, go_type in GO_TYPE_MAP.items()
        if name in PRIMITIVE_WIDTHS and name != "boolean"
    ]


class GoTypeMapper:
    """Maps members to Go field types."""

    def __init__(self, type_ref: Callable[[TypeName], str]):
        """
        Args:
            type_ref: Qualified Go name of a struct type as seen from the
                package being generated
        """
        self.type_ref = type_ref

    def leaf_type(self, type_name: TypeName) -> str:
        if type_name.is_primitive:
            return go_primitive(type_name).name
        return self.type_ref(type_name)

    def member_type(self, member: Member, depth: int = 0) -> str:
        """
        Go type of ``member`` below its first ``depth`` dimensions.

        Constant dimensions become arrays and variable dimensions slices.
        """
        go_type = self.leaf_type(member.type)
        for dim in reversed(member.dimensions[depth:]):
            if isinstance(dim, ConstantDimension):
                go_type = f"[{dim.size}]{go_type}"
            else:
                go_type = f"[]{go_type}"
        return go_type
