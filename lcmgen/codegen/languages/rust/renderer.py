"""Rust syntax for the marshalling synthesizer."""

from typing import Callable, List

from ...core.marshal import MarshalRenderer
from ...core.naming import NameSanitizer
from ...core.schema import Member, Struct, TypeName
from .types import rust_member_type, rust_primitive


class RustRenderer(MarshalRenderer):
    """
    Renders ``lcm::Message`` method bodies.

    ``encode`` and ``size`` read from ``self``; ``decode`` fills a
    default-constructed ``msg``. Every leaf goes through the Message trait.
    """

    def __init__(
        self,
        sanitizer: NameSanitizer,
        type_ref: Callable[[TypeName], str],
        indent_unit: str = "    ",
    ):
        self.sanitizer = sanitizer
        self.type_ref = type_ref
        self.indent_unit = indent_unit

    def field_name(self, member: Member) -> str:
        return self.sanitizer.sanitize_name(member.name)

    def _leaf_type(self, type_name: TypeName) -> str:
        if type_name.is_primitive:
            return rust_primitive(type_name)
        return self.type_ref(type_name)

    def member_ref(self, member: Member) -> str:
        return f"self.{self.field_name(member)}"

    def decode_ref(self, member: Member) -> str:
        return f"msg.{self.field_name(member)}"

    def member_sink(self, member: Member) -> str:
        return f"msg.{self.field_name(member)} = {{}};"

    def encode_primitive(self, type_name: TypeName, expr: str) -> List[str]:
        return [f"Message::encode(&{expr}, buffer)?;"]

    def encode_struct(self, type_name: TypeName, expr: str) -> List[str]:
        return [f"Message::encode(&{expr}, buffer)?;"]

    def decode_primitive(self, type_name: TypeName, sink: str) -> List[str]:
        return [sink.format(f"<{self._leaf_type(type_name)} as Message>::decode(buffer)?")]

    def decode_struct(self, type_name: TypeName, sink: str) -> List[str]:
        return [sink.format(f"<{self._leaf_type(type_name)} as Message>::decode(buffer)?")]

    def size_primitive(self, type_name: TypeName, expr: str) -> str:
        return f"Message::size(&{expr})"

    def size_struct(self, type_name: TypeName, expr: str) -> str:
        return f"Message::size(&{expr})"

    def size_add(self, expr: str) -> str:
        return f"size += {expr};"

    def variable_count(self, ref: str, size_member: Member) -> str:
        return f"({ref} as usize)"

    def check_length(
        self, struct: Struct, member: Member, container: str, ref: str, size_member: Member
    ) -> List[str]:
        condition = f"({ref} as usize) > {container}.len()"
        if size_member.type.is_signed:
            condition = f"{ref} < 0 || {condition}"
        message = (
            f"{struct.full_name}.{member.name}: {size_member.name} does not match "
            f"the number of elements"
        )
        return [
            f"if {condition} {{",
            self.indent_unit
            + f'return Err(Error::new(ErrorKind::InvalidInput, "{message}"));',
            "}",
        ]

    def check_count(
        self, struct: Struct, member: Member, ref: str, size_member: Member
    ) -> List[str]:
        if not size_member.type.is_signed:
            return []
        message = f"{struct.full_name}.{member.name}: negative {size_member.name}"
        return [
            f"if {ref} < 0 {{",
            self.indent_unit
            + f'return Err(Error::new(ErrorKind::InvalidData, "{message}"));',
            "}",
        ]

    def loop_open(self, index: str, count: str) -> List[str]:
        return [f"for {index} in 0..{count} {{"]

    def element(self, container: str, index: str) -> str:
        return f"{container}[{index}]"

    def fixed_array_open(self, var: str, member: Member, depth: int, count: str) -> List[str]:
        rust_type = rust_member_type(member, self.type_ref, depth)
        return [f"let mut {var}: {rust_type} = Default::default();"]

    def variable_array_open(
        self, var: str, member: Member, depth: int, count: str
    ) -> List[str]:
        rust_type = rust_member_type(member, self.type_ref, depth)
        return [f"let mut {var}: {rust_type} = Vec::new();"]

    def fixed_array_sink(self, var: str, index: str) -> str:
        return f"{var}[{index}] = {{}};"

    def variable_array_sink(self, var: str, index: str) -> str:
        return f"{var}.push({{}});"
