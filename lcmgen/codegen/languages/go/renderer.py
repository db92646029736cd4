"""Go syntax for the marshalling synthesizer."""

from typing import List

from ...core.marshal import MarshalRenderer
from ...core.naming import NameSanitizer, NamingCase
from ...core.schema import Member, Struct, TypeName
from .types import GoTypeMapper, go_primitive


class GoRenderer(MarshalRenderer):
    """
    Renders method bodies for generated Go structs.

    ``Encode`` and ``Size`` read from the receiver ``p``; ``Decode`` fills
    a local ``msg`` and copies it to ``*p`` only after every member decoded.
    """

    indent_unit = "\t"

    def __init__(self, sanitizer: NameSanitizer, types: GoTypeMapper, indent_unit: str = "\t"):
        self.sanitizer = sanitizer
        self.types = types
        self.indent_unit = indent_unit

    def field_name(self, member: Member) -> str:
        return self.sanitizer.sanitize_name(member.name, NamingCase.PASCAL_CASE)

    def _return_on_error(self, call: str) -> List[str]:
        return [f"if err := {call}; err != nil {{", self.indent_unit + "return err", "}"]

    def member_ref(self, member: Member) -> str:
        return f"p.{self.field_name(member)}"

    def decode_ref(self, member: Member) -> str:
        return f"msg.{self.field_name(member)}"

    def member_sink(self, member: Member) -> str:
        return f"msg.{self.field_name(member)} = {{}}"

    def encode_primitive(self, type_name: TypeName, expr: str) -> List[str]:
        return self._return_on_error(f"{go_primitive(type_name).writer}(w, {expr})")

    def encode_struct(self, type_name: TypeName, expr: str) -> List[str]:
        return self._return_on_error(f"{expr}.Encode(w)")

    def decode_primitive(self, type_name: TypeName, sink: str) -> List[str]:
        t = self.indent_unit
        return [
            "{",
            t + f"v, err := {go_primitive(type_name).reader}(r)",
            t + "if err != nil {",
            t + t + "return err",
            t + "}",
            t + sink.format("v"),
            "}",
        ]

    def decode_struct(self, type_name: TypeName, sink: str) -> List[str]:
        t = self.indent_unit
        return [
            "{",
            t + f"var v {self.types.leaf_type(type_name)}",
            t + "if err := v.Decode(r); err != nil {",
            t + t + "return err",
            t + "}",
            t + sink.format("v"),
            "}",
        ]

    def size_primitive(self, type_name: TypeName, expr: str) -> str:
        go_type = go_primitive(type_name)
        if go_type.width is None:
            return f"sizeString({expr})"
        return str(go_type.width)

    def size_struct(self, type_name: TypeName, expr: str) -> str:
        return f"{expr}.Size()"

    def size_add(self, expr: str) -> str:
        return f"size += {expr}"

    def variable_count(self, ref: str, size_member: Member) -> str:
        return f"int({ref})"

    def check_length(
        self, struct: Struct, member: Member, container: str, ref: str, size_member: Member
    ) -> List[str]:
        condition = f"int({ref}) > len({container})"
        if size_member.type.is_signed:
            condition = f"{ref} < 0 || {condition}"
        message = (
            f"{struct.full_name}.{member.name}: {size_member.name} is %d "
            f"but only %d elements are present"
        )
        return [
            f"if {condition} {{",
            self.indent_unit + f'return fmt.Errorf("{message}", {ref}, len({container}))',
            "}",
        ]

    def check_count(
        self, struct: Struct, member: Member, ref: str, size_member: Member
    ) -> List[str]:
        if not size_member.type.is_signed:
            return []
        message = f"{struct.full_name}.{member.name}: negative length %d"
        return [
            f"if {ref} < 0 {{",
            self.indent_unit + f'return fmt.Errorf("{message}", {ref})',
            "}",
        ]

    def loop_open(self, index: str, count: str) -> List[str]:
        return [f"for {index} := 0; {index} < {count}; {index}++ {{"]

    def element(self, container: str, index: str) -> str:
        return f"{container}[{index}]"

    def fixed_array_open(self, var: str, member: Member, depth: int, count: str) -> List[str]:
        return [f"var {var} {self.types.member_type(member, depth)}"]

    def variable_array_open(
        self, var: str, member: Member, depth: int, count: str
    ) -> List[str]:
        return [f"{var} := make({self.types.member_type(member, depth)}, {count})"]

    def fixed_array_sink(self, var: str, index: str) -> str:
        return f"{var}[{index}] = {{}}"

    def variable_array_sink(self, var: str, index: str) -> str:
        return f"{var}[{index}] = {{}}"
