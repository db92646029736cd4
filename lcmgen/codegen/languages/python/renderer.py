"""Python syntax for the marshalling synthesizer."""

from typing import Callable, List

from ...core.marshal import MarshalRenderer
from ...core.naming import NameSanitizer
from ...core.schema import Member, Struct, TypeName
from .config import get_codec, get_fixed_width


class PythonRenderer(MarshalRenderer):
    """
    Renders method bodies for generated dataclasses.

    Encode and size bodies run with ``self`` bound; decode bodies fill a
    bare instance called ``obj``. The runtime module is imported as ``_rt``.
    """

    checks_in_size = True

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

    def member_ref(self, member: Member) -> str:
        return f"self.{self.field_name(member)}"

    def decode_ref(self, member: Member) -> str:
        return f"obj.{self.field_name(member)}"

    def member_sink(self, member: Member) -> str:
        return f"obj.{self.field_name(member)} = {{}}"

    def encode_primitive(self, type_name: TypeName, expr: str) -> List[str]:
        return [f"_rt.{get_codec(type_name)}.write(buf, {expr})"]

    def encode_struct(self, type_name: TypeName, expr: str) -> List[str]:
        return [f"{expr}._encode_one(buf)"]

    def decode_primitive(self, type_name: TypeName, sink: str) -> List[str]:
        return [sink.format(f"_rt.{get_codec(type_name)}.read(buf)")]

    def decode_struct(self, type_name: TypeName, sink: str) -> List[str]:
        return [sink.format(f"{self.type_ref(type_name)}._decode_one(buf)")]

    def size_primitive(self, type_name: TypeName, expr: str) -> str:
        width = get_fixed_width(type_name)
        if width is None:
            return f"_rt.{get_codec(type_name)}.size({expr})"
        return str(width)

    def size_struct(self, type_name: TypeName, expr: str) -> str:
        return f"{expr}._encoded_size_one()"

    def size_add(self, expr: str) -> str:
        return f"size += {expr}"

    def variable_count(self, ref: str, size_member: Member) -> str:
        return ref

    def check_length(
        self, struct: Struct, member: Member, container: str, ref: str, size_member: Member
    ) -> List[str]:
        where = f"{struct.full_name}.{member.name}"
        return [
            f"if not 0 <= {ref} <= len({container}):",
            self.indent_unit
            + f'raise _rt.EncodeError(f"{where}: {size_member.name} is {{{ref}}} '
            + f'but only {{len({container})}} elements are present")',
        ]

    def check_count(
        self, struct: Struct, member: Member, ref: str, size_member: Member
    ) -> List[str]:
        if not size_member.type.is_signed:
            return []
        where = f"{struct.full_name}.{member.name}"
        return [
            f"if {ref} < 0:",
            self.indent_unit
            + f'raise _rt.DecodeError(f"{where}: negative length {{{ref}}}")',
        ]

    def loop_open(self, index: str, count: str) -> List[str]:
        return [f"for {index} in range({count}):"]

    def loop_close(self) -> List[str]:
        return []

    def element(self, container: str, index: str) -> str:
        return f"{container}[{index}]"

    def fixed_array_open(self, var: str, member: Member, depth: int, count: str) -> List[str]:
        return [f"{var} = []"]

    def variable_array_open(
        self, var: str, member: Member, depth: int, count: str
    ) -> List[str]:
        return [f"{var} = []"]

    def fixed_array_sink(self, var: str, index: str) -> str:
        return f"{var}.append({{}})"

    def variable_array_sink(self, var: str, index: str) -> str:
        return f"{var}.append({{}})"
