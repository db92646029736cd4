"""
Dimension-aware marshalling code synthesis.

A single traversal over a struct's members produces the encode, decode and
size routines for every backend. Backends never walk dimensions themselves;
they implement MarshalRenderer and return the target syntax for each step.

Decode routines build each array level in a local container, fill it in a
loop and then assign it to the enclosing sink. A sink is a line template
containing one ``{}`` placeholder for the decoded value.
"""

from abc import ABC, abstractmethod
from typing import Callable, List

from .schema import (
    ConstantDimension,
    Dimension,
    Member,
    ModelError,
    Struct,
    TypeName,
    VariableDimension,
    check_dimensions,
)

ENCODE = "encode"
DECODE = "decode"
SIZE = "size"


class CodeWriter:
    """Collects source lines at the current indentation level."""

    def __init__(self, indent_unit: str = "    "):
        self.indent_unit = indent_unit
        self.level = 0
        self.lines: List[str] = []

    def line(self, text: str = "") -> None:
        self.lines.append(self.indent_unit * self.level + text if text else "")

    def extend(self, lines: List[str]) -> None:
        for text in lines:
            self.line(text)

    def indent(self) -> None:
        self.level += 1

    def dedent(self) -> None:
        if self.level == 0:
            raise ValueError("Cannot dedent below column zero")
        self.level -= 1


class MarshalRenderer(ABC):
    """
    Target-language syntax for the marshalling traversal.

    Hooks returning ``List[str]`` produce lines relative to the current
    indentation; nested blocks inside those lines use ``indent_unit``.
    Hooks returning ``str`` produce expressions.
    """

    indent_unit = "    "

    # Whether size routines repeat the declared-length check of encode.
    checks_in_size = False

    # Member access

    @abstractmethod
    def member_ref(self, member: Member) -> str:
        """Expression reading ``member`` in encode and size routines."""

    @abstractmethod
    def decode_ref(self, member: Member) -> str:
        """Expression reading an already decoded ``member``."""

    @abstractmethod
    def member_sink(self, member: Member) -> str:
        """Sink assigning a decoded value to ``member``."""

    # Leaves

    @abstractmethod
    def encode_primitive(self, type_name: TypeName, expr: str) -> List[str]:
        pass

    @abstractmethod
    def encode_struct(self, type_name: TypeName, expr: str) -> List[str]:
        pass

    @abstractmethod
    def decode_primitive(self, type_name: TypeName, sink: str) -> List[str]:
        pass

    @abstractmethod
    def decode_struct(self, type_name: TypeName, sink: str) -> List[str]:
        pass

    @abstractmethod
    def size_primitive(self, type_name: TypeName, expr: str) -> str:
        pass

    @abstractmethod
    def size_struct(self, type_name: TypeName, expr: str) -> str:
        pass

    @abstractmethod
    def size_add(self, expr: str) -> str:
        """Statement adding ``expr`` to the running size."""

    # Counts and checks

    def constant_count(self, dim: ConstantDimension) -> str:
        return str(dim.size)

    @abstractmethod
    def variable_count(self, ref: str, size_member: Member) -> str:
        """Loop bound for a variable dimension whose size member reads ``ref``."""

    @abstractmethod
    def check_length(
        self, struct: Struct, member: Member, container: str, ref: str, size_member: Member
    ) -> List[str]:
        """Fail encoding unless ``0 <= ref <= len(container)``."""

    @abstractmethod
    def check_count(
        self, struct: Struct, member: Member, ref: str, size_member: Member
    ) -> List[str]:
        """Fail decoding when a decoded count is negative."""

    # Loops

    @abstractmethod
    def loop_open(self, index: str, count: str) -> List[str]:
        pass

    def loop_close(self) -> List[str]:
        return ["}"]

    @abstractmethod
    def element(self, container: str, index: str) -> str:
        pass

    def index_var(self, depth: int) -> str:
        return f"i{depth}"

    def container_var(self, depth: int) -> str:
        return f"a{depth}"

    # Decode containers

    @abstractmethod
    def fixed_array_open(self, var: str, member: Member, depth: int, count: str) -> List[str]:
        pass

    @abstractmethod
    def variable_array_open(
        self, var: str, member: Member, depth: int, count: str
    ) -> List[str]:
        pass

    @abstractmethod
    def fixed_array_sink(self, var: str, index: str) -> str:
        pass

    @abstractmethod
    def variable_array_sink(self, var: str, index: str) -> str:
        pass

    def array_close(self, var: str, member: Member, depth: int) -> List[str]:
        return []


class MarshalSynthesizer:
    """Builds encode, decode and size routine bodies for one backend."""

    def __init__(self, renderer: MarshalRenderer):
        self.renderer = renderer

    def validate(self, struct: Struct) -> None:
        """Raise ModelError if ``struct`` cannot be marshalled in member order."""
        check_dimensions(struct)

    def encode_body(self, struct: Struct) -> List[str]:
        self.validate(struct)
        out = CodeWriter(self.renderer.indent_unit)
        for member in struct.members:
            self._encode(out, struct, member, self.renderer.member_ref(member), 0)
        return out.lines

    def decode_body(self, struct: Struct) -> List[str]:
        self.validate(struct)
        out = CodeWriter(self.renderer.indent_unit)
        for member in struct.members:
            self._decode(out, struct, member, self.renderer.member_sink(member), 0)
        return out.lines

    def size_body(self, struct: Struct) -> List[str]:
        self.validate(struct)
        out = CodeWriter(self.renderer.indent_unit)
        for member in struct.members:
            self._size(out, struct, member, self.renderer.member_ref(member), 0)
        return out.lines

    def _encode(
        self, out: CodeWriter, struct: Struct, member: Member, expr: str, depth: int
    ) -> None:
        r = self.renderer
        if depth == len(member.dimensions):
            if member.type.is_primitive:
                out.extend(r.encode_primitive(member.type, expr))
            else:
                out.extend(r.encode_struct(member.type, expr))
            return

        dim = member.dimensions[depth]
        count = self._count(out, struct, member, dim, expr, ENCODE)
        index = r.index_var(depth)
        self._loop(
            out,
            index,
            count,
            lambda: self._encode(out, struct, member, r.element(expr, index), depth + 1),
        )

    def _decode(
        self, out: CodeWriter, struct: Struct, member: Member, sink: str, depth: int
    ) -> None:
        r = self.renderer
        if depth == len(member.dimensions):
            if member.type.is_primitive:
                out.extend(r.decode_primitive(member.type, sink))
            else:
                out.extend(r.decode_struct(member.type, sink))
            return

        dim = member.dimensions[depth]
        count = self._count(out, struct, member, dim, "", DECODE)
        var = r.container_var(depth)
        index = r.index_var(depth)
        if isinstance(dim, ConstantDimension):
            out.extend(r.fixed_array_open(var, member, depth, count))
            inner = r.fixed_array_sink(var, index)
        else:
            out.extend(r.variable_array_open(var, member, depth, count))
            inner = r.variable_array_sink(var, index)

        self._loop(
            out, index, count, lambda: self._decode(out, struct, member, inner, depth + 1)
        )
        out.extend(r.array_close(var, member, depth))
        out.line(sink.format(var))

    def _size(
        self, out: CodeWriter, struct: Struct, member: Member, expr: str, depth: int
    ) -> None:
        r = self.renderer
        if depth == len(member.dimensions):
            if member.type.is_primitive:
                out.line(r.size_add(r.size_primitive(member.type, expr)))
            else:
                out.line(r.size_add(r.size_struct(member.type, expr)))
            return

        dim = member.dimensions[depth]
        count = self._count(out, struct, member, dim, expr, SIZE)
        index = r.index_var(depth)
        self._loop(
            out,
            index,
            count,
            lambda: self._size(out, struct, member, r.element(expr, index), depth + 1),
        )

    def _count(
        self,
        out: CodeWriter,
        struct: Struct,
        member: Member,
        dim: Dimension,
        container: str,
        mode: str,
    ) -> str:
        """Emit the checks for one dimension and return its loop bound."""
        r = self.renderer
        if isinstance(dim, ConstantDimension):
            return r.constant_count(dim)

        if isinstance(dim, VariableDimension):
            size_member = struct.get_member(dim.size_field)
            if mode == DECODE:
                ref = r.decode_ref(size_member)
                out.extend(r.check_count(struct, member, ref, size_member))
            else:
                ref = r.member_ref(size_member)
                if mode == ENCODE or r.checks_in_size:
                    out.extend(r.check_length(struct, member, container, ref, size_member))
            return r.variable_count(ref, size_member)

        raise ModelError(f"{struct.full_name}.{member.name}: unsupported dimension {dim!r}")

    def _loop(self, out: CodeWriter, index: str, count: str, body: Callable[[], None]) -> None:
        out.extend(self.renderer.loop_open(index, count))
        out.indent()
        body()
        out.dedent()
        out.extend(self.renderer.loop_close())
