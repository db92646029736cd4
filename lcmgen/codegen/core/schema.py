"""
Core schema representation for code generation.

The semantic model shared by every backend: type names, dimensions,
members, constants and structs, plus the conversion of parsed schema
documents into that model.
"""

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .fingerprint import compute_base_hash
from ...logging_config import get_logger

logger = get_logger(__name__)


class ModelError(Exception):
    """Raised when the semantic model is inconsistent."""

    pass


# Canonical primitive type names, as hashed into fingerprints.
INTEGER_TYPES = (
    "byte",
    "int8_t",
    "int16_t",
    "int32_t",
    "int64_t",
    "uint8_t",
    "uint16_t",
    "uint32_t",
    "uint64_t",
)
FLOAT_TYPES = ("float", "double")
PRIMITIVE_TYPES = frozenset(INTEGER_TYPES + FLOAT_TYPES + ("boolean", "string"))

# Fixed wire widths in bytes; strings are variable length.
PRIMITIVE_WIDTHS = {
    "boolean": 1,
    "byte": 1,
    "int8_t": 1,
    "int16_t": 2,
    "int32_t": 4,
    "int64_t": 8,
    "uint8_t": 1,
    "uint16_t": 2,
    "uint32_t": 4,
    "uint64_t": 8,
    "float": 4,
    "double": 8,
}

PRIMITIVE_ALIASES = {
    "bool": "boolean",
    "int8": "int8_t",
    "int16": "int16_t",
    "int32": "int32_t",
    "int64": "int64_t",
    "uint8": "uint8_t",
    "uint16": "uint16_t",
    "uint32": "uint32_t",
    "uint64": "uint64_t",
    "float32": "float",
    "float64": "double",
}

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def canonical_primitive(name: str) -> Optional[str]:
    """Return the canonical primitive name for ``name``, or None."""
    name = PRIMITIVE_ALIASES.get(name, name)
    return name if name in PRIMITIVE_TYPES else None


@dataclass(frozen=True)
class TypeName:
    """A fully qualified reference to a primitive or struct type."""

    package: str
    short_name: str

    @property
    def full_name(self) -> str:
        if self.package:
            return f"{self.package}.{self.short_name}"
        return self.short_name

    @property
    def is_primitive(self) -> bool:
        return not self.package and self.short_name in PRIMITIVE_TYPES

    @property
    def is_integer(self) -> bool:
        return self.is_primitive and self.short_name in INTEGER_TYPES

    @property
    def is_signed(self) -> bool:
        return self.is_primitive and self.short_name.startswith("int")

    @classmethod
    def parse(cls, name: str, default_package: str = "") -> "TypeName":
        """
        Resolve a type reference as written in a schema.

        Primitive names (and their aliases) stay unqualified, dotted names
        are split at the last dot, and any other name belongs to
        ``default_package``.
        """
        primitive = canonical_primitive(name)
        if primitive:
            return cls("", primitive)
        if "." in name:
            package, _, short_name = name.rpartition(".")
            return cls(package, short_name)
        return cls(default_package, name)

    def __str__(self) -> str:
        return self.full_name


class DimensionMode(Enum):
    """How the length of one array axis is determined."""

    CONSTANT = 0
    VARIABLE = 1


@dataclass(frozen=True)
class ConstantDimension:
    """An array axis whose length is a literal known at compile time."""

    size: int

    @property
    def mode(self) -> DimensionMode:
        return DimensionMode.CONSTANT

    @property
    def size_text(self) -> str:
        return str(self.size)


@dataclass(frozen=True)
class VariableDimension:
    """An array axis whose length is the value of a sibling integer member."""

    size_field: str

    @property
    def mode(self) -> DimensionMode:
        return DimensionMode.VARIABLE

    @property
    def size_text(self) -> str:
        return self.size_field


Dimension = Union[ConstantDimension, VariableDimension]


@dataclass(frozen=True)
class Member:
    """Represents a single field in a struct."""

    name: str
    type: TypeName
    dimensions: Tuple[Dimension, ...] = ()
    comment: Optional[str] = None

    @property
    def is_array(self) -> bool:
        return bool(self.dimensions)

    @property
    def is_constant_size(self) -> bool:
        return all(isinstance(d, ConstantDimension) for d in self.dimensions)


@dataclass(frozen=True)
class Constant:
    """A named compile-time value attached to a struct."""

    name: str
    type: TypeName
    value: str
    comment: Optional[str] = None

    @property
    def parsed_value(self) -> Union[int, float]:
        if self.type.is_integer:
            return int(self.value, 0)
        return float(self.value)


@dataclass(frozen=True)
class Struct:
    """Represents one message type of the schema."""

    type_name: TypeName
    members: Tuple[Member, ...] = ()
    constants: Tuple[Constant, ...] = ()
    base_hash: int = 0
    comment: Optional[str] = None
    source_file: Optional[str] = None

    @property
    def full_name(self) -> str:
        return self.type_name.full_name

    def get_member(self, name: str) -> Optional[Member]:
        """Get member by name."""
        for member in self.members:
            if member.name == name:
                return member
        return None

    def referenced_types(self) -> List[TypeName]:
        """Distinct struct types used by members, excluding this struct."""
        seen: List[TypeName] = []
        for member in self.members:
            if member.type.is_primitive or member.type == self.type_name:
                continue
            if member.type not in seen:
                seen.append(member.type)
        return seen


@dataclass
class Schema:
    """All structs of one compilation unit, keyed by full name."""

    structs: Dict[str, Struct] = field(default_factory=dict)

    def add_struct(self, struct: Struct) -> None:
        if struct.full_name in self.structs:
            raise ModelError(f"Duplicate struct definition: {struct.full_name}")
        self.structs[struct.full_name] = struct

    def get_struct(self, type_name: TypeName) -> Struct:
        """Resolve a struct reference, failing on dangling references."""
        try:
            return self.structs[type_name.full_name]
        except KeyError:
            raise ModelError(f"Unresolved type reference: {type_name}") from None

    def packages(self) -> List[str]:
        return sorted({s.type_name.package for s in self.structs.values()})

    def __iter__(self) -> Iterator[Struct]:
        return iter(self.structs.values())

    def __len__(self) -> int:
        return len(self.structs)

    def __contains__(self, type_name: object) -> bool:
        return isinstance(type_name, TypeName) and type_name.full_name in self.structs


def build_struct(
    type_name: TypeName,
    members: Iterable[Member],
    constants: Iterable[Constant] = (),
    comment: Optional[str] = None,
    source_file: Optional[str] = None,
    base_hash: Optional[int] = None,
) -> Struct:
    """Create a Struct, deriving its base hash from the members."""
    members = tuple(members)
    if base_hash is None:
        base_hash = compute_base_hash(members)
    return Struct(
        type_name=type_name,
        members=members,
        constants=tuple(constants),
        base_hash=base_hash,
        comment=comment,
        source_file=source_file,
    )


def _parse_dimension(raw: Any, where: str) -> Dimension:
    if isinstance(raw, bool):
        raise ModelError(f"{where}: invalid dimension {raw!r}")
    if isinstance(raw, int):
        if raw < 0:
            raise ModelError(f"{where}: negative array size {raw}")
        return ConstantDimension(raw)
    if isinstance(raw, str):
        text = raw.strip()
        if text.isdigit():
            return ConstantDimension(int(text))
        if _IDENTIFIER.match(text):
            return VariableDimension(text)
    raise ModelError(f"{where}: invalid dimension {raw!r}")


def _parse_constant(raw: Dict[str, Any], where: str) -> Constant:
    name = raw.get("name")
    if not name or not _IDENTIFIER.match(name):
        raise ModelError(f"{where}: invalid constant name {name!r}")

    type_name = TypeName.parse(raw.get("type", ""))
    if not type_name.is_primitive or type_name.short_name in ("string", "boolean"):
        raise ModelError(f"{where}.{name}: constants must be numeric, got {type_name}")

    value = str(raw.get("value", "")).strip()
    constant = Constant(name, type_name, value, raw.get("comment"))
    try:
        parsed = constant.parsed_value
    except ValueError:
        raise ModelError(
            f"{where}.{name}: invalid {type_name} literal {value!r}"
        ) from None

    width = PRIMITIVE_WIDTHS[type_name.short_name]
    if type_name.is_integer:
        if type_name.is_signed:
            low, high = -(1 << (8 * width - 1)), (1 << (8 * width - 1)) - 1
        else:
            low, high = 0, (1 << (8 * width)) - 1
        if not low <= parsed <= high:
            raise ModelError(f"{where}.{name}: {value} out of range for {type_name}")
    elif not math.isfinite(parsed):
        raise ModelError(f"{where}.{name}: {value} is not a finite number")
    return constant


def _parse_members(
    raw_members: List[Dict[str, Any]], package: str, where: str
) -> List[Member]:
    members: List[Member] = []
    names = set()
    for raw in raw_members:
        name = raw.get("name")
        if not name or not _IDENTIFIER.match(name):
            raise ModelError(f"{where}: invalid member name {name!r}")
        if name in names:
            raise ModelError(f"{where}: duplicate member {name!r}")
        names.add(name)

        type_text = raw.get("type")
        if not type_text:
            raise ModelError(f"{where}.{name}: missing type")

        dims = tuple(
            _parse_dimension(d, f"{where}.{name}") for d in raw.get("dims", [])
        )
        members.append(
            Member(
                name=name,
                type=TypeName.parse(type_text, package),
                dimensions=dims,
                comment=raw.get("comment"),
            )
        )
    return members


def check_dimensions(struct: Struct) -> None:
    """
    Check that every variable dimension names an integer scalar member
    declared earlier in the struct (decoders read the count before the
    array it sizes).
    """
    for index, member in enumerate(struct.members):
        for dim in member.dimensions:
            if isinstance(dim, ConstantDimension):
                continue
            if not isinstance(dim, VariableDimension):
                raise ModelError(
                    f"{struct.full_name}.{member.name}: unsupported dimension {dim!r}"
                )

            size_member = struct.get_member(dim.size_field)
            where = f"{struct.full_name}.{member.name}"
            if size_member is None:
                raise ModelError(f"{where}: unknown size member {dim.size_field!r}")
            if size_member.is_array or not size_member.type.is_integer:
                raise ModelError(
                    f"{where}: size member {dim.size_field!r} must be an integer scalar"
                )
            if struct.members.index(size_member) >= index:
                raise ModelError(
                    f"{where}: size member {dim.size_field!r} must be declared before "
                    f"the array it sizes"
                )


def validate_struct(struct: Struct, schema: Schema) -> None:
    """Check that struct references resolve and dimensions are well formed."""
    for member in struct.members:
        if not member.type.is_primitive:
            schema.get_struct(member.type)
    check_dimensions(struct)


def convert_schema_document(
    documents: Union[Dict[str, Any], Iterable[Tuple[Optional[str], Dict[str, Any]]]],
) -> Schema:
    """
    Convert parsed schema documents to the internal Schema representation.

    Args:
        documents: A single document, or an iterable of
            ``(source, document)`` pairs to merge into one schema

    Returns:
        Schema: validated semantic model
    """
    if isinstance(documents, dict):
        documents = [(None, documents)]

    schema = Schema()
    for source, document in documents:
        if not isinstance(document, dict) or not isinstance(
            document.get("structs"), list
        ):
            raise ModelError(f"Schema document {source or '<input>'} has no struct list")

        default_source = document.get("source", source)
        for raw in document["structs"]:
            package = raw.get("package", "") or ""
            short_name = raw.get("name")
            if not short_name or not _IDENTIFIER.match(short_name):
                raise ModelError(f"Invalid struct name {short_name!r}")

            type_name = TypeName(package, short_name)
            where = type_name.full_name
            if canonical_primitive(short_name) and not package:
                raise ModelError(f"Struct name {short_name!r} shadows a primitive type")

            members = _parse_members(raw.get("members", []), package, where)
            constants = [_parse_constant(c, where) for c in raw.get("constants", [])]

            struct = build_struct(
                type_name,
                members,
                constants,
                comment=raw.get("comment"),
                source_file=raw.get("source", default_source),
                base_hash=raw.get("base_hash"),
            )
            schema.add_struct(struct)
            logger.debug("Loaded struct %s (%d members)", where, len(members))

    for struct in schema:
        validate_struct(struct, schema)

    logger.info("Schema loaded: %d structs", len(schema))
    return schema
