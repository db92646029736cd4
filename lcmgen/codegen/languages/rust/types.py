"""
Rust type system for code generation.

Maps canonical primitive types onto Rust types and builds the nested
container types of array members.
"""

from typing import Callable

from ...core.schema import ConstantDimension, Member, TypeName


RUST_TYPE_MAP = {
    "boolean": "bool",
    "byte": "u8",
    "int8_t": "i8",
    "int16_t": "i16",
    "int32_t": "i32",
    "int64_t": "i64",
    "uint8_t": "u8",
    "uint16_t": "u16",
    "uint32_t": "u32",
    "uint64_t": "u64",
    "float": "f32",
    "double": "f64",
    "string": "String",
}


def rust_primitive(type_name: TypeName) -> str:
    return RUST_TYPE_MAP[type_name.short_name]


def rust_member_type(
    member: Member, type_ref: Callable[[TypeName], str], depth: int = 0
) -> str:
    """
    Rust type of ``member`` below its first ``depth`` dimensions.

    Constant dimensions become ``GenericArray<T, typenum::UN>`` and variable
    dimensions become ``Vec<T>``.
    """
    if member.type.is_primitive:
        rust_type = rust_primitive(member.type)
    else:
        rust_type = type_ref(member.type)

    for dim in reversed(member.dimensions[depth:]):
        if isinstance(dim, ConstantDimension):
            rust_type = f"GenericArray<{rust_type}, typenum::U{dim.size}>"
        else:
            rust_type = f"Vec<{rust_type}>"
    return rust_type
