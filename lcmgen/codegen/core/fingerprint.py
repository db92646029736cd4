"""
Structural fingerprints for struct types.

A struct's base hash covers its own member names, primitive member types
and dimension shapes. The published fingerprint adds the fingerprints of
the distinct struct types it references and rotates the 64-bit sum left by
one bit at every level. Reference cycles are broken with an in-progress set:
a struct whose composition is already under way contributes zero. Distinct
cyclic graphs can therefore share fingerprint components.
"""

from typing import TYPE_CHECKING, Dict, Iterable, Set

from ...logging_config import get_logger

if TYPE_CHECKING:
    from .schema import Member, Schema, Struct, TypeName

logger = get_logger(__name__)

MASK64 = (1 << 64) - 1
BASE_HASH_SEED = 0x12345678


def _to_int64(value: int) -> int:
    value &= MASK64
    return value - (1 << 64) if value & (1 << 63) else value


def _to_int8(value: int) -> int:
    value &= 0xFF
    return value - 0x100 if value & 0x80 else value


def _hash_update(v: int, c: int) -> int:
    # Signed 64-bit arithmetic: ``v >> 55`` must sign-extend.
    return _to_int64(((v << 8) ^ (v >> 55)) + c)


def _hash_string_update(v: int, text: str) -> int:
    data = text.encode("utf-8")
    v = _hash_update(v, _to_int8(len(data)))
    for byte in data:
        v = _hash_update(v, _to_int8(byte))
    return v


def compute_base_hash(members: Iterable["Member"]) -> int:
    """
    Compute the signed 64-bit base hash of a member list.

    Struct-typed members contribute only their name and dimensions here;
    their types are accounted for when fingerprints are composed.
    """
    v = BASE_HASH_SEED
    for member in members:
        v = _hash_string_update(v, member.name)
        if member.type.is_primitive:
            v = _hash_string_update(v, member.type.short_name)

        v = _hash_update(v, _to_int8(len(member.dimensions)))
        for dim in member.dimensions:
            v = _hash_update(v, dim.mode.value)
            v = _hash_string_update(v, dim.size_text)
    return v


def rotate_left(value: int) -> int:
    """Rotate an unsigned 64-bit value left by one bit."""
    value &= MASK64
    return ((value << 1) & MASK64) | (value >> 63)


class FingerprintEngine:
    """Computes and memoizes published fingerprints for one schema."""

    def __init__(self, schema: "Schema"):
        self.schema = schema
        self._cache: Dict[str, int] = {}

    def fingerprint(self, struct: "Struct") -> int:
        """Return the published unsigned 64-bit fingerprint of ``struct``."""
        key = struct.full_name
        if key not in self._cache:
            self._cache[key] = self.compose(struct, set())
            logger.debug("Fingerprint %s = 0x%016x", key, self._cache[key])
        return self._cache[key]

    def fingerprint_of(self, type_name: "TypeName") -> int:
        return self.fingerprint(self.schema.get_struct(type_name))

    def compose(self, struct: "Struct", in_progress: Set[str]) -> int:
        """
        Compose the fingerprint of ``struct`` below the structs in
        ``in_progress``.

        ``in_progress`` holds the full names of the structs whose
        composition encloses this call; it is restored before returning.
        """
        key = struct.full_name
        if key in in_progress:
            return 0

        in_progress.add(key)
        try:
            total = struct.base_hash
            for type_name in struct.referenced_types():
                total += self.compose(self.schema.get_struct(type_name), in_progress)
        finally:
            in_progress.discard(key)

        return rotate_left(total)

    def clear(self) -> None:
        self._cache.clear()
