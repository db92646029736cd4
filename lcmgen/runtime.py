"""Wire codecs used by generated Python message classes.

Encoded messages are an 8-byte big-endian fingerprint followed by the
members in declaration order. Primitives are big-endian, booleans take one
byte (0 or 1) and strings are an int32 length (bytes + 1), the UTF-8 bytes
and a NUL terminator.
"""

import struct
from typing import Any, BinaryIO


class EncodeError(Exception):
    """Raised when a message cannot be serialized."""

    pass


class DecodeError(Exception):
    """Raised when input bytes do not form a valid message."""

    pass


class FingerprintMismatch(DecodeError):
    """The envelope carries a fingerprint for a different type."""

    def __init__(self, type_name: str, expected: int, actual: int):
        self.type_name = type_name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{type_name}: fingerprint mismatch "
            f"(expected 0x{expected:016x}, got 0x{actual:016x})"
        )


def read_exact(buf: BinaryIO, size: int) -> bytes:
    """Read exactly ``size`` bytes or fail with DecodeError."""
    data = buf.read(size)
    if len(data) != size:
        raise DecodeError(
            f"Unexpected end of input: needed {size} bytes, got {len(data)}"
        )
    return data


class PrimitiveCodec:
    """Fixed-width big-endian number codec."""

    def __init__(self, name: str, fmt: str):
        self.name = name
        self._struct = struct.Struct(">" + fmt)
        self.width = self._struct.size

    def write(self, buf: BinaryIO, value: Any) -> None:
        try:
            buf.write(self._struct.pack(value))
        except (struct.error, OverflowError) as e:
            raise EncodeError(f"Invalid {self.name} value {value!r}: {e}") from e

    def read(self, buf: BinaryIO) -> Any:
        return self._struct.unpack(read_exact(buf, self.width))[0]

    def size(self, value: Any) -> int:
        return self.width

    def __repr__(self) -> str:
        return f"PrimitiveCodec({self.name!r})"


class BooleanCodec:
    """One byte, 0 for false and 1 for true."""

    name = "boolean"
    width = 1

    def write(self, buf: BinaryIO, value: Any) -> None:
        buf.write(b"\x01" if value else b"\x00")

    def read(self, buf: BinaryIO) -> bool:
        raw = read_exact(buf, 1)[0]
        if raw > 1:
            raise DecodeError(f"Invalid boolean byte 0x{raw:02x}")
        return raw == 1

    def size(self, value: Any) -> int:
        return self.width


class StringCodec:
    """Length-prefixed, NUL-terminated UTF-8 text."""

    name = "string"

    @staticmethod
    def _payload(value: Any) -> bytes:
        if not isinstance(value, str):
            raise EncodeError(f"Invalid string value {value!r}")
        data = value.encode("utf-8")
        if len(data) + 1 > 0x7FFFFFFF:
            raise EncodeError(f"String of {len(data)} bytes is too long")
        return data

    def write(self, buf: BinaryIO, value: Any) -> None:
        data = self._payload(value)
        INT32.write(buf, len(data) + 1)
        buf.write(data)
        buf.write(b"\x00")

    def read(self, buf: BinaryIO) -> str:
        length = INT32.read(buf)
        if length < 1:
            raise DecodeError(f"Invalid string length {length}")

        data = read_exact(buf, length)
        if data[-1] != 0:
            raise DecodeError("String is not NUL terminated")
        try:
            return data[:-1].decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"String is not valid UTF-8: {e}") from e

    def size(self, value: Any) -> int:
        return 4 + len(self._payload(value)) + 1


BOOLEAN = BooleanCodec()
BYTE = PrimitiveCodec("byte", "B")
INT8 = PrimitiveCodec("int8_t", "b")
INT16 = PrimitiveCodec("int16_t", "h")
INT32 = PrimitiveCodec("int32_t", "i")
INT64 = PrimitiveCodec("int64_t", "q")
UINT8 = PrimitiveCodec("uint8_t", "B")
UINT16 = PrimitiveCodec("uint16_t", "H")
UINT32 = PrimitiveCodec("uint32_t", "I")
UINT64 = PrimitiveCodec("uint64_t", "Q")
FLOAT = PrimitiveCodec("float", "f")
DOUBLE = PrimitiveCodec("double", "d")
STRING = StringCodec()

FINGERPRINT_SIZE = UINT64.width


def write_fingerprint(buf: BinaryIO, fingerprint: int) -> None:
    UINT64.write(buf, fingerprint)


def check_fingerprint(buf: BinaryIO, expected: int, type_name: str) -> None:
    """Consume the envelope fingerprint and verify it matches ``expected``."""
    actual = UINT64.read(buf)
    if actual != expected:
        raise FingerprintMismatch(type_name, expected, actual)
