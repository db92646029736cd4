import pytest

from lcmgen.codegen.core.marshal import CodeWriter, MarshalSynthesizer
from lcmgen.codegen.core.schema import (
    Member,
    ModelError,
    TypeName,
    VariableDimension,
    build_struct,
)
from lcmgen.codegen.languages.go import GoRenderer, GoTypeMapper, create_go_sanitizer
from lcmgen.codegen.languages.python import PythonRenderer, create_python_sanitizer
from lcmgen.codegen.languages.rust import RustRenderer, create_rust_sanitizer


def _python(type_ref=lambda t: t.short_name):
    return MarshalSynthesizer(PythonRenderer(create_python_sanitizer(), type_ref))


@pytest.fixture
def reading(reading_schema):
    (struct,) = reading_schema
    return struct


@pytest.fixture
def scan(robot_schema):
    return robot_schema.get_struct(TypeName("robot.sensors", "scan_t"))


def test_code_writer_indents_nested_blocks():
    out = CodeWriter("  ")
    out.line("a")
    out.indent()
    out.extend(["b", "c"])
    out.line()
    out.dedent()
    out.line("d")
    assert out.lines == ["a", "  b", "  c", "", "d"]
    with pytest.raises(ValueError):
        out.dedent()


class TestPythonBodies:
    def test_encode_variable_array(self, reading):
        assert _python().encode_body(reading) == [
            "_rt.INT32.write(buf, self.count)",
            "if not 0 <= self.count <= len(self.values):",
            '    raise _rt.EncodeError(f"robot.sensors.reading_t.values: count is '
            '{self.count} but only {len(self.values)} elements are present")',
            "for i0 in range(self.count):",
            "    _rt.DOUBLE.write(buf, self.values[i0])",
        ]

    def test_decode_variable_array(self, reading):
        assert _python().decode_body(reading) == [
            "obj.count = _rt.INT32.read(buf)",
            "if obj.count < 0:",
            '    raise _rt.DecodeError(f"robot.sensors.reading_t.values: '
            'negative length {obj.count}")',
            "a0 = []",
            "for i0 in range(obj.count):",
            "    a0.append(_rt.DOUBLE.read(buf))",
            "obj.values = a0",
        ]

    def test_size_repeats_length_check(self, reading):
        lines = _python().size_body(reading)
        assert lines[0] == "size += 4"
        assert lines[1] == "if not 0 <= self.count <= len(self.values):"
        assert lines[-2:] == ["for i0 in range(self.count):", "    size += 8"]

    def test_nested_fixed_dimensions(self, scan):
        encode = _python().encode_body(scan)
        start = encode.index("for i0 in range(2):")
        assert encode[start : start + 3] == [
            "for i0 in range(2):",
            "    for i1 in range(3):",
            "        _rt.INT16.write(buf, self.grid[i0][i1])",
        ]

        decode = _python().decode_body(scan)
        start = decode.index("obj.grid = a0") - 6
        assert decode[start : start + 7] == [
            "a0 = []",
            "for i0 in range(2):",
            "    a1 = []",
            "    for i1 in range(3):",
            "        a1.append(_rt.INT16.read(buf))",
            "    a0.append(a1)",
            "obj.grid = a0",
        ]

    def test_variable_inside_constant_dimension(self, scan):
        encode = _python().encode_body(scan)
        start = encode.index("for i0 in range(2):", encode.index("for i0 in range(self.nrows):"))
        assert encode[start : start + 5] == [
            "for i0 in range(2):",
            "    if not 0 <= self.nrows <= len(self.labels[i0]):",
            '        raise _rt.EncodeError(f"robot.sensors.scan_t.labels: nrows is '
            '{self.nrows} but only {len(self.labels[i0])} elements are present")',
            "    for i1 in range(self.nrows):",
            "        _rt.STRING.write(buf, self.labels[i0][i1])",
        ]

    def test_unsigned_counts_skip_negative_check(self, scan):
        decode = _python().decode_body(scan)
        assert "if obj.nrows < 0:" not in decode
        assert "if obj.nranges < 0:" in decode

    def test_struct_leaves(self, scan):
        synthesizer = _python(lambda t: f"mod.{t.short_name}")
        assert "self.pose._encode_one(buf)" in synthesizer.encode_body(scan)
        assert "obj.pose = mod.pose_t._decode_one(buf)" in synthesizer.decode_body(scan)
        assert "    size += self.path[i0]._encoded_size_one()" in synthesizer.size_body(scan)

    def test_strings_are_sized_by_value(self, robot_schema):
        pose = robot_schema.get_struct(TypeName("robot", "pose_t"))
        assert _python().size_body(pose) == [
            "for i0 in range(3):",
            "    size += 8",
            "size += _rt.STRING.size(self.frame)",
        ]


def test_rust_fixed_and_variable_containers(scan):
    renderer = RustRenderer(create_rust_sanitizer(), lambda t: f"crate::{t.short_name}")
    decode = MarshalSynthesizer(renderer).decode_body(scan)

    assert "let mut a0: GenericArray<GenericArray<i16, typenum::U3>, typenum::U2> = " \
        "Default::default();" in decode
    assert "let mut a0: Vec<f32> = Vec::new();" in decode
    assert "        a1[i1] = <i16 as Message>::decode(buffer)?;" in decode
    assert "msg.grid = a0;" in decode

    encode = MarshalSynthesizer(renderer).encode_body(scan)
    assert "for i0 in 0..(self.nranges as usize) {" in encode
    assert (
        "if self.nranges < 0 || (self.nranges as usize) > self.ranges.len() {"
        in encode
    )


def test_go_decodes_into_local_message(scan):
    mapper = GoTypeMapper(lambda t: t.short_name)
    renderer = GoRenderer(create_go_sanitizer(), mapper)
    decode = MarshalSynthesizer(renderer).decode_body(scan)

    assert "a0 := make([]float32, int(msg.Nranges))" in decode
    assert "var a0 [2][3]int16" in decode
    assert "msg.Grid = a0" in decode
    assert "\tv, err := readInt64(r)" in decode

    size = MarshalSynthesizer(renderer).size_body(scan)
    assert "size += 8" in size
    assert not any("Errorf" in line for line in size)


def test_size_member_after_array_is_rejected():
    struct = build_struct(
        TypeName("demo", "bad_t"),
        [
            Member("values", TypeName.parse("double"), (VariableDimension("count"),)),
            Member("count", TypeName.parse("int32")),
        ],
    )
    with pytest.raises(ModelError):
        _python().encode_body(struct)
