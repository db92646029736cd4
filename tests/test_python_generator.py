import struct
from pathlib import Path

import pytest

from lcmgen import runtime
from lcmgen.codegen.core.config import GeneratorConfig
from lcmgen.codegen.core.fingerprint import FingerprintEngine
from lcmgen.codegen.core.generator import GeneratorError, generate_code
from lcmgen.codegen.core.schema import TypeName, convert_schema_document
from lcmgen.codegen.languages.python import PythonGenerator


def _files(schema, **config):
    generator = PythonGenerator(GeneratorConfig(**config))
    return {f.path.as_posix(): f for f in generator.generate(schema)}


class TestGeneratedLayout:
    def test_one_module_per_struct_plus_package_inits(self, robot_schema):
        files = _files(robot_schema)

        assert set(files) == {
            "robot/pose.py",
            "robot/sensors/scan.py",
            "robot/__init__.py",
            "robot/sensors/__init__.py",
        }
        assert files["robot/__init__.py"].index
        assert not files["robot/pose.py"].index
        assert files["robot/pose.py"].source == "types/robot.lcm"

    def test_package_init_reexports(self, robot_schema):
        init = _files(robot_schema)["robot/sensors/__init__.py"].content
        assert "from .scan import Scan" in init
        assert '"Scan",' in init

    def test_package_prefix(self, reading_schema):
        files = _files(reading_schema, package_prefix="gen")
        assert "gen/robot/sensors/reading.py" in files
        assert "gen/__init__.py" in files

    def test_struct_module_content(self, reading_schema):
        content = _files(reading_schema)["robot/sensors/reading.py"].content
        fingerprint = FingerprintEngine(reading_schema).fingerprint_of(
            TypeName("robot.sensors", "reading_t")
        )

        assert "class Reading:" in content
        assert f"FINGERPRINT: typing.ClassVar[int] = 0x{fingerprint:016x}" in content
        assert "MAX_COUNT: typing.ClassVar[int] = 64" in content
        assert "count: int = 0" in content
        assert "values: list[float] = dataclasses.field(default_factory=list)" in content
        assert '"""A batch of readings."""' in content
        assert "# Source: types/sensors.lcm" in content
        assert "import lcmgen.runtime as _rt" in content

    def test_without_comments(self, reading_schema):
        content = _files(reading_schema, add_comments=False)["robot/sensors/reading.py"].content
        assert "A batch of readings." not in content
        assert "# Source:" not in content

    def test_keeps_type_suffix_when_configured(self, reading_schema):
        files = _files(reading_schema, strip_type_suffix=False)
        assert "class ReadingT:" in files["robot/sensors/reading_t.py"].content

    def test_generated_code_compiles(self, robot_schema):
        for path, generated in _files(robot_schema).items():
            compile(generated.content, path, "exec")

    def test_warns_about_renamed_fields(self):
        schema = convert_schema_document(
            {
                "structs": [
                    {
                        "package": "demo",
                        "name": "odd_t",
                        "members": [{"name": "lambda", "type": "int8"}],
                    }
                ]
            }
        )
        warnings = PythonGenerator().validate_schema(schema)
        assert any("renamed to lambda_" in w for w in warnings)


class TestReadingRoundTrip:
    @pytest.fixture
    def Reading(self, reading_schema, import_generated):
        return import_generated(reading_schema, "robot.sensors.reading").Reading

    def test_types(self, Reading):
        msg = Reading()
        assert msg.count == 0
        assert msg.values == []
        assert Reading.MAX_COUNT == 64

    def test_round_trip(self, Reading):
        msg = Reading(count=3, values=[1.0, 2.0, 3.0])
        data = msg.encode()

        assert Reading.decode(data) == msg
        assert data[:8] == struct.pack(">Q", Reading.FINGERPRINT)
        assert data[8:] == struct.pack(">i3d", 3, 1.0, 2.0, 3.0)

    def test_size_matches_encoding(self, Reading):
        msg = Reading(count=3, values=[1.0, 2.0, 3.0])
        assert msg.encoded_size() == len(msg.encode()) == 8 + 4 + 3 * 8

    def test_count_larger_than_container_fails(self, Reading):
        with pytest.raises(runtime.EncodeError, match="count is 5"):
            Reading(count=5, values=[1.0, 2.0, 3.0]).encode()

    def test_negative_count_fails(self, Reading):
        with pytest.raises(runtime.EncodeError):
            Reading(count=-1, values=[]).encode()

    def test_shorter_count_serializes_declared_elements(self, Reading):
        data = Reading(count=2, values=[1.0, 2.0, 3.0]).encode()
        assert Reading.decode(data) == Reading(count=2, values=[1.0, 2.0])

    def test_fingerprint_mismatch(self, Reading):
        data = bytearray(Reading(count=0, values=[]).encode())
        data[0] ^= 0xFF
        with pytest.raises(runtime.FingerprintMismatch) as excinfo:
            Reading.decode(bytes(data))
        assert excinfo.value.expected == Reading.FINGERPRINT

    def test_truncated_input(self, Reading):
        data = Reading(count=3, values=[1.0, 2.0, 3.0]).encode()
        with pytest.raises(runtime.DecodeError):
            Reading.decode(data[:-1])

    def test_negative_decoded_count(self, Reading):
        data = struct.pack(">Qi", Reading.FINGERPRINT, -2)
        with pytest.raises(runtime.DecodeError, match="negative length"):
            Reading.decode(data)


class TestNestedRoundTrip:
    @pytest.fixture
    def robot(self, robot_schema, import_generated):
        scan = import_generated(robot_schema, "robot.sensors.scan")
        pose = import_generated(robot_schema, "robot.pose")
        return scan.Scan, pose.Pose

    def test_defaults_have_fixed_shapes(self, robot):
        Scan, Pose = robot
        msg = Scan()
        assert msg.grid == [[0, 0, 0], [0, 0, 0]]
        assert msg.labels == [[], []]
        assert msg.pose == Pose(position=[0.0, 0.0, 0.0], frame="")
        assert Scan.FLAGS == 0xFF
        assert Scan.MAX_RANGE == 30.5

    def test_default_round_trip(self, robot):
        Scan, _ = robot
        msg = Scan()
        assert Scan.decode(msg.encode()) == msg

    def test_full_round_trip(self, robot):
        Scan, Pose = robot
        msg = Scan(
            utime=1_700_000_000_000_000,
            valid=True,
            pose=Pose(position=[1.0, 2.0, 3.0], frame="map"),
            nranges=2,
            ranges=[0.5, 1.5],
            grid=[[1, 2, 3], [-4, -5, -6]],
            nrows=1,
            rows=[[7, 8]],
            labels=[["left"], ["rechts ü"]],
            npath=2,
            path=[
                Pose(position=[0.0, 0.0, 0.0], frame="a"),
                Pose(position=[1.0, 1.0, 1.0], frame="b"),
            ],
        )
        data = msg.encode()

        assert Scan.decode(data) == msg
        assert msg.encoded_size() == len(data)

    def test_nested_count_check(self, robot):
        Scan, _ = robot
        msg = Scan(nrows=2, rows=[[1, 2], [3, 4]], labels=[["a", "b"], ["c"]])
        with pytest.raises(runtime.EncodeError, match="labels"):
            msg.encode()

    def test_out_of_range_value(self, robot):
        Scan, _ = robot
        with pytest.raises(runtime.EncodeError):
            Scan(grid=[[1, 2, 3], [4, 5, 1 << 20]]).encode()


def test_self_referencing_struct(tmp_path, import_generated):
    schema = convert_schema_document(
        {
            "structs": [
                {
                    "package": "tree",
                    "name": "node_t",
                    "members": [
                        {"name": "value", "type": "int32"},
                        {"name": "nchildren", "type": "int32"},
                        {"name": "children", "type": "node_t", "dims": ["nchildren"]},
                    ],
                }
            ]
        }
    )
    Node = import_generated(schema, "tree.node").Node

    leaf = Node(value=2, nchildren=0, children=[])
    root = Node(value=1, nchildren=1, children=[leaf])
    assert Node.decode(root.encode()) == root
    assert Path(tmp_path, "tree", "__init__.py").exists()


def _clash_schema(*names):
    return convert_schema_document(
        {
            "structs": [
                {
                    "package": "demo",
                    "name": "clash_t",
                    "members": [{"name": n, "type": "int8"} for n in names],
                }
            ]
        }
    )


class TestFieldNameCollisions:
    def test_keyword_and_escaped_name_collide(self):
        schema = _clash_schema("class", "class_")

        with pytest.raises(GeneratorError, match="demo.clash_t.class_"):
            PythonGenerator().generate(schema)

        result = generate_code(PythonGenerator(), schema)
        assert not result.success
        assert "both map to python field class_" in result.error_message
        assert result.files == []

    def test_generated_attribute_and_escaped_name_collide(self):
        with pytest.raises(GeneratorError, match="encode_"):
            PythonGenerator().generate(_clash_schema("encode", "encode_"))

    def test_escaped_keyword_alone_is_fine(self):
        content = _files(_clash_schema("class", "klass"))["demo/clash.py"].content
        assert content.count("class_: int = 0") == 1
