import pytest

from lcmgen.codegen.core.config import GeneratorConfig
from lcmgen.codegen.core.fingerprint import FingerprintEngine
from lcmgen.codegen.core.generator import GeneratorError
from lcmgen.codegen.core.schema import TypeName, convert_schema_document
from lcmgen.codegen.languages.rust import RustGenerator


def _files(schema, **config):
    generator = RustGenerator(GeneratorConfig(**config))
    return {f.path.as_posix(): f.content for f in generator.generate(schema)}


@pytest.fixture
def robot_files(robot_schema):
    return _files(robot_schema)


def test_module_tree(robot_files):
    assert set(robot_files) == {
        "robot/pose.rs",
        "robot/sensors/scan.rs",
        "mod.rs",
        "robot/mod.rs",
        "robot/sensors/mod.rs",
    }
    assert "pub mod robot;" in robot_files["mod.rs"]
    assert "pub mod sensors;" in robot_files["robot/mod.rs"]
    assert "pub mod pose;" in robot_files["robot/mod.rs"]
    assert "pub use self::pose::Pose;" in robot_files["robot/mod.rs"]
    assert "pub use self::scan::Scan;" in robot_files["robot/sensors/mod.rs"]


def test_struct_definition(robot_files):
    scan = robot_files["robot/sensors/scan.rs"]

    assert "#[derive(Clone, Debug, Default, PartialEq)]" in scan
    assert "pub struct Scan {" in scan
    assert "    pub utime: i64," in scan
    assert "    pub valid: bool," in scan
    assert "    pub pose: crate::robot::pose::Pose," in scan
    assert "    pub ranges: Vec<f32>," in scan
    assert "    pub grid: GenericArray<GenericArray<i16, typenum::U3>, typenum::U2>," in scan
    assert "    pub rows: Vec<GenericArray<i32, typenum::U2>>," in scan
    assert "    pub labels: GenericArray<Vec<String>, typenum::U2>," in scan
    assert "    pub path: Vec<crate::robot::pose::Pose>," in scan
    assert "    pub const MAX_RANGE: f64 = 30.5;" in scan
    assert "    pub const FLAGS: u8 = 255;" in scan
    assert "/// One laser scan." in scan


def test_message_impl(robot_schema, robot_files):
    scan = robot_files["robot/sensors/scan.rs"]
    fingerprint = FingerprintEngine(robot_schema).fingerprint_of(
        TypeName("robot.sensors", "scan_t")
    )

    assert "impl Message for Scan {" in scan
    assert f"        0x{fingerprint:016x}" in scan
    assert "fn encode(&self, buffer: &mut dyn Write) -> Result<()> {" in scan
    assert "fn decode(buffer: &mut dyn Read) -> Result<Self> {" in scan
    assert "fn size(&self) -> usize {" in scan
    assert "use lcm::generic_array::{GenericArray, typenum};" in scan
    assert "use std::io::{Error, ErrorKind, Read, Result, Write};" in scan


def test_imports_without_arrays(robot_files):
    pose = robot_files["robot/pose.rs"]
    assert "use std::io::{Read, Result, Write};" in pose
    assert "GenericArray<f64, typenum::U3>" in pose


def test_crate_root_and_prefix():
    document = {
        "structs": [
            {"package": "a", "name": "leaf_t", "members": [{"name": "x", "type": "int8"}]},
            {"package": "b", "name": "user_t", "members": [{"name": "leaf", "type": "a.leaf_t"}]},
        ]
    }
    files = _files(
        convert_schema_document(document),
        package_prefix="msgs",
        custom={"crate_root": "lcm_types"},
    )
    assert "pub leaf: lcm_types::msgs::a::leaf::Leaf," in files["msgs/b/user.rs"]
    assert "pub mod msgs;" in files["mod.rs"]


def test_keyword_fields_use_raw_identifiers():
    schema = convert_schema_document(
        {
            "structs": [
                {
                    "package": "demo",
                    "name": "kw_t",
                    "members": [{"name": "type", "type": "int8"}],
                }
            ]
        }
    )
    content = _files(schema)["demo/kw.rs"]
    assert "pub r#type: i8," in content
    assert "Message::encode(&self.r#type, buffer)?;" in content


def test_warns_about_self_embedding():
    schema = convert_schema_document(
        {
            "structs": [
                {
                    "package": "demo",
                    "name": "loop_t",
                    "members": [{"name": "next", "type": "loop_t"}],
                }
            ]
        }
    )
    warnings = RustGenerator().validate_schema(schema)
    assert any("infinite size" in w for w in warnings)


def test_non_raw_keyword_collision_fails():
    schema = convert_schema_document(
        {
            "structs": [
                {
                    "package": "demo",
                    "name": "kw_t",
                    "members": [
                        {"name": "self", "type": "int8"},
                        {"name": "self_", "type": "int8"},
                    ],
                }
            ]
        }
    )
    with pytest.raises(GeneratorError, match="both map to rust field self_"):
        RustGenerator().generate(schema)
