"""Shared fixtures for the lcmgen test suite."""

import importlib
import sys

import pytest

from lcmgen.codegen.core.config import GeneratorConfig
from lcmgen.codegen.core.generator import write_generated_files
from lcmgen.codegen.core.schema import convert_schema_document
from lcmgen.codegen.languages.python import PythonGenerator


@pytest.fixture
def reading_document():
    """The ``Reading`` example: a count and a variable array sized by it."""
    return {
        "source": "types/sensors.lcm",
        "structs": [
            {
                "package": "robot.sensors",
                "name": "reading_t",
                "comment": "A batch of readings.",
                "members": [
                    {"name": "count", "type": "int32"},
                    {"name": "values", "type": "float64", "dims": ["count"]},
                ],
                "constants": [{"name": "MAX_COUNT", "type": "int32", "value": "64"}],
            }
        ],
    }


@pytest.fixture
def robot_document():
    """A small multi-package schema exercising every dimension shape."""
    return {
        "source": "types/robot.lcm",
        "structs": [
            {
                "package": "robot",
                "name": "pose_t",
                "members": [
                    {"name": "position", "type": "double", "dims": [3]},
                    {"name": "frame", "type": "string"},
                ],
            },
            {
                "package": "robot.sensors",
                "name": "scan_t",
                "comment": "One laser scan.",
                "members": [
                    {"name": "utime", "type": "int64"},
                    {"name": "valid", "type": "boolean"},
                    {"name": "pose", "type": "robot.pose_t"},
                    {"name": "nranges", "type": "int16"},
                    {"name": "ranges", "type": "float", "dims": ["nranges"]},
                    {"name": "grid", "type": "int16", "dims": [2, 3]},
                    {"name": "nrows", "type": "uint8"},
                    {"name": "rows", "type": "int32", "dims": ["nrows", 2]},
                    {"name": "labels", "type": "string", "dims": [2, "nrows"]},
                    {"name": "npath", "type": "int32"},
                    {"name": "path", "type": "robot.pose_t", "dims": ["npath"]},
                ],
                "constants": [
                    {"name": "MAX_RANGE", "type": "double", "value": "30.5"},
                    {"name": "FLAGS", "type": "uint8", "value": "0xff"},
                ],
            },
        ],
    }


@pytest.fixture
def reading_schema(reading_document):
    return convert_schema_document(reading_document)


@pytest.fixture
def robot_schema(robot_document):
    return convert_schema_document(robot_document)


@pytest.fixture
def import_generated(tmp_path, monkeypatch):
    """
    Generate Python code for a schema into ``tmp_path`` and import a module.

    Modules imported by the test are dropped from ``sys.modules`` afterwards
    so later tests can generate packages with the same names.
    """
    before = set(sys.modules)
    monkeypatch.syspath_prepend(str(tmp_path))

    def load(schema, module, **config):
        generator = PythonGenerator(GeneratorConfig(**config))
        write_generated_files(generator.generate(schema), tmp_path)
        importlib.invalidate_caches()
        return importlib.import_module(module)

    yield load

    for name in set(sys.modules) - before:
        if not name.startswith("lcmgen"):
            del sys.modules[name]
