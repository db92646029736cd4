"""
Rust code generator implementation.

Generates one module per struct implementing ``lcm::Message`` and a
``mod.rs`` module tree for every package directory.
"""

from collections import defaultdict
from typing import Dict, List, Any, Optional, Set
from pathlib import Path

from ...core.config import GeneratorConfig
from ...core.generator import CodeGenerator, GeneratedFile
from ...core.marshal import MarshalSynthesizer
from ...core.naming import package_to_path, package_to_scope
from ...core.schema import (
    Constant,
    ConstantDimension,
    Member,
    Schema,
    Struct,
    TypeName,
    VariableDimension,
)
from .naming import create_rust_sanitizer
from .renderer import RustRenderer
from .types import rust_member_type, rust_primitive


class RustGenerator(CodeGenerator):
    """Code generator for Rust structs on top of the ``lcm`` crate."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize Rust generator with configuration."""
        super().__init__(config)

        self.sanitizer = create_rust_sanitizer()
        self.crate_root = self.config.custom.get("crate_root", "crate")

    @property
    def language_name(self) -> str:
        return "rust"

    @property
    def file_extension(self) -> str:
        return ".rs"

    def get_template_directory(self) -> Path:
        """Return the Rust templates directory."""
        return Path(__file__).parent / "templates"

    def _package_segments(self, package: str) -> List[str]:
        qualified = self.qualified_package(package)
        return qualified.split(".") if qualified else []

    def type_path(self, type_name: TypeName) -> str:
        """Absolute Rust path of a generated struct."""
        segments = [self.crate_root]
        segments += [self.sanitizer.sanitize_name(s) for s in self._package_segments(type_name.package)]
        segments.append(self.sanitizer.sanitize_name(self.module_name_for(type_name)))
        segments.append(self.type_name_for(type_name))
        return package_to_scope(".".join(segments), "::")

    def struct_path(self, struct: Struct) -> Path:
        package = self.qualified_package(struct.type_name.package)
        return Path(package_to_path(package)) / (
            self.module_name_for(struct.type_name) + self.file_extension
        )

    def generate_single_struct(self, struct: Struct, schema: Schema) -> str:
        """Generate the module for a single struct."""
        self.check_member_names(struct, lambda m: self.sanitizer.sanitize_name(m.name))
        renderer = RustRenderer(self.sanitizer, self.type_path, self.config.indent)
        synthesizer = MarshalSynthesizer(renderer)

        dimensions = [d for m in struct.members for d in m.dimensions]
        uses_generic_array = any(isinstance(d, ConstantDimension) for d in dimensions)
        io_imports = ["Read", "Result", "Write"]
        if any(isinstance(d, VariableDimension) for d in dimensions):
            io_imports = ["Error", "ErrorKind"] + io_imports

        context = {
            "struct_name": self.type_name_for(struct.type_name),
            "full_name": struct.full_name,
            "source": struct.source_file,
            "description": struct.comment if self.config.add_comments else None,
            "add_comments": self.config.add_comments,
            "uses_generic_array": uses_generic_array,
            "io_imports": io_imports,
            "fingerprint": f"0x{self.fingerprint(struct.type_name):016x}",
            "constants": [self._constant_data(c) for c in struct.constants],
            "fields": [self._field_data(m) for m in struct.members],
            "encode_lines": synthesizer.encode_body(struct),
            "decode_lines": synthesizer.decode_body(struct),
            "size_lines": synthesizer.size_body(struct),
            "indent": self.config.indent,
        }

        return self.render_template("struct.rs.j2", context)

    def _constant_data(self, constant: Constant) -> Dict[str, Any]:
        value = constant.parsed_value
        return {
            "name": self.sanitizer.sanitize_name(constant.name),
            "type": rust_primitive(constant.type),
            "value": repr(value),
            "comment": constant.comment if self.config.add_comments else None,
        }

    def _field_data(self, member: Member) -> Dict[str, Any]:
        return {
            "name": self.sanitizer.sanitize_name(member.name),
            "type": rust_member_type(member, self.type_path),
            "comment": member.comment if self.config.add_comments else None,
        }

    def generate_index_files(self, schema: Schema) -> List[GeneratedFile]:
        """Generate a ``mod.rs`` for the output root and every package directory."""
        submodules: Dict[str, Set[str]] = defaultdict(set)
        exports: Dict[str, List[Dict[str, str]]] = defaultdict(list)

        for struct in schema:
            segments = self._package_segments(struct.type_name.package)
            package = ".".join(segments)
            exports[package].append(
                {
                    "module": self.sanitizer.sanitize_name(
                        self.module_name_for(struct.type_name)
                    ),
                    "name": self.type_name_for(struct.type_name),
                }
            )
            for i in range(len(segments)):
                parent = ".".join(segments[:i])
                submodules[parent].add(self.sanitizer.sanitize_name(segments[i]))
                exports.setdefault(parent, [])

        files = []
        for package in sorted(exports):
            context = {
                "package": package,
                "submodules": sorted(submodules.get(package, ())),
                "exports": sorted(exports[package], key=lambda e: e["module"]),
            }
            files.append(
                GeneratedFile(
                    path=Path(package_to_path(package)) / "mod.rs",
                    content=self.render_template("mod.rs.j2", context),
                )
            )
        return files

    def validate_schema(self, schema: Schema) -> List[str]:
        """Validate a schema for Rust generation."""
        warnings = super().validate_schema(schema)

        for struct in schema:
            for member in struct.members:
                if member.type == struct.type_name and not any(
                    isinstance(d, VariableDimension) for d in member.dimensions
                ):
                    warnings.append(
                        f"Field {struct.full_name}.{member.name} embeds its own "
                        f"struct; the Rust type will have infinite size"
                    )

        return warnings


def create_rust_generator(config: Optional[GeneratorConfig] = None) -> RustGenerator:
    """Create a Rust generator with default configuration."""
    if config is None:
        from ...core.config import load_config

        config = load_config("rust")

    return RustGenerator(config)
