"""
Go code generator implementation.

Generates one file per struct with Encode/Decode/Size methods and the
``encoding.BinaryMarshaler`` pair, plus a ``lcm_codec.go`` file of
primitive helpers in every package.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Any, Tuple
from pathlib import Path

from ...core.config import GeneratorConfig
from ...core.generator import CodeGenerator, GeneratedFile
from ...core.marshal import MarshalSynthesizer
from ...core.naming import NamingCase, package_to_path, package_to_scope
from ...core.schema import Member, Schema, Struct, TypeName, VariableDimension
from .naming import create_go_sanitizer, validate_go_package_name
from .renderer import GoRenderer
from .types import GoTypeMapper, go_primitive, numeric_types

CODEC_FILE = "lcm_codec.go"


class GoGenerator(CodeGenerator):
    """Code generator for Go structs with binary marshalling."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize Go generator with configuration."""
        super().__init__(config)

        # Initialize naming
        self.sanitizer = create_go_sanitizer()

        # Extract configuration
        self.module_path = self.config.custom.get("module_path", "lcmtypes")
        self.default_package = self.config.custom.get("default_package", "lcmtypes")

    def get_template_directory(self) -> Optional[Path]:
        """Return the Go templates directory."""
        return Path(__file__).parent / "templates"

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "go"

    @property
    def file_extension(self) -> str:
        """Return Go file extension."""
        return ".go"

    def go_package(self, package: str) -> str:
        """Dotted Go package for a schema package (never empty)."""
        return self.qualified_package(package) or self.default_package

    def package_name(self, package: str) -> str:
        return self.go_package(package).rsplit(".", 1)[-1]

    def import_path(self, package: str) -> str:
        return f"{self.module_path}/{package_to_scope(self.go_package(package), '/')}"

    def import_alias(self, package: str) -> str:
        return package_to_scope(self.go_package(package), "_")

    def package_dir(self, package: str) -> Path:
        return Path(package_to_path(self.go_package(package)))

    def struct_path(self, struct: Struct) -> Path:
        return self.package_dir(struct.type_name.package) / (
            self.module_name_for(struct.type_name) + self.file_extension
        )

    def generate_single_struct(self, struct: Struct, schema: Schema) -> str:
        """Generate the Go file for a single struct."""
        self.check_member_names(
            struct, lambda m: self.sanitizer.sanitize_name(m.name, NamingCase.PASCAL_CASE)
        )
        own_package = self.go_package(struct.type_name.package)

        def type_ref(type_name: TypeName) -> str:
            name = self.type_name_for(type_name)
            if self.go_package(type_name.package) == own_package:
                return name
            return f"{self.import_alias(type_name.package)}.{name}"

        mapper = GoTypeMapper(type_ref)
        renderer = GoRenderer(self.sanitizer, mapper, self.config.indent)
        synthesizer = MarshalSynthesizer(renderer)
        struct_name = self.type_name_for(struct.type_name)

        context = {
            "package_name": self.package_name(struct.type_name.package),
            "struct_name": struct_name,
            "full_name": struct.full_name,
            "source": struct.source_file,
            "description": struct.comment if self.config.add_comments else None,
            "add_comments": self.config.add_comments,
            "imports": self._imports(struct, own_package),
            "fingerprint": f"0x{self.fingerprint(struct.type_name):016x}",
            "constants": [
                {
                    "name": struct_name
                    + self.sanitizer.sanitize_name(c.name, NamingCase.PASCAL_CASE),
                    "type": go_primitive(c.type).name,
                    "value": repr(c.parsed_value),
                    "comment": c.comment if self.config.add_comments else None,
                }
                for c in struct.constants
            ],
            "fields": [self._field_data(m, renderer, mapper) for m in struct.members],
            "encode_lines": synthesizer.encode_body(struct),
            "decode_lines": synthesizer.decode_body(struct),
            "size_lines": synthesizer.size_body(struct),
            "indent": self.config.indent,
        }

        return self.render_template("struct.go.j2", context)

    def _field_data(
        self, member: Member, renderer: GoRenderer, mapper: GoTypeMapper
    ) -> Dict[str, Any]:
        """Generate field data for template."""
        return {
            "name": renderer.field_name(member),
            "type": mapper.member_type(member),
            "comment": member.comment if self.config.add_comments else None,
        }

    def _imports(self, struct: Struct, own_package: str) -> Dict[str, List[Any]]:
        """Standard library and generated-package imports of a struct file."""
        std = ["bytes", "io"]
        if any(
            isinstance(d, VariableDimension) for m in struct.members for d in m.dimensions
        ):
            std.insert(1, "fmt")

        packages: List[Tuple[str, str]] = []
        for type_name in struct.referenced_types():
            if self.go_package(type_name.package) == own_package:
                continue
            entry = (self.import_alias(type_name.package), self.import_path(type_name.package))
            if entry not in packages:
                packages.append(entry)

        return {"std": std, "packages": sorted(packages)}

    def generate_index_files(self, schema: Schema) -> List[GeneratedFile]:
        """Generate the primitive codec helpers for every package."""
        packages = sorted({self.go_package(s.type_name.package) for s in schema})
        files = []
        for package in packages:
            context = {
                "package_name": package.rsplit(".", 1)[-1],
                "numeric_types": numeric_types(),
                "indent": self.config.indent,
            }
            files.append(
                GeneratedFile(
                    path=Path(package_to_path(package)) / CODEC_FILE,
                    content=self.render_template("lcm_codec.go.j2", context),
                )
            )
        return files

    def validate_schema(self, schema: Schema) -> List[str]:
        """Validate a schema for Go generation."""
        warnings = super().validate_schema(schema)

        by_package: Dict[str, List[Struct]] = defaultdict(list)
        for struct in schema:
            by_package[self.go_package(struct.type_name.package)].append(struct)

        for package in by_package:
            for error in validate_go_package_name(package.rsplit(".", 1)[-1]):
                warnings.append(f"Go package {package}: {error}")

        return warnings


def create_go_generator(config: Optional[GeneratorConfig] = None) -> GoGenerator:
    """Create a Go generator with default configuration."""
    if config is None:
        from ...core.config import load_config

        config = load_config("go")

    return GoGenerator(config)
