"""
Python code generator implementation.

Generates one dataclass module per struct with encode, decode and size
methods, plus package ``__init__`` files re-exporting the classes.
"""

from collections import defaultdict
from typing import Dict, List, Any, Optional
from pathlib import Path

from ...core.config import GeneratorConfig
from ...core.generator import CodeGenerator, GeneratedFile
from ...core.marshal import MarshalSynthesizer
from ...core.naming import package_to_path
from ...core.schema import ConstantDimension, Member, Schema, Struct, TypeName
from .config import PYTHON_DEFAULTS, PythonConfig, format_constant, get_python_type
from .naming import create_python_sanitizer
from .renderer import PythonRenderer


class PythonGenerator(CodeGenerator):
    """Code generator for Python message dataclasses."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize Python generator with configuration."""
        super().__init__(config)

        # Initialize naming
        self.sanitizer = create_python_sanitizer()

        # Initialize Python-specific configuration
        self.python_config = PythonConfig(**self.config.custom)

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "python"

    @property
    def file_extension(self) -> str:
        """Return Python file extension."""
        return ".py"

    def get_template_directory(self) -> Path:
        """Return the Python templates directory."""
        return Path(__file__).parent / "templates"

    def module_path(self, type_name: TypeName) -> str:
        """Dotted import path of the module holding ``type_name``."""
        package = self.qualified_package(type_name.package)
        module = self.module_name_for(type_name)
        return f"{package}.{module}" if package else module

    def struct_path(self, struct: Struct) -> Path:
        package = self.qualified_package(struct.type_name.package)
        return Path(package_to_path(package)) / (
            self.module_name_for(struct.type_name) + self.file_extension
        )

    def generate_single_struct(self, struct: Struct, schema: Schema) -> str:
        """Generate the module for a single struct."""
        self.check_member_names(struct, lambda m: self.sanitizer.sanitize_name(m.name))
        class_name = self.type_name_for(struct.type_name)

        def type_ref(type_name: TypeName) -> str:
            if type_name == struct.type_name:
                return "cls"
            return f"{self.module_path(type_name)}.{self.type_name_for(type_name)}"

        renderer = PythonRenderer(self.sanitizer, type_ref, self.config.indent)
        synthesizer = MarshalSynthesizer(renderer)

        imports = sorted(
            {self.module_path(t) for t in struct.referenced_types()}
        )

        context = {
            "class_name": class_name,
            "full_name": struct.full_name,
            "source": struct.source_file,
            "description": _docstring(struct.comment) if self.config.add_comments else None,
            "add_comments": self.config.add_comments,
            "runtime_module": self.python_config.runtime_module,
            "dataclass_options": self.python_config.dataclass_options,
            "imports": imports,
            "fingerprint": f"0x{self.fingerprint(struct.type_name):016x}",
            "constants": [self._constant_data(c) for c in struct.constants],
            "fields": [self._field_data(m, struct) for m in struct.members],
            "encode_lines": synthesizer.encode_body(struct),
            "decode_lines": synthesizer.decode_body(struct),
            "size_lines": synthesizer.size_body(struct),
            "indent": self.config.indent,
        }

        return self.render_template("struct.py.j2", context)

    def _constant_data(self, constant) -> Dict[str, Any]:
        return {
            "name": self.sanitizer.sanitize_name(constant.name),
            "type": get_python_type(constant.type),
            "value": format_constant(constant.parsed_value),
            "comment": constant.comment if self.config.add_comments else None,
        }

    def _field_data(self, member: Member, struct: Struct) -> Dict[str, Any]:
        """Generate field data for template."""
        return {
            "name": self.sanitizer.sanitize_name(member.name),
            "annotation": self._annotation(member, struct),
            "default": self._default(member, struct),
            "comment": member.comment if self.config.add_comments else None,
        }

    def _element_type(self, member: Member, struct: Struct) -> str:
        if member.type.is_primitive:
            return get_python_type(member.type)
        return f"{self.module_path(member.type)}.{self.type_name_for(member.type)}"

    def _annotation(self, member: Member, struct: Struct) -> str:
        annotation = self._element_type(member, struct)
        if not member.is_array and member.type == struct.type_name:
            return f"{annotation} | None"
        for _ in member.dimensions:
            annotation = f"list[{annotation}]"
        return annotation

    def _leaf_default(self, member: Member, struct: Struct) -> str:
        if member.type.is_primitive:
            return PYTHON_DEFAULTS[get_python_type(member.type)]
        if member.type == struct.type_name:
            # A struct cannot build a default instance of itself.
            return "None"
        return f"{self._element_type(member, struct)}()"

    def _default(self, member: Member, struct: Struct) -> str:
        """Default value expression for a dataclass field."""
        leaf = self._leaf_default(member, struct)
        if not member.is_array:
            if member.type.is_primitive or leaf == "None":
                return leaf
            return f"dataclasses.field(default_factory=lambda: {leaf})"

        if not isinstance(member.dimensions[0], ConstantDimension):
            return "dataclasses.field(default_factory=list)"

        value = leaf
        for dim in reversed(member.dimensions):
            if isinstance(dim, ConstantDimension):
                value = f"[{value} for _ in range({dim.size})]"
            else:
                value = "[]"
        return f"dataclasses.field(default_factory=lambda: {value})"

    def generate_index_files(self, schema: Schema) -> List[GeneratedFile]:
        """Generate ``__init__.py`` for every package directory."""
        exports: Dict[str, List[Dict[str, str]]] = defaultdict(list)

        for struct in schema:
            package = self.qualified_package(struct.type_name.package)
            if not package:
                continue
            module = self.module_name_for(struct.type_name)
            name = self.type_name_for(struct.type_name)
            # Re-exporting would shadow a module of the same name
            if module != name:
                exports[package].append({"module": module, "name": name})
            else:
                exports.setdefault(package, [])

            # Parent packages need an __init__ too
            parts = package.split(".")
            for i in range(1, len(parts)):
                exports.setdefault(".".join(parts[:i]), [])

        files = []
        for package in sorted(exports):
            entries = sorted(exports[package], key=lambda e: e["name"])
            content = self.render_template(
                "package_init.py.j2", {"package": package, "exports": entries}
            )
            files.append(
                GeneratedFile(
                    path=Path(package_to_path(package)) / "__init__.py",
                    content=content,
                )
            )
        return files

    def validate_schema(self, schema: Schema) -> List[str]:
        """Validate a schema for Python generation."""
        warnings = super().validate_schema(schema)

        for struct in schema:
            for member in struct.members:
                sanitized = self.sanitizer.sanitize_name(member.name)
                if sanitized != member.name:
                    warnings.append(
                        f"Field {struct.full_name}.{member.name} renamed to {sanitized}"
                    )

        return warnings


def create_python_generator(
    config: Optional[GeneratorConfig] = None,
) -> PythonGenerator:
    """Create a Python generator with default configuration."""
    if config is None:
        from ...core.config import load_config

        config = load_config("python")

    return PythonGenerator(config)


def _docstring(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    return text.replace('"""', r'\"\"\"').strip()
