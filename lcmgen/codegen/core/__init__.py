"""
Core code generation components.

Provides the semantic model, fingerprinting, marshalling synthesis and the
base classes used by all language generators.
"""

from .generator import (
    CodeGenerator,
    GeneratedFile,
    GeneratorError,
    GenerationResult,
    generate_code,
    needs_generation,
    write_generated_files,
)
from .schema import (
    Constant,
    ConstantDimension,
    DimensionMode,
    Member,
    ModelError,
    Schema,
    Struct,
    TypeName,
    VariableDimension,
    build_struct,
    convert_schema_document,
)
from .fingerprint import FingerprintEngine, compute_base_hash
from .marshal import CodeWriter, MarshalRenderer, MarshalSynthesizer
from .naming import (
    NameSanitizer,
    NamingCase,
    package_to_path,
    package_to_scope,
    strip_type_suffix,
    to_upper_camel,
)
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratedFile",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
    "needs_generation",
    "write_generated_files",
    # Semantic model
    "Constant",
    "ConstantDimension",
    "DimensionMode",
    "Member",
    "ModelError",
    "Schema",
    "Struct",
    "TypeName",
    "VariableDimension",
    "build_struct",
    "convert_schema_document",
    # Fingerprints and marshalling
    "FingerprintEngine",
    "compute_base_hash",
    "CodeWriter",
    "MarshalRenderer",
    "MarshalSynthesizer",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "NamingCase",
    "package_to_path",
    "package_to_scope",
    "strip_type_suffix",
    "to_upper_camel",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system - language-agnostic
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
