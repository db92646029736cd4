"""
LCM Code Generation Module

Generates message types in various languages from LCM schema documents.
"""

from pathlib import Path

from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    get_registry,
    is_language_supported,
    list_all_language_info,
    list_supported_languages,
)
from .core.generator import (
    CodeGenerator,
    GeneratedFile,
    GenerationResult,
    GeneratorError,
    generate_code,
    write_generated_files,
)
from .core.schema import ModelError, Schema, Struct, TypeName, convert_schema_document
from .core.fingerprint import FingerprintEngine
from .core.config import ConfigError, ConfigManager, GeneratorConfig, load_config

# Version info
__version__ = "0.1.0"


# Convenience functions
def generate_from_document(document, language="python", config=None):
    """
    Generate code from a parsed schema document.

    Args:
        document: Schema document dict (see ``convert_schema_document``)
        language: Target language name
        config: Generator configuration, dict or path

    Returns:
        GenerationResult with generated files
    """
    schema = convert_schema_document(document)
    generator = get_generator(language, config)
    return generate_code(generator, schema)


def generate_to_directory(schema, output_dir, languages=("python",), lazy=False):
    """
    Generate and write code for several languages.

    Each language is written below ``output_dir/<language>``.

    Returns:
        Dict mapping language to the paths written

    Raises:
        GeneratorError: If generation fails or a file cannot be written
    """
    written = {}
    for language in languages:
        generator = get_generator(language)
        result = generate_code(generator, schema)
        if not result.success:
            raise GeneratorError(result.error_message) from result.exception
        target = Path(output_dir) / generator.language_name
        written[generator.language_name] = write_generated_files(
            result.files, target, lazy=lazy
        )
    return written


# Export main interfaces
__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "CodeGenerator",
    "GeneratedFile",
    "GenerationResult",
    "GeneratorError",
    "FingerprintEngine",
    "ModelError",
    "Schema",
    "Struct",
    "TypeName",
    "ConfigError",
    "ConfigManager",
    "GeneratorConfig",
    "convert_schema_document",
    "generate_code",
    "generate_from_document",
    "generate_to_directory",
    "get_generator",
    "get_language_info",
    "get_registry",
    "is_language_supported",
    "list_all_language_info",
    "list_supported_languages",
    "load_config",
    "write_generated_files",
]
