"""
Base generator interface for all code generation targets.

Defines the contract that all language generators must implement, plus the
incremental regeneration gate and the writer for generated files.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Any, Optional, Set, Union
from pathlib import Path

from .config import GeneratorConfig
from .fingerprint import FingerprintEngine
from .naming import module_identifier, type_identifier
from .schema import Member, ModelError, Schema, Struct, TypeName
from .templates import TemplateEngine, TemplateError, create_template_engine
from ...logging_config import get_logger

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


@dataclass
class GeneratedFile:
    """
    One artifact produced by a generator, relative to the output directory.

    ``sources`` lists every schema file whose contents reach the artifact:
    the struct's own source plus the sources of all structs it references,
    directly or transitively. An empty list falls back to ``source``.
    """

    path: Path
    content: str
    source: Optional[str] = None
    struct_name: Optional[str] = None
    index: bool = False
    sources: List[Optional[str]] = field(default_factory=list)


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()
        self.fingerprints: Optional[FingerprintEngine] = None
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        template_dir = self.get_template_directory()
        if template_dir:
            self._template_engine = create_template_engine(template_dir)
        else:
            # Fallback to in-memory templates
            self._template_engine = create_template_engine()

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'go', 'python')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.go', '.py')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Subclasses should override this to provide their template directory.
        Return None to use in-memory templates only.

        Returns:
            Path to template directory or None
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    def generate(self, schema: Schema) -> List[GeneratedFile]:
        """
        Generate one artifact per struct plus the package index files.

        A fresh FingerprintEngine is created for every run.

        Args:
            schema: Validated semantic model

        Returns:
            Generated files, struct artifacts first
        """
        self.fingerprints = FingerprintEngine(schema)
        files = []

        for struct in schema:
            code = self.generate_single_struct(struct, schema)
            files.append(
                GeneratedFile(
                    path=self.struct_path(struct),
                    content=self.format_code(code),
                    source=struct.source_file,
                    struct_name=struct.full_name,
                    sources=reference_sources(struct, schema),
                )
            )
            logger.debug("Generated %s for %s", files[-1].path, struct.full_name)

        for index_file in self.generate_index_files(schema):
            index_file.content = self.format_code(index_file.content)
            index_file.index = True
            files.append(index_file)

        return files

    @abstractmethod
    def generate_single_struct(self, struct: Struct, schema: Schema) -> str:
        """
        Generate code for a single struct.

        Args:
            struct: Struct to generate code for
            schema: Schema used to resolve referenced structs

        Returns:
            Generated code for this struct only
        """
        pass

    @abstractmethod
    def struct_path(self, struct: Struct) -> Path:
        """Relative path of the artifact generated for ``struct``."""
        pass

    def generate_index_files(self, schema: Schema) -> List[GeneratedFile]:
        """
        Generate package index files (module trees, re-exports, helpers).

        Returns:
            List of index files (can be empty)
        """
        return []

    def fingerprint(self, type_name: TypeName) -> int:
        if self.fingerprints is None:
            raise GeneratorError("Fingerprints are only available during generate()")
        return self.fingerprints.fingerprint_of(type_name)

    # Naming helpers shared by backends

    def qualified_package(self, package: str) -> str:
        """Package name with the configured prefix applied."""
        parts = [p for p in (self.config.package_prefix, package) if p]
        return ".".join(parts)

    def type_name_for(self, type_name: TypeName) -> str:
        return type_identifier(type_name.short_name, self.config.strip_type_suffix)

    def module_name_for(self, type_name: TypeName) -> str:
        return module_identifier(type_name.short_name, self.config.strip_type_suffix)

    def check_member_names(
        self, struct: Struct, name_of: Callable[[Member], str]
    ) -> None:
        """Raise GeneratorError if two members of ``struct`` map to one identifier."""
        seen: Dict[str, str] = {}
        for member in struct.members:
            name = name_of(member)
            if name in seen:
                raise GeneratorError(
                    f"Members {struct.full_name}.{seen[name]} and "
                    f"{struct.full_name}.{member.name} both map to "
                    f"{self.language_name} field {name}"
                )
            seen[name] = member.name

    def validate_schema(self, schema: Schema) -> List[str]:
        """
        Validate a schema for issues that do not prevent generation.

        Language generators should override this to add language-specific validation.

        Args:
            schema: Schema to validate

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        for struct in schema:
            if not struct.members:
                warnings.append(f"Struct '{struct.full_name}' has no members")

            if _in_reference_cycle(struct, schema):
                warnings.append(
                    f"Struct '{struct.full_name}' is part of a reference cycle; "
                    f"cyclic references add nothing to its fingerprint"
                )

        return warnings

    def format_code(self, code: str) -> str:
        """
        Apply language-specific formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code
        """
        # Basic cleanup - remove excessive blank lines
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 2:  # Allow max 2 consecutive blank lines
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines).strip("\n") + "\n"

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with context.

        Args:
            template_name: Template file name
            context: Template variables

        Returns:
            Rendered content
        """
        return self.template_engine.render_template(template_name, context)


def _in_reference_cycle(struct: Struct, schema: Schema) -> bool:
    """Whether ``struct`` can reach itself through struct-typed members."""
    pending = list(struct.referenced_types())
    seen: Set[str] = set()
    while pending:
        type_name = pending.pop()
        if type_name == struct.type_name:
            return True
        if type_name.full_name in seen:
            continue
        seen.add(type_name.full_name)
        target = schema.get_struct(type_name)
        pending.extend(
            m.type for m in target.members if not m.type.is_primitive
        )
    return False


def reference_sources(struct: Struct, schema: Schema) -> List[Optional[str]]:
    """
    Source files of ``struct`` and of every struct it reaches through
    struct-typed members, in discovery order without duplicates.

    A published fingerprint folds in the base hash of each of these structs,
    so an artifact is current only if it is newer than all of them.
    """
    sources: List[Optional[str]] = [struct.source_file]
    seen = {struct.full_name}
    pending = list(struct.referenced_types())
    while pending:
        type_name = pending.pop(0)
        if type_name.full_name in seen:
            continue
        seen.add(type_name.full_name)
        target = schema.get_struct(type_name)
        if target.source_file not in sources:
            sources.append(target.source_file)
        pending.extend(target.referenced_types())
    return sources


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        files: List[GeneratedFile],
        warnings: List[str] = None,
        metadata: Dict[str, Any] = None,
    ):
        """
        Initialize generation result.

        Args:
            files: Generated files
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.files = files
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(files=[])
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(generator: CodeGenerator, schema: Schema) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    Args:
        generator: Code generator instance
        schema: Schema to generate code for

    Returns:
        GenerationResult with files, warnings, and metadata
    """
    try:
        # Validate schema at the base level
        warnings = generator.validate_schema(schema)

        files = generator.generate(schema)

        metadata = {
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            "struct_count": len(schema),
            "packages": schema.packages(),
            "fingerprints": {
                struct.full_name: generator.fingerprint(struct.type_name)
                for struct in schema
            },
        }

        return GenerationResult(files, warnings, metadata)

    except (GeneratorError, ModelError, TemplateError) as e:
        logger.debug("Generation failed for %s", generator.language_name, exc_info=True)
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)


def needs_generation(
    source: Union[None, str, Path, Iterable[Optional[Union[str, Path]]]],
    output: Union[str, Path],
    lazy: bool,
) -> bool:
    """
    Decide whether an artifact must be (re)generated.

    ``source`` is one source path or every source the artifact depends on.
    Only a lazy run skips work, and only when the output and all sources
    exist and the output is strictly newer than the newest source.
    """
    if not lazy:
        return True

    if source is None or isinstance(source, (str, Path)):
        sources = [source]
    else:
        sources = list(source)
    if not sources or any(s is None for s in sources):
        return True

    output_path = Path(output)
    if not output_path.exists():
        return True

    newest = None
    for item in sources:
        source_path = Path(item)
        if not source_path.exists():
            return True
        mtime = source_path.stat().st_mtime_ns
        newest = mtime if newest is None else max(newest, mtime)

    return output_path.stat().st_mtime_ns <= newest


def write_generated_files(
    files: List[GeneratedFile], output_dir: Union[str, Path], lazy: bool = False
) -> List[Path]:
    """
    Write generated files below ``output_dir``.

    Struct artifacts pass through the incremental gate; index files are
    rewritten only when their content changed.

    Returns:
        Paths actually written
    """
    root = Path(output_dir)
    written = []

    for generated in files:
        target = root / generated.path

        try:
            if generated.index:
                existing = (
                    target.read_text(encoding="utf-8") if target.exists() else None
                )
                if existing == generated.content:
                    logger.debug("Unchanged %s", target)
                    continue
            elif not needs_generation(
                generated.sources or generated.source, target, lazy
            ):
                logger.info("Up to date: %s", target)
                continue

            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "w", encoding="utf-8", newline="\n") as f:
                f.write(generated.content)
        except OSError as e:
            raise GeneratorError(f"Failed to write {target}: {e}") from e

        logger.info("Wrote %s", target)
        written.append(target)

    return written
