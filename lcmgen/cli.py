"""
Command-line interface for the LCM code generator.

Loads schema documents, runs the selected generators and writes (or, with
``--dry-run``, displays) the generated files.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.syntax import Syntax
from rich.table import Table

from .codegen import (
    ConfigError,
    GenerationResult,
    GeneratorConfig,
    GeneratorError,
    ModelError,
    RegistryError,
    Schema,
    generate_code,
    get_generator,
    get_language_info,
    get_registry,
    is_language_supported,
    list_all_language_info,
    load_config,
    write_generated_files,
)
from .codegen.core.fingerprint import FingerprintEngine
from .logging_config import get_logger, setup_logging
from .utils import SchemaLoaderError, load_schema

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``lcmgen`` command."""
    parser = argparse.ArgumentParser(
        prog="lcmgen",
        description="Generate LCM message types from schema documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  lcmgen types.json
  lcmgen -l python -l rust -o generated types.json
  lcmgen --lazy -l go --config lcmgen.json types.json
  lcmgen --fingerprints types.json
  lcmgen --list-languages
        """.strip(),
    )

    # Input options
    parser.add_argument(
        "schemas", nargs="*", metavar="SCHEMA", help="Schema document (JSON) files"
    )
    parser.add_argument(
        "--url",
        action="append",
        default=[],
        metavar="URL",
        help="Fetch a schema document over HTTP (repeatable)",
    )

    codegen_group = parser.add_argument_group("code generation")
    codegen_group.add_argument(
        "--language",
        "-l",
        action="append",
        metavar="LANGUAGE",
        help="Target language (repeatable, default: python)",
    )
    codegen_group.add_argument(
        "--output-dir",
        "-o",
        metavar="DIR",
        help="Output directory (one subdirectory per language when several are given)",
    )
    codegen_group.add_argument(
        "--config", metavar="FILE", help="JSON configuration file for code generation"
    )
    codegen_group.add_argument(
        "--package-prefix",
        metavar="PACKAGE",
        help="Dotted package prepended to every generated package",
    )
    codegen_group.add_argument(
        "--lazy",
        action="store_true",
        help="Skip files that are newer than their schema source",
    )
    codegen_group.add_argument(
        "--no-comments",
        action="store_true",
        help="Don't generate comments in output code",
    )
    codegen_group.add_argument(
        "--dry-run",
        action="store_true",
        help="Print generated code instead of writing files",
    )

    info_group = parser.add_argument_group("information")
    info_group.add_argument(
        "--fingerprints",
        action="store_true",
        help="Print the fingerprint of every struct and exit",
    )
    info_group.add_argument(
        "--list-languages",
        action="store_true",
        help="List supported target languages and exit",
    )
    info_group.add_argument(
        "--language-info",
        metavar="LANGUAGE",
        help="Show detailed information about a specific language",
    )
    info_group.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging level (default: WARNING)",
    )

    return parser


class CLIHandler:
    """Handle command-line operations for code generation."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def run(self, args: argparse.Namespace) -> int:
        """Run the command described by ``args``.

        Returns:
            Exit code (0 for success, 1 for failure).
        """
        try:
            if args.list_languages:
                return self._list_languages()

            if args.language_info:
                return self._show_language_info(args.language_info)

            schema = self._load_schema(args)

            if args.fingerprints:
                return self._show_fingerprints(schema)

            languages = self._languages(args)
            for language in languages:
                config = self._build_config(args, language, len(languages) > 1)
                status = self._generate(schema, language, config, args)
                if status:
                    return status
            return 0

        except (CLIError, SchemaLoaderError, FileNotFoundError) as e:
            self.console.print(f"[red]✗ Error:[/red] {e}")
            logger.error("%s", e)
            return 1
        except ModelError as e:
            self.console.print(f"[red]✗ Invalid schema:[/red] {e}")
            logger.error("Invalid schema: %s", e)
            return 1
        except (ConfigError, RegistryError) as e:
            self.console.print(f"[red]✗ Configuration error:[/red] {e}")
            logger.error("Configuration error: %s", e)
            return 1

    def _load_schema(self, args: argparse.Namespace) -> Schema:
        if not args.schemas and not args.url:
            raise CLIError("No schema documents given")

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.console,
            transient=True,
        ) as progress:
            progress.add_task("[cyan]Loading schema documents...", total=None)
            schema = load_schema(args.schemas, args.url)

        logger.info("Loaded %d structs", len(schema))
        return schema

    def _languages(self, args: argparse.Namespace) -> list[str]:
        languages = []
        for language in args.language or ["python"]:
            if not is_language_supported(language):
                supported = ", ".join(get_registry().list_languages())
                raise CLIError(
                    f"Unsupported language '{language}' (supported: {supported})"
                )
            primary = get_registry().resolve(language)
            if primary not in languages:
                languages.append(primary)
        return languages

    def _build_config(
        self, args: argparse.Namespace, language: str, per_language_dir: bool
    ) -> GeneratorConfig:
        """Build configuration from defaults, config file and CLI arguments."""
        overrides: dict[str, Any] = {}

        if args.package_prefix is not None:
            overrides["package_prefix"] = args.package_prefix
        if args.no_comments:
            overrides["add_comments"] = False
        if args.lazy:
            overrides["lazy"] = True

        config = load_config(language, overrides, args.config)

        output_dir = Path(args.output_dir or config.output_dir)
        if per_language_dir:
            output_dir = output_dir / language
        config.output_dir = str(output_dir)
        return config

    def _generate(
        self,
        schema: Schema,
        language: str,
        config: GeneratorConfig,
        args: argparse.Namespace,
    ) -> int:
        generator = get_generator(language, config)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.console,
            transient=True,
        ) as progress:
            progress.add_task(f"[green]Generating {language} code...", total=None)
            result = generate_code(generator, schema)

        if not result.success:
            self.console.print(
                f"[red]✗ {language} generation failed:[/red] {result.error_message}"
            )
            return 1

        for warning in result.warnings:
            self.console.print(f"[yellow]⚠️  {warning}[/yellow]")

        if args.dry_run:
            self._print_files(result, language)
            return 0

        try:
            written = write_generated_files(
                result.files, config.output_dir, lazy=config.lazy
            )
        except GeneratorError as e:
            self.console.print(f"[red]✗ Failed to write {language} code:[/red] {e}")
            return 1

        skipped = len(result.files) - len(written)
        self.console.print(
            f"[green]✓[/green] {language}: wrote {len(written)} file(s) to "
            f"[cyan]{config.output_dir}[/cyan]"
            + (f" [dim]({skipped} unchanged)[/dim]" if skipped else "")
        )
        return 0

    def _print_files(self, result: GenerationResult, language: str) -> None:
        for generated in result.files:
            self.console.print()
            self.console.print(
                Panel(
                    Syntax(generated.content, language, theme="monokai"),
                    title=f"📄 {generated.path.as_posix()}",
                    border_style="green",
                )
            )

    def _show_fingerprints(self, schema: Schema) -> int:
        engine = FingerprintEngine(schema)

        table = Table(title="🔑 Fingerprints", box=box.ROUNDED, title_style="bold cyan")
        table.add_column("Struct", style="bold green", no_wrap=True)
        table.add_column("Base hash", style="dim")
        table.add_column("Fingerprint", style="cyan")

        for struct in sorted(schema, key=lambda s: s.full_name):
            table.add_row(
                struct.full_name,
                f"0x{struct.base_hash & 0xFFFFFFFFFFFFFFFF:016x}",
                f"0x{engine.fingerprint(struct):016x}",
            )

        self.console.print(table)
        return 0

    def _list_languages(self) -> int:
        """List supported languages with details."""
        language_info = list_all_language_info()

        if not language_info:
            self.console.print("[yellow]⚠️ No code generators available[/yellow]")
            return 0

        table = Table(
            title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan"
        )
        table.add_column("Language", style="bold green", no_wrap=True)
        table.add_column("Extension", style="cyan")
        table.add_column("Generator Class", style="dim")
        table.add_column("Aliases", style="blue")

        for lang_name, info in sorted(language_info.items()):
            aliases = (
                ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
            )
            table.add_row(lang_name, info["file_extension"], info["class"], aliases)

        self.console.print(table)
        self.console.print(
            Panel(
                "[bold]Usage:[/bold] lcmgen [dim]types.json[/dim] --language [cyan]LANGUAGE[/cyan]\n"
                "[bold]Info:[/bold] lcmgen --language-info [cyan]LANGUAGE[/cyan]",
                title="💡 Quick Start",
                border_style="blue",
            )
        )
        return 0

    def _show_language_info(self, language: str) -> int:
        """Show detailed information about a specific language."""
        if not is_language_supported(language):
            self.console.print(f"[red]✗ Language '{language}' is not supported[/red]")
            self.console.print("[dim]Use --list-languages to see available options[/dim]")
            return 1

        info = get_language_info(language)
        info_text = (
            f"[bold]Language:[/bold] {info['name']}\n"
            f"[bold]File Extension:[/bold] {info['file_extension']}\n"
            f"[bold]Generator Class:[/bold] {info['class']}\n"
            f"[bold]Module:[/bold] {info['module']}"
        )
        if info["aliases"]:
            info_text += f"\n[bold]Aliases:[/bold] {', '.join(info['aliases'])}"

        self.console.print(
            Panel(
                info_text,
                title=f"🔧 {info['name'].title()} Generator",
                border_style="green",
            )
        )

        config = get_generator(language).config
        config_table = Table(
            title="⚙️  Default Configuration",
            box=box.SIMPLE,
            show_header=True,
            header_style="bold cyan",
        )
        config_table.add_column("Setting", style="bold")
        config_table.add_column("Value", style="green")

        config_table.add_row("Indent", "tab" if config.use_tabs else str(config.indent_size))
        config_table.add_row("Add Comments", str(config.add_comments))
        config_table.add_row("Strip Type Suffix", str(config.strip_type_suffix))
        for key, value in sorted(config.custom.items()):
            config_table.add_row(key, str(value))

        self.console.print(config_table)
        return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``lcmgen`` console script."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    logger.debug("Arguments: %s", args)

    return CLIHandler().run(args)


if __name__ == "__main__":
    raise SystemExit(main())
