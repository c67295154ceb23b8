"""
CLI integration for code generation functionality.

Provides the ``generate`` subcommand of the command-line interface.
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.syntax import Syntax
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from ..logging_config import get_logger
from ..utils import DescriptorLoaderError, load_descriptor, load_descriptor_from_stream
from . import (
    GenerationResult,
    RegistryError,
    SchemaError,
    convert_descriptor,
    generate_code,
    get_generator,
    get_language_info,
    list_all_language_info,
    list_supported_languages,
)
from .core.config import ConfigError, GeneratorConfig, load_config
from .registry import get_registry, is_language_supported

logger = get_logger(__name__)

# Syntax highlighting lexer per language
_LEXERS = {"java": "java", "python": "python"}


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Initialize rich console
console = Console()


def add_input_args(parser: argparse.ArgumentParser):
    """Descriptor source arguments shared by the subcommands."""
    input_group = parser.add_mutually_exclusive_group(required=False)
    input_group.add_argument("file", nargs="?", help="JSON service descriptor")
    input_group.add_argument("--url", help="URL to fetch the descriptor from")
    input_group.add_argument(
        "--stdin", action="store_true", help="Read the descriptor from standard input"
    )


def create_codegen_subparser(subparsers) -> argparse.ArgumentParser:
    """
    Create the ``generate`` subcommand parser.

    Args:
        subparsers: Subparser group from main parser

    Returns:
        Configured subparser for the generate command
    """
    parser = subparsers.add_parser(
        "generate",
        help="Generate RPC stubs from a service descriptor",
        description="Generate service interfaces, clients and servers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rpcgen generate -l java greeter.json -o src/main/java
  rpcgen generate -l python --stdin < greeter.json
  rpcgen generate --list-languages
  rpcgen generate --language-info java
        """.strip(),
    )

    add_input_args(parser)

    parser.add_argument("--language", "-l", help="Target language for code generation")
    parser.add_argument(
        "--output", "-o", help="Output directory (default: print to stdout)"
    )
    parser.add_argument("--config", help="Configuration file path (JSON)")
    parser.add_argument("--package-name", "--package", help="Package/namespace name")

    parser.add_argument(
        "--no-comments",
        action="store_true",
        help="Don't copy schema comments into generated code",
    )
    parser.add_argument(
        "--no-metrics",
        action="store_true",
        help="Don't wrap server handlers with metrics",
    )
    parser.add_argument(
        "--disable-version",
        action="store_true",
        help="Leave the generator version out of generated headers",
    )
    parser.add_argument(
        "--method-case",
        choices=["camel", "snake", "pascal"],
        help="Naming case for generated method names",
    )
    parser.add_argument(
        "--show-metadata",
        action="store_true",
        help="Show generation result metadata",
    )

    info_group = parser.add_argument_group("information")
    info_group.add_argument(
        "--list-languages",
        action="store_true",
        help="List supported languages and exit",
    )
    info_group.add_argument(
        "--language-info",
        metavar="LANGUAGE",
        help="Show detailed info about a language and exit",
    )

    parser.set_defaults(func=handle_codegen_command)
    return parser


def handle_codegen_command(args: argparse.Namespace) -> int:
    """
    Handle the generate subcommand.

    Returns:
        Exit code (0 when every service was generated, 1 otherwise)
    """
    try:
        if args.list_languages:
            return _list_languages()

        if args.language_info:
            return _show_language_info(args.language_info)

        if not args.language:
            console.print("[red]✗[/red] --language is required for code generation")
            return 1

        if not _validate_language(args.language):
            return 1

        source, descriptor = get_input_descriptor(args)
        config = _build_config(args)

        return _generate_and_output(descriptor, source, args.language, config, args)

    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1


def _list_languages() -> int:
    """List supported languages with details."""
    language_info = list_all_language_info()

    if not language_info:
        console.print("[yellow]⚠️ No code generators available[/yellow]")
        return 0

    table = Table(
        title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan"
    )

    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for lang_name, info in sorted(language_info.items()):
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(f"🔧 {lang_name}", info["file_extension"], info["class"], aliases)

    console.print()
    console.print(table)
    console.print()

    console.print(
        Panel(
            "[bold]Usage:[/bold] rpcgen generate -l [cyan]LANGUAGE[/cyan] [dim]descriptor.json[/dim]\n"
            "[bold]Info:[/bold] rpcgen generate --language-info [cyan]LANGUAGE[/cyan]",
            title="💡 Quick Start",
            border_style="blue",
        )
    )

    return 0


def _show_language_info(language: str) -> int:
    """Show detailed information about a specific language."""
    if not _validate_language(language, silent=True):
        console.print(f"[red]✗ Language '{language}' is not supported[/red]")
        console.print("[dim]Use --list-languages to see available options[/dim]")
        return 1

    info = get_language_info(language)

    info_text = f"""[bold]Language:[/bold] {info['name']}
[bold]File Extension:[/bold] {info['file_extension']}
[bold]Generator Class:[/bold] {info['class']}
[bold]Module:[/bold] {info['module']}
[bold]Templates:[/bold] {', '.join(info['templates'])}"""

    if info["aliases"]:
        info_text += f"\n[bold]Aliases:[/bold] {', '.join(info['aliases'])}"

    console.print()
    console.print(
        Panel(
            info_text,
            title=f"🔧 {info['name'].title()} Generator",
            border_style="green",
        )
    )

    generator = get_generator(language)
    config_table = Table(
        title="⚙️  Default Configuration",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    config_table.add_column("Setting", style="bold")
    config_table.add_column("Value", style="green")

    config_table.add_row("Package Name", str(generator.config.package_name))
    config_table.add_row("Indent Size", str(generator.config.indent_size))
    config_table.add_row("Add Comments", str(generator.config.add_comments))
    config_table.add_row("Enable Metrics", str(generator.config.enable_metrics))
    config_table.add_row("Disable Version", str(generator.config.disable_version))
    for key, value in sorted(generator.config.language_config.items()):
        config_table.add_row(key, str(value))

    console.print()
    console.print(config_table)

    examples_text = f"""Generate into a source tree:
[cyan]rpcgen generate -l {language} -o out/ greeter.json[/cyan]

Print to the terminal:
[cyan]rpcgen generate -l {language} greeter.json[/cyan]

Custom package name:
[cyan]rpcgen generate -l {language} --package io.example.rpc greeter.json[/cyan]"""

    console.print()
    console.print(Panel(examples_text, title="💡 Usage Examples", border_style="blue"))

    return 0


def _validate_language(language: str, silent: bool = False) -> bool:
    """Validate that a language or alias is supported."""
    if not is_language_supported(language):
        if not silent:
            supported = list_supported_languages()
            console.print(f"[red]✗ Unsupported language '{language}'[/red]")
            console.print(f"[dim]Supported languages: {', '.join(supported)}[/dim]")
        return False
    return True


def get_input_descriptor(args: argparse.Namespace):
    """Load the descriptor named by the input arguments."""
    try:
        if args.file:
            return load_descriptor(file_path=args.file)
        if args.url:
            return load_descriptor(url=args.url)
        if args.stdin:
            return load_descriptor_from_stream(sys.stdin)
    except (DescriptorLoaderError, FileNotFoundError) as e:
        raise CLIError(f"Failed to load input: {e}") from e

    raise CLIError("Input source required (file, --url, or --stdin)")


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Build configuration from CLI arguments over the language defaults."""
    overrides: Dict[str, Any] = {}

    if args.package_name:
        overrides["package_name"] = args.package_name
    if args.no_comments:
        overrides["add_comments"] = False
    if args.no_metrics:
        overrides["enable_metrics"] = False
    if args.disable_version:
        overrides["disable_version"] = True
    if args.method_case:
        overrides["language_config"] = {"method_case": args.method_case}
    if args.output:
        overrides["output_dir"] = args.output

    language = get_registry().resolve(args.language)
    try:
        return load_config(language, custom_config=overrides, config_file=args.config)
    except ConfigError as e:
        raise CLIError(f"Configuration error: {e}") from e


def _generate_and_output(
    descriptor: Any, source: str, language: str, config: GeneratorConfig, args: argparse.Namespace
) -> int:
    """Generate code and handle output with rich formatting."""
    try:
        proto_file = convert_descriptor(descriptor, default_name=Path(source).stem + ".proto")
    except SchemaError as e:
        console.print(f"[red]✗ Invalid descriptor:[/red] {e}")
        return 1

    try:
        generator = get_generator(language, config)
    except RegistryError as e:
        console.print(f"[red]✗[/red] {e}")
        return 1

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        gen_task = progress.add_task(
            f"[green]Generating {generator.language_name} code...", total=None
        )
        result = generate_code(generator, proto_file)
        progress.remove_task(gen_task)

    if result.error_message:
        console.print(f"[red]✗ Code generation failed:[/red] {result.error_message}")
        if result.exception:
            console.print(f"[dim]Details: {result.exception}[/dim]")
        return 1

    if args.output:
        written = write_files(result, Path(args.output))
        if written is None:
            return 1
    else:
        _print_files(result, generator.language_name)

    if args.show_metadata and result.metadata:
        _print_metadata(result)

    if result.warnings:
        console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {warning}")
        console.print()

    if result.failures:
        console.print("\n[red]✗ Failed services:[/red]")
        for failure in result.failures:
            console.print(f"  [red]•[/red] {failure.describe()}")
        return 1

    return 0


def write_files(result: GenerationResult, output_dir: Path) -> Optional[int]:
    """Write generated files below output_dir; None when writing fails."""
    count = 0
    for relative_path, code in result.files.items():
        path = output_dir / relative_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(code, encoding="utf-8")
        except OSError as e:
            logger.error("Failed to write %s: %s", path, e)
            console.print(f"[red]✗ Failed to write to {path}:[/red] {e}")
            return None
        count += 1
        console.print(f"[green]✓[/green] Wrote [cyan]{path}[/cyan]")

    logger.info("Wrote %d file(s) to %s", count, output_dir)
    return count


def _print_files(result: GenerationResult, language: str):
    lexer = _LEXERS.get(language, language)
    for relative_path, code in result.files.items():
        console.print(Panel(Syntax(code, lexer, theme="monokai"), title=f"📄 {relative_path}"))


def _print_metadata(result: GenerationResult):
    metadata_table = Table(
        title="📊 Generation Metadata",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    metadata_table.add_column("Property", style="bold")
    metadata_table.add_column("Value", style="green")

    for key, value in result.metadata.items():
        metadata_table.add_row(key.replace("_", " ").title(), str(value))

    console.print()
    console.print(metadata_table)
