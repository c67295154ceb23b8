from __future__ import annotations

import argparse
from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .codegen.cli_integration import CLIError, add_input_args, get_input_descriptor
from .codegen.core.errors import PlanningError
from .codegen.core.planner import ARTIFACT_ORDER, EmissionPlan, PlanOptions, plan_service
from .codegen.core.schema import ProtoFile, SchemaError, convert_descriptor
from .codegen.core.semantics import SEMANTIC_ORDER
from .logging_config import get_logger

logger = get_logger(__name__)


class InspectHandler:
    """Show how the services of a descriptor are classified, routed and planned."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.proto_file: ProtoFile | None = None
        self.source: str | None = None
        logger.debug("InspectHandler initialized")

    def set_descriptor(self, descriptor: Any, source: str) -> None:
        """Convert and keep a descriptor for inspection.

        Raises:
            SchemaError: If the descriptor does not have the expected shape.
        """
        self.proto_file = convert_descriptor(descriptor)
        self.source = source
        logger.info("Descriptor set for source: %s", source)

    def run(self, args: Any) -> int:
        """Print the tables for every service.

        Returns:
            Exit code (0 when every service plans, 1 otherwise).
        """
        if self.proto_file is None:
            self.console.print("❌ [red]No descriptor loaded[/red]")
            logger.warning("No descriptor loaded; aborting inspect run")
            return 1

        self.console.print(f"📄 Loaded: {self.source}")
        options = PlanOptions(enable_metrics=not getattr(args, "no_metrics", False))
        failed = 0

        for service in self.proto_file.services:
            try:
                plan = plan_service(service, options)
            except PlanningError as e:
                failed += 1
                logger.error("Planning %s failed: %s", service.name, e.describe())
                self.console.print(
                    Panel(e.describe(), title=f"❌ {service.name}", border_style="red")
                )
                continue

            self._print_routes(plan)
            if getattr(args, "tasks", False):
                self._print_tasks(plan)

        if not self.proto_file.services:
            self.console.print("[yellow]No services declared.[/yellow]")

        return 1 if failed else 0

    def _print_routes(self, plan: EmissionPlan) -> None:
        table = Table(
            title=f"🔀 {plan.service.full_name}",
            box=box.ROUNDED,
            title_style="bold cyan",
            caption=", ".join(f"{name}: {count}" for name, count in plan.summary().items()),
        )
        table.add_column("Interaction", style="bold green", no_wrap=True)
        table.add_column("Route Key", style="cyan")
        table.add_column("Method")
        table.add_column("Route", style="dim")

        for semantic in SEMANTIC_ORDER:
            entry = plan.entry_point(semantic)
            if not entry.implemented:
                table.add_row(entry.name, "[dim]-[/dim]", "[dim]not implemented[/dim]", "")
                continue
            for task in plan.server_tasks_for(semantic):
                table.add_row(
                    entry.name,
                    task.route_key,
                    task.method.name,
                    task.identifiers.route_value,
                )

        self.console.print()
        self.console.print(table)

    def _print_tasks(self, plan: EmissionPlan) -> None:
        table = Table(title="📋 Emission Plan", box=box.SIMPLE, header_style="bold cyan")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Artifact", style="bold")
        table.add_column("Method")
        table.add_column("Interaction", style="green")
        table.add_column("Handler", style="cyan")

        index = 0
        for artifact in ARTIFACT_ORDER:
            for task in plan.tasks_for(artifact):
                index += 1
                table.add_row(
                    str(index),
                    artifact.value,
                    task.method.name,
                    task.semantic.interaction_name,
                    task.handler_name,
                )

        self.console.print(table)


def create_inspect_subparser(subparsers) -> argparse.ArgumentParser:
    """Create the ``inspect`` subcommand parser."""
    parser = subparsers.add_parser(
        "inspect",
        help="Show the dispatch table and emission plan of each service",
    )
    add_input_args(parser)
    parser.add_argument(
        "--tasks", action="store_true", help="Also list the ordered emission tasks"
    )
    parser.add_argument(
        "--no-metrics", action="store_true", help="Plan server handlers without metrics"
    )
    parser.set_defaults(func=handle_inspect_command)
    return parser


def handle_inspect_command(args: argparse.Namespace) -> int:
    handler = InspectHandler()
    try:
        source, descriptor = get_input_descriptor(args)
        handler.set_descriptor(descriptor, source)
    except (CLIError, SchemaError) as e:
        handler.console.print(f"❌ [red]{e}[/red]")
        return 1
    return handler.run(args)
