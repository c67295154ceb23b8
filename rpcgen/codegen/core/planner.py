"""
Emission planning.

Turns a classified service and its dispatch table into an ordered list of
per-artifact, per-method tasks plus the four server entry points. Renderers
only spell out what the plan says; they make no semantic decisions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ...logging_config import get_logger
from .naming import (
    method_constant_name,
    route_constant_name,
    to_lower_camel,
    to_upper_camel,
)
from .routes import DispatchTable, RouteBinding, build_route_table
from .schema import MethodDefinition, ServiceDefinition
from .semantics import SEMANTIC_ORDER, InteractionSemantic

logger = get_logger(__name__)


class ArtifactKind(Enum):
    """Generated artifacts, in emission order."""

    INTERFACE = "interface"
    CLIENT_STUB = "client"
    SERVER_STUB = "server"


ARTIFACT_ORDER = (ArtifactKind.INTERFACE, ArtifactKind.CLIENT_STUB, ArtifactKind.SERVER_STUB)


@dataclass(frozen=True)
class MethodIdentifiers:
    """Every identifier derived from one method name."""

    name: str
    lower_camel: str
    upper_camel: str
    method_constant: str
    route_constant: str
    route_key: str
    route_value: str

    @classmethod
    def derive(cls, service: ServiceDefinition, method: MethodDefinition,
               route_key: str) -> "MethodIdentifiers":
        return cls(
            name=method.name,
            lower_camel=to_lower_camel(method.name),
            upper_camel=to_upper_camel(method.name),
            method_constant=method_constant_name(method.name),
            route_constant=route_constant_name(method.name),
            route_key=route_key,
            route_value=f"{service.full_name}.{method.name}",
        )


@dataclass(frozen=True)
class EmissionTask:
    """One handler entry a renderer must emit for one artifact."""

    artifact: ArtifactKind
    method: MethodDefinition
    semantic: InteractionSemantic
    identifiers: MethodIdentifiers
    # Server-stub only; None for the other artifacts
    metrics_wrapped: Optional[bool] = None
    void_return: Optional[bool] = None

    @property
    def route_key(self) -> str:
        return self.identifiers.route_key

    @property
    def request_streaming(self) -> bool:
        return self.semantic is InteractionSemantic.CLIENT_OR_BIDI_STREAM

    @property
    def response_streaming(self) -> bool:
        return self.method.server_streaming

    @property
    def handler_name(self) -> str:
        """Name of the server-side per-method handler."""
        return f"do{self.identifiers.upper_camel}{self.semantic.handler_suffix}"


@dataclass(frozen=True)
class ServerEntryPoint:
    """A public server entry point; unimplemented when its bucket is empty."""

    semantic: InteractionSemantic
    bindings: Tuple[RouteBinding, ...]

    @property
    def name(self) -> str:
        return self.semantic.interaction_name

    @property
    def implemented(self) -> bool:
        return bool(self.bindings)

    @property
    def two_stage(self) -> bool:
        """Channel entry points decode the first payload before routing."""
        return self.semantic is InteractionSemantic.CLIENT_OR_BIDI_STREAM

    @property
    def unimplemented_message(self) -> str:
        return f"{self.semantic.label} is not implemented."


@dataclass(frozen=True)
class Registration:
    """A row of the server self-registration table."""

    semantic: InteractionSemantic
    route_key: str
    handler_name: str
    identifiers: MethodIdentifiers


@dataclass(frozen=True)
class PlanOptions:
    """Switches that change the server-stub shape."""

    enable_metrics: bool = True


@dataclass(frozen=True)
class EmissionPlan:
    """Ordered, fully-resolved generation tasks for one service."""

    service: ServiceDefinition
    dispatch_table: DispatchTable
    tasks: Tuple[EmissionTask, ...]
    entry_points: Tuple[ServerEntryPoint, ...]
    registrations: Tuple[Registration, ...]
    options: PlanOptions = field(default_factory=PlanOptions)

    def tasks_for(self, artifact: ArtifactKind) -> List[EmissionTask]:
        """Tasks of one artifact, in emission order."""
        return [task for task in self.tasks if task.artifact is artifact]

    def entry_point(self, semantic: InteractionSemantic) -> ServerEntryPoint:
        for entry in self.entry_points:
            if entry.semantic is semantic:
                return entry
        raise KeyError(semantic)

    def server_tasks_for(self, semantic: InteractionSemantic) -> List[EmissionTask]:
        return [
            task for task in self.tasks_for(ArtifactKind.SERVER_STUB)
            if task.semantic is semantic
        ]

    def summary(self) -> Dict[str, int]:
        """Counts per semantic and per artifact, for reporting."""
        counts = {s.value: len(self.dispatch_table.bucket(s)) for s in SEMANTIC_ORDER}
        counts.update({a.value: len(self.tasks_for(a)) for a in ARTIFACT_ORDER})
        return counts


def plan(service: ServiceDefinition, dispatch_table: DispatchTable,
         options: Optional[PlanOptions] = None) -> EmissionPlan:
    """
    Plan emission for a service.

    Interface and client tasks follow declaration order. Server tasks follow
    the dispatch table: bucket by bucket, declaration order inside a bucket.
    All four server entry points are always present.
    """
    options = options or PlanOptions()

    identifiers: Dict[str, MethodIdentifiers] = {}
    semantics: Dict[str, InteractionSemantic] = {}
    for semantic in SEMANTIC_ORDER:
        for binding in dispatch_table.bucket(semantic):
            identifiers[binding.method.name] = MethodIdentifiers.derive(
                service, binding.method, binding.route_key
            )
            semantics[binding.method.name] = semantic

    tasks: List[EmissionTask] = []
    for artifact in (ArtifactKind.INTERFACE, ArtifactKind.CLIENT_STUB):
        for method in service.methods:
            tasks.append(EmissionTask(
                artifact=artifact,
                method=method,
                semantic=semantics[method.name],
                identifiers=identifiers[method.name],
            ))

    registrations: List[Registration] = []
    entry_points: List[ServerEntryPoint] = []
    for semantic in SEMANTIC_ORDER:
        bucket = dispatch_table.bucket(semantic)
        entry_points.append(ServerEntryPoint(semantic, bucket))
        for binding in bucket:
            task = EmissionTask(
                artifact=ArtifactKind.SERVER_STUB,
                method=binding.method,
                semantic=semantic,
                identifiers=identifiers[binding.method.name],
                metrics_wrapped=options.enable_metrics,
                void_return=semantic is InteractionSemantic.ONE_WAY,
            )
            tasks.append(task)
            registrations.append(Registration(
                semantic, binding.route_key, task.handler_name, task.identifiers
            ))

    logger.debug(
        "Planned %d tasks for service %s (%d methods)",
        len(tasks), service.name, len(service.methods),
    )
    return EmissionPlan(
        service=service,
        dispatch_table=dispatch_table,
        tasks=tuple(tasks),
        entry_points=tuple(entry_points),
        registrations=tuple(registrations),
        options=options,
    )


def plan_service(service: ServiceDefinition, options: Optional[PlanOptions] = None) -> EmissionPlan:
    """Build the route table and plan in one step."""
    return plan(service, build_route_table(service), options)
