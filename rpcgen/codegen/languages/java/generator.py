"""
Java code generator implementation.

Renders blocking RSocket RPC artifacts: the service interface, a blocking
client delegating to the reactive client, and a server dispatching the four
interaction models.
"""

from typing import Any, Dict, List
from pathlib import Path

from ...core.config import GeneratorConfig, load_config
from ...core.errors import PlanningError
from ...core.generator import CodeGenerator
from ...core.naming import NamingCase, parse_naming_case, to_lower_camel
from ...core.planner import ArtifactKind, EmissionPlan, EmissionTask
from ...core.schema import ProtoFile
from ...core.semantics import InteractionSemantic
from .config import (
    JAVA_REGISTRY_NAMES,
    JAVA_SERVER_RESPONSE_TYPES,
    JAVA_SYMBOLS,
    JavaConfig,
)
from .naming import create_java_sanitizer, java_class_name, java_package_for

TEMPLATES = {
    ArtifactKind.INTERFACE: "interface.java.j2",
    ArtifactKind.CLIENT_STUB: "client.java.j2",
    ArtifactKind.SERVER_STUB: "server.java.j2",
}


class JavaGenerator(CodeGenerator):
    """Code generator for blocking Java RSocket RPC services."""

    native_indent = 2

    def __init__(self, config: GeneratorConfig = None):
        """Initialize Java generator with configuration."""
        super().__init__(config)
        self.sanitizer = create_java_sanitizer()
        self.java_config = JavaConfig(**self.config.language_config)

    @property
    def language_name(self) -> str:
        return "java"

    @property
    def file_extension(self) -> str:
        return ".java"

    def get_template_directory(self) -> Path:
        return Path(__file__).parent / "templates"

    def default_symbols(self, artifact: ArtifactKind) -> Dict[str, str]:
        return JAVA_SYMBOLS[artifact]

    def template_name(self, artifact: ArtifactKind) -> str:
        return TEMPLATES[artifact]

    def java_package(self, proto_file: ProtoFile) -> str:
        return java_package_for(proto_file.package, proto_file.options, self.config.package_name)

    def class_name(self, plan: EmissionPlan, artifact: ArtifactKind) -> str:
        service_name = plan.service.name
        if artifact is ArtifactKind.INTERFACE:
            return self.java_config.interface_name(service_name)
        if artifact is ArtifactKind.CLIENT_STUB:
            return self.java_config.client_name(service_name)
        return self.java_config.server_name(service_name)

    def artifact_path(self, plan: EmissionPlan, artifact: ArtifactKind,
                      proto_file: ProtoFile) -> str:
        package_dir = self.java_package(proto_file).replace(".", "/")
        file_name = self.class_name(plan, artifact) + self.file_extension
        return f"{package_dir}/{file_name}" if package_dir else file_name

    def build_context(self, plan: EmissionPlan, artifact: ArtifactKind,
                      proto_file: ProtoFile) -> Dict[str, Any]:
        symbols = self.symbols(artifact)
        java_package = self.java_package(proto_file)
        methods = [self._method_data(task, proto_file, symbols) for task in plan.tasks_for(artifact)]
        entries = []
        for entry in plan.entry_points:
            publisher, element = JAVA_SERVER_RESPONSE_TYPES[entry.semantic]
            entries.append({
                "entry": entry,
                "family": entry.semantic.name,
                "publisher": publisher,
                "element": element,
                "methods": [m for m in methods if m["task"].semantic is entry.semantic],
            })
        return {
            "java_package": java_package,
            "interface_name": self.class_name(plan, ArtifactKind.INTERFACE),
            "class_name": self.class_name(plan, artifact),
            "delegate_client": ".".join(
                p for p in (java_package, self.java_config.delegate_client_name(plan.service.name)) if p
            ),
            "metrics_name": self.java_config.metrics_name,
            "methods": methods,
            "entries": entries,
            "registrations": [
                {
                    "registry": JAVA_REGISTRY_NAMES[reg.semantic],
                    "route_constant": reg.identifiers.route_constant,
                    "handler_name": reg.handler_name,
                }
                for reg in plan.registrations
            ],
            "semantics": {s.name: s for s in InteractionSemantic},
        }

    def _method_data(self, task: EmissionTask, proto_file: ProtoFile,
                     symbols: Dict[str, str]) -> Dict[str, Any]:
        """Java spelling of one task."""
        input_type = java_class_name(task.method.input_type, proto_file.package, proto_file.options)
        output_type = java_class_name(task.method.output_type, proto_file.package, proto_file.options)
        iterable = symbols.get("Iterable", "Iterable")

        if task.semantic is InteractionSemantic.ONE_WAY:
            return_type = "void"
            return_class = "Void"
        elif task.response_streaming:
            return_type = f"{symbols.get('BlockingIterable', iterable)}<{output_type}>" \
                if task.artifact is ArtifactKind.CLIENT_STUB else f"{iterable}<{output_type}>"
            return_class = output_type
        else:
            return_type = output_type
            return_class = output_type

        if task.request_streaming:
            param_type = f"{iterable}<{input_type}>"
            param_name = "messages"
        else:
            param_type = input_type
            param_name = "message"

        publisher, element = JAVA_SERVER_RESPONSE_TYPES[task.semantic]
        return {
            "task": task,
            "ids": task.identifiers,
            "family": task.semantic.name,
            "method_name": self.sanitizer.sanitize_name(task.identifiers.name, self._method_case()),
            "input_type": input_type,
            "output_type": output_type,
            "return_type": return_type,
            "return_class": return_class,
            "param_type": param_type,
            "param_name": param_name,
            "handler_name": task.handler_name,
            "publisher": symbols.get(publisher, publisher),
            "publisher_element": symbols.get(element, element),
            "doc": task.method.comments if self.config.add_comments else "",
        }

    def _method_case(self) -> NamingCase:
        return parse_naming_case(self.config.language_config.get("method_case"), NamingCase.CAMEL_CASE)

    def validate_services(self, proto_file: ProtoFile) -> List[str]:
        warnings = super().validate_services(proto_file)

        for service in proto_file.services:
            for method in service.methods:
                try:
                    java_name = self.sanitizer.sanitize_name(method.name, self._method_case())
                    plain_name = to_lower_camel(method.name)
                except PlanningError:
                    # Reported when the service is planned
                    continue
                if self._method_case() is NamingCase.CAMEL_CASE and java_name != plain_name:
                    warnings.append(
                        f"Method {service.name}.{method.name} renamed to {java_name} in Java"
                    )

        return warnings


def create_java_generator(config: GeneratorConfig = None, **overrides) -> JavaGenerator:
    """Create a Java generator, optionally overriding configuration keys."""
    if config is None:
        config = load_config("java", custom_config=overrides or None)
    return JavaGenerator(config)
