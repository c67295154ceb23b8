"""
Python code generator implementation.

Renders asyncio RSocket RPC artifacts: an abstract service class with the
route constants, a client encoding requests for an rsocket requester, and
a server dispatching the four interaction models to the service.
"""

from typing import Any, Dict, List, Optional, Tuple
from pathlib import Path

from ...core.config import GeneratorConfig, load_config
from ...core.errors import PlanningError
from ...core.generator import CodeGenerator
from ...core.naming import NamingCase, parse_naming_case, to_snake_case
from ...core.planner import ArtifactKind, EmissionPlan, EmissionTask
from ...core.schema import ProtoFile
from ...core.semantics import InteractionSemantic
from .config import PYTHON_REGISTRY_NAMES, PYTHON_SYMBOLS, PythonConfig, symbol_imports
from .naming import (
    create_python_sanitizer,
    import_line,
    messages_module_name,
    module_alias,
    python_type_ref,
)

TEMPLATES = {
    ArtifactKind.INTERFACE: "service.py.j2",
    ArtifactKind.CLIENT_STUB: "client.py.j2",
    ArtifactKind.SERVER_STUB: "server.py.j2",
}

# Module name suffix of each artifact
MODULE_SUFFIXES = {
    ArtifactKind.INTERFACE: "_service",
    ArtifactKind.CLIENT_STUB: "_client",
    ArtifactKind.SERVER_STUB: "_server",
}


class PythonGenerator(CodeGenerator):
    """Code generator for asyncio Python RSocket RPC services."""

    max_blank_lines = 2

    def __init__(self, config: GeneratorConfig = None):
        """Initialize Python generator with configuration."""
        super().__init__(config)
        self.sanitizer = create_python_sanitizer()
        self.python_config = PythonConfig(**self.config.language_config)

    @property
    def language_name(self) -> str:
        return "python"

    @property
    def file_extension(self) -> str:
        return ".py"

    def get_template_directory(self) -> Path:
        return Path(__file__).parent / "templates"

    def default_symbols(self, artifact: ArtifactKind) -> Dict[str, str]:
        return PYTHON_SYMBOLS[artifact]

    def template_name(self, artifact: ArtifactKind) -> str:
        return TEMPLATES[artifact]

    def module_name(self, plan: EmissionPlan, artifact: ArtifactKind) -> str:
        """Unqualified module name of an artifact, e.g. ``greeter_client``."""
        return to_snake_case(plan.service.name) + MODULE_SUFFIXES[artifact]

    def qualified_module(self, module: str) -> str:
        if self.config.package_name:
            return f"{self.config.package_name}.{module}"
        return module

    def class_name(self, plan: EmissionPlan, artifact: ArtifactKind) -> str:
        service_name = plan.service.name
        if artifact is ArtifactKind.INTERFACE:
            return self.python_config.interface_name(service_name)
        if artifact is ArtifactKind.CLIENT_STUB:
            return self.python_config.client_name(service_name)
        return self.python_config.server_name(service_name)

    def artifact_path(self, plan: EmissionPlan, artifact: ArtifactKind,
                      proto_file: ProtoFile) -> str:
        file_name = self.module_name(plan, artifact) + self.file_extension
        if self.config.package_name:
            return f"{self.config.package_name.replace('.', '/')}/{file_name}"
        return file_name

    def messages_module(self, proto_file: ProtoFile) -> str:
        return self.qualified_module(
            messages_module_name(proto_file.stem, self.python_config.messages_module_suffix)
        )

    def build_context(self, plan: EmissionPlan, artifact: ArtifactKind,
                      proto_file: ProtoFile) -> Dict[str, Any]:
        symbols = self.symbols(artifact)
        message_modules = set()
        methods = []
        for task in plan.tasks_for(artifact):
            data, modules = self._method_data(task, proto_file)
            methods.append(data)
            message_modules.update(modules)

        entries = [
            {
                "entry": entry,
                "name": entry.semantic.value,
                "family": entry.semantic.name,
                "methods": [m for m in methods if m["task"].semantic is entry.semantic],
            }
            for entry in plan.entry_points
        ]

        interface_module = self.qualified_module(self.module_name(plan, ArtifactKind.INTERFACE))
        constants = ["SERVICE_ID"]
        for task in plan.tasks_for(ArtifactKind.INTERFACE):
            constants.extend([task.identifiers.method_constant, task.identifiers.route_constant])

        return {
            "imports": symbol_imports(symbols),
            "message_imports": sorted(import_line(m) for m in message_modules),
            "interface_module": interface_module,
            "interface_name": self.class_name(plan, ArtifactKind.INTERFACE),
            "class_name": self.class_name(plan, artifact),
            "constants": constants,
            "metrics_name": self.python_config.metrics_name,
            "methods": methods,
            "entries": entries,
            "registrations": [
                {
                    "registry": PYTHON_REGISTRY_NAMES[reg.semantic],
                    "route_constant": reg.identifiers.route_constant,
                    "handler_name": self.handler_name(reg.identifiers.name, reg.semantic),
                }
                for reg in plan.registrations
            ],
            "registries": [PYTHON_REGISTRY_NAMES[entry.semantic] for entry in plan.entry_points],
        }

    @staticmethod
    def handler_name(method_name: str, semantic: InteractionSemantic) -> str:
        """Private per-method handler, e.g. ``_do_say_hello_request_response``."""
        return f"_do_{to_snake_case(method_name)}_{to_snake_case(semantic.handler_suffix)}"

    def _resolve_type(self, type_ref: str, proto_file: ProtoFile) -> Tuple[str, str]:
        """Reference to a message class plus the module it needs imported."""
        module, local_name, _ = python_type_ref(
            type_ref, proto_file.package, self.messages_module(proto_file),
            self.python_config.type_modules,
        )
        return f"{module_alias(module)}.{local_name}", module

    def _method_data(self, task: EmissionTask, proto_file: ProtoFile) -> Tuple[Dict[str, Any], List[str]]:
        """Python spelling of one task and the message modules it uses."""
        input_type, input_module = self._resolve_type(task.method.input_type, proto_file)
        output_type, output_module = self._resolve_type(task.method.output_type, proto_file)

        if task.semantic is InteractionSemantic.ONE_WAY:
            return_type = "None"
        elif task.response_streaming:
            return_type = f"AsyncIterator[{output_type}]"
        else:
            return_type = output_type

        if task.request_streaming:
            param_type = f"AsyncIterable[{input_type}]"
            param_name = "messages"
        else:
            param_type = input_type
            param_name = "message"

        data = {
            "task": task,
            "ids": task.identifiers,
            "family": task.semantic.name,
            "method_name": self.sanitizer.sanitize_name(task.identifiers.name, self._method_case()),
            "input_type": input_type,
            "output_type": output_type,
            "return_type": return_type,
            "param_type": param_type,
            "param_name": param_name,
            "handler_name": self.handler_name(task.method.name, task.semantic),
            "doc": task.method.comments if self.config.add_comments else "",
        }
        return data, [input_module, output_module]

    def _method_case(self) -> NamingCase:
        return parse_naming_case(self.python_config.method_case, NamingCase.SNAKE_CASE)

    def validate_services(self, proto_file: ProtoFile) -> List[str]:
        warnings = super().validate_services(proto_file)
        messages_module = self.messages_module(proto_file)
        unresolved = set()

        for service in proto_file.services:
            seen: Dict[str, str] = {}
            for method in service.methods:
                for type_ref in (method.input_type, method.output_type):
                    _, _, resolved = python_type_ref(
                        type_ref, proto_file.package, messages_module, self.python_config.type_modules
                    )
                    if not resolved and type_ref not in unresolved:
                        unresolved.add(type_ref)
                        warnings.append(
                            f"No module configured for type {type_ref}; "
                            f"assuming it is defined in {messages_module}"
                        )
                try:
                    python_name = self.sanitizer.sanitize_name(method.name, self._method_case())
                except PlanningError:
                    # Reported when the service is planned
                    continue
                other: Optional[str] = seen.get(python_name)
                if other is not None:
                    warnings.append(
                        f"Methods {service.name}.{other} and {service.name}.{method.name} "
                        f"share the Python name {python_name}"
                    )
                seen[python_name] = method.name

        return warnings


def create_python_generator(config: GeneratorConfig = None, **overrides) -> PythonGenerator:
    """Create a Python generator, optionally overriding configuration keys."""
    if config is None:
        config = load_config("python", custom_config=overrides or None)
    return PythonGenerator(config)
