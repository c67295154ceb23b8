"""
Core schema representation for code generation.

Converts a JSON service descriptor (the JSON form of a protobuf file
descriptor, restricted to services) into immutable definitions that the
classifier, route builder and planner work on.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


class SchemaError(Exception):
    """Exception raised when a descriptor cannot be converted."""

    pass


@dataclass(frozen=True)
class MethodDefinition:
    """A single RPC method as declared in the schema."""

    name: str
    input_type: str
    output_type: str
    client_streaming: bool = False
    server_streaming: bool = False
    one_way: bool = False
    comments: str = ""


@dataclass(frozen=True)
class ServiceDefinition:
    """A service and its methods, in declaration order."""

    name: str
    namespace: str = ""
    methods: Tuple[MethodDefinition, ...] = ()
    comments: str = ""

    @property
    def full_name(self) -> str:
        """Service name qualified by its declaring namespace."""
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name


@dataclass(frozen=True)
class ProtoFile:
    """A descriptor file: the unit handed to a generator."""

    name: str
    package: str = ""
    services: Tuple[ServiceDefinition, ...] = ()
    options: Dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    @property
    def stem(self) -> str:
        """File name without directories and extension."""
        base = self.name.replace("\\", "/").rsplit("/", 1)[-1]
        return base.rsplit(".", 1)[0] if "." in base else base


# Keys from protobuf's JSON mapping (camelCase) accepted next to snake_case
_KEY_ALIASES = {
    "input_type": ("input_type", "inputType"),
    "output_type": ("output_type", "outputType"),
    "client_streaming": ("client_streaming", "clientStreaming"),
    "server_streaming": ("server_streaming", "serverStreaming"),
    "fire_and_forget": ("fire_and_forget", "fireAndForget", "one_way", "oneWay"),
}


def _lookup(data: Dict[str, Any], key: str, default: Any = None) -> Any:
    """Read a key trying every accepted spelling."""
    for alias in _KEY_ALIASES.get(key, (key,)):
        if alias in data:
            return data[alias]
    return default


def _as_bool(value: Any, where: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    raise SchemaError(f"Expected boolean for {where}, got {type(value).__name__}")


def _type_reference(value: Any, where: str) -> str:
    if not isinstance(value, str) or not value.strip("."):
        raise SchemaError(f"Missing or invalid type reference for {where}")
    return value.lstrip(".")


def convert_method(data: Dict[str, Any], service_name: str = "") -> MethodDefinition:
    """Convert one method node of the descriptor."""
    if not isinstance(data, dict):
        raise SchemaError(f"Method entry of service '{service_name}' must be an object")

    name = data.get("name", "")
    if not isinstance(name, str):
        raise SchemaError(f"Method name in service '{service_name}' must be a string")

    where = f"{service_name}.{name}" if service_name else name
    options = data.get("options") or {}
    if not isinstance(options, dict):
        raise SchemaError(f"Options of {where} must be an object")

    one_way = _lookup(data, "fire_and_forget")
    if one_way is None:
        one_way = _lookup(options, "fire_and_forget")

    return MethodDefinition(
        name=name,
        input_type=_type_reference(_lookup(data, "input_type"), f"{where} input"),
        output_type=_type_reference(_lookup(data, "output_type"), f"{where} output"),
        client_streaming=_as_bool(_lookup(data, "client_streaming"), f"{where}.client_streaming"),
        server_streaming=_as_bool(_lookup(data, "server_streaming"), f"{where}.server_streaming"),
        one_way=_as_bool(one_way, f"{where}.fire_and_forget"),
        comments=data.get("comments") or "",
    )


def convert_service(data: Dict[str, Any], namespace: str = "") -> ServiceDefinition:
    """Convert one service node of the descriptor."""
    if not isinstance(data, dict):
        raise SchemaError("Service entry must be an object")

    name = data.get("name", "")
    if not isinstance(name, str):
        raise SchemaError("Service name must be a string")

    methods_data = _lookup(data, "methods") or _lookup(data, "method") or []
    if not isinstance(methods_data, list):
        raise SchemaError(f"Methods of service '{name}' must be a list")

    methods = tuple(convert_method(m, name) for m in methods_data)
    return ServiceDefinition(
        name=name,
        namespace=data.get("namespace", namespace) or "",
        methods=methods,
        comments=data.get("comments") or "",
    )


def convert_descriptor(descriptor: Dict[str, Any], default_name: str = "service.proto") -> ProtoFile:
    """
    Convert a JSON descriptor to the internal representation.

    Args:
        descriptor: Parsed JSON document
        default_name: File name used when the descriptor has none

    Returns:
        ProtoFile with services in declaration order

    Raises:
        SchemaError: If the document does not have the expected shape
    """
    if not isinstance(descriptor, dict):
        raise SchemaError("Descriptor root must be a JSON object")

    package = descriptor.get("package") or ""
    if not isinstance(package, str):
        raise SchemaError("Descriptor 'package' must be a string")

    services_data = descriptor.get("services")
    if services_data is None:
        services_data = descriptor.get("service", [])
    if not isinstance(services_data, list):
        raise SchemaError("Descriptor 'services' must be a list")

    options = descriptor.get("options") or {}
    if not isinstance(options, dict):
        raise SchemaError("Descriptor 'options' must be an object")

    services = tuple(convert_service(s, package) for s in services_data)
    return ProtoFile(
        name=descriptor.get("name") or default_name,
        package=package,
        services=services,
        options=dict(options),
    )
