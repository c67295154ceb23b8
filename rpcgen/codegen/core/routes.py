"""
Route table construction.

Derives one route key per method and assembles the dispatch table that
maps every interaction semantic to its ordered route bindings.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from ...logging_config import get_logger
from .errors import DuplicateIdentifier, DuplicateRoute, PlanningError
from .naming import method_constant_name, to_lower_camel, to_upper_camel, validate_service_name
from .schema import MethodDefinition, ServiceDefinition
from .semantics import SEMANTIC_ORDER, InteractionSemantic, classify

logger = get_logger(__name__)


@dataclass(frozen=True)
class RouteBinding:
    """A method bound to the route key that selects it at dispatch time."""

    route_key: str
    method: MethodDefinition


def derive_route_key(service_identifier: str, method_name: str) -> str:
    """``<Service>.METHOD_<SCREAMING_SNAKE>``"""
    return f"{service_identifier}.{method_constant_name(method_name)}"


class DispatchTable:
    """Read-only mapping of semantic to ordered route bindings."""

    def __init__(self, service: ServiceDefinition,
                 buckets: Dict[InteractionSemantic, Tuple[RouteBinding, ...]]):
        self.service = service
        self._buckets: Mapping[InteractionSemantic, Tuple[RouteBinding, ...]] = MappingProxyType(
            {semantic: tuple(buckets.get(semantic, ())) for semantic in SEMANTIC_ORDER}
        )
        self._by_key = {
            binding.route_key: semantic
            for semantic, bucket in self._buckets.items()
            for binding in bucket
        }

    @property
    def buckets(self) -> Mapping[InteractionSemantic, Tuple[RouteBinding, ...]]:
        return self._buckets

    def bucket(self, semantic: InteractionSemantic) -> Tuple[RouteBinding, ...]:
        """Bindings of one semantic in declaration order."""
        return self._buckets[semantic]

    def bindings(self) -> List[RouteBinding]:
        """All bindings, bucket by bucket."""
        return [binding for semantic in SEMANTIC_ORDER for binding in self._buckets[semantic]]

    def route_keys(self) -> List[str]:
        return [binding.route_key for binding in self.bindings()]

    def semantic_of(self, route_key: str) -> Optional[InteractionSemantic]:
        return self._by_key.get(route_key)

    def __len__(self) -> int:
        return len(self._by_key)

    def __iter__(self) -> Iterator[InteractionSemantic]:
        return iter(SEMANTIC_ORDER)

    def __repr__(self) -> str:
        sizes = ", ".join(f"{s.name}={len(b)}" for s, b in self._buckets.items())
        return f"DispatchTable({self.service.name}: {sizes})"


def build_route_table(service: ServiceDefinition) -> DispatchTable:
    """
    Build the dispatch table for a service.

    Args:
        service: Service whose methods are bound, in declaration order

    Returns:
        DispatchTable with one binding per method

    Raises:
        InvalidIdentifier: If the service or a method name is unusable
        DuplicateRoute: On the first route key derived twice
        DuplicateIdentifier: When distinct route keys share a method or
            handler name, e.g. ``AB`` and ``aB``
    """
    try:
        service_identifier = validate_service_name(service.name)
    except PlanningError as e:
        raise e.with_service(service.name or "<unnamed>")

    buckets: Dict[InteractionSemantic, List[RouteBinding]] = {
        semantic: [] for semantic in SEMANTIC_ORDER
    }
    seen: Dict[str, MethodDefinition] = {}
    # Method and handler names must be unique too
    seen_names: Dict[str, MethodDefinition] = {}

    for method in service.methods:
        try:
            route_key = derive_route_key(service_identifier, method.name)
        except PlanningError as e:
            if not e.method_names:
                e.method_names = (method.name,)
            raise e.with_service(service.name)

        if route_key in seen:
            raise DuplicateRoute(
                route_key,
                service_name=service.name,
                method_names=(seen[route_key].name, method.name),
            )
        seen[route_key] = method

        for identifier in dict.fromkeys((to_lower_camel(method.name), to_upper_camel(method.name))):
            if identifier in seen_names:
                raise DuplicateIdentifier(
                    identifier,
                    service_name=service.name,
                    method_names=(seen_names[identifier].name, method.name),
                )
            seen_names[identifier] = method

        semantic = classify(method)
        buckets[semantic].append(RouteBinding(route_key, method))
        logger.debug("Bound %s to %s", route_key, semantic.name)

    return DispatchTable(service, {s: tuple(b) for s, b in buckets.items()})
