"""
Planning errors raised by the classification and routing core.

Both errors are structural: the input service is malformed or contradicts
itself. They are never retried and abort generation for one service only.
"""

from typing import Optional, Sequence, Tuple


class PlanningError(Exception):
    """Base class for errors that abort planning of a single service."""

    rule = "planning"

    def __init__(
        self,
        message: str,
        service_name: Optional[str] = None,
        method_names: Sequence[str] = (),
    ):
        super().__init__(message)
        self.message = message
        self.service_name = service_name
        self.method_names: Tuple[str, ...] = tuple(method_names)

    def with_service(self, service_name: str) -> "PlanningError":
        """Attach the offending service name if it is not known yet."""
        if self.service_name is None:
            self.service_name = service_name
        return self

    def describe(self) -> str:
        """Human readable summary naming the service, methods and rule."""
        parts = [f"[{self.rule}]"]
        if self.service_name:
            parts.append(f"service '{self.service_name}'")
        if self.method_names:
            quoted = ", ".join(f"'{name}'" for name in self.method_names)
            parts.append(f"method(s) {quoted}")
        parts.append(f"- {self.message}")
        return " ".join(parts)


class InvalidIdentifier(PlanningError):
    """A service or method name cannot be turned into an identifier."""

    rule = "invalid-identifier"


class DuplicateRoute(PlanningError):
    """Two methods of one service derive the same route key."""

    rule = "duplicate-route"

    def __init__(
        self,
        route_key: str,
        service_name: Optional[str] = None,
        method_names: Sequence[str] = (),
    ):
        super().__init__(
            f"route key '{route_key}' is derived by more than one method",
            service_name,
            method_names,
        )
        self.route_key = route_key


class DuplicateIdentifier(PlanningError):
    """Two methods with distinct route keys derive the same method or handler name."""

    rule = "duplicate-identifier"

    def __init__(
        self,
        identifier: str,
        service_name: Optional[str] = None,
        method_names: Sequence[str] = (),
    ):
        super().__init__(
            f"identifier '{identifier}' is derived by more than one method",
            service_name,
            method_names,
        )
        self.identifier = identifier
