"""
Interaction classification.

Each method is classified once into one of four interaction semantics and
the result is threaded through routing, planning and rendering.
"""

from enum import Enum
from typing import Dict, Iterable, List

from .schema import MethodDefinition


class InteractionSemantic(Enum):
    """The four RSocket interaction models a method can map to."""

    ONE_WAY = "fire_and_forget"
    UNARY_SINGLE_RESPONSE = "request_response"
    SERVER_STREAM = "request_stream"
    CLIENT_OR_BIDI_STREAM = "request_channel"

    @property
    def interaction_name(self) -> str:
        """Name of the server entry point, e.g. ``requestResponse``."""
        return _INTERACTION_NAMES[self]

    @property
    def handler_suffix(self) -> str:
        """Suffix of generated per-method handlers, e.g. ``RequestStream``."""
        return _INTERACTION_NAMES[self][0].upper() + _INTERACTION_NAMES[self][1:]

    @property
    def label(self) -> str:
        """Display label, e.g. ``Fire And Forget``."""
        return _LABELS[self]


_INTERACTION_NAMES = {
    InteractionSemantic.ONE_WAY: "fireAndForget",
    InteractionSemantic.UNARY_SINGLE_RESPONSE: "requestResponse",
    InteractionSemantic.SERVER_STREAM: "requestStream",
    InteractionSemantic.CLIENT_OR_BIDI_STREAM: "requestChannel",
}

_LABELS = {
    InteractionSemantic.ONE_WAY: "Fire And Forget",
    InteractionSemantic.UNARY_SINGLE_RESPONSE: "Request Response",
    InteractionSemantic.SERVER_STREAM: "Request Stream",
    InteractionSemantic.CLIENT_OR_BIDI_STREAM: "Request Channel",
}

# Order of server entry points and of dispatch buckets
SEMANTIC_ORDER = (
    InteractionSemantic.ONE_WAY,
    InteractionSemantic.UNARY_SINGLE_RESPONSE,
    InteractionSemantic.SERVER_STREAM,
    InteractionSemantic.CLIENT_OR_BIDI_STREAM,
)


def classify_flags(client_streaming: bool, server_streaming: bool, one_way: bool) -> InteractionSemantic:
    """Classify a raw attribute triple.

    Client streaming wins over server streaming, which wins over one-way.
    """
    if client_streaming:
        return InteractionSemantic.CLIENT_OR_BIDI_STREAM
    if server_streaming:
        return InteractionSemantic.SERVER_STREAM
    if one_way:
        return InteractionSemantic.ONE_WAY
    return InteractionSemantic.UNARY_SINGLE_RESPONSE


def classify(method: MethodDefinition) -> InteractionSemantic:
    """Classify a method definition."""
    return classify_flags(method.client_streaming, method.server_streaming, method.one_way)


def group_by_semantic(methods: Iterable[MethodDefinition]) -> Dict[InteractionSemantic, List[MethodDefinition]]:
    """Bucket methods by semantic, keeping declaration order in each bucket."""
    groups: Dict[InteractionSemantic, List[MethodDefinition]] = {
        semantic: [] for semantic in SEMANTIC_ORDER
    }
    for method in methods:
        groups[classify(method)].append(method)
    return groups
