"""
Core code generation components.

Classification, identifier derivation, routing and planning, plus the base
classes and utilities used by all language generators.
"""

from .errors import PlanningError, InvalidIdentifier, DuplicateRoute, DuplicateIdentifier
from .naming import (
    NameSanitizer,
    NamingCase,
    to_lower_camel,
    to_screaming_snake,
    to_upper_camel,
    to_snake_case,
    method_constant_name,
    route_constant_name,
)
from .schema import (
    MethodDefinition,
    ServiceDefinition,
    ProtoFile,
    SchemaError,
    convert_descriptor,
)
from .semantics import InteractionSemantic, SEMANTIC_ORDER, classify, classify_flags, group_by_semantic
from .routes import DispatchTable, RouteBinding, build_route_table, derive_route_key
from .planner import (
    ArtifactKind,
    EmissionPlan,
    EmissionTask,
    MethodIdentifiers,
    PlanOptions,
    Registration,
    ServerEntryPoint,
    plan,
    plan_service,
)
from .docs import escape_doc_comment, doc_lines
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine
from .generator import (
    CodeGenerator,
    GeneratorError,
    GenerationResult,
    ServiceFailure,
    generate_code,
)

__all__ = [
    # Errors raised while planning a service
    "PlanningError",
    "InvalidIdentifier",
    "DuplicateRoute",
    "DuplicateIdentifier",
    # Identifier derivation
    "NameSanitizer",
    "NamingCase",
    "to_lower_camel",
    "to_screaming_snake",
    "to_upper_camel",
    "to_snake_case",
    "method_constant_name",
    "route_constant_name",
    # Schema system - core data structures
    "MethodDefinition",
    "ServiceDefinition",
    "ProtoFile",
    "SchemaError",
    "convert_descriptor",
    # Classification and routing
    "InteractionSemantic",
    "SEMANTIC_ORDER",
    "classify",
    "classify_flags",
    "group_by_semantic",
    "DispatchTable",
    "RouteBinding",
    "build_route_table",
    "derive_route_key",
    # Planning
    "ArtifactKind",
    "EmissionPlan",
    "EmissionTask",
    "MethodIdentifiers",
    "PlanOptions",
    "Registration",
    "ServerEntryPoint",
    "plan",
    "plan_service",
    # Doc comments
    "escape_doc_comment",
    "doc_lines",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "ServiceFailure",
    "generate_code",
]
