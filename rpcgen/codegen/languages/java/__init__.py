"""
Java code generator module.

Generates blocking RSocket RPC interfaces, clients and servers.
"""

from .generator import JavaGenerator, create_java_generator
from .naming import create_java_sanitizer, java_class_name, java_package_for
from .config import (
    JavaConfig,
    JAVA_SYMBOLS,
    JAVA_REGISTRY_NAMES,
    JAVA_SERVER_RESPONSE_TYPES,
)

__all__ = [
    # Generator
    "JavaGenerator",
    "create_java_generator",
    # Naming
    "create_java_sanitizer",
    "java_class_name",
    "java_package_for",
    # Configuration
    "JavaConfig",
    "JAVA_SYMBOLS",
    "JAVA_REGISTRY_NAMES",
    "JAVA_SERVER_RESPONSE_TYPES",
]
