"""
Python code generator module.

Generates asyncio RSocket RPC service interfaces, clients and servers.
"""

from .generator import PythonGenerator, create_python_generator
from .naming import create_python_sanitizer, messages_module_name, python_type_ref
from .config import PythonConfig, PYTHON_SYMBOLS, PYTHON_REGISTRY_NAMES, symbol_imports

__all__ = [
    # Generator
    "PythonGenerator",
    "create_python_generator",
    # Naming
    "create_python_sanitizer",
    "messages_module_name",
    "python_type_ref",
    # Configuration
    "PythonConfig",
    "PYTHON_SYMBOLS",
    "PYTHON_REGISTRY_NAMES",
    "symbol_imports",
]
