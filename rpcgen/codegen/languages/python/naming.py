"""
Python-specific naming utilities and sanitization.

Handles Python reserved words and maps schema type references to the
attribute paths of protoc-generated message modules.
"""

from typing import Dict, Optional, Tuple

from ...core.naming import NameSanitizer


# Python reserved keywords
PYTHON_RESERVED_WORDS = {
    "False", "None", "True", "and", "as", "assert", "async", "await",
    "break", "class", "continue", "def", "del", "elif", "else", "except",
    "finally", "for", "from", "global", "if", "import", "in", "is",
    "lambda", "nonlocal", "not", "or", "pass", "raise", "return", "try",
    "while", "with", "yield",
}

# Names generated classes already use for their own attributes
PYTHON_BUILTIN_TYPES = {
    "int", "float", "str", "bool", "list", "dict", "set", "tuple", "bytes",
    "object", "type", "property", "super", "print", "open", "id",
}


def create_python_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Python."""
    return NameSanitizer(PYTHON_RESERVED_WORDS, PYTHON_BUILTIN_TYPES)


def messages_module_name(proto_stem: str, suffix: str = "_pb2") -> str:
    """Module protoc generates for a file, e.g. ``greeter_pb2``."""
    return f"{proto_stem.replace('-', '_').replace('.', '_')}{suffix}"


def python_type_ref(type_ref: str, proto_package: str, messages_module: str,
                    type_modules: Optional[Dict[str, str]] = None) -> Tuple[str, str, bool]:
    """
    Locate a message class among the protoc-generated modules.

    Types of the file's own package live in ``messages_module``; foreign
    packages are looked up in ``type_modules`` (package -> module).

    Returns:
        (module path, class path inside the module, whether it was resolved)
    """
    type_modules = type_modules or {}
    if proto_package and type_ref.startswith(proto_package + "."):
        return messages_module, type_ref[len(proto_package) + 1:], True
    if not proto_package and "." not in type_ref:
        return messages_module, type_ref, True

    package, _, local_name = type_ref.rpartition(".")
    # Nested messages keep their parent in the class path
    while package and package not in type_modules:
        package, _, parent = package.rpartition(".")
        local_name = f"{parent}.{local_name}"
    if package:
        return type_modules[package], local_name, True
    return messages_module, type_ref.rsplit(".", 1)[-1], False


def module_alias(module_path: str) -> str:
    """Name a dotted module is referred to by after ``from x import y``."""
    return module_path.rsplit(".", 1)[-1]


def import_line(module_path: str) -> str:
    """Import statement binding a module to its alias."""
    parent, _, name = module_path.rpartition(".")
    if parent:
        return f"from {parent} import {name}"
    return f"import {name}"
