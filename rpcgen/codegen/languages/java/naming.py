"""
Java-specific naming utilities.

Handles Java keywords and maps schema type references to Java class names.
"""

from typing import Any, Dict

from ...core.naming import NameSanitizer


JAVA_RESERVED_WORDS = {
    "abstract", "assert", "boolean", "break", "byte", "case", "catch",
    "char", "class", "const", "continue", "default", "do", "double", "else",
    "enum", "extends", "final", "finally", "float", "for", "goto", "if",
    "implements", "import", "instanceof", "int", "interface", "long",
    "native", "new", "package", "private", "protected", "public", "return",
    "short", "static", "strictfp", "super", "switch", "synchronized", "this",
    "throw", "throws", "transient", "try", "void", "volatile", "while",
    "true", "false", "null", "var", "record", "yield",
}

# Names every generated class already uses
JAVA_BUILTIN_TYPES = {
    "Object", "String", "Iterable", "Override", "Void", "Exception",
    "getService", "getServiceClass", "selfRegister",
    "fireAndForget", "requestResponse", "requestStream", "requestChannel",
}


def create_java_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Java."""
    return NameSanitizer(JAVA_RESERVED_WORDS, JAVA_BUILTIN_TYPES)


def java_package_for(proto_package: str, options: Dict[str, Any], override: str = None) -> str:
    """Java package generated classes are declared in."""
    if override:
        return override
    return options.get("java_package") or proto_package


def java_class_name(type_ref: str, proto_package: str, options: Dict[str, Any]) -> str:
    """
    Fully qualified Java class for a message type reference.

    Types declared in the file's own package move to ``java_package`` and,
    unless ``java_multiple_files`` is set, nest under the outer class.
    """
    java_package = options.get("java_package")
    outer = options.get("java_outer_classname")
    multiple_files = options.get("java_multiple_files", False)

    if proto_package and type_ref.startswith(proto_package + "."):
        local_name = type_ref[len(proto_package) + 1:]
        package = java_package or proto_package
    elif not proto_package and "." not in type_ref:
        local_name = type_ref
        package = java_package or ""
    else:
        return type_ref

    if outer and not multiple_files:
        local_name = f"{outer}.{local_name}"
    return f"{package}.{local_name}" if package else local_name
