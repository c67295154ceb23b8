"""
RSocket RPC code generation module.

Plans and renders service interfaces, clients and servers from JSON
service descriptors.
"""

from typing import Any, Dict, Optional, Union
from pathlib import Path

from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    list_all_language_info,
    list_supported_languages,
)
from .core.generator import (
    CodeGenerator,
    GenerationResult,
    GeneratorError,
    ServiceFailure,
    generate_code,
)
from .core.schema import ProtoFile, SchemaError, convert_descriptor
from .core.config import GeneratorConfig, ConfigManager, load_config


def generate_from_descriptor(
    descriptor: Union[Dict[str, Any], ProtoFile],
    language: str = "java",
    config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
    file_name: str = "service.proto",
) -> GenerationResult:
    """
    Generate code for every service of a descriptor.

    Args:
        descriptor: Parsed JSON descriptor or an already converted ProtoFile
        language: Target language name or alias
        config: Generator configuration object, dict or file path
        file_name: File name used when the descriptor has none

    Returns:
        GenerationResult with generated files keyed by relative path

    Raises:
        SchemaError: If the descriptor does not have the expected shape
        RegistryError: If the language is unknown or the config is invalid
    """
    if isinstance(descriptor, ProtoFile):
        proto_file = descriptor
    else:
        proto_file = convert_descriptor(descriptor, default_name=file_name)

    generator = get_generator(language, config)
    return generate_code(generator, proto_file)


def quick_generate(descriptor: Dict[str, Any], language: str = "java", **options) -> Dict[str, str]:
    """
    Quick code generation from a descriptor.

    Args:
        descriptor: Parsed JSON descriptor
        language: Target language
        **options: Generator options

    Returns:
        Generated code keyed by relative path
    """
    result = generate_from_descriptor(descriptor, language, options or None)

    if result.success:
        return result.files
    if result.error_message:
        raise RuntimeError(f"Code generation failed: {result.error_message}")
    raise RuntimeError(
        "Code generation failed: " + "; ".join(f.describe() for f in result.failures)
    )


__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "CodeGenerator",
    "GenerationResult",
    "GeneratorError",
    "ServiceFailure",
    "ProtoFile",
    "SchemaError",
    "GeneratorConfig",
    "ConfigManager",
    "load_config",
    "convert_descriptor",
    "generate_code",
    "generate_from_descriptor",
    "quick_generate",
    "get_generator",
    "get_language_info",
    "list_all_language_info",
    "list_supported_languages",
]
