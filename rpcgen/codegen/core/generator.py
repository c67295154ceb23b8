"""
Base generator interface for all code generation targets.

Defines the contract language generators implement and the batch harness
that plans and renders every service of a descriptor file.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Any, Optional, Tuple, Union
from pathlib import Path

from ... import __version__
from ...logging_config import get_logger
from .config import GeneratorConfig, load_config
from .errors import PlanningError
from .planner import ARTIFACT_ORDER, ArtifactKind, EmissionPlan, PlanOptions, plan_service
from .schema import ProtoFile, ServiceDefinition
from .semantics import InteractionSemantic, classify
from .templates import TemplateEngine, TemplateError, create_template_engine

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    # Indentation unit the templates are written with
    native_indent = 4
    max_blank_lines = 1

    def __init__(self, config: Optional[Union[GeneratorConfig, Dict[str, Any]]] = None):
        """Initialize generator with optional configuration."""
        if config is None:
            config = load_config(self.language_name)
        elif isinstance(config, dict):
            config = load_config(self.language_name, custom_config=config)
        self.config: GeneratorConfig = config
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        self._template_engine = create_template_engine(self.get_template_directory())

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'java', 'python')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.java')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Return None to use in-memory templates only.
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def default_symbols(self, artifact: ArtifactKind) -> Dict[str, str]:
        """Qualified names the artifact's templates refer to."""
        pass

    @abstractmethod
    def template_name(self, artifact: ArtifactKind) -> str:
        """Template file used to render an artifact."""
        pass

    @abstractmethod
    def artifact_path(self, plan: EmissionPlan, artifact: ArtifactKind,
                      proto_file: ProtoFile) -> str:
        """Relative output path of an artifact."""
        pass

    @abstractmethod
    def build_context(self, plan: EmissionPlan, artifact: ArtifactKind,
                      proto_file: ProtoFile) -> Dict[str, Any]:
        """Template variables for one artifact."""
        pass

    def symbols(self, artifact: ArtifactKind) -> Dict[str, str]:
        """Default symbols overlaid with the configured ones."""
        merged = dict(self.default_symbols(artifact))
        merged.update(self.config.symbols)
        return merged

    def plan_options(self) -> PlanOptions:
        return PlanOptions(enable_metrics=self.config.enable_metrics)

    def version_suffix(self) -> str:
        """Version note placed in generated headers."""
        if self.config.disable_version:
            return ""
        return f" (version {__version__})"

    def generate_service(self, plan: EmissionPlan, proto_file: ProtoFile) -> Dict[str, str]:
        """
        Render every artifact of a planned service.

        Returns:
            Mapping of relative path to formatted code
        """
        files = {}
        for artifact in ARTIFACT_ORDER:
            context = self.build_context(plan, artifact, proto_file)
            context.setdefault("symbols", self.symbols(artifact))
            context.setdefault("plan", plan)
            context.setdefault("service", plan.service)
            context.setdefault("file_name", proto_file.name)
            context.setdefault("version", self.version_suffix())
            context.setdefault("add_comments", self.config.add_comments)
            try:
                code = self.render_template(self.template_name(artifact), context)
            except TemplateError as e:
                raise GeneratorError(
                    f"Rendering {artifact.value} of {plan.service.name} failed: {e}"
                ) from e
            files[self.artifact_path(plan, artifact, proto_file)] = self.format_code(code)
        return files

    def validate_services(self, proto_file: ProtoFile) -> List[str]:
        """
        Report suspicious but valid service shapes.

        Language generators may extend this with language-specific checks.
        """
        warnings = []

        if not proto_file.services:
            warnings.append(f"File '{proto_file.name}' declares no services")

        for service in proto_file.services:
            if not service.methods:
                warnings.append(
                    f"Service '{service.name}' has no methods - all entry points will be unimplemented"
                )
            for method in service.methods:
                if method.one_way and classify(method) is not InteractionSemantic.ONE_WAY:
                    warnings.append(
                        f"Method {service.name}.{method.name} is marked fire-and-forget "
                        f"but streams; the one-way flag is ignored"
                    )

        return warnings

    def format_code(self, code: str) -> str:
        """
        Apply basic formatting to generated code.

        Strips trailing whitespace and collapses runs of blank lines.
        """
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= self.max_blank_lines:
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        code = "\n".join(formatted_lines).strip("\n") + "\n"
        return reindent(code, self.native_indent, self.config.indent_size)

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with context."""
        return self.template_engine.render_template(template_name, context)


def reindent(code: str, from_unit: int, to_unit: int) -> str:
    """Rewrite leading indentation from one unit width to another."""
    if from_unit == to_unit or to_unit < 1:
        return code
    lines = []
    for line in code.split("\n"):
        stripped = line.lstrip(" ")
        levels, rest = divmod(len(line) - len(stripped), from_unit)
        lines.append(" " * (levels * to_unit + rest) + stripped)
    return "\n".join(lines)


@dataclass(frozen=True)
class ServiceFailure:
    """A service skipped because planning failed."""

    service_name: str
    method_names: Tuple[str, ...]
    rule: str
    message: str

    @classmethod
    def from_error(cls, service: ServiceDefinition, error: PlanningError) -> "ServiceFailure":
        return cls(
            service_name=error.service_name or service.name,
            method_names=error.method_names,
            rule=error.rule,
            message=error.message,
        )

    def describe(self) -> str:
        methods = ", ".join(f"'{name}'" for name in self.method_names)
        suffix = f" (methods: {methods})" if methods else ""
        return f"Service '{self.service_name}' skipped [{self.rule}]: {self.message}{suffix}"


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        files: Dict[str, str] = None,
        warnings: List[str] = None,
        metadata: Dict[str, Any] = None,
        failures: List[ServiceFailure] = None,
    ):
        """
        Initialize generation result.

        Args:
            files: Generated code keyed by relative path
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
            failures: Services that were skipped
        """
        self.files = files or {}
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.failures = failures or []
        self.plans: Dict[str, EmissionPlan] = {}
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @property
    def success(self) -> bool:
        return self.error_message is None and not self.failures

    @property
    def code(self) -> str:
        """All generated files concatenated, for stdout output."""
        return "\n".join(self.files.values())

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls()
        result.error_message = message
        result.exception = exception
        return result


def generate_code(generator: CodeGenerator, proto_file: ProtoFile) -> GenerationResult:
    """
    Plan and render every service of a file.

    A service whose planning fails is reported in ``failures`` and skipped;
    the remaining services are still generated.

    Args:
        generator: Code generator instance
        proto_file: Descriptor file to generate code for

    Returns:
        GenerationResult with files, warnings, failures and metadata
    """
    try:
        warnings = generator.validate_services(proto_file)
    except Exception as e:
        logger.error("Validation of %s failed: %s", proto_file.name, e, exc_info=True)
        return GenerationResult.error(f"Validation failed: {e}", exception=e)

    result = GenerationResult(warnings=warnings)
    options = generator.plan_options()

    for service in proto_file.services:
        try:
            plan = plan_service(service, options)
        except PlanningError as e:
            failure = ServiceFailure.from_error(service, e)
            logger.error(failure.describe())
            result.failures.append(failure)
            continue

        try:
            files = generator.generate_service(plan, proto_file)
        except Exception as e:
            logger.error("Rendering service %s failed: %s", service.name, e, exc_info=True)
            return GenerationResult.error(
                f"Code generation failed for service '{service.name}': {e}", exception=e
            )

        result.plans[service.name] = plan
        result.files.update(files)
        logger.info("Generated %d file(s) for service %s", len(files), service.name)

    result.metadata = {
        "language": generator.language_name,
        "file_extension": generator.file_extension,
        "source": proto_file.name,
        "service_count": len(proto_file.services),
        "generated_services": len(result.plans),
        "failed_services": len(result.failures),
        "file_count": len(result.files),
        "method_count": sum(len(s.methods) for s in proto_file.services),
    }
    return result
