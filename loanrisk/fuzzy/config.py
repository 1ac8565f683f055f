"""
Configuration models for fuzzy systems.

A fuzzy system document declares variables with their trapezoidal sets,
names the output variable and lists the rules. Documents are validated
with Pydantic and then turned into the immutable runtime objects of
:mod:`loanrisk.fuzzy.model`. Malformed configuration is rejected here,
before any evaluation takes place.
"""

import math
from pathlib import Path
from typing import Annotated, Any, Literal, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from loanrisk import get_logger, log_performance
from loanrisk.config import default_config_path, get_engine_settings
from loanrisk.errors import (
    ConfigurationError,
    ConfigurationFileError,
    InvalidConfigurationError,
)
from loanrisk.fuzzy.model import (
    Clause,
    FuzzySet,
    Registry,
    Rule,
    RuleBase,
    Variable,
)

logger = get_logger(__name__)


class TrapezoidalSetConfig(BaseModel):
    """
    Configuration for a trapezoidal fuzzy set.

    The parameters [a, b, c, d] must satisfy: a ≤ b ≤ c ≤ d
    """

    type: Literal["trapezoidal"] = "trapezoidal"
    parameters: list[float] = Field(
        ...,
        min_length=4,
        max_length=4,
        description="Four breakpoints [a, b, c, d] defining the trapezoid",
    )

    @field_validator("parameters")
    @classmethod
    def validate_parameters(cls, parameters: list[float]) -> list[float]:
        """
        Raises:
            ConfigurationError: If breakpoints are not finite or out of order
        """
        if not all(math.isfinite(p) for p in parameters):
            raise ConfigurationError(
                message="Trapezoidal set breakpoints must be finite numbers",
                error_code="CONFIG-NonFiniteParameter",
                details={"parameters": parameters},
            )

        a, b, c, d = parameters
        if not (a <= b <= c <= d):
            raise ConfigurationError(
                message="Trapezoidal set parameters must satisfy: a ≤ b ≤ c ≤ d",
                error_code="CONFIG-InvalidParameterOrder",
                details={"parameters": {"a": a, "b": b, "c": c, "d": d}},
            )

        return parameters

    def as_trapezoid(self) -> list[float]:
        return list(self.parameters)


class TriangularSetConfig(BaseModel):
    """
    Shorthand for a triangle [a, b, c], stored as the trapezoid [a, b, b, c].

    The parameters must satisfy: a ≤ b ≤ c
    """

    type: Literal["triangular"] = "triangular"
    parameters: list[float] = Field(
        ...,
        min_length=3,
        max_length=3,
        description="Three breakpoints [a, b, c] defining the triangle",
    )

    @field_validator("parameters")
    @classmethod
    def validate_parameters(cls, parameters: list[float]) -> list[float]:
        if not all(math.isfinite(p) for p in parameters):
            raise ConfigurationError(
                message="Triangular set breakpoints must be finite numbers",
                error_code="CONFIG-NonFiniteParameter",
                details={"parameters": parameters},
            )

        a, b, c = parameters
        if not (a <= b <= c):
            raise ConfigurationError(
                message="Triangular set parameters must satisfy: a ≤ b ≤ c",
                error_code="CONFIG-InvalidParameterOrder",
                details={"parameters": {"a": a, "b": b, "c": c}},
            )

        return parameters

    def as_trapezoid(self) -> list[float]:
        a, b, c = self.parameters
        return [a, b, b, c]


FuzzySetConfig = Annotated[
    Union[TrapezoidalSetConfig, TriangularSetConfig],
    Field(discriminator="type"),
]


class VariableConfig(BaseModel):
    """
    Configuration of one linguistic variable.

    Sets may be written in full (``{type: trapezoidal, parameters: [...]}``)
    or as a bare list of 4 (trapezoid) or 3 (triangle) breakpoints.
    """

    label: Optional[str] = None
    unit: Optional[str] = None
    min: float
    max: float
    step: Optional[float] = Field(default=None, gt=0)
    default: Optional[float] = None
    sets: dict[str, FuzzySetConfig] = Field(..., min_length=1)

    @field_validator("sets", mode="before")
    @classmethod
    def expand_shorthand_sets(cls, sets: Any) -> Any:
        if not isinstance(sets, dict):
            return sets

        expanded = {}
        for name, value in sets.items():
            if isinstance(value, (list, tuple)):
                kind = "triangular" if len(value) == 3 else "trapezoidal"
                expanded[name] = {"type": kind, "parameters": list(value)}
            elif isinstance(value, dict) and "type" not in value:
                expanded[name] = {"type": "trapezoidal", **value}
            else:
                expanded[name] = value
        return expanded

    @model_validator(mode="after")
    def validate_domain(self) -> "VariableConfig":
        if not (math.isfinite(self.min) and math.isfinite(self.max)):
            raise ConfigurationError(
                message="Variable domain bounds must be finite numbers",
                error_code="CONFIG-NonFiniteDomain",
                details={"min": self.min, "max": self.max},
            )
        if self.min >= self.max:
            raise ConfigurationError(
                message="Variable domain must satisfy min < max",
                error_code="CONFIG-InvalidDomain",
                details={"min": self.min, "max": self.max},
            )
        if self.default is not None and not (self.min <= self.default <= self.max):
            raise ConfigurationError(
                message="Variable default must lie inside its domain",
                error_code="CONFIG-DefaultOutOfRange",
                details={"default": self.default, "min": self.min, "max": self.max},
            )
        return self

    def to_variable(self, name: str) -> Variable:
        return Variable(
            name=name,
            min=self.min,
            max=self.max,
            sets=tuple(
                FuzzySet.from_parameters(set_name, set_config.as_trapezoid())
                for set_name, set_config in self.sets.items()
            ),
            label=self.label,
            unit=self.unit,
            step=self.step,
            default=self.default,
        )


class RuleConfig(BaseModel):
    """
    Configuration of one rule.

    ``when`` is an ordered list of ``[variable, set]`` pairs joined by AND;
    ``then`` is a single ``[output variable, set]`` pair.
    """

    when: list[tuple[str, str]] = Field(..., min_length=1)
    then: tuple[str, str]
    description: str = ""

    def to_rule(self) -> Rule:
        return Rule(
            antecedents=tuple(Clause(variable, set_name) for variable, set_name in self.when),
            consequent=Clause(*self.then),
            description=self.description,
        )


class FuzzySystemConfig(BaseModel):
    """
    Complete fuzzy system: variables, designated output and rules.

    Validation includes cross-references, so a successfully validated
    config always builds into a usable registry and rule base.
    """

    output: str = "risk"
    variables: dict[str, VariableConfig] = Field(..., min_length=2)
    rules: list[RuleConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_system(self) -> "FuzzySystemConfig":
        """
        Raises:
            ConfigurationError: Identifying the offending variable, set or rule
        """
        self.build()
        logger.debug(
            f"Validated fuzzy system: {len(self.variables)} variables, {len(self.rules)} rules"
        )
        return self

    def build_registry(self) -> Registry:
        variables = []
        for name, variable_config in self.variables.items():
            try:
                variables.append(variable_config.to_variable(name))
            except ConfigurationError as e:
                e.context.setdefault("variable", name)
                raise
        return Registry(variables=tuple(variables), output_name=self.output)

    def build_rule_base(self) -> RuleBase:
        rules = []
        for index, rule_config in enumerate(self.rules):
            try:
                rules.append(rule_config.to_rule())
            except ConfigurationError as e:
                e.context.setdefault("rule_index", index)
                raise
        return RuleBase(rules=tuple(rules))

    def build(self) -> tuple[Registry, RuleBase]:
        """
        Build the immutable runtime objects.

        Returns:
            ``(registry, rule_base)`` with every rule reference resolved
        """
        registry = self.build_registry()
        rule_base = self.build_rule_base()
        rule_base.validate_against(registry)
        return registry, rule_base


class FuzzyConfigLoader:
    """
    Loads and validates fuzzy system configuration from dicts or YAML files.
    """

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """
        Args:
            config_dir: Directory relative paths are resolved against.
                       If not provided, the current working directory is used.
        """
        self.config_dir = Path(config_dir) if config_dir else Path.cwd()
        logger.debug(
            f"Initialized FuzzyConfigLoader with config directory: {self.config_dir}"
        )

    @staticmethod
    def load_from_dict(config_dict: dict) -> FuzzySystemConfig:
        """
        Load and validate a fuzzy system from a dictionary.

        Raises:
            ConfigurationError: If a set, variable or rule is malformed
            InvalidConfigurationError: If the document does not match the schema
        """
        if not isinstance(config_dict, dict):
            raise InvalidConfigurationError(
                message="Fuzzy system configuration must be a mapping",
                error_code="CONFIG-InvalidFuzzySystem",
                details={"type": type(config_dict).__name__},
            )

        try:
            logger.debug("Loading fuzzy system configuration from dictionary")
            return FuzzySystemConfig.model_validate(config_dict)
        except ConfigurationError as e:
            logger.error(f"Invalid fuzzy system configuration: {e}")
            raise
        except ValidationError as e:
            logger.error(f"Fuzzy system configuration failed schema validation: {e}")
            raise InvalidConfigurationError(
                message="Fuzzy system configuration failed schema validation",
                error_code="CONFIG-SchemaValidationFailed",
                details={"validation_errors": e.errors(include_url=False)},
            ) from e

    @log_performance()
    def load_from_yaml(self, file_path: Union[str, Path]) -> FuzzySystemConfig:
        """
        Load and validate a fuzzy system from a YAML file.

        Args:
            file_path: Path to the YAML file. Relative paths are resolved
                       against the config directory.

        Raises:
            ConfigurationFileError: If the file cannot be found or read
            InvalidConfigurationError: If the YAML or the schema is invalid
            ConfigurationError: If a set, variable or rule is malformed
        """
        path = Path(file_path)
        if not path.is_absolute():
            path = self.config_dir / path

        logger.info(f"Loading fuzzy system configuration from file: {path}")

        if not path.exists():
            logger.error(f"Fuzzy system configuration file not found: {path}")
            raise ConfigurationFileError(
                message=f"Fuzzy system configuration file not found: {path}",
                error_code="CONFIG-FileNotFound",
                details={"path": str(path)},
            )

        try:
            with open(path, encoding="utf-8") as file:
                config_dict = yaml.safe_load(file)
        except yaml.YAMLError as e:
            logger.error(f"Invalid YAML format in fuzzy system configuration file: {e}")
            raise InvalidConfigurationError(
                message="Invalid YAML format in fuzzy system configuration file",
                error_code="CONFIG-InvalidYaml",
                context={"file": str(path)},
                details={"yaml_error": str(e)},
            ) from e
        except OSError as e:
            logger.error(f"Error reading fuzzy system configuration file: {e}")
            raise ConfigurationFileError(
                message="Error reading fuzzy system configuration file",
                error_code="CONFIG-FileReadError",
                context={"file": str(path)},
                details={"error": str(e)},
            ) from e

        if config_dict is None:
            logger.warning(f"Empty fuzzy system configuration file: {path}")
            config_dict = {}

        try:
            config = self.load_from_dict(config_dict)
        except ConfigurationError as e:
            e.context.setdefault("file", str(path))
            raise

        logger.info(
            f"Successfully loaded fuzzy system from {path} "
            f"({len(config.variables)} variables, {len(config.rules)} rules)"
        )
        return config

    def load_default(self) -> FuzzySystemConfig:
        """
        Load the configured fuzzy system: ``LOANRISK_CONFIG_PATH`` when set,
        otherwise the packaged loan risk configuration.
        """
        override = get_engine_settings().config_path
        path = override if override else default_config_path()
        logger.info(f"Loading default fuzzy system configuration from: {path}")
        return self.load_from_yaml(path)
