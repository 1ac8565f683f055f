"""
Immutable runtime description of a fuzzy system.

A :class:`Registry` holds the variables (one of them the output) and their
named trapezoidal sets; a :class:`RuleBase` holds the ordered rules. Both
are validated when they are constructed so that evaluation never has to
deal with malformed configuration.
"""

import math
from dataclasses import dataclass, field
from typing import Iterator, Optional

import numpy as np

from loanrisk import get_logger
from loanrisk.errors import ConfigurationError
from loanrisk.fuzzy.membership import TrapezoidalMF

logger = get_logger(__name__)


@dataclass(frozen=True)
class FuzzySet:
    """A named trapezoidal fuzzy set."""

    name: str
    mf: TrapezoidalMF

    @classmethod
    def from_parameters(cls, name: str, parameters: list[float]) -> "FuzzySet":
        try:
            return cls(name=name, mf=TrapezoidalMF(parameters))
        except ConfigurationError as e:
            e.context.setdefault("fuzzy_set", name)
            raise

    @property
    def parameters(self) -> tuple[float, float, float, float]:
        return self.mf.parameters

    def degree(self, x: float) -> float:
        return self.mf.evaluate(x)


@dataclass(frozen=True)
class Variable:
    """
    A linguistic variable: a numeric domain plus its named fuzzy sets.

    ``label``, ``unit``, ``step`` and ``default`` are descriptive metadata
    for consumers (UI sliders, CLI defaults); the engine ignores them.
    Set breakpoints may lie outside ``[min, max]``.
    """

    name: str
    min: float
    max: float
    sets: tuple[FuzzySet, ...]
    label: Optional[str] = None
    unit: Optional[str] = None
    step: Optional[float] = None
    default: Optional[float] = None
    _index: dict[str, FuzzySet] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "sets", tuple(self.sets))

        if not (math.isfinite(self.min) and math.isfinite(self.max)):
            raise ConfigurationError(
                message=f"Domain of variable '{self.name}' must be finite",
                error_code="REGISTRY-NonFiniteDomain",
                context={"variable": self.name},
                details={"min": self.min, "max": self.max},
            )
        if self.min >= self.max:
            raise ConfigurationError(
                message=f"Domain of variable '{self.name}' must satisfy min < max",
                error_code="REGISTRY-InvalidDomain",
                context={"variable": self.name},
                details={"min": self.min, "max": self.max},
            )
        if not self.sets:
            raise ConfigurationError(
                message=f"Variable '{self.name}' must define at least one fuzzy set",
                error_code="REGISTRY-EmptyVariable",
                context={"variable": self.name},
            )

        for fuzzy_set in self.sets:
            if fuzzy_set.name in self._index:
                raise ConfigurationError(
                    message=f"Duplicate fuzzy set '{fuzzy_set.name}' in variable '{self.name}'",
                    error_code="REGISTRY-DuplicateSet",
                    context={"variable": self.name, "fuzzy_set": fuzzy_set.name},
                )
            self._index[fuzzy_set.name] = fuzzy_set

    @property
    def set_names(self) -> list[str]:
        return [fuzzy_set.name for fuzzy_set in self.sets]

    def has_set(self, name: str) -> bool:
        return name in self._index

    def get_set(self, name: str) -> FuzzySet:
        try:
            return self._index[name]
        except KeyError:
            raise KeyError(
                f"Variable '{self.name}' has no fuzzy set '{name}'"
            ) from None

    def fuzzify(self, x: float) -> dict[str, float]:
        """Membership degree of ``x`` in every set, in declaration order."""
        return {fuzzy_set.name: fuzzy_set.degree(x) for fuzzy_set in self.sets}

    def sample_points(self) -> np.ndarray:
        """Unit-step samples ``min, min + 1, ...`` up to and including ``max``."""
        count = int(math.floor(self.max - self.min)) + 1
        return self.min + np.arange(count, dtype=float)


@dataclass(frozen=True)
class Registry:
    """All variables of a fuzzy system, with one designated output variable."""

    variables: tuple[Variable, ...]
    output_name: str = "risk"
    _index: dict[str, Variable] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "variables", tuple(self.variables))

        for variable in self.variables:
            if variable.name in self._index:
                raise ConfigurationError(
                    message=f"Duplicate variable '{variable.name}'",
                    error_code="REGISTRY-DuplicateVariable",
                    context={"variable": variable.name},
                )
            self._index[variable.name] = variable

        if self.output_name not in self._index:
            raise ConfigurationError(
                message=f"Output variable '{self.output_name}' is not declared",
                error_code="REGISTRY-MissingOutput",
                context={"variable": self.output_name},
                details={"declared_variables": list(self._index)},
            )

        if len(self.variables) < 2:
            raise ConfigurationError(
                message="At least one input variable must be declared",
                error_code="REGISTRY-NoInputs",
                details={"declared_variables": list(self._index)},
            )

        logger.debug(
            f"Registry built with inputs {self.input_names} and output '{self.output_name}'"
        )

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def get(self, name: str) -> Variable:
        try:
            return self._index[name]
        except KeyError:
            raise KeyError(f"Unknown variable '{name}'") from None

    @property
    def output_variable(self) -> Variable:
        return self._index[self.output_name]

    @property
    def input_variables(self) -> tuple[Variable, ...]:
        return tuple(v for v in self.variables if v.name != self.output_name)

    @property
    def input_names(self) -> list[str]:
        return [v.name for v in self.input_variables]


@dataclass(frozen=True)
class Clause:
    """A ``variable is set_name`` statement."""

    variable: str
    set_name: str

    def __str__(self) -> str:
        return f"{self.variable} is {self.set_name}"


@dataclass(frozen=True)
class Rule:
    """
    IF <antecedents, joined by AND> THEN <consequent>.

    Antecedents are an ordered tuple; a variable appears at most once.
    """

    antecedents: tuple[Clause, ...]
    consequent: Clause
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "antecedents", tuple(self.antecedents))

        if not self.antecedents:
            raise ConfigurationError(
                message="A rule needs at least one antecedent clause",
                error_code="RULES-EmptyAntecedent",
                details={"consequent": str(self.consequent)},
            )

        seen: set[str] = set()
        for clause in self.antecedents:
            if clause.variable in seen:
                raise ConfigurationError(
                    message=f"Variable '{clause.variable}' appears twice in one rule",
                    error_code="RULES-RepeatedVariable",
                    context={"variable": clause.variable},
                    details={"antecedents": [str(c) for c in self.antecedents]},
                )
            seen.add(clause.variable)

    def __str__(self) -> str:
        conditions = " AND ".join(str(clause) for clause in self.antecedents)
        return f"IF {conditions} THEN {self.consequent}"


@dataclass(frozen=True)
class RuleBase:
    """Ordered rules. Order affects presentation only, never the score."""

    rules: tuple[Rule, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", tuple(self.rules))

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __getitem__(self, index: int) -> Rule:
        return self.rules[index]

    def validate_against(self, registry: Registry) -> None:
        """
        Check that every clause resolves to a declared variable and set.

        Raises:
            ConfigurationError: Identifying the first offending rule
        """
        for index, rule in enumerate(self.rules):
            for clause in rule.antecedents:
                if clause.variable == registry.output_name:
                    raise ConfigurationError(
                        message=f"Rule {index} uses output variable '{clause.variable}' as an antecedent",
                        error_code="RULES-OutputInAntecedent",
                        context={"rule_index": index, "variable": clause.variable},
                        details={"rule": str(rule)},
                    )
                self._check_clause(registry, index, rule, clause)

            if rule.consequent.variable != registry.output_name:
                raise ConfigurationError(
                    message=(
                        f"Rule {index} concludes on '{rule.consequent.variable}', "
                        f"expected output variable '{registry.output_name}'"
                    ),
                    error_code="RULES-InvalidConsequent",
                    context={"rule_index": index, "variable": rule.consequent.variable},
                    details={"rule": str(rule)},
                )
            self._check_clause(registry, index, rule, rule.consequent)

        if not self.rules:
            logger.warning("Rule base is empty; every evaluation will score 0")

    @staticmethod
    def _check_clause(registry: Registry, index: int, rule: Rule, clause: Clause) -> None:
        if clause.variable not in registry:
            raise ConfigurationError(
                message=f"Rule {index} references undeclared variable '{clause.variable}'",
                error_code="RULES-UnknownVariable",
                context={"rule_index": index, "variable": clause.variable},
                details={
                    "rule": str(rule),
                    "declared_variables": [v.name for v in registry.variables],
                },
            )
        variable = registry.get(clause.variable)
        if not variable.has_set(clause.set_name):
            raise ConfigurationError(
                message=(
                    f"Rule {index} references undeclared fuzzy set "
                    f"'{clause.set_name}' of variable '{clause.variable}'"
                ),
                error_code="RULES-UnknownSet",
                context={"rule_index": index, "variable": clause.variable},
                details={
                    "rule": str(rule),
                    "set_name": clause.set_name,
                    "available_sets": variable.set_names,
                },
            )
