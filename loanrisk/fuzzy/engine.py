"""
Mamdani fuzzy inference pipeline.

The pipeline has exactly one shape::

    fuzzify -> evaluate_rules -> aggregate -> defuzzify_centroid

Every step is a pure function of its arguments. :func:`evaluate` composes
them; :class:`FuzzyInferenceEngine` binds a validated registry and rule
base so callers only pass the input record.

Example:
    ```python
    config = FuzzyConfigLoader().load_default()
    engine = FuzzyInferenceEngine.from_config(config)

    result = engine.evaluate(
        {"age": 30, "income": 4500, "co_income": 0,
         "loan_amount": 35000, "installment": 2000, "dependents": 1}
    )
    result.score          # centroid in [0, 100]
    result.active_rules   # rules that fired, with antecedent breakdown
    ```
"""

import math
import numbers
from collections.abc import Mapping, Sequence

import numpy as np

from loanrisk import get_logger
from loanrisk.errors import ProcessingError
from loanrisk.fuzzy.config import FuzzySystemConfig
from loanrisk.fuzzy.model import Registry, RuleBase, Variable
from loanrisk.fuzzy.result import AntecedentDegree, EvaluationResult, RuleActivation

logger = get_logger(__name__)

# Score reported when no rule fires anywhere on the output domain.
NO_ACTIVATION_SCORE = 0.0


def _check_inputs(inputs: Mapping[str, float], registry: Registry) -> None:
    """
    Enforce the input contract: exactly the declared input variables, no NaN.

    Out-of-domain and infinite values are accepted; they simply fuzzify to 0
    (or to a plateau) through the membership formula.
    """
    expected = registry.input_names
    missing = [name for name in expected if name not in inputs]
    if missing:
        raise ProcessingError(
            message=f"Missing input values for: {', '.join(missing)}",
            error_code="ENGINE-MissingInput",
            details={"missing": missing, "expected": expected},
        )

    unknown = [name for name in inputs if name not in expected]
    if unknown:
        raise ProcessingError(
            message=f"Unknown input variables: {', '.join(map(str, unknown))}",
            error_code="ENGINE-UnknownInput",
            details={"unknown": unknown, "expected": expected},
        )

    for name in expected:
        value = inputs[name]
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise ProcessingError(
                message=f"Input '{name}' must be a number, got {type(value).__name__}",
                error_code="ENGINE-InvalidInputType",
                details={"variable": name, "value": repr(value)},
            )
        if math.isnan(value):
            raise ProcessingError(
                message=f"Input '{name}' is NaN",
                error_code="ENGINE-NonFiniteInput",
                details={"variable": name},
            )


def fuzzify(
    inputs: Mapping[str, float], registry: Registry
) -> dict[str, dict[str, float]]:
    """
    Membership degree of every input value in every set of its variable.

    Raises:
        ProcessingError: If the input record breaks the input contract
    """
    _check_inputs(inputs, registry)
    return {
        variable.name: variable.fuzzify(float(inputs[variable.name]))
        for variable in registry.input_variables
    }


def evaluate_rules(
    inputs: Mapping[str, float],
    fuzzified: Mapping[str, Mapping[str, float]],
    rule_base: RuleBase,
) -> tuple[list[float], list[RuleActivation]]:
    """
    Firing strength of every rule: the minimum of its antecedent degrees.

    Returns:
        ``(strengths, active)`` where ``strengths`` is parallel to the rule
        base and ``active`` holds the rules with strength > 0
    """
    strengths: list[float] = []
    active: list[RuleActivation] = []

    for index, rule in enumerate(rule_base):
        antecedents = tuple(
            AntecedentDegree(
                variable=clause.variable,
                set_name=clause.set_name,
                value=float(inputs[clause.variable]),
                degree=fuzzified[clause.variable][clause.set_name],
            )
            for clause in rule.antecedents
        )
        strength = min(antecedent.degree for antecedent in antecedents)
        strengths.append(strength)

        if strength > 0.0:
            active.append(
                RuleActivation(
                    index=index, rule=rule, strength=strength, antecedents=antecedents
                )
            )

    return strengths, active


def aggregate(
    active_rules: Sequence[RuleActivation], output_variable: Variable
) -> tuple[np.ndarray, np.ndarray]:
    """
    Clip each fired consequent at its rule strength and take the pointwise max.

    The output domain is sampled at unit steps from ``min`` to ``max``
    inclusive. With no active rule the curve is all zeros.

    Returns:
        ``(points, curve)`` arrays of equal length
    """
    points = output_variable.sample_points()
    curve = np.zeros_like(points)

    for activation in active_rules:
        shape = output_variable.get_set(activation.consequent_set).mf.evaluate(points)
        curve = np.maximum(curve, np.minimum(shape, activation.strength))

    return points, curve


def defuzzify_centroid(points: np.ndarray, curve: np.ndarray) -> float:
    """
    Center of gravity ``Σ x·μ(x) / Σ μ(x)`` over the sampled curve.

    Both sums accumulate strictly left to right over the samples, so the
    score is reproducible bit for bit. Returns :data:`NO_ACTIVATION_SCORE`
    when the curve is zero everywhere.
    """
    numerator = 0.0
    denominator = 0.0
    for x, mu in zip(points.tolist(), curve.tolist()):
        numerator += x * mu
        denominator += mu

    if denominator == 0.0:
        return NO_ACTIVATION_SCORE

    score = numerator / denominator
    # Rounding can overshoot the domain by an ulp when all mass sits on an edge
    return min(max(score, float(points[0])), float(points[-1]))


def evaluate(
    inputs: Mapping[str, float], registry: Registry, rule_base: RuleBase
) -> EvaluationResult:
    """
    Run the full pipeline for one input record.

    ``registry`` and ``rule_base`` are expected to be validated already
    (see :meth:`RuleBase.validate_against`); :class:`FuzzyInferenceEngine`
    does this once at construction.

    Raises:
        ProcessingError: If the input record breaks the input contract
    """
    fuzzified = fuzzify(inputs, registry)
    strengths, active = evaluate_rules(inputs, fuzzified, rule_base)
    points, curve = aggregate(active, registry.output_variable)
    score = defuzzify_centroid(points, curve)

    logger.debug(
        f"Evaluated {len(rule_base)} rules: {len(active)} active, score={score:.4f}"
    )

    return EvaluationResult(
        fuzzified=fuzzified,
        rule_strengths=tuple(strengths),
        active_rules=tuple(active),
        domain=tuple(points.tolist()),
        aggregated_curve=tuple(curve.tolist()),
        score=score,
    )


class FuzzyInferenceEngine:
    """
    A validated registry and rule base bound together.

    The engine holds no mutable state; :meth:`evaluate` may be called from
    any number of threads at once.
    """

    def __init__(self, registry: Registry, rule_base: RuleBase):
        """
        Raises:
            ConfigurationError: If a rule references an undeclared variable or set
        """
        rule_base.validate_against(registry)
        self._registry = registry
        self._rule_base = rule_base
        logger.info(
            f"FuzzyInferenceEngine initialized with {len(registry.input_variables)} "
            f"input variables and {len(rule_base)} rules"
        )

    @classmethod
    def from_config(cls, config: FuzzySystemConfig) -> "FuzzyInferenceEngine":
        registry, rule_base = config.build()
        return cls(registry, rule_base)

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def rule_base(self) -> RuleBase:
        return self._rule_base

    @property
    def input_variables(self) -> tuple[Variable, ...]:
        return self._registry.input_variables

    @property
    def output_variable(self) -> Variable:
        return self._registry.output_variable

    def default_inputs(self) -> dict[str, float]:
        """Declared default of every input variable (domain minimum when unset)."""
        return {
            variable.name: variable.default if variable.default is not None else variable.min
            for variable in self.input_variables
        }

    def evaluate(self, inputs: Mapping[str, float]) -> EvaluationResult:
        return evaluate(inputs, self._registry, self._rule_base)
