"""
Value objects produced by one evaluation of the fuzzy inference pipeline.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from loanrisk.fuzzy.labels import risk_label
from loanrisk.fuzzy.model import Rule


@dataclass(frozen=True)
class AntecedentDegree:
    """How strongly one antecedent clause of a rule held for the given input."""

    variable: str
    set_name: str
    value: float
    degree: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "variable": self.variable,
            "set_name": self.set_name,
            "value": self.value,
            "degree": self.degree,
        }


@dataclass(frozen=True)
class RuleActivation:
    """A rule that fired, with the breakdown of its antecedents."""

    index: int
    rule: Rule
    strength: float
    antecedents: tuple[AntecedentDegree, ...]

    @property
    def consequent_set(self) -> str:
        return self.rule.consequent.set_name

    @property
    def description(self) -> str:
        return self.rule.description

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "description": self.description,
            "strength": self.strength,
            "consequent": {
                "variable": self.rule.consequent.variable,
                "set_name": self.consequent_set,
            },
            "antecedents": [a.to_dict() for a in self.antecedents],
        }


@dataclass(frozen=True)
class EvaluationResult:
    """
    Everything the engine computed for one input vector.

    Attributes:
        fuzzified: input variable -> set name -> membership degree
            (read-only views)
        rule_strengths: firing strength of every rule, parallel to the rule base
        active_rules: rules with strength > 0, in rule base order
        domain: sampled points of the output variable's domain
        aggregated_curve: aggregated membership at each point of ``domain``
        score: centroid of the aggregated curve (0 when no rule fired)
    """

    fuzzified: Mapping[str, Mapping[str, float]] = field(hash=False)
    rule_strengths: tuple[float, ...]
    active_rules: tuple[RuleActivation, ...]
    domain: tuple[float, ...]
    aggregated_curve: tuple[float, ...]
    score: float

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "fuzzified",
            MappingProxyType(
                {
                    variable: MappingProxyType(dict(degrees))
                    for variable, degrees in self.fuzzified.items()
                }
            ),
        )

    @property
    def label(self) -> str:
        return risk_label(self.score)

    @property
    def has_activity(self) -> bool:
        """False when no rule fired and the score is the fallback value."""
        return bool(self.active_rules)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation."""
        return {
            "fuzzified": {
                variable: dict(degrees) for variable, degrees in self.fuzzified.items()
            },
            "rule_strengths": list(self.rule_strengths),
            "active_rules": [activation.to_dict() for activation in self.active_rules],
            "domain": list(self.domain),
            "aggregated_curve": list(self.aggregated_curve),
            "score": self.score,
            "label": self.label,
        }
