"""
Fuzzy inference for LoanRisk.

This package turns crisp applicant attributes into a risk score with a
Mamdani pipeline: trapezoidal fuzzification, min-conjunction of rule
antecedents, clip-and-max aggregation and centroid defuzzification.
"""

from loanrisk.fuzzy.batch_calculator import BatchRiskScorer
from loanrisk.fuzzy.config import (
    FuzzyConfigLoader,
    FuzzySystemConfig,
    RuleConfig,
    TrapezoidalSetConfig,
    TriangularSetConfig,
    VariableConfig,
)
from loanrisk.fuzzy.engine import (
    NO_ACTIVATION_SCORE,
    FuzzyInferenceEngine,
    aggregate,
    defuzzify_centroid,
    evaluate,
    evaluate_rules,
    fuzzify,
)
from loanrisk.fuzzy.labels import RiskBand, risk_band, risk_label
from loanrisk.fuzzy.membership import TrapezoidalMF, membership
from loanrisk.fuzzy.model import (
    Clause,
    FuzzySet,
    Registry,
    Rule,
    RuleBase,
    Variable,
)
from loanrisk.fuzzy.result import AntecedentDegree, EvaluationResult, RuleActivation

__all__ = [
    "AntecedentDegree",
    "BatchRiskScorer",
    "Clause",
    "EvaluationResult",
    "FuzzyConfigLoader",
    "FuzzyInferenceEngine",
    "FuzzySet",
    "FuzzySystemConfig",
    "NO_ACTIVATION_SCORE",
    "Registry",
    "RiskBand",
    "Rule",
    "RuleActivation",
    "RuleBase",
    "RuleConfig",
    "TrapezoidalMF",
    "TrapezoidalSetConfig",
    "TriangularSetConfig",
    "Variable",
    "VariableConfig",
    "aggregate",
    "defuzzify_centroid",
    "evaluate",
    "evaluate_rules",
    "fuzzify",
    "membership",
    "risk_band",
    "risk_label",
]
