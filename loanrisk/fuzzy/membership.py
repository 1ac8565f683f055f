"""
Trapezoidal membership function used to fuzzify crisp values.

A trapezoid is defined by four breakpoints [a, b, c, d]:
- a: start point (membership degree = 0)
- b: start of plateau (membership degree = 1)
- c: end of plateau (membership degree = 1)
- d: end point (membership degree = 0)

The membership degree μ(x) is evaluated in this exact order:
1. μ(x) = 0,                 if x <= a or x >= d
2. μ(x) = 1,                 if b <= x <= c
3. μ(x) = (x - a) / (b - a), if a < x < b
4. μ(x) = (d - x) / (d - c), otherwise (c < x < d)

Because the outer check comes first, x == a and x == d always give 0,
even for shoulders where a == b or c == d. Left as is: scores produced by
existing configurations depend on it.
"""

import math
from typing import TYPE_CHECKING, Union

import numpy as np

from loanrisk import get_logger
from loanrisk.errors import ConfigurationError

if TYPE_CHECKING:
    from loanrisk.fuzzy.model import FuzzySet

logger = get_logger(__name__)


class TrapezoidalMF:
    """
    Trapezoidal membership function.

    Degenerate shapes are valid: b == c gives a triangle, a == b or c == d
    gives a shoulder.
    """

    def __init__(self, parameters: list[float]):
        """
        Initialize a trapezoidal membership function with parameters [a, b, c, d].

        Raises:
            ConfigurationError: If parameters are invalid
        """
        if len(parameters) != 4:
            logger.error(
                f"Invalid trapezoidal MF parameters: expected 4, got {len(parameters)}"
            )
            raise ConfigurationError(
                message="Trapezoidal membership function requires exactly 4 parameters [a, b, c, d]",
                error_code="MF-InvalidParameterCount",
                details={"expected": 4, "actual": len(parameters)},
            )

        a, b, c, d = (float(p) for p in parameters)

        if not all(math.isfinite(p) for p in (a, b, c, d)):
            logger.error(f"Non-finite trapezoidal MF parameters: {parameters}")
            raise ConfigurationError(
                message="Trapezoidal membership function parameters must be finite numbers",
                error_code="MF-NonFiniteParameter",
                details={"parameters": {"a": a, "b": b, "c": c, "d": d}},
            )

        if not (a <= b <= c <= d):
            logger.error(
                f"Invalid trapezoidal MF parameter order: a={a}, b={b}, c={c}, d={d}"
            )
            raise ConfigurationError(
                message="Trapezoidal membership function parameters must satisfy: a ≤ b ≤ c ≤ d",
                error_code="MF-InvalidParameterOrder",
                details={"parameters": {"a": a, "b": b, "c": c, "d": d}},
            )

        self.a, self.b, self.c, self.d = a, b, c, d

    @property
    def parameters(self) -> tuple[float, float, float, float]:
        return (self.a, self.b, self.c, self.d)

    def evaluate(self, x: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """
        Evaluate the membership function for a scalar or a numpy array.

        Args:
            x: Crisp value(s) to evaluate

        Returns:
            Membership degree(s) in the range [0, 1] (NaN stays NaN)
        """
        if isinstance(x, np.ndarray):
            return self._evaluate_array(x)
        if isinstance(x, (int, float, np.number)):
            return self._evaluate_scalar(float(x))

        logger.error(f"Unsupported input type for trapezoidal MF: {type(x)}")
        raise TypeError(
            f"Unsupported input type: {type(x)}. Expected float or np.ndarray."
        )

    def __call__(self, x: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        return self.evaluate(x)

    def _evaluate_scalar(self, x: float) -> float:
        if math.isnan(x):
            return math.nan

        if x <= self.a or x >= self.d:
            return 0.0
        elif self.b <= x <= self.c:
            return 1.0
        elif self.a < x < self.b:
            return (x - self.a) / (self.b - self.a)
        else:
            return (self.d - x) / (self.d - self.c)

    def _evaluate_array(self, x: np.ndarray) -> np.ndarray:
        x = np.asarray(x, dtype=float)

        # Ramps are only computed where they can be selected, so a == b
        # or c == d never divides by zero.
        rising = np.zeros_like(x)
        rising_mask = (x > self.a) & (x < self.b)
        rising[rising_mask] = (x[rising_mask] - self.a) / (self.b - self.a)

        falling = np.zeros_like(x)
        falling_mask = (x > self.c) & (x < self.d)
        falling[falling_mask] = (self.d - x[falling_mask]) / (self.d - self.c)

        result = np.select(
            [
                (x <= self.a) | (x >= self.d),
                (x >= self.b) & (x <= self.c),
                rising_mask,
            ],
            [0.0, 1.0, rising],
            default=falling,
        )

        nan_mask = np.isnan(x)
        if nan_mask.any():
            result[nan_mask] = np.nan

        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TrapezoidalMF):
            return NotImplemented
        return self.parameters == other.parameters

    def __hash__(self) -> int:
        return hash(self.parameters)

    def __repr__(self) -> str:
        return f"TrapezoidalMF(a={self.a}, b={self.b}, c={self.c}, d={self.d})"


def membership(x: float, fuzzy_set: Union["TrapezoidalMF", "FuzzySet"]) -> float:
    """
    Membership degree of crisp value ``x`` in a trapezoidal fuzzy set.

    ``fuzzy_set`` is a ``TrapezoidalMF`` or any object exposing one as
    ``.mf`` (such as :class:`loanrisk.fuzzy.model.FuzzySet`).
    """
    mf = fuzzy_set if isinstance(fuzzy_set, TrapezoidalMF) else fuzzy_set.mf
    return mf.evaluate(x)
