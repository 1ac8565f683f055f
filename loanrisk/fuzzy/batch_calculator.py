"""
Batch risk scoring for tables of applicants.

Each row of a DataFrame is scored by an independent call to the engine;
nothing is cached between rows.
"""

import time

import numpy as np
import pandas as pd

from loanrisk import get_logger
from loanrisk.errors import ProcessingError
from loanrisk.fuzzy.engine import FuzzyInferenceEngine

logger = get_logger(__name__)

RESULT_COLUMNS = ["score", "label", "active_rules"]


class BatchRiskScorer:
    """
    Scores every row of a pandas DataFrame with a :class:`FuzzyInferenceEngine`.

    Example:
        ```python
        scorer = BatchRiskScorer(engine)
        applicants = pd.DataFrame(
            [{"age": 30, "income": 4500, "co_income": 0,
              "loan_amount": 35000, "installment": 2000, "dependents": 1}]
        )
        scored = scorer.score_frame(applicants)
        # columns: score, label, active_rules; same index as applicants
        ```

    Rows with a missing (NaN) input are not scored: their ``score`` is NaN,
    ``label`` is None and ``active_rules`` is 0.
    """

    def __init__(self, engine: FuzzyInferenceEngine):
        self._engine = engine
        self._input_names = engine.registry.input_names

    def score_frame(self, applicants: pd.DataFrame) -> pd.DataFrame:
        """
        Score each applicant row.

        Args:
            applicants: DataFrame with one column per input variable
                        (extra columns are ignored)

        Returns:
            DataFrame indexed like ``applicants`` with ``score``, ``label``
            and ``active_rules`` columns

        Raises:
            ProcessingError: If the frame lacks input columns
        """
        self._validate_frame(applicants)

        if applicants.empty:
            logger.warning("Empty applicant frame provided for batch scoring")
            return pd.DataFrame(columns=RESULT_COLUMNS, index=applicants.index)

        start_time = time.perf_counter()
        inputs = applicants[self._input_names]
        nan_mask = inputs.isna().any(axis=1)
        if nan_mask.any():
            logger.debug(f"Skipping {int(nan_mask.sum())} rows with missing inputs")

        scores: list[float] = []
        labels: list = []
        active_counts: list[int] = []
        for (_, row), skip in zip(inputs.iterrows(), nan_mask):
            if skip:
                scores.append(np.nan)
                labels.append(None)
                active_counts.append(0)
                continue

            result = self._engine.evaluate(row.to_dict())
            scores.append(result.score)
            labels.append(result.label)
            active_counts.append(len(result.active_rules))

        elapsed = time.perf_counter() - start_time
        logger.debug(f"Scored {len(applicants)} applicants in {elapsed:.3f}s")

        return pd.DataFrame(
            {"score": scores, "label": labels, "active_rules": active_counts},
            index=applicants.index,
        )

    def _validate_frame(self, applicants: pd.DataFrame) -> None:
        if not isinstance(applicants, pd.DataFrame):
            raise ProcessingError(
                message="Applicants must be a pandas DataFrame",
                error_code="BATCH-InvalidFrameType",
                details={"type": type(applicants).__name__},
            )

        missing = [name for name in self._input_names if name not in applicants.columns]
        if missing:
            logger.error(f"Applicant frame lacks input columns: {missing}")
            raise ProcessingError(
                message=f"Applicant frame lacks input columns: {', '.join(missing)}",
                error_code="BATCH-MissingColumns",
                details={"missing": missing, "columns": list(applicants.columns)},
            )
