"""Ranking of (strategy, model) runs by ROC-AUC."""

from typing import Mapping, Optional, Tuple

import pandas as pd

from .evaluator import EvaluationResult

RunKey = Tuple[str, str]

RANKING_COLUMNS = ["strategy", "model", "auc", "pr_auc", "tp", "fp", "fn", "tn"]


def _sort_key(item: tuple[RunKey, EvaluationResult]) -> tuple:
    # defined AUC first, then higher AUC, then fewer false negatives
    _, result = item
    if result.auc is None:
        return (1, 0.0, result.false_negatives)
    return (0, -result.auc, result.false_negatives)


def best_pair(results: Mapping[RunKey, EvaluationResult]) -> Optional[RunKey]:
    """Return the (strategy, model) with maximum AUC, ties broken by fewer false negatives.

    Runs with an undefined AUC are never selected; returns None when no run
    has a defined AUC.
    """
    defined = [(key, r) for key, r in results.items() if r.auc is not None]
    if not defined:
        return None
    return min(defined, key=_sort_key)[0]


def rank(results: Mapping[RunKey, EvaluationResult]) -> pd.DataFrame:
    rows = [
        {
            "strategy": strategy,
            "model": model,
            "auc": r.auc,
            "pr_auc": r.pr_auc,
            "tp": r.true_positives,
            "fp": r.false_positives,
            "fn": r.false_negatives,
            "tn": r.true_negatives,
        }
        for (strategy, model), r in sorted(results.items(), key=_sort_key)
    ]
    return pd.DataFrame(rows, columns=RANKING_COLUMNS)
