from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import numpy as np
from sklearn.metrics import (
    average_precision_score,
    confusion_matrix,
    roc_auc_score,
    roc_curve,
)

from .utils.logger import get_logger


def _has_both_classes(y_true: np.ndarray) -> bool:
    return np.unique(y_true).size == 2


def auc_score(y_true, scores) -> Optional[float]:
    """ROC-AUC, or None when only one class is present."""
    y_true = np.asarray(y_true).astype(int)
    if not _has_both_classes(y_true):
        return None
    return float(roc_auc_score(y_true, np.asarray(scores).astype(float)))


@dataclass(frozen=True, eq=False)
class EvaluationResult:
    """Confusion matrix at a fixed threshold plus threshold-free ranking scores."""
    model: str
    strategy: str
    confusion_matrix: np.ndarray
    auc: Optional[float]
    pr_auc: Optional[float] = None
    threshold: float = 0.5
    fpr: np.ndarray = field(default_factory=lambda: np.array([]), repr=False)
    tpr: np.ndarray = field(default_factory=lambda: np.array([]), repr=False)

    @property
    def true_negatives(self) -> int:
        return int(self.confusion_matrix[0, 0])

    @property
    def false_positives(self) -> int:
        return int(self.confusion_matrix[0, 1])

    @property
    def false_negatives(self) -> int:
        return int(self.confusion_matrix[1, 0])

    @property
    def true_positives(self) -> int:
        return int(self.confusion_matrix[1, 1])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "strategy": self.strategy,
            "ROC_AUC": self.auc,
            "PR_AUC": self.pr_auc,
            "threshold": self.threshold,
            "confusion_matrix": self.confusion_matrix.tolist(),
        }


class Evaluator:
    """Evaluate positive-class scores against true 0/1 labels."""

    def __init__(self, threshold: float = 0.5, verbose: bool = True):
        self.threshold = threshold
        self.verbose = verbose
        self.logger = get_logger(self.__class__.__name__)

    def evaluate(
        self,
        y_true,
        scores,
        model: str = "",
        strategy: str = "",
    ) -> EvaluationResult:
        y_true = np.asarray(y_true).astype(int)
        scores = np.asarray(scores).astype(float)

        y_pred = (scores > self.threshold).astype(int)
        cm = confusion_matrix(y_true, y_pred, labels=[0, 1])

        if _has_both_classes(y_true):
            auc = float(roc_auc_score(y_true, scores))
            pr_auc = float(average_precision_score(y_true, scores))
            fpr, tpr, _ = roc_curve(y_true, scores)
        else:
            auc = pr_auc = None
            fpr = tpr = np.array([])
            self.logger.warning(
                f"{strategy}/{model}: evaluation labels contain a single class, AUC undefined"
            )

        if self.verbose and auc is not None:
            self.logger.info(
                f"{strategy}/{model}: ROC-AUC={auc:.4f} PR-AUC={pr_auc:.4f} "
                f"FN={int(cm[1, 0])} FP={int(cm[0, 1])}"
            )

        return EvaluationResult(
            model=model,
            strategy=strategy,
            confusion_matrix=cm,
            auc=auc,
            pr_auc=pr_auc,
            threshold=self.threshold,
            fpr=fpr,
            tpr=tpr,
        )
