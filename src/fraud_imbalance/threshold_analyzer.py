import numpy as np
import pandas as pd
from sklearn.metrics import f1_score, precision_score, recall_score

from .utils.logger import get_logger


class ThresholdAnalyzer:
    """Sweep probability thresholds and tabulate precision/recall/F1 trade-offs."""

    def __init__(self, step: float = 0.05, verbose: bool = True):
        if not 0.0 < step < 1.0:
            raise ValueError(f"step must be in (0, 1), got {step}")
        self.step = step
        self.verbose = verbose
        self.logger = get_logger(self.__class__.__name__)

    def sweep(self, y_true, scores) -> pd.DataFrame:
        y_true = np.asarray(y_true).astype(int)
        scores = np.asarray(scores).astype(float)

        n_steps = int(round(1.0 / self.step))
        thresholds = np.round(np.arange(1, n_steps) * self.step, 10)

        rows = []
        for thr in thresholds:
            y_pred = (scores > thr).astype(int)
            rows.append(
                {
                    "threshold": float(thr),
                    "precision": float(precision_score(y_true, y_pred, zero_division=0)),
                    "recall": float(recall_score(y_true, y_pred, zero_division=0)),
                    "f1": float(f1_score(y_true, y_pred, zero_division=0)),
                }
            )
        table = pd.DataFrame(rows)

        if self.verbose and not table.empty:
            best = table.loc[table["f1"].idxmax()]
            self.logger.info(f"Best F1 threshold: {best['threshold']:.3f} (F1={best['f1']:.3f})")

        return table


def best_threshold(sweep: pd.DataFrame) -> float:
    """Threshold with the highest F1; the lowest one wins ties."""
    return float(sweep.loc[sweep["f1"].idxmax(), "threshold"])
