import warnings
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import numpy as np
import pandas as pd
from lightgbm import LGBMClassifier
from sklearn.discriminant_analysis import (
    LinearDiscriminantAnalysis,
    QuadraticDiscriminantAnalysis,
)
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import Pipeline

from .exceptions import ModelFitError
from .preprocessor import Preprocessor
from .utils.logger import get_logger

MODEL_NAMES = ("logistic_regression", "lda", "qda", "gradient_boosting")

DEFAULT_PARAMS: dict[str, dict[str, Any]] = {
    "logistic_regression": {"max_iter": 1000},
    "lda": {},
    "qda": {},
    "gradient_boosting": {"max_depth": 3, "learning_rate": 0.1, "n_estimators": 200},
}


@dataclass
class FittedModel:
    name: str
    estimator: Pipeline
    seed: int


class ModelBank:
    """
    Uniform fit/predict_proba over logistic regression, LDA, QDA and
    LightGBM gradient-boosted trees. Every estimator is wrapped in a
    Pipeline with the feature preprocessor so scaling is learned on the
    training set only.
    """

    def __init__(
        self,
        params: Optional[Mapping[str, Mapping[str, Any]]] = None,
        random_state: int = 42,
        scale_features: bool = True,
    ):
        self.params = {name: dict(p) for name, p in DEFAULT_PARAMS.items()}
        for name, p in (params or {}).items():
            if name not in MODEL_NAMES:
                raise ValueError(f"Unknown model: {name}")
            self.params[name].update(p or {})
        self.random_state = random_state
        self.scale_features = scale_features
        self.logger = get_logger(self.__class__.__name__)

    def _make_estimator(self, name: str, seed: int):
        params = dict(self.params[name])

        if name == "logistic_regression":
            params.setdefault("random_state", seed)
            return LogisticRegression(**params)
        if name == "lda":
            return LinearDiscriminantAnalysis(**params)
        if name == "qda":
            return QuadraticDiscriminantAnalysis(**params)
        if name == "gradient_boosting":
            params.setdefault("objective", "binary")
            params.setdefault("random_state", seed)
            params.setdefault("verbosity", -1)
            return LGBMClassifier(**params)

        raise ValueError(f"Unknown model: {name}")

    def build(self, name: str, X: pd.DataFrame, seed: Optional[int] = None) -> Pipeline:
        """Build (but do not fit) the preprocessing + estimator pipeline."""
        seed = self.random_state if seed is None else seed
        transformer = Preprocessor(use_scaler=self.scale_features).build(X)
        return Pipeline(
            steps=[("prep", transformer), ("model", self._make_estimator(name, seed))]
        )

    @staticmethod
    def _check_covariance(name: str, X: pd.DataFrame, y: np.ndarray) -> None:
        """Reject rank-deficient pooled (LDA) or per-class (QDA) covariance."""
        values = X.fillna(X.median()).to_numpy(dtype=float)
        n_features = values.shape[1]

        centered = {
            cls: values[y == cls] - values[y == cls].mean(axis=0) for cls in (0, 1)
        }
        if name == "lda":
            groups = {"pooled": np.vstack([centered[0], centered[1]])}
        else:
            groups = {f"class {cls}": c for cls, c in centered.items()}

        for label, matrix in groups.items():
            rank = np.linalg.matrix_rank(matrix) if len(matrix) else 0
            if rank < n_features:
                raise ModelFitError(
                    f"{name}: singular {label} covariance matrix "
                    f"(rank {rank} < {n_features} features)"
                )

    def fit(
        self,
        name: str,
        X: pd.DataFrame,
        y: np.ndarray,
        seed: Optional[int] = None,
    ) -> FittedModel:
        if name not in MODEL_NAMES:
            raise ValueError(f"Unknown model: {name}")

        y = np.asarray(y).astype(int)
        if np.unique(y).size < 2:
            raise ModelFitError(f"{name}: training set has fewer than two classes")

        if name in ("lda", "qda"):
            self._check_covariance(name, X, y)

        seed = self.random_state if seed is None else seed
        pipeline = self.build(name, X, seed)

        with warnings.catch_warnings():
            warnings.filterwarnings("ignore", category=UserWarning, module="lightgbm")
            try:
                pipeline.fit(X, y)
            except np.linalg.LinAlgError as exc:
                raise ModelFitError(f"{name}: {exc}") from exc

        self.logger.info(f"Fitted {name} on {len(y):,} rows (seed={seed})")
        return FittedModel(name=name, estimator=pipeline, seed=seed)

    @staticmethod
    def predict_proba(fitted: FittedModel, X: pd.DataFrame) -> np.ndarray:
        """Probability of the fraudulent class for each row of X."""
        return fitted.estimator.predict_proba(X)[:, 1]
