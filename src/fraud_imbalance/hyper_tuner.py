import logging
from typing import Any

import numpy as np
import optuna
import pandas as pd
from sklearn.model_selection import StratifiedKFold

from .evaluator import auc_score
from .model_bank import ModelBank
from .utils.logger import get_logger


class HyperTuner:
    """Optuna tuning of the gradient-boosted trees using stratified CV on the training set."""

    def __init__(
        self,
        n_trials: int = 20,
        n_splits: int = 3,
        random_state: int = 42,
        scale_features: bool = True,
    ):
        self.n_trials = n_trials
        self.n_splits = n_splits
        self.random_state = random_state
        self.scale_features = scale_features
        self.logger = get_logger(self.__class__.__name__)
        self.best_params_: dict[str, Any] | None = None
        self.best_value_: float | None = None

    def _suggest_params(self, trial: optuna.Trial) -> dict[str, Any]:
        """Define Optuna search space."""
        return {
            "n_estimators": trial.suggest_int("n_estimators", 100, 600, step=50),
            "learning_rate": trial.suggest_float("learning_rate", 0.01, 0.3, log=True),
            "max_depth": trial.suggest_int("max_depth", 2, 8),
            "num_leaves": trial.suggest_int("num_leaves", 4, 64),
            "min_child_samples": trial.suggest_int("min_child_samples", 5, 100),
        }

    def cross_validate(self, X: pd.DataFrame, y: np.ndarray, params: dict[str, Any]) -> float:
        """Mean ROC-AUC of the gradient-boosted trees over stratified folds."""
        bank = ModelBank(
            params={"gradient_boosting": params},
            random_state=self.random_state,
            scale_features=self.scale_features,
        )
        skf = StratifiedKFold(
            n_splits=self.n_splits, shuffle=True, random_state=self.random_state
        )
        fold_aucs: list[float] = []

        # reduce log noise during tuning; the logger is shared with the main run
        previous_level = bank.logger.level
        bank.logger.setLevel(logging.WARNING)
        try:
            for train_idx, val_idx in skf.split(X, y):
                fitted = bank.fit("gradient_boosting", X.iloc[train_idx], y[train_idx])
                val_auc = auc_score(y[val_idx], bank.predict_proba(fitted, X.iloc[val_idx]))
                if val_auc is not None:
                    fold_aucs.append(val_auc)
        finally:
            bank.logger.setLevel(previous_level)

        return float(np.mean(fold_aucs)) if fold_aucs else 0.0

    def tune(
        self,
        X: pd.DataFrame,
        y: np.ndarray,
        base_params: dict[str, Any],
    ) -> dict[str, Any]:
        """Run Optuna optimization and return the best tuned parameters (subset)."""
        self.logger.info(
            f"Starting Optuna tuning ({self.n_trials} trials, {self.n_splits}-fold CV)"
        )
        optuna.logging.set_verbosity(optuna.logging.WARNING)

        sampler = optuna.samplers.TPESampler(seed=self.random_state)
        study = optuna.create_study(direction="maximize", sampler=sampler)

        y = np.asarray(y).astype(int)

        def objective(trial: optuna.Trial) -> float:
            params = dict(base_params)
            params.update(self._suggest_params(trial))
            return self.cross_validate(X, y, params)

        study.optimize(objective, n_trials=self.n_trials)

        self.best_params_ = study.best_params
        self.best_value_ = float(study.best_value)

        self.logger.info(f"Best CV ROC-AUC: {self.best_value_:.4f}")
        self.logger.info(f"Best parameters: {self.best_params_}")

        return dict(self.best_params_)
