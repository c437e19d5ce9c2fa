import warnings
from dataclasses import dataclass, field
from textwrap import indent
from typing import Optional

import pandas as pd

from .balancer import ResamplerBank
from .comparator import RunKey, best_pair, rank
from .config import Config
from .data_loader import DataLoader, encode_target, split_features
from .evaluator import EvaluationResult, Evaluator
from .exceptions import DegenerateResampleError, ModelFitError
from .explorer import class_balance, feature_summary, target_correlations
from .hyper_tuner import HyperTuner
from .model_bank import MODEL_NAMES, ModelBank
from .partitioner import Partitioner
from .threshold_analyzer import ThresholdAnalyzer
from .utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class RunFailure:
    strategy: str
    model: Optional[str]
    reason: str


@dataclass
class ComparisonOutcome:
    results: dict[RunKey, EvaluationResult] = field(default_factory=dict)
    failures: list[RunFailure] = field(default_factory=list)
    strategy_sizes: dict[str, dict[str, int]] = field(default_factory=dict)

    @property
    def best(self) -> Optional[RunKey]:
        return best_pair(self.results)

    @property
    def ranking(self) -> pd.DataFrame:
        return rank(self.results)


@dataclass
class Report:
    """Structured values handed to the rendering stage."""
    class_balance: pd.DataFrame
    feature_summary: pd.DataFrame
    target_correlations: pd.Series
    outcome: ComparisonOutcome
    threshold_sweep: Optional[pd.DataFrame] = None


def compare(
    train_df: pd.DataFrame,
    eval_df: pd.DataFrame,
    target_col: str,
    resampler_bank: ResamplerBank,
    model_bank: ModelBank,
    evaluator: Evaluator,
    models: Optional[list[str]] = None,
) -> ComparisonOutcome:
    """Fit every model on every resampled training set and evaluate on eval_df.

    A strategy that cannot be applied, or a model that cannot be fit, is
    recorded as a failure and left out of the results; other runs proceed.
    """
    models = list(MODEL_NAMES if models is None else models)
    if not models:
        raise ValueError("At least one model is required")
    outcome = ComparisonOutcome()
    X_eval, y_eval = split_features(eval_df, target_col)

    for strategy in resampler_bank.names:
        try:
            train_s = resampler_bank.resample(strategy, train_df, target_col)
        except DegenerateResampleError as exc:
            logger.error(f"Strategy '{strategy}' skipped: {exc}")
            outcome.failures.extend(RunFailure(strategy, m, str(exc)) for m in models)
            continue

        X_train, y_train = split_features(train_s, target_col)
        outcome.strategy_sizes[strategy] = {
            "positive": int(y_train.sum()),
            "negative": int((y_train == 0).sum()),
        }

        for name in models:
            try:
                fitted = model_bank.fit(name, X_train, y_train)
            except ModelFitError as exc:
                logger.error(f"Model '{name}' on '{strategy}' skipped: {exc}")
                outcome.failures.append(RunFailure(strategy, name, str(exc)))
                continue

            scores = model_bank.predict_proba(fitted, X_eval)
            outcome.results[(strategy, name)] = evaluator.evaluate(
                y_eval, scores, model=name, strategy=strategy
            )

    return outcome


class PipelineRunner:
    """End-to-end imbalance-aware fraud classifier comparison.

    Steps:
      1. Load transactions, drop the time column, label the target
      2. Summarise class balance and per-feature class separation
      3. Stratified train/evaluation split
      4. Optionally tune gradient-boosted trees with Optuna
      5. Fit every model on every resampled training set
      6. Evaluate (confusion matrix at a fixed threshold, ROC-AUC) and rank
      7. Optionally sweep thresholds for the best (strategy, model) pair"""

    def __init__(self, config_path: str):
        self.config = Config.from_yaml(config_path)
        self.logger = get_logger(self.__class__.__name__)
        warnings.filterwarnings(
            "ignore",
            message="X does not have valid feature names",
            category=UserWarning,
            module="sklearn",
        )

    def run(self) -> Report:
        cfg = self.config
        target_col = cfg.data.get("target_col", "Class")
        self.logger.info("Starting fraud imbalance comparison pipeline")

        df = DataLoader(
            cfg.data["path"],
            time_col=cfg.data.get("time_col", "Time"),
            target_col=target_col,
            negative_value=cfg.data.get("negative_value", 0),
            positive_value=cfg.data.get("positive_value", 1),
            sample_size=cfg.data.get("sample_size"),
            sample_seed=cfg.data.get("sample_seed", 42),
        ).load()

        balance = class_balance(df, target_col)
        self.logger.info(f"Class balance:\n{indent(balance.to_string(), ' ' * 4)}")
        features = feature_summary(df, target_col)
        correlations = target_correlations(df, target_col)

        train_df, eval_df = Partitioner(
            train_fraction=cfg.split.get("train_fraction", 0.8),
            random_state=cfg.split.get("random_state", 42),
        ).split(df, target_col)

        model_params = {k: dict(v or {}) for k, v in cfg.models.get("params", {}).items()}
        random_state = cfg.models.get("random_state", 42)
        scale_features = cfg.models.get("scale_features", True)

        if cfg.models.get("tune", False):
            tuner = HyperTuner(
                n_trials=cfg.models.get("n_trials", 20),
                n_splits=cfg.models.get("n_splits", 3),
                random_state=random_state,
                scale_features=scale_features,
            )
            X_train, y_train = split_features(train_df, target_col)
            best_params = tuner.tune(
                X_train, y_train, model_params.get("gradient_boosting", {})
            )
            model_params.setdefault("gradient_boosting", {}).update(best_params)
            self.logger.info("Gradient boosting parameters updated with tuned values")
        else:
            self.logger.info("Hyperparameter tuning disabled")

        resampling = cfg.resampling
        resampler_bank = ResamplerBank(
            strategies=resampling.get("strategies"),
            seeds=resampling.get("seeds"),
            smote_params=resampling.get("smote"),
        )
        model_bank = ModelBank(
            params=model_params,
            random_state=random_state,
            scale_features=scale_features,
        )
        evaluator = Evaluator(threshold=cfg.evaluation.get("threshold", 0.5))

        outcome = compare(
            train_df,
            eval_df,
            target_col,
            resampler_bank,
            model_bank,
            evaluator,
            models=cfg.models.get("enabled"),
        )

        ranking_str = indent(outcome.ranking.to_string(index=False), " " * 4)
        self.logger.info(f"Ranking:\n{ranking_str}")
        if outcome.failures:
            self.logger.info(f"{len(outcome.failures)} run(s) excluded from ranking")

        sweep = None
        best = outcome.best
        if best is None:
            self.logger.error("No run produced a defined ROC-AUC")
        else:
            self.logger.info(f"Best pair: strategy={best[0]}, model={best[1]}")
            if cfg.evaluation.get("analyze_thresholds", False):
                sweep = self._sweep_best(best, train_df, eval_df, target_col, resampler_bank, model_bank)

        self.logger.info("Pipeline finished")
        return Report(
            class_balance=balance,
            feature_summary=features,
            target_correlations=correlations,
            outcome=outcome,
            threshold_sweep=sweep,
        )

    def _sweep_best(
        self,
        best: RunKey,
        train_df: pd.DataFrame,
        eval_df: pd.DataFrame,
        target_col: str,
        resampler_bank: ResamplerBank,
        model_bank: ModelBank,
    ) -> pd.DataFrame:
        """Refit the best pair (same seeds, so same model) and sweep thresholds on its scores."""
        strategy, name = best
        X_train, y_train = split_features(
            resampler_bank.resample(strategy, train_df, target_col), target_col
        )
        fitted = model_bank.fit(name, X_train, y_train)
        scores = model_bank.predict_proba(fitted, eval_df.drop(columns=[target_col]))
        analyzer = ThresholdAnalyzer(step=self.config.evaluation.get("threshold_step", 0.05))
        return analyzer.sweep(encode_target(eval_df[target_col]), scores)
