"""
Fraud Imbalance — resampling x classifier comparison for fraud detection

This package loads a labeled transaction dataset, splits it with
stratification, derives alternative training sets (identity, up-sampling,
down-sampling, SMOTE), fits several off-the-shelf classifiers on each and
ranks every (strategy, model) pair by ROC-AUC.

Modules:
    config              — Load YAML configuration safely.
    data_loader         — Read, validate and label the transaction CSV.
    explorer            — Class balance and feature-structure summaries.
    partitioner         — Stratified train/evaluation split.
    balancer            — Resampling strategies and the resampler bank.
    preprocessor        — Impute and scale numeric features.
    model_bank          — Logistic regression, LDA, QDA, LightGBM.
    evaluator           — Confusion matrix and ROC-AUC per run.
    comparator          — Rank runs and pick the best pair.
    threshold_analyzer  — Precision/recall/F1 threshold sweep.
    hyper_tuner         — Tune gradient-boosted trees with Optuna.
    pipeline            — Orchestrates all components.
    reporting           — Render figures and the metrics JSON.
    utils.logger        — Unified timestamped console logger.
"""

from .config import Config
from .data_loader import DataLoader
from .partitioner import Partitioner
from .balancer import Balancer, ResamplerBank
from .preprocessor import Preprocessor
from .model_bank import ModelBank
from .evaluator import Evaluator, EvaluationResult
from .comparator import best_pair, rank
from .threshold_analyzer import ThresholdAnalyzer
from .hyper_tuner import HyperTuner
from .pipeline import PipelineRunner, compare

__all__ = [
    "Config",
    "DataLoader",
    "Partitioner",
    "Balancer",
    "ResamplerBank",
    "Preprocessor",
    "ModelBank",
    "Evaluator",
    "EvaluationResult",
    "best_pair",
    "rank",
    "ThresholdAnalyzer",
    "HyperTuner",
    "PipelineRunner",
    "compare",
]
