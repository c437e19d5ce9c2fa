import json
import os
from typing import Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns

from .data_loader import LABELS
from .pipeline import Report
from .threshold_analyzer import best_threshold
from .utils.logger import get_logger

sns.set_theme(style="whitegrid", palette="muted")


class ReportRenderer:
    """Render a Report to PNG figures and a JSON metrics file."""

    def __init__(
        self,
        figures_dir: str = "artifacts/figures",
        metrics_path: str = "artifacts/metrics.json",
        top_features: int = 15,
        verbose: bool = True,
    ):
        self.figures_dir = figures_dir
        self.metrics_path = metrics_path
        self.top_features = top_features
        self.verbose = verbose
        self.logger = get_logger(self.__class__.__name__)

    def render(self, report: Report) -> list[str]:
        os.makedirs(self.figures_dir, exist_ok=True)
        paths = [
            self._plot_class_balance(report),
            self._plot_feature_separation(report),
            *self._plot_roc_curves(report),
            self._plot_confusion_matrices(report),
        ]
        if report.threshold_sweep is not None:
            paths.append(self._plot_threshold_sweep(report))
        paths.append(self.save_metrics(report))
        return [p for p in paths if p]

    def _save(self, filename: str) -> str:
        path = os.path.join(self.figures_dir, filename)
        plt.tight_layout()
        plt.savefig(path, dpi=200)
        plt.close()
        if self.verbose:
            self.logger.info(f"Saved figure: {path}")
        return path

    def _plot_class_balance(self, report: Report) -> str:
        table = report.class_balance
        plt.figure(figsize=(6, 4))
        ax = sns.barplot(x=list(table.index.astype(str)), y=table["count"].to_numpy(), color="steelblue")
        ax.set_yscale("log")
        for i, (count, ratio) in enumerate(zip(table["count"], table["ratio"])):
            ax.text(i, count, f"{count:,} ({ratio:.2%})", ha="center", va="bottom", fontsize=8)
        plt.xlabel("Class")
        plt.ylabel("Transactions (log scale)")
        plt.title("Class Balance")
        return self._save("class_balance.png")

    def _plot_feature_separation(self, report: Report) -> str:
        top = report.feature_summary.head(self.top_features)
        plt.figure(figsize=(7, 5))
        sns.barplot(x=top["separation"].to_numpy(), y=list(top.index.astype(str)), color="steelblue")
        plt.xlabel("|standardized mean difference|")
        plt.ylabel("Feature")
        plt.title("Feature Separation Between Classes")
        return self._save("feature_separation.png")

    def _plot_roc_curves(self, report: Report) -> list[str]:
        paths = []
        results = report.outcome.results
        for strategy in sorted({s for s, _ in results}):
            plt.figure(figsize=(6, 5))
            for (s, model), r in sorted(results.items()):
                if s != strategy or r.auc is None:
                    continue
                plt.plot(r.fpr, r.tpr, label=f"{model} (AUC={r.auc:.3f})")
            plt.plot([0, 1], [0, 1], linestyle="--", color="grey")
            plt.xlabel("False positive rate")
            plt.ylabel("True positive rate")
            plt.title(f"ROC Curves ({strategy})")
            plt.legend(loc="lower right")
            paths.append(self._save(f"roc_{strategy}.png"))
        return paths

    def _plot_confusion_matrices(self, report: Report) -> Optional[str]:
        results = report.outcome.results
        if not results:
            return None

        keys = sorted(results)
        n_cols = min(4, len(keys))
        n_rows = int(np.ceil(len(keys) / n_cols))
        fig, axes = plt.subplots(n_rows, n_cols, figsize=(4 * n_cols, 3.5 * n_rows), squeeze=False)

        for ax, key in zip(axes.flat, keys):
            cm = results[key].confusion_matrix.astype(float)
            row_sums = cm.sum(axis=1, keepdims=True)
            row_sums[row_sums == 0] = 1.0
            sns.heatmap(
                cm / row_sums,
                annot=True,
                fmt=".2f",
                cmap="Blues",
                cbar=False,
                xticklabels=LABELS,
                yticklabels=LABELS,
                ax=ax,
            )
            ax.set_title(f"{key[0]} / {key[1]}", fontsize=9)
            ax.set_xlabel("Predicted")
            ax.set_ylabel("Actual")

        for ax in list(axes.flat)[len(keys):]:
            ax.axis("off")

        fig.suptitle("Confusion Matrices (Normalized)")
        return self._save("confusion_matrices.png")

    def _plot_threshold_sweep(self, report: Report) -> str:
        sweep = report.threshold_sweep
        best_thr = best_threshold(sweep)
        plt.figure(figsize=(7, 5))
        for metric in ("precision", "recall", "f1"):
            sns.lineplot(x=sweep["threshold"], y=sweep[metric], label=metric.capitalize())
        plt.axvline(best_thr, linestyle="--", label=f"Best F1 thr={best_thr:.2f}")
        plt.xlabel("Threshold")
        plt.ylabel("Score")
        plt.title("Threshold Sweep (best pair)")
        plt.legend()
        return self._save("threshold_sweep.png")

    def save_metrics(self, report: Report) -> str:
        outcome = report.outcome
        best = outcome.best
        payload = {
            "class_balance": {
                label: {"count": int(row["count"]), "ratio": float(row["ratio"])}
                for label, row in report.class_balance.iterrows()
            },
            "target_correlations": {
                str(feature): float(value)
                for feature, value in report.target_correlations.items()
            },
            "strategy_sizes": outcome.strategy_sizes,
            "best": None if best is None else {"strategy": best[0], "model": best[1]},
            "results": [outcome.results[key].to_dict() for key in sorted(outcome.results)],
            "failures": [vars(f) for f in outcome.failures],
        }

        directory = os.path.dirname(self.metrics_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.metrics_path, "w") as f:
            json.dump(payload, f, indent=4)

        if self.verbose:
            self.logger.info(f"Saved metrics: {self.metrics_path}")
        return self.metrics_path
