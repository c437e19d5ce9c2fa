"""Structured summaries of class imbalance and feature structure."""

import numpy as np
import pandas as pd

from .data_loader import LABELS, encode_target


def class_balance(df: pd.DataFrame, target_col: str) -> pd.DataFrame:
    """Count and ratio of records per label."""
    counts = df[target_col].value_counts().reindex(LABELS, fill_value=0)
    total = int(counts.sum())
    return pd.DataFrame(
        {
            "count": counts.astype(int),
            "ratio": counts / total if total else counts.astype(float),
        }
    )


def feature_summary(df: pd.DataFrame, target_col: str) -> pd.DataFrame:
    """Per-class feature means and the standardized mean difference between classes."""
    X = df.drop(columns=[target_col])
    y = encode_target(df[target_col])

    mean_neg = X[y == 0].mean()
    mean_pos = X[y == 1].mean()
    std = X.std().replace(0, np.nan)

    out = pd.DataFrame(
        {
            "mean_non_fraudulent": mean_neg,
            "mean_fraudulent": mean_pos,
            "separation": ((mean_pos - mean_neg).abs() / std).fillna(0.0),
        }
    )
    return out.sort_values("separation", ascending=False)


def target_correlations(df: pd.DataFrame, target_col: str) -> pd.Series:
    X = df.drop(columns=[target_col])
    y = pd.Series(encode_target(df[target_col]), index=df.index)
    corr = X.corrwith(y).fillna(0.0)
    return corr.reindex(corr.abs().sort_values(ascending=False).index)
