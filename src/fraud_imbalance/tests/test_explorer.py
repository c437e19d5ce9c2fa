import numpy as np
import pandas as pd
import pytest

from fraud_imbalance.data_loader import LABELS, NEGATIVE_LABEL, POSITIVE_LABEL
from fraud_imbalance.explorer import class_balance, feature_summary, target_correlations


def _make_df():
    return pd.DataFrame(
        {
            "V1": [0.0, 0.1, -0.1, 0.05, 3.0, 3.1],
            "V2": [1.0, -1.0, 1.0, -1.0, 1.0, -1.0],
            "Class": pd.Categorical(
                [NEGATIVE_LABEL] * 4 + [POSITIVE_LABEL] * 2, categories=LABELS
            ),
        }
    )


def test_class_balance_counts_and_ratios():
    table = class_balance(_make_df(), "Class")
    assert table.loc[NEGATIVE_LABEL, "count"] == 4
    assert table.loc[POSITIVE_LABEL, "count"] == 2
    assert table["ratio"].sum() == pytest.approx(1.0)
    assert table.loc[POSITIVE_LABEL, "ratio"] == pytest.approx(1 / 3)


def test_feature_summary_ranks_separating_feature_first():
    summary = feature_summary(_make_df(), "Class")
    assert summary.index[0] == "V1"
    assert summary.loc["V2", "separation"] == pytest.approx(0.0)
    assert np.isfinite(summary["separation"]).all()


def test_target_correlations_sorted_by_magnitude():
    corr = target_correlations(_make_df(), "Class")
    assert corr.index[0] == "V1"
    assert corr["V1"] > 0.9
