import numpy as np
import pandas as pd

from fraud_imbalance.preprocessor import Preprocessor


def _make_small_X():
    return pd.DataFrame(
        {
            "V1": [-1.3, 0.2, np.nan, 2.4],
            "V2": [0.5, np.nan, -0.7, 1.1],
            "Amount": [12.5, 3.0, 250.0, np.nan],
        }
    )


def test_preprocessor_build_returns_column_transformer():
    transformer = Preprocessor(impute_strategy="median").build(_make_small_X())
    names = [name for name, _, _ in transformer.transformers]
    assert names == ["num"]


def test_preprocessor_fit_transform_preserves_row_count_and_no_nans():
    X = _make_small_X()
    Xt = Preprocessor(impute_strategy="median").build(X).fit_transform(X)
    assert Xt.shape == X.shape
    assert np.isfinite(Xt).all()


def test_preprocessor_standardizes_when_scaler_enabled():
    X = _make_small_X().fillna(0.0)
    Xt = Preprocessor(use_scaler=True).build(X).fit_transform(X)
    np.testing.assert_allclose(Xt.mean(axis=0), 0.0, atol=1e-12)


def test_preprocessor_without_scaler_only_imputes():
    X = _make_small_X()
    Xt = Preprocessor(use_scaler=False).build(X).fit_transform(X)
    assert Xt[0, 0] == -1.3
    assert Xt[2, 0] == np.nanmedian(X["V1"])
