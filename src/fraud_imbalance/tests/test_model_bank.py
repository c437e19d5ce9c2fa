import numpy as np
import pandas as pd
import pytest

from fraud_imbalance.evaluator import auc_score
from fraud_imbalance.exceptions import ModelFitError
from fraud_imbalance.model_bank import MODEL_NAMES, FittedModel, ModelBank


def _make_xy(n_neg=200, n_pos=40, n_features=3, shift=3.0, seed=0):
    rng = np.random.RandomState(seed)
    X = np.vstack(
        [
            rng.normal(0.0, 1.0, size=(n_neg, n_features)),
            rng.normal(shift, 1.0, size=(n_pos, n_features)),
        ]
    )
    y = np.array([0] * n_neg + [1] * n_pos)
    return pd.DataFrame(X, columns=[f"V{i}" for i in range(1, n_features + 1)]), y


@pytest.mark.parametrize("name", MODEL_NAMES)
def test_every_model_ranks_separable_data(name):
    X, y = _make_xy()
    X_eval, y_eval = _make_xy(seed=1)

    bank = ModelBank(random_state=0)
    fitted = bank.fit(name, X, y)
    scores = bank.predict_proba(fitted, X_eval)

    assert isinstance(fitted, FittedModel)
    assert fitted.name == name
    assert scores.shape == (len(X_eval),)
    assert ((scores >= 0.0) & (scores <= 1.0)).all()
    assert auc_score(y_eval, scores) > 0.95


def test_fit_rejects_single_class():
    X, y = _make_xy()
    with pytest.raises(ModelFitError, match="fewer than two classes"):
        ModelBank().fit("logistic_regression", X, np.zeros_like(y))


def test_qda_rejects_singular_class_covariance():
    # 3 positive records cannot span 3 features once centered
    X, y = _make_xy(n_pos=3)
    with pytest.raises(ModelFitError, match="singular class 1 covariance"):
        ModelBank().fit("qda", X, y)


@pytest.mark.parametrize("name", ["lda", "qda"])
def test_discriminant_analysis_rejects_collinear_features(name):
    X, y = _make_xy()
    X["V4"] = 2.0 * X["V1"] - X["V2"]
    with pytest.raises(ModelFitError, match="singular"):
        ModelBank().fit(name, X, y)


def test_gradient_boosting_is_deterministic_for_a_seed():
    X, y = _make_xy()
    bank = ModelBank(params={"gradient_boosting": {"n_estimators": 50}})
    a = bank.predict_proba(bank.fit("gradient_boosting", X, y, seed=3), X)
    b = bank.predict_proba(bank.fit("gradient_boosting", X, y, seed=3), X)
    np.testing.assert_array_equal(a, b)


def test_params_override_defaults():
    X, _ = _make_xy()
    bank = ModelBank(params={"gradient_boosting": {"n_estimators": 10, "max_depth": 2}})
    model = bank.build("gradient_boosting", X).named_steps["model"]
    assert model.n_estimators == 10
    assert model.max_depth == 2
    assert model.learning_rate == pytest.approx(0.1)


def test_scaler_can_be_disabled():
    X, _ = _make_xy()
    prep = ModelBank(scale_features=False).build("lda", X).named_steps["prep"]
    num_pipe = prep.transformers[0][1]
    assert "scaler" not in num_pipe.named_steps


def test_unknown_model():
    X, y = _make_xy()
    with pytest.raises(ValueError, match="Unknown model"):
        ModelBank().fit("svm", X, y)
    with pytest.raises(ValueError, match="Unknown model"):
        ModelBank(params={"svm": {}})
