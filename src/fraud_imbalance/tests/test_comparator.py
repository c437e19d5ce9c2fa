import numpy as np

from fraud_imbalance.comparator import RANKING_COLUMNS, best_pair, rank
from fraud_imbalance.evaluator import EvaluationResult


def _result(strategy, model, auc, fn):
    cm = np.array([[90, 5], [fn, 10 - fn]])
    return EvaluationResult(model=model, strategy=strategy, confusion_matrix=cm, auc=auc)


def test_best_pair_has_maximum_auc():
    results = {
        ("identity", "lda"): _result("identity", "lda", 0.91, 4),
        ("smote", "gradient_boosting"): _result("smote", "gradient_boosting", 0.97, 3),
        ("upsample", "qda"): _result("upsample", "qda", 0.93, 1),
    }
    assert best_pair(results) == ("smote", "gradient_boosting")


def test_ties_broken_by_fewer_false_negatives():
    results = {
        ("identity", "logistic_regression"): _result("identity", "logistic_regression", 0.95, 4),
        ("downsample", "logistic_regression"): _result("downsample", "logistic_regression", 0.95, 2),
    }
    assert best_pair(results) == ("downsample", "logistic_regression")


def test_undefined_auc_is_never_selected():
    results = {
        ("identity", "lda"): _result("identity", "lda", None, 0),
        ("upsample", "lda"): _result("upsample", "lda", 0.51, 9),
    }
    assert best_pair(results) == ("upsample", "lda")


def test_no_defined_auc_returns_none():
    results = {("identity", "lda"): _result("identity", "lda", None, 0)}
    assert best_pair(results) is None
    assert best_pair({}) is None


def test_rank_orders_rows_and_puts_undefined_last():
    results = {
        ("identity", "lda"): _result("identity", "lda", None, 0),
        ("upsample", "lda"): _result("upsample", "lda", 0.80, 3),
        ("smote", "lda"): _result("smote", "lda", 0.90, 5),
        ("downsample", "lda"): _result("downsample", "lda", 0.90, 2),
    }
    table = rank(results)

    assert list(table.columns) == RANKING_COLUMNS
    assert table["strategy"].tolist() == ["downsample", "smote", "upsample", "identity"]
    assert table["fn"].tolist() == [2, 5, 3, 0]
    assert table["auc"].isna().tolist() == [False, False, False, True]


def test_rank_of_empty_results():
    assert rank({}).empty
