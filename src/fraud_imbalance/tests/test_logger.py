import logging

from fraud_imbalance.utils import get_logger


def test_get_logger_is_idempotent():
    a = get_logger("fraud_imbalance.test")
    b = get_logger("fraud_imbalance.test")
    assert a is b
    assert len(a.handlers) == 1
    assert a.level == logging.INFO
    assert a.propagate is False
