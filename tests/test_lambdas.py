import pytest

import numpy as np

from l0net.lambdas import (max_lambda,
                           information_criterion_lambda,
                           log_spaced_lambdas)
from l0net.l0em import l0em
from l0net.data import make_sparse_regression

rng = np.random.default_rng(0)

@pytest.mark.parametrize('n, p', [(30, 10), (20, 100)])
def test_max_lambda(n, p):

    X = rng.standard_normal((n, p))
    y = rng.standard_normal(n)

    expected = max([(X[:,j] @ y)**2 / (4 * (X[:,j]**2).sum()) for j in range(p)])
    assert np.isclose(max_lambda(X, y), expected)

def test_max_lambda_zero_column():

    X = rng.standard_normal((15, 4))
    X[:,2] = 0
    y = rng.standard_normal(15)

    value = max_lambda(X, y)
    assert np.isfinite(value)
    assert np.isclose(value, max_lambda(X[:,[0,1,3]], y))

def test_max_lambda_univariate():
    """
    for a single feature L0EM keeps it just below the value and drops it above
    """
    X = rng.standard_normal((50, 1))
    y = 2 * X[:,0] + 0.1 * rng.standard_normal(50)

    lambda_max = max_lambda(X, y)
    assert np.count_nonzero(l0em(X, y, 0.9 * lambda_max)) == 1
    assert np.count_nonzero(l0em(X, y, 1.1 * lambda_max)) == 0

def test_information_criterion():

    assert information_criterion_lambda('aic', 100, 1000) == 2
    assert np.isclose(information_criterion_lambda('BIC', 100, 1000), np.log(100))
    assert np.isclose(information_criterion_lambda('ric', 100, 1000), 2 * np.log(1000))
    with pytest.raises(ValueError):
        information_criterion_lambda('cv', 100, 1000)

def test_log_spaced_lambdas():

    X, y, _ = make_sparse_regression(n_samples=40, n_features=60, random_state=1)
    lambdas = log_spaced_lambdas(X, y, num_lambdas=10)

    assert lambdas.shape == (10,)
    assert np.isclose(lambdas[0], 1e-6)
    assert np.isclose(lambdas[-1], max_lambda(X, y) + 1e-6)
    assert np.allclose(np.diff(np.log(lambdas + 1 - 1e-6)),
                       np.log(max_lambda(X, y) + 1) / 9)
