import pytest

import numpy as np

from sklearn.linear_model import Lasso

from l0net.path import (PathControl,
                        SparsityIndex,
                        adaptive_lambda_path)
from l0net.l0em import (L0EMControl,
                        l0em)
from l0net.lambdas import max_lambda
from l0net.data import make_sparse_regression

rng = np.random.default_rng(0)

class StepRegressor(object):
    """
    Selects `sum(lambda_val < thresholds)` variables and
    records every call.
    """

    def __init__(self, thresholds):
        self.thresholds = np.asarray(thresholds)
        self.calls = []

    def nvars(self, lambda_val):
        return int(np.sum(lambda_val < self.thresholds))

    def __call__(self, X, y, lambda_val):
        self.calls.append(lambda_val)
        coef = np.zeros(X.shape[1])
        coef[:self.nvars(lambda_val)] = 1
        return coef

def never_called(X, y, lambda_val):
    raise AssertionError('regressor should not be called')

@pytest.fixture
def step_problem():
    X, y, _ = make_sparse_regression(n_samples=40,
                                     n_features=20,
                                     random_state=0)
    lambda_max = max_lambda(X, y)
    regressor = StepRegressor(np.geomspace(lambda_max / 100, lambda_max / 2, 10))
    return X, y, regressor

@pytest.mark.parametrize('log_space', [True, False])
def test_all_levels_found(step_problem, log_space):

    X, y, regressor = step_problem
    control = PathControl(num_lambdas=500, log_space=log_space)
    coefs, nvars_to_lambda = adaptive_lambda_path(X, y, regressor, control=control)

    assert sorted(nvars_to_lambda) == list(range(11))
    assert nvars_to_lambda[10] == control.min_lambda
    assert nvars_to_lambda[0] == max_lambda(X, y)

    # every lambda evaluated once, and cached
    assert len(regressor.calls) == len(set(regressor.calls)) == len(coefs)
    assert set(nvars_to_lambda.values()) <= set(coefs)

def test_first_discovery(step_problem):

    X, y, regressor = step_problem
    _, nvars_to_lambda = adaptive_lambda_path(X, y, regressor,
                                              control=PathControl(num_lambdas=500))

    for k, lambda_val in nvars_to_lambda.items():
        first = [l for l in regressor.calls if regressor.nvars(l) == k][0]
        assert lambda_val == first

def test_evaluation_order(step_problem):

    X, y, regressor = step_problem
    adaptive_lambda_path(X, y, regressor, control=PathControl(num_lambdas=500))

    lambda_max = max_lambda(X, y)
    assert regressor.calls[0] == 1e-7
    assert regressor.calls[1] == lambda_max
    assert np.isclose(regressor.calls[2], np.sqrt(1e-7 * lambda_max))

@pytest.mark.parametrize('num_lambdas', [2, 5])
def test_budget(step_problem, num_lambdas):

    X, y, regressor = step_problem
    coefs, nvars_to_lambda = adaptive_lambda_path(X, y, regressor,
                                                  control=PathControl(num_lambdas=num_lambdas))

    assert len(coefs) <= num_lambdas + 3
    assert len(nvars_to_lambda) < 11

def test_min_gap(step_problem):
    """
    a coarse minimum gap stops the bisection after the first midpoint
    """
    X, y, regressor = step_problem
    lambda_max = max_lambda(X, y)
    log_increment = (np.log(lambda_max + 1) - np.log(1e-7 + 1)) / 99
    control = PathControl(num_lambdas=100,
                          log_space=False,
                          step_divisor=log_increment / (0.75 * lambda_max))
    coefs, nvars_to_lambda = adaptive_lambda_path(X, y, regressor, control=control)

    assert len(coefs) == 3
    assert {0, 10} <= set(nvars_to_lambda)

    # nothing is evaluated if the whole interval is narrower than the gap
    regressor.calls = []
    control = PathControl(num_lambdas=100,
                          step_divisor=log_increment / (2 * lambda_max))
    coefs, nvars_to_lambda = adaptive_lambda_path(X, y, regressor, control=control)
    assert coefs == {} and len(nvars_to_lambda) == 0
    assert regressor.calls == []

@pytest.mark.filterwarnings('ignore::sklearn.exceptions.ConvergenceWarning')
def test_l0em_path():

    X, y, _ = make_sparse_regression(n_samples=60,
                                     n_features=20,
                                     random_state=1)
    control = L0EMControl(maxit=1000)
    coefs, nvars_to_lambda = adaptive_lambda_path(X, y,
                                                  control=PathControl(num_lambdas=30),
                                                  regressor_kws={'control':control})

    assert len(coefs) <= 33
    assert max(nvars_to_lambda) >= 4
    assert min(nvars_to_lambda) <= 2

    for k, lambda_val in nvars_to_lambda.items():
        assert np.count_nonzero(coefs[lambda_val]) == k
        # refitting reproduces the stored model
        np.testing.assert_array_equal(l0em(X, y, lambda_val, control=control),
                                      coefs[lambda_val])

def lasso(X, y, lambda_val, max_iter=1000):
    return Lasso(alpha=lambda_val,
                 fit_intercept=False,
                 max_iter=max_iter).fit(X, y).coef_

@pytest.mark.filterwarnings('ignore::sklearn.exceptions.ConvergenceWarning')
def test_substitute_regressor():

    X, y, _ = make_sparse_regression(n_samples=60,
                                     n_features=20,
                                     random_state=2)
    coefs, nvars_to_lambda = adaptive_lambda_path(X, y,
                                                  lasso,
                                                  control=PathControl(num_lambdas=40),
                                                  regressor_kws={'max_iter':5000})
    assert 0 in nvars_to_lambda
    assert 20 in nvars_to_lambda
    for k, lambda_val in nvars_to_lambda.items():
        assert np.count_nonzero(coefs[lambda_val]) == k

def test_min_lambda_too_large():

    X, y, _ = make_sparse_regression(n_samples=30, n_features=10, random_state=3)
    control = PathControl(min_lambda=2 * max_lambda(X, y))
    with pytest.raises(ValueError):
        adaptive_lambda_path(X, y, never_called, control=control)

@pytest.mark.parametrize('shape', [(0, 10), (10, 0)])
def test_empty_input(shape):

    with pytest.raises(ValueError):
        adaptive_lambda_path(np.zeros(shape), np.zeros(shape[0]), never_called)

@pytest.mark.parametrize('control', [PathControl(num_lambdas=1),
                                     PathControl(step_divisor=0),
                                     PathControl(min_lambda=0),
                                     PathControl(min_lambda=-1, log_space=False)])
def test_bad_control(control):

    X, y, _ = make_sparse_regression(n_samples=30, n_features=10, random_state=4)
    with pytest.raises(ValueError):
        adaptive_lambda_path(X, y, never_called, control=control)

def test_linear_min_lambda_zero(step_problem):

    X, y, regressor = step_problem
    _, nvars_to_lambda = adaptive_lambda_path(X, y, regressor,
                                              control=PathControl(min_lambda=0,
                                                                  log_space=False,
                                                                  num_lambdas=500))
    assert nvars_to_lambda[10] == 0

def test_sparsity_index():

    index = SparsityIndex()
    assert index.insert_if_absent(3, 0.5)
    assert not index.insert_if_absent(3, 0.1)
    assert index.insert_if_absent(1, 2.)

    assert index[3] == 0.5
    assert len(index) == 2
    assert dict(index) == {3:0.5, 1:2.}
    assert 2 not in index

    with pytest.raises(TypeError):
        index[3] = 0.1
    with pytest.raises(KeyError):
        index[2]

@pytest.mark.filterwarnings('ignore::sklearn.exceptions.ConvergenceWarning')
def test_l0em_path_wide():
    """
    more features than observations, default budget
    """
    X, y, _ = make_sparse_regression(n_samples=100,
                                     n_features=1000,
                                     random_state=0)
    coefs, nvars_to_lambda = adaptive_lambda_path(X, y,
                                                  control=PathControl(num_lambdas=100))

    assert len(coefs) <= 103
    assert 0 in nvars_to_lambda
    assert max(nvars_to_lambda) >= 80
    for k, lambda_val in nvars_to_lambda.items():
        assert np.count_nonzero(coefs[lambda_val]) == k

@pytest.mark.filterwarnings('ignore::sklearn.exceptions.ConvergenceWarning')
def test_l0em_path_small_models():
    """
    a larger budget reaches the small model sizes above the lower half
    """
    X, y, _ = make_sparse_regression(n_samples=100,
                                     n_features=1000,
                                     random_state=0)
    coefs, nvars_to_lambda = adaptive_lambda_path(X, y,
                                                  control=PathControl(num_lambdas=300))

    assert len(coefs) <= 303
    assert {0, 1, 2, 3, 4} <= set(nvars_to_lambda)
    assert np.count_nonzero(coefs[nvars_to_lambda[4]]) == 4
