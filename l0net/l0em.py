"""
L0-penalized least squares via the generalized EM algorithm of

    Zhenqiu Liu and Gang Li. "Efficient Regularized Regression for
    Variable Selection with L0 Penalty", arXiv 2014.

For a given `lambda` the coefficients approximately minimize

    0.5 * ||y - X @ coef||^2 + lambda / 2 * #{j: coef[j] != 0}

by a sequence of reweighted ridge regressions, each solved in dual
form through an `(nobs, nobs)` system.
"""

import logging
import warnings

from typing import Union
from dataclasses import dataclass, field

import numpy as np
import scipy.linalg
from scipy.linalg import LinAlgError

from sklearn.base import BaseEstimator, RegressorMixin
from sklearn.exceptions import ConvergenceWarning
from sklearn.utils import check_array
from sklearn.utils.validation import check_is_fitted

from ._utils import (_check_data,
                     _feature_names)
from .lambdas import information_criterion_lambda
from .docstrings import add_dataclass_docstring

_EPS = np.finfo(float).eps


class L0EMNumericalError(LinAlgError):
    """
    A ridge system in the L0EM iteration was singular or too
    ill-conditioned to solve reliably.
    """


@dataclass(frozen=True)
class L0EMControl(object):
    """Control parameters for L0EM."""

    epsilon: float = 1e-4
    delta_thresh: float = 1e-5
    maxit: int = 10000
    nonnegative: bool = False
    logging: bool = False

add_dataclass_docstring(L0EMControl)


@dataclass
class L0EMResult(object):
    """
    Output of `l0em_fit`.

    Parameters
    ----------
    coef: np.ndarray
        Coefficients, of shape `(nvars,)`.
    converged: bool
        Did the iteration converge before `maxit`?
    n_iter: int
        Number of EM iterations run.
    """
    coef: np.ndarray
    converged: bool
    n_iter: int


def _dual_ridge(X,
                Xt,
                y,
                lambda_val,
                iteration):
    """
    Compute `Xt @ (X @ Xt + lambda_val * I)^{-1} y`.
    """
    G = X @ Xt
    G[np.diag_indices_from(G)] += lambda_val

    try:
        factor = scipy.linalg.cho_factor(G, check_finite=False)
    except LinAlgError as e:
        raise L0EMNumericalError(f'ridge system is singular at lambda={lambda_val}, '
                                 f'iteration {iteration}: {e}') from e

    # squared pivot ratio approximates the reciprocal condition number
    pivots = np.fabs(np.diag(factor[0]))
    if not pivots.min()**2 > G.shape[0] * _EPS * pivots.max()**2:
        raise L0EMNumericalError(f'ridge system is ill-conditioned at lambda={lambda_val}, '
                                 f'iteration {iteration}')

    dual = scipy.linalg.cho_solve(factor, y, check_finite=False)
    coef = Xt @ dual
    if not np.all(np.isfinite(coef)):
        raise L0EMNumericalError(f'non-finite coefficients at lambda={lambda_val}, iteration {iteration}')
    return coef


def l0em_fit(X,
             y,
             lambda_val=2.,
             control=None,
             check=True):
    """
    Run the L0EM iteration and report convergence.

    Parameters
    ----------
    X: np.ndarray
        Input matrix, of shape `(nobs, nvars)`.
    y: np.ndarray
        Response variable, of shape `(nobs,)`.
    lambda_val: float
        Penalty per selected variable. 2 corresponds to AIC,
        `log(nobs)` to BIC and `2*log(nvars)` to RIC.
    control: Optional[L0EMControl]
        Parameters to control the solver.
    check: bool
        Validate `X` and `y`?

    Returns
    -------
    L0EMResult

    Raises
    ------
    L0EMNumericalError
        If a ridge system cannot be solved reliably, typically for
        `lambda_val` at or near 0 with fewer effective features than
        observations.
    """
    if control is None:
        control = L0EMControl()

    if check:
        X, y = _check_data(X, y)
    else:
        y = np.asarray(y).reshape(-1)

    lambda_val = float(lambda_val)
    if not np.isfinite(lambda_val) or lambda_val < 0:
        raise ValueError(f'lambda_val should be non-negative and finite, got {lambda_val}')

    Xt = X.T

    coef = _dual_ridge(X, Xt, y, lambda_val, 0)
    if control.nonnegative:
        coef = np.maximum(coef, 0)

    if control.logging:
        logging.info(f'Starting L0EM, lambda={lambda_val}')

    converged = False
    n_iter = 0
    while n_iter < control.maxit:
        n_iter += 1

        # E-step
        eta = coef

        # M-step
        Xt_eta = (eta**2)[:, None] * Xt
        coef = _dual_ridge(X, Xt_eta, y, lambda_val, n_iter)
        if control.nonnegative:
            coef = np.maximum(coef, 0)

        delta = np.linalg.norm(coef - eta)
        if control.logging:
            logging.debug(f'Iteration {n_iter}, change in coefficients {delta}')
        if delta < control.delta_thresh:
            converged = True
            break

    coef[np.fabs(coef) < control.epsilon] = 0

    if control.logging:
        logging.info(f'Terminating L0EM after {n_iter} iterations, '
                     f'{np.count_nonzero(coef)} variables selected.')

    if not converged:
        warnings.warn(f'L0EM did not converge after maxit={control.maxit} iterations '
                      f'for lambda={lambda_val}', ConvergenceWarning)

    return L0EMResult(coef=coef,
                      converged=converged,
                      n_iter=n_iter)


def l0em(X,
         y,
         lambda_val=2.,
         control=None,
         check=True):
    """
    Coefficients of L0-penalized regression for a single `lambda`.

    Entries of the result are either exactly zero or at least
    `control.epsilon` in absolute value. See `l0em_fit` for the
    parameters; this function returns only the coefficients, which
    makes it usable as the `regressor` of `adaptive_lambda_path`.

    Returns
    -------
    np.ndarray
        Coefficients, of shape `(nvars,)`.
    """
    return l0em_fit(X,
                    y,
                    lambda_val=lambda_val,
                    control=control,
                    check=check).coef


@dataclass
class L0EMSpec(object):

    lambda_val: Union[float, str] = 2.
    control: L0EMControl = field(default_factory=L0EMControl)

add_dataclass_docstring(L0EMSpec, subs={'lambda_val':'lambda_val_ic',
                                        'control':'control_l0em'})


@dataclass
class L0EM(RegressorMixin,
           BaseEstimator,
           L0EMSpec):
    """L0-penalized linear regression fitted by L0EM.

    There is no intercept: center `X` and `y` beforehand if needed.

    Parameters
    ----------
    lambda_val: Union[float, str]
        A single value for the `lambda` hyperparameter, or one of "aic",
        "bic" or "ric". Defaults to 2.
    control: L0EMControl
        Parameters to control the solver.
    """

    def fit(self,
            X,
            y,
            check=True):
        """Fit the model.

        Parameters
        ----------
        X : array-like, shape (n_samples, n_features)
            Training data.
        y : array-like, shape (n_samples,)
            Target values.
        check : bool, default=True
            Whether to perform input validation.

        Returns
        -------
        self : object
            Returns self.
        """

        self.feature_names_in_ = _feature_names(X)

        if check:
            X, y = _check_data(X, y, estimator=self)

        nobs, nvars = X.shape
        self.n_features_in_ = nvars

        if isinstance(self.lambda_val, str):
            self.lambda_val_ = information_criterion_lambda(self.lambda_val,
                                                            nobs,
                                                            nvars)
        else:
            self.lambda_val_ = float(self.lambda_val)

        result = l0em_fit(X,
                          y,
                          lambda_val=self.lambda_val_,
                          control=self.control,
                          check=False)

        self.coef_ = result.coef
        self.converged_ = result.converged
        self.n_iter_ = result.n_iter

        return self

    def predict(self, X):
        """Linear predictions `X @ coef_`."""
        check_is_fitted(self, ["coef_"])
        X = check_array(X, dtype=float)
        return X @ self.coef_
