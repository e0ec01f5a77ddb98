import logging

from dataclasses import dataclass, asdict, field
from typing import Callable, Optional

import numpy as np
import pandas as pd

from sklearn.base import BaseEstimator
from sklearn.model_selection import check_cv
from sklearn.utils import check_array
from sklearn.utils.validation import check_is_fitted

from .l0em import (L0EMControl,
                   l0em)
from .lambdas import max_lambda
from .path import (PathControl,
                   adaptive_lambda_path)
from .scorer import PathScorer
from ._utils import (_check_data,
                     _feature_names,
                     _parent_dataclass_from_child)
from .docstrings import add_dataclass_docstring


@dataclass(frozen=True)
class L0NetControl(L0EMControl):
    """
    Control parameters for L0Net fitting.

    Parameters
    ----------
    epsilon: float
        Minimum coefficient magnitude kept by L0EM.
    delta_thresh: float
        Convergence threshold of L0EM.
    maxit: int
        Maximum number of EM iterations.
    nonnegative: bool
        Restrict coefficients to be non-negative?
    logging: bool
        Write info and debug messages to log?
    progress: bool
        Show a progress bar over the regressor call budget?
    """
    progress: bool = False


@dataclass
class L0NetSpec(object):

    min_lambda: float = 1e-7
    num_lambdas: int = 100
    step_divisor: float = 2**12
    log_space: bool = True
    control: L0NetControl = field(default_factory=L0NetControl)
    regressor: Optional[Callable] = None
    regressor_kws: dict = field(default_factory=dict)

add_dataclass_docstring(L0NetSpec, subs={'control':'control_l0net'})


@dataclass
class L0Net(BaseEstimator,
            L0NetSpec):
    """
    L0Net: L0-penalized regression along an adaptively searched `lambda` path.

    One model is kept per distinct number of selected variables found
    by the search; `get_model` returns it.

    Parameters
    ----------
    min_lambda: float
        Smallest `lambda` value searched.
    num_lambdas: int
        Budget of regressor calls.
    step_divisor: float
        Controls the narrowest interval that is still subdivided.
    log_space: bool
        Bisect at geometric midpoints?
    control: L0NetControl
        Parameters to control the solver and the search.
    regressor: Optional[callable]
        Alternative sparse regressor, called as
        `regressor(X, y, lambda_val, **regressor_kws)`. Defaults to `l0em`.
    regressor_kws: dict
        Keyword arguments for `regressor`.
    """

    def fit(self,
            X,
            y):
        """
        Fit L0Net model.

        Parameters
        ----------
        X: np.ndarray
            Input matrix, of shape `(nobs, nvars)`.
        y: np.ndarray
            Response variable.

        Returns
        -------
        self: object
            L0Net class instance.
        """
        self.feature_names_in_ = _feature_names(X)

        X, y = _check_data(X, y, estimator=self)
        self.n_features_in_ = X.shape[1]

        if self.control is None:
            self.control = L0NetControl()
        elif not isinstance(self.control, L0NetControl):
            self.control = _parent_dataclass_from_child(L0NetControl,
                                                        asdict(self.control))

        path_control = PathControl(min_lambda=self.min_lambda,
                                   num_lambdas=self.num_lambdas,
                                   step_divisor=self.step_divisor,
                                   log_space=self.log_space,
                                   progress=self.control.progress,
                                   logging=self.control.logging)

        regressor, regressor_kws = self._get_regressor()
        coefs, self.nvars_to_lambda_ = adaptive_lambda_path(X,
                                                            y,
                                                            regressor,
                                                            control=path_control,
                                                            regressor_kws=regressor_kws)

        self.lambda_max_ = max_lambda(X, y)
        self.n_calls_ = len(coefs)

        self.lambda_values_ = np.array(sorted(coefs))
        self.coefs_ = np.array([coefs[l] for l in self.lambda_values_])

        self.summary_ = pd.DataFrame({'Selected Variables':(self.coefs_ != 0).sum(1)},
                                     index=pd.Series(self.lambda_values_,
                                                     name='lambda'))

        if self.control.logging:
            logging.info(f'Model sizes found: {sorted(self.nvars_to_lambda_)}')

        return self

    def get_model(self,
                  nvars):
        """
        Coefficients of the model with `nvars` selected variables.

        Parameters
        ----------
        nvars: int
            Number of selected variables.

        Returns
        -------
        np.ndarray
            Coefficients at the first `lambda` where `nvars` variables were
            selected. Raises `KeyError` if the search never found that size.
        """
        check_is_fitted(self, ["coefs_"])
        lambda_val = self.nvars_to_lambda_[nvars]
        idx = np.flatnonzero(self.lambda_values_ == lambda_val)[0]
        return self.coefs_[idx]

    def predict(self,
                X,
                nvars=None):
        """
        Linear predictions.

        Parameters
        ----------
        X: np.ndarray
            Input matrix, of shape `(nobs, nvars)`.
        nvars: Optional[int]
            If given, predict with the model having this many selected
            variables. Otherwise predict with every tried `lambda`.

        Returns
        -------
        np.ndarray
            Shape `(nobs,)` if `nvars` is given, else `(nobs, n_lambdas)`
            with columns ordered as `lambda_values_`.
        """
        check_is_fitted(self, ["coefs_"])
        X = check_array(X, dtype=float)
        if nvars is not None:
            return X @ self.get_model(nvars)
        return X @ self.coefs_.T

    def score_path(self,
                   X,
                   y,
                   scorers=[]):
        """
        Score each model size found along the path on the data `(X, y)`,
        typically a held-out test set.

        Parameters
        ----------
        X: np.ndarray
            Input matrix, of shape `(nobs, nvars)`.
        y: np.ndarray
            Response variable.
        scorers: list
            `Scorer` instances; mean squared error is always computed.

        Returns
        -------
        pd.DataFrame
            Indexed by the number of selected variables, with the
            corresponding `lambda` and one column per scorer.
        """
        check_is_fitted(self, ["coefs_"])
        X, y = _check_data(X, y)

        levels = sorted(self.nvars_to_lambda_)
        predictions = np.column_stack([X @ self.get_model(k) for k in levels])

        scorer = PathScorer(response=y,
                            predictions=predictions,
                            index=pd.Index(levels, name='Selected Variables'),
                            compute_std_error=False)
        scores_ = scorer.compute_scores(scorers=scorers)[0]
        scores_.insert(0, 'lambda', [self.nvars_to_lambda_[k] for k in levels])
        return scores_

    def cross_validation_path(self,
                              X,
                              y,
                              cv=5,
                              groups=None,
                              scorers=[]):
        """
        Cross-validate the model sizes found along the path.

        For each fold the regressor is refitted on the training part at
        every `lambda` in `nvars_to_lambda_`, and predictions on the
        held-out part are scored.

        Parameters
        ----------
        X: np.ndarray
            Input matrix, of shape `(nobs, nvars)`.
        y: np.ndarray
            Response variable.
        cv: int, cross-validation generator or an iterable
            Determines the cross-validation splitting strategy.
        groups: array-like, optional
            Group labels for the samples used while splitting the dataset into train/test set.
        scorers: list
            `Scorer` instances; mean squared error is always computed.

        Returns
        -------
        pd.DataFrame
            Indexed by the number of selected variables (of the fit to all
            the data), with the corresponding `lambda`, the mean score and
            its standard error for each scorer. The best model size and
            the smallest model within one standard error of it are stored
            in `index_best_` and `index_1se_`.
        """
        check_is_fitted(self, ["coefs_"])
        X, y = _check_data(X, y)

        cv = check_cv(cv, y, classifier=False)

        levels = sorted(self.nvars_to_lambda_)
        lambda_values = [self.nvars_to_lambda_[k] for k in levels]
        regressor, regressor_kws = self._get_regressor()

        predictions = np.zeros((X.shape[0], len(levels)))
        splits = []
        for f, (train, test) in enumerate(cv.split(X, y, groups)):
            if self.control.logging:
                logging.info(f'Cross-validation fold {f}')
            for i, l in enumerate(lambda_values):
                coef = np.asarray(regressor(X[train], y[train], l, **regressor_kws)).reshape(-1)
                predictions[test, i] = X[test] @ coef
            splits.append(test)

        scorer = PathScorer(response=y,
                            predictions=predictions,
                            splits=splits,
                            index=pd.Index(levels, name='Selected Variables'),
                            compute_std_error=True)

        (self.cv_scores_,
         self.index_best_,
         self.index_1se_) = scorer.compute_scores(scorers=scorers)
        self.cv_scores_.insert(0, 'lambda', lambda_values)

        return self.cv_scores_

    def _get_regressor(self):

        if self.regressor is None:
            control = _parent_dataclass_from_child(L0EMControl,
                                                   asdict(self.control))
            return l0em, {'control':control}
        return self.regressor, dict(self.regressor_kws)
