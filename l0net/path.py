"""
Adaptive search over `lambda` for sparse regressors.

Instead of fitting a fixed log-spaced grid of `lambda` values, the
interval `[min_lambda, max_lambda(X, y)]` is bisected wherever the
number of selected variables drops by more than one between its
endpoints. Evaluations concentrate where the model size changes
and the total number of regressor calls stays close to a budget.
"""

import logging

from collections.abc import Mapping
from dataclasses import dataclass

import numpy as np
from tqdm import tqdm

from ._utils import (_check_data,
                     _num_selected)
from .l0em import l0em
from .lambdas import max_lambda
from .docstrings import add_dataclass_docstring


@dataclass(frozen=True)
class PathControl(object):
    """Control parameters for the adaptive `lambda` search."""

    min_lambda: float = 1e-7
    num_lambdas: int = 100
    step_divisor: float = 2**12
    log_space: bool = True
    progress: bool = False
    logging: bool = False

add_dataclass_docstring(PathControl)


class SparsityIndex(Mapping):
    """
    Read-only mapping from a number of selected variables to the first
    `lambda` value at which a fit with that many variables was seen.

    Entries are added with `insert_if_absent` only, so the first
    `lambda` recorded for a given model size is never replaced.
    """

    def __init__(self):
        self._lambdas = {}

    def insert_if_absent(self,
                         nvars,
                         lambda_val):
        """
        Record `lambda_val` for `nvars` unless `nvars` is already present.

        Returns
        -------
        bool
            True if the entry was added.
        """
        if nvars in self._lambdas:
            return False
        self._lambdas[nvars] = lambda_val
        return True

    def __getitem__(self, nvars):
        return self._lambdas[nvars]

    def __iter__(self):
        return iter(self._lambdas)

    def __len__(self):
        return len(self._lambdas)

    def __repr__(self):
        return f'{self.__class__.__name__}({self._lambdas!r})'


def _midpoint(lo,
              hi,
              log_space=True):
    if log_space:
        log_lo = np.log(lo)
        return float(np.exp(log_lo + (np.log(hi) - log_lo) / 2))
    return lo + (hi - lo) / 2


def _check_path_control(control):

    if control.num_lambdas < 2:
        raise ValueError('num_lambdas should be at least 2')
    if control.step_divisor <= 0:
        raise ValueError('step_divisor should be positive')
    if control.log_space:
        if control.min_lambda <= 0:
            raise ValueError('min_lambda should be positive when log_space is True')
    elif control.min_lambda < 0:
        raise ValueError('min_lambda should be non-negative')


def adaptive_lambda_path(X,
                         y,
                         regressor=l0em,
                         control=None,
                         regressor_kws=None):
    """
    Find the `lambda` values at which the number of variables selected
    by `regressor` changes.

    Parameters
    ----------
    X: np.ndarray
        Input matrix, of shape `(nobs, nvars)`.
    y: np.ndarray
        Response variable, of shape `(nobs,)`.
    regressor: callable
        Called as `regressor(X, y, lambda_val, **regressor_kws)` and
        returning a coefficient vector. Defaults to `l0em`.
    control: Optional[PathControl]
        Parameters of the search.
    regressor_kws: Optional[dict]
        Keyword arguments passed on to `regressor`, e.g.
        `{'control': L0EMControl(...)}` for `l0em`.

    Returns
    -------
    coefs: dict
        Maps each tried `lambda` to the coefficients found for it.
    nvars_to_lambda: SparsityIndex
        Maps each number of selected variables to the `lambda` at which
        it was first encountered.

    Notes
    -----
    Within an interval `(lo, hi)` the regressor is evaluated at `lo`,
    then `hi`, then, if more than one variable leaves the model across
    the interval, at the midpoint. Sub-intervals that still lose more
    than one variable are searched depth first, lower half first.
    An interval is dropped once the number of regressor calls exceeds
    `num_lambdas` or it is narrower than the nominal log-spaced
    increment divided by `step_divisor`; running out of budget is not
    an error, the entries found so far are returned.
    Because the lower half is searched first, a tight budget can be
    spent at small `lambda` and leave the small model sizes near
    `max_lambda` unfound; increase `num_lambdas` if they are needed.

    Previously evaluated `lambda` values are looked up rather than
    refitted, so shared endpoints of adjacent intervals cost one call.
    """
    if control is None:
        control = PathControl()
    if regressor_kws is None:
        regressor_kws = {}

    X, y = _check_data(X, y)
    _check_path_control(control)

    lambda_max = max_lambda(X, y)
    if control.min_lambda >= lambda_max:
        raise ValueError(f'min_lambda={control.min_lambda} should be less than '
                         f'max_lambda(X, y)={lambda_max}')

    log_increment = ((np.log(lambda_max + 1) - np.log(control.min_lambda + 1)) /
                     (control.num_lambdas - 1))
    min_gap = log_increment / control.step_divisor

    coefs = {}
    nvars_to_lambda = SparsityIndex()

    pb = tqdm(total=control.num_lambdas,
              disable=not control.progress)

    def evaluate(lambda_val):
        if lambda_val in coefs:
            coef = coefs[lambda_val]
        else:
            coef = np.asarray(regressor(X, y, lambda_val, **regressor_kws)).reshape(-1)
            coefs[lambda_val] = coef
            pb.update(1)
        nvars = _num_selected(coef)
        if nvars_to_lambda.insert_if_absent(nvars, lambda_val) and control.logging:
            logging.debug(f'{nvars} variables selected first at lambda={lambda_val}')
        return nvars

    if control.logging:
        logging.info(f'Searching lambda in [{control.min_lambda}, {lambda_max}]')

    budget_exhausted = False
    # LIFO so the lower half of an interval is exhausted before the upper half
    intervals = [(control.min_lambda, lambda_max)]

    try:
        while intervals:
            lo, hi = intervals.pop()

            if len(coefs) > control.num_lambdas:
                budget_exhausted = True
                continue
            if hi - lo <= min_gap:
                continue

            nvars_lo = evaluate(lo)
            nvars_hi = evaluate(hi)

            if nvars_lo - nvars_hi > 1:
                mid = _midpoint(lo, hi, log_space=control.log_space)
                nvars_mid = evaluate(mid)

                if control.logging:
                    logging.debug(f'Interval [{lo}, {hi}]: {nvars_lo} -> {nvars_mid} -> {nvars_hi}')

                pending = []
                if nvars_lo - nvars_mid > 1:
                    pending.append((lo, mid))
                if nvars_mid - nvars_hi > 1:
                    pending.append((mid, hi))
                intervals.extend(pending[::-1])
    finally:
        pb.close()

    if control.logging:
        if budget_exhausted:
            logging.info(f'Call budget num_lambdas={control.num_lambdas} exhausted; '
                         'some transitions may not be localized')
        logging.info(f'Adaptive path used {len(coefs)} regressor calls and found '
                     f'{len(nvars_to_lambda)} model sizes')

    return coefs, nvars_to_lambda
