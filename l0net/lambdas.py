"""
l0net.lambdas
-------------
Choices of the `lambda` hyperparameter for L0-penalized regression:
an upper bound to seed a path search, the classical information
criteria, and a fixed log-spaced grid.
"""

import numpy as np

from ._utils import _check_data


def max_lambda(X, y):
    r"""
    Heuristic upper end of the `lambda` range for L0EM.

    For each column $j$ this computes

    .. math::

        \lambda_j = \frac{(\sum_i X_{ij} y_i)^2}{4 \sum_i X_{ij}^2}

    which is the value above which feature $j$ on its own would no
    longer be selected, and returns $\max_j \lambda_j$.

    Parameters
    ----------
    X: np.ndarray
        Input matrix, of shape `(nobs, nvars)`.
    y: np.ndarray
        Response variable, of shape `(nobs,)`.

    Returns
    -------
    float
        The largest per-feature value $\lambda_j$.

    Notes
    -----
    This is a univariate argument applied to each feature separately.
    With correlated features the smallest `lambda` at which L0EM
    selects nothing can be above or below this value, so treat it as
    a starting point for a search rather than as an exact bound.
    Columns that are identically zero contribute 0.
    """
    X, y = _check_data(X, y)

    Xty = X.T @ y
    col_ss = (X**2).sum(0)
    lambdas = np.zeros(X.shape[1])
    nonzero = col_ss > 0
    lambdas[nonzero] = Xty[nonzero]**2 / (4 * col_ss[nonzero])
    return float(lambdas.max())


def information_criterion_lambda(criterion,
                                 nobs,
                                 nvars):
    """
    `lambda` implied by an information criterion.

    Parameters
    ----------
    criterion: str
        One of "aic" (2), "bic" (`log(nobs)`) or "ric" (`2*log(nvars)`).
    nobs: int
        Number of observations.
    nvars: int
        Number of features.

    Returns
    -------
    float
    """
    criterion = criterion.lower()
    if criterion == 'aic':
        return 2.
    elif criterion == 'bic':
        return float(np.log(nobs))
    elif criterion == 'ric':
        return float(2 * np.log(nvars))
    raise ValueError(f"criterion should be one of 'aic', 'bic', 'ric', got '{criterion}'")


def log_spaced_lambdas(X,
                       y,
                       num_lambdas=10,
                       offset=1e-6):
    """
    Fixed grid of `num_lambdas` values equally spaced in `log(lambda + 1)`
    from 0 to `log(max_lambda(X, y) + 1)`, shifted by `offset`.

    This is the non-adaptive alternative to `adaptive_lambda_path`.
    """
    if num_lambdas < 1:
        raise ValueError('num_lambdas should be at least 1')
    lambda_max = max_lambda(X, y)
    return np.exp(np.linspace(0, np.log(lambda_max + 1), num_lambdas)) - 1 + offset
