"""
l0net.data
----------
Synthetic sparse regression problems.

Similar to sklearn's make_regression, but the true coefficients are
placed on a known support so that variable selection can be checked.
"""

import numpy as np
from numpy.random import default_rng


def make_sparse_regression(n_samples=100, n_features=1000, coef=None, n_informative=4,
                           noise=0.1, snr=None, shuffle=False, random_state=None):
    """
    Generate a linear regression problem `y = X @ coef + noise` with a sparse `coef`.

    Parameters
    ----------
    n_samples : int, default=100
        The number of samples.
    n_features : int, default=1000
        The total number of features. May exceed `n_samples`.
    coef : array-like, default=None
        The non-zero coefficient values. If None, uses `1, 2, ..., n_informative`.
    n_informative : int, default=4
        The number of informative features; ignored if `coef` is given.
    noise : float, default=0.1
        Standard deviation of the Gaussian noise added to the output.
    snr : float or None, default=None
        Desired signal-to-noise ratio. If set, `noise` is scaled to achieve this SNR.
    shuffle : bool, default=False
        If True the informative features are placed at random columns,
        otherwise in the first columns.
    random_state : int, Generator or None, default=None
        Determines random number generation for dataset creation.

    Returns
    -------
    X : ndarray of shape (n_samples, n_features)
        The input samples, standard normal.
    y : ndarray of shape (n_samples,)
        The response.
    coef : ndarray of shape (n_features,)
        The true coefficients.

    Examples
    --------
    >>> X, y, coef = make_sparse_regression(n_samples=50, n_features=200, random_state=0)
    >>> X.shape, y.shape, np.flatnonzero(coef)
    ((50, 200), (50,), array([0, 1, 2, 3]))
    """
    rng = default_rng(random_state)

    if coef is None:
        values = np.arange(1, n_informative + 1, dtype=float)
    else:
        values = np.asarray(coef, float).reshape(-1)
    if values.shape[0] > n_features:
        raise ValueError('more informative coefficients than features')

    if shuffle:
        support = np.sort(rng.choice(n_features, values.shape[0], replace=False))
    else:
        support = np.arange(values.shape[0])

    X = rng.standard_normal((n_samples, n_features))
    coef = np.zeros(n_features)
    coef[support] = values

    lin_pred = X @ coef
    if snr is not None:
        noise = np.sqrt(np.var(lin_pred) / snr)
    y = lin_pred + rng.normal(0, noise, size=n_samples)

    return X, y, coef
