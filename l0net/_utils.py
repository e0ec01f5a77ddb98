import numpy as np
import pandas as pd

from sklearn.utils import check_X_y

from dataclasses import fields

def _check_data(X,
                y,
                estimator=None):
    """
    Validate `(X, y)` and return float arrays with `y` flattened
    to shape `(nobs,)`. Empty, non-finite or mismatched inputs
    raise `ValueError`.
    """

    y = np.asarray(y)
    # accept a column vector for y
    if y.ndim == 2 and y.shape[1] == 1:
        y = y.reshape(-1)

    X, y = check_X_y(X, y,
                     dtype=float,
                     y_numeric=True,
                     multi_output=False,
                     estimator=estimator)
    return X, np.asarray(y, float)

def _feature_names(X):
    if isinstance(X, pd.DataFrame):
        return list(X.columns)
    return ['X{}'.format(i) for i in range(np.shape(X)[1])]

def _num_selected(coef):
    """
    Number of selected (non-zero) coefficients.
    """
    return int(np.count_nonzero(coef))

def _parent_dataclass_from_child(cls,
                                 parent_dict,
                                 **modified_args):
    _fields = [f.name for f in fields(cls)]
    _cls_args = {k:parent_dict[k] for k in parent_dict.keys() if k in _fields}
    _cls_args.update(**modified_args)
    return cls(**_cls_args)
