"""
Held-out scores for the models found along a `lambda` path.
"""

from dataclasses import dataclass

import numpy as np

from sklearn.metrics import (mean_squared_error,
                             mean_absolute_error,
                             r2_score)


@dataclass(frozen=True)
class Scorer(object):
    """
    A named prediction score.

    Parameters
    ----------
    name: str
        Column name used in score tables.
    score: callable
        Called as `score(y_true, y_pred, sample_weight=w)`.
    maximize: bool
        Is a larger score better?
    normalize_weights: bool
        Rescale the weights of each fold to have mean 1 before scoring?
    """

    name: str
    score: callable = None
    maximize: bool = True
    normalize_weights: bool = True

    def score_fn(self,
                 split,
                 response,
                 predictions,
                 sample_weight=None):
        """
        Score `predictions` on the observations in `split`.

        Returns
        -------
        tuple
            The score and the total weight of `split`, used to
            average scores over folds.
        """
        if sample_weight is None:
            sample_weight = np.ones(response.shape[0])
        fold_weight = np.asarray(sample_weight)[split]

        total = fold_weight.sum()
        if self.normalize_weights:
            fold_weight = fold_weight / fold_weight.mean()

        value = self.score(response[split],
                           predictions[split],
                           sample_weight=fold_weight)
        return value, total


mse_scorer = Scorer(name='Mean Squared Error',
                    score=mean_squared_error,
                    maximize=False)

mae_scorer = Scorer(name='Mean Absolute Error',
                    score=mean_absolute_error,
                    maximize=False)

r2_scorer = Scorer(name='R2',
                   score=r2_score,
                   maximize=True)
