from dataclasses import dataclass, field

import numpy as np
import pandas as pd

import warnings

from .scoring import mse_scorer

@dataclass
class PathScorer(object):
    """Scorer for model sizes found along a `lambda` path.

    Parameters
    ----------
    response : np.ndarray
        Observed response.
    predictions : np.ndarray
        Array of predictions, one column per model.
    sample_weight : np.ndarray, optional
        Sample weights.
    splits : list, default_factory=list
        List of test splits, one per fold.
    compute_std_error : bool, default=True
        Whether to compute standard errors across splits.
    index : pd.Index, optional
        Index for the models, ordered by increasing number of selected variables.
    """

    response: np.ndarray
    predictions: np.ndarray
    sample_weight: np.ndarray = None
    splits: list = field(default_factory=list)
    compute_std_error: bool = True
    index: pd.Index = None

    def __post_init__(self):
        if self.sample_weight is None:
            self.sample_weight = np.ones(self.response.shape[0])
        if not self.splits:
            self.splits = [np.arange(self.response.shape[0])]

    def compute_scores(self,
                       scorers=[]):
        """Compute scores for each model.

        Parameters
        ----------
        scorers : list, default=[]
            List of scorers to use. Mean squared error is always included.

        Returns
        -------
        tuple
            Tuple of (scores, index_best, index_1se).
        """

        self.scorers = [mse_scorer] + [s for s in scorers if s != mse_scorer]

        score_dict = self._get_scores(self.scorers)
        df_dict = {}

        for scorer in self.scorers:
            val_W = score_dict[scorer]
            val = val_W[:,:,0]
            W = val_W[:,:,1]
            mask = ~np.isnan(val)
            count = mask.sum(1)
            val = np.where(mask, val, 0)
            mean_ = np.sum(val * mask * W, 1) / np.sum(mask * W, 1)
            df_dict[scorer.name] = mean_

            if self.compute_std_error:
                resid = val - mean_[:,None]
                std_ = np.sqrt(np.sum(resid**2 * mask * W, 1) / (np.sum(mask * W, 1) * (count-1)))
                df_dict[f'SD({scorer.name})'] = std_

        self.scores_ = pd.DataFrame(df_dict,
                                    index=self.index)

        index_best_, index_1se_ = _tune(self.scorers,
                                        self.scores_,
                                        compute_std_error=self.compute_std_error)

        return self.scores_, index_best_, index_1se_

    def _get_scores(self,
                    scorers):
        """Score every model on every split.

        Returns
        -------
        dict
            Maps each scorer to an array of shape (n_models, n_splits, 2)
            holding (value, weight_sum).
        """

        final_scores = {}
        for cur_scorer in scorers:
            scores = []
            for i in np.arange(self.predictions.shape[1]):
                cur_scores = []
                for f, split in enumerate(self.splits):
                    try:
                        val, w = cur_scorer.score_fn(split,
                                                     self.response,
                                                     self.predictions[:,i],
                                                     sample_weight=self.sample_weight)
                    except ValueError as e:
                        warnings.warn(f'Scorer "{cur_scorer.name}" failed on fold {f}, model {i}: {e}')
                        val, w = np.nan, 0.
                    cur_scores.append([val, w])
                scores.append(cur_scores)
            final_scores[cur_scorer] = np.array(scores, float)

        return final_scores


def _tune(scorers,
          scores,
          compute_std_error=True):
    """Pick the best model, and the smallest model within one standard error of it.

    Rows of `scores` are assumed ordered by increasing model size.

    Returns
    -------
    tuple
        Tuple of (index_best, index_1se) as `pd.Series` keyed by scorer name.
    """

    index_best_ = []
    index_1se_ = []

    for scorer in scorers:
        picker = {False:np.argmin, True:np.argmax}[scorer.maximize]

        _mean = np.asarray(scores[scorer.name])
        _best_idx = picker(_mean)
        index_best_.append((scorer.name, scores.index[_best_idx]))

        if compute_std_error:
            _std = np.asarray(scores[f'SD({scorer.name})'])
            if not scorer.maximize:
                _1se_idx = np.nonzero(_mean <= (_mean + _std)[_best_idx])[0].min()
            else:
                _1se_idx = np.nonzero(_mean >= (_mean - _std)[_best_idx])[0].min()
            index_1se_.append((scorer.name, scores.index[_1se_idx]))

    index_best_ = pd.Series([v for _, v in index_best_],
                            index=[k for k, _ in index_best_],
                            name='index_best')
    if compute_std_error:
        index_1se_ = pd.Series([v for _, v in index_1se_],
                               index=[k for k, _ in index_1se_],
                               name='index_1se')
    else:
        index_1se_ = None

    return index_best_, index_1se_
