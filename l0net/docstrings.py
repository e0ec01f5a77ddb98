from dataclasses import fields

_docstrings = {
    'logging':'''
logging: bool
    Write info and debug messages to log?''',

    'progress':'''
progress: bool
    Show a `tqdm` progress bar over the regressor call budget?''',

    'lambda_val_ic':'''
lambda_val: Union[float, str]
    A single value for the `lambda` hyperparameter, or one of "aic"
    (`lambda=2`), "bic" (`lambda=log(nobs)`) or "ric"
    (`lambda=2*log(nvars)`). Defaults to 2.''',

    'epsilon':'''
epsilon: float
    Minimum coefficient magnitude; coefficients smaller than this in
    absolute value are set to zero when the iteration stops.
    Default is `1e-4`.''',

    'delta_thresh':'''
delta_thresh: float
    Convergence threshold. The iteration stops once the Euclidean norm
    of the change in coefficients is below this. Default is `1e-5`.''',

    'maxit':'''
maxit: int
    Maximum number of EM iterations. Default is `10000`.''',

    'nonnegative':'''
nonnegative: bool
    Restrict coefficients to be non-negative? Default is False.''',

    'min_lambda':'''
min_lambda: float
    Smallest `lambda` value searched. Defaults to `1e-7`; smaller
    values may fail to converge.''',

    'num_lambdas':'''
num_lambdas: int
    Budget of regressor calls. This is a guide rather than an exact
    count: the search stops subdividing once it has been exceeded,
    so a few extra calls may be made. Default is 100.''',

    'step_divisor':'''
step_divisor: float
    Intervals narrower than the nominal log-spaced increment
    divided by `step_divisor` are not subdivided further. Larger
    values find more distinct model sizes. Default is `2**12`.''',

    'log_space':'''
log_space: bool
    Bisect intervals at their geometric (rather than arithmetic)
    midpoint? Default is True.''',

    'regressor':'''
regressor: Optional[callable]
    Function with signature `regressor(X, y, lambda_val, **kws)`
    returning a coefficient vector. Defaults to `l0em`.''',

    'regressor_kws':'''
regressor_kws: dict
    Keyword arguments passed on to `regressor`. Ignored when
    `regressor` is None, in which case `control` configures `l0em`.''',

    'control_l0em': '''
control: Optional(L0EMControl)
    Parameters to control the solver.''',

    'control_l0net': '''
control: Optional(L0NetControl)
    Parameters to control the solver and the path search.''',

}


def make_docstring(*fieldnames):

    field_str = '\n\n'.join([_docstrings[f].strip() for f in fieldnames])
    return f'''
Parameters
----------

{field_str}
'''

def add_dataclass_docstring(kls, subs={}):
    """
    Add a docstring to a dataclass using entries in `._docstrings` based on the fields
    of the dataclass.
    """

    fieldnames = [f.name for f in fields(kls)]
    for k in subs:
        fieldnames[fieldnames.index(k)] = subs[k]

    kls.__doc__ = '\n'.join([kls.__doc__ or '', make_docstring(*fieldnames)])
    return kls
