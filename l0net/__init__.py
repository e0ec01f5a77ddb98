from .l0em import (L0EM,
                   L0EMControl,
                   L0EMNumericalError,
                   L0EMResult,
                   l0em,
                   l0em_fit)
from .lambdas import (max_lambda,
                      information_criterion_lambda,
                      log_spaced_lambdas)
from .path import (PathControl,
                   SparsityIndex,
                   adaptive_lambda_path)
from .l0net import (L0Net,
                    L0NetControl)
from .data import make_sparse_regression

from .info import VERSION as __version__
