""" This file contains defines parameters for l0net that we use to fill
settings in setup.py and the l0net top-level docstring.
"""

CLASSIFIERS = ["Development Status :: 3 - Alpha",
               "Environment :: Console",
               "Intended Audience :: Science/Research",
               "License :: OSI Approved :: BSD License",
               "Operating System :: OS Independent",
               "Programming Language :: Python",
               "Topic :: Scientific/Engineering"]

description  = 'L0-penalized regression via EM with adaptive lambda paths'

# versions
NUMPY_MIN_VERSION = '1.22'
SCIPY_MIN_VERSION = '1.8'
PANDAS_MIN_VERSION = '1.4'
SKLEARN_MIN_VERSION = '1.3'
TQDM_MIN_VERSION = '4.60'

NAME                = 'l0net'
VERSION             = '0.1.0'
MAINTAINER          = "l0net developers"
MAINTAINER_EMAIL    = ""
DESCRIPTION         = description
LONG_DESCRIPTION    = description
URL                 = ""
DOWNLOAD_URL        = ""
LICENSE             = "BSD license"
CLASSIFIERS         = CLASSIFIERS
AUTHOR              = "l0net developers"
AUTHOR_EMAIL        = ""
PLATFORMS           = "OS Independent"
STATUS              = 'alpha'
PROVIDES            = []
REQUIRES            = ["numpy>=%s" % NUMPY_MIN_VERSION,
                       "scipy>=%s" % SCIPY_MIN_VERSION,
                       "pandas>=%s" % PANDAS_MIN_VERSION,
                       "scikit-learn>=%s" % SKLEARN_MIN_VERSION,
                       "tqdm>=%s" % TQDM_MIN_VERSION,
                       ]
TESTS_REQUIRE       = ["pytest",
                       "statsmodels"]
