"""
Fragmentation functions D(z) describing the fraction z of the quark momentum
carried by the produced hadron, and sampling of z from them.
"""
import functools
import numpy as np
from scipy import integrate

import logging
logger = logging.getLogger('NuEvtGen.fragmentation_functions')


def collins_spiller_fragmentation_function(z, N, epsilon):
    """
    Collins-Spiller fragmentation function

    Parameters
    ----------
    z: float or array
        momentum fraction, 0 < z < 1
    N: float
        normalization
    epsilon: float
        shape parameter
    """
    z = np.asarray(z, dtype=float)
    return N * ((1. - z) / z + epsilon * (2. - z) / (1. - z)) * \
        (1. + z) ** 2 * (1. - 1. / z - epsilon / (1. - z)) ** (-2.)


def peterson_fragmentation_function(z, N, epsilon):
    """
    Peterson fragmentation function

    Parameters
    ----------
    z: float or array
        momentum fraction, 0 < z < 1
    N: float
        normalization
    epsilon: float
        shape parameter
    """
    z = np.asarray(z, dtype=float)
    return N / (z * (1. - 1. / z - epsilon / (1. - z)) ** 2)


fragmentation_functions = {'collins_spiller': collins_spiller_fragmentation_function,
                           'peterson': peterson_fragmentation_function}


@functools.lru_cache(maxsize=64)
def _get_inverse_cdf_interpolation(function_name, epsilon, n_points):
    # the normalization drops out of the cdf
    z = np.linspace(0, 1, n_points + 2)[1:-1]
    pdf = fragmentation_functions[function_name](z, 1., epsilon)
    cdf = integrate.cumulative_trapezoid(pdf, z, initial=0)
    cdf /= cdf[-1]
    return cdf, z


def sample_z(function_name, n, epsilon, rnd=None, n_points=2000):
    """
    samples momentum fractions z from a fragmentation function

    Parameters
    ----------
    function_name: string
        'collins_spiller' or 'peterson'
    n: int
        number of samples
    epsilon: float
        shape parameter of the fragmentation function
    rnd: random generator object
        if None is provided, a new default random generator object is initialized
    n_points: int
        number of tabulation points of the cumulative distribution

    Returns
    -------
    z: array
    """
    if function_name not in fragmentation_functions:
        msg = f"fragmentation function {function_name} is not implemented, available are {list(fragmentation_functions)}"
        logger.error(msg)
        raise NotImplementedError(msg)
    rnd = rnd or np.random.default_rng()
    cdf, z = _get_inverse_cdf_interpolation(function_name, float(epsilon), int(n_points))
    return np.interp(rnd.uniform(0, 1, size=n), cdf, z)
