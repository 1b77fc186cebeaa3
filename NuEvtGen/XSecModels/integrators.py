"""
Numerical integrators used by the cross section models.

The integrators use fixed-order Gauss-Legendre product rules, so the result
for a given integrand is fully deterministic. This matters because the
integrated cross sections end up as spline knots that event sampling
depends on.
"""
import functools
import numpy as np


@functools.lru_cache(maxsize=16)
def _gauss_legendre_nodes(order):
    return np.polynomial.legendre.leggauss(order)


class GaussLegendreIntegrator:
    """
    fixed-order Gauss-Legendre integration in one and two dimensions

    Parameters
    ----------
    order: int
        number of nodes along each dimension
    """

    def __init__(self, order=48):
        if order < 2:
            raise ValueError(f"Gauss-Legendre order needs to be at least 2, not {order}")
        self._order = int(order)

    @property
    def order(self):
        return self._order

    def _nodes(self, a, b):
        x, w = _gauss_legendre_nodes(self._order)
        half = 0.5 * (b - a)
        return a + half * (x + 1.), half * w

    def integrate_1d(self, func, a, b):
        """
        integrates func from a to b

        func is called once with the array of all nodes and needs to return an
        array of the same shape.
        """
        if b <= a:
            return 0.
        x, w = self._nodes(a, b)
        return float(np.sum(w * func(x)))

    def integrate_2d(self, func, range_x, range_y):
        """
        integrates func(x, y) over the rectangle range_x times range_y

        func is called once with two 2D arrays (meshgrid of the nodes).
        """
        (ax, bx), (ay, by) = range_x, range_y
        if bx <= ax or by <= ay:
            return 0.
        x, wx = self._nodes(ax, bx)
        y, wy = self._nodes(ay, by)
        xx, yy = np.meshgrid(x, y, indexing='ij')
        return float(np.sum(np.outer(wx, wy) * func(xx, yy)))
