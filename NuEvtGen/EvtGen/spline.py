"""
Interpolated cross section curve over an energy domain.
"""
import numpy as np
from scipy.interpolate import PchipInterpolator
import logging

from NuEvtGen.utilities.exceptions import OutOfDomainError

logger = logging.getLogger('NuEvtGen.spline')


class Spline:
    """
    monotone piecewise cubic Hermite interpolation through a set of knots

    The curve passes through every knot: evaluated at a knot energy the
    stored knot value is returned unchanged. Between knots the interpolation
    never overshoots, so a spline through non-negative cross sections stays
    non-negative. The knots are read-only once the spline is created.
    """

    def __init__(self, energies, values):
        """
        Parameters
        ----------
        energies: array of floats
            knot energies, strictly increasing
        values: array of floats
            knot values, same length as energies
        """
        energies = np.array(energies, dtype=float)
        values = np.array(values, dtype=float)
        if energies.ndim != 1 or energies.shape != values.shape:
            raise ValueError(f"energies and values need to be 1D arrays of the same length, "
                             f"got shapes {energies.shape} and {values.shape}")
        if len(energies) < 2:
            raise ValueError(f"a spline needs at least 2 knots, got {len(energies)}")
        if np.any(np.diff(energies) <= 0):
            raise ValueError("knot energies need to be strictly increasing")
        if not np.all(np.isfinite(values)):
            raise ValueError("knot values need to be finite")
        energies.flags.writeable = False
        values.flags.writeable = False
        self._energies = energies
        self._values = values
        self._interpolator = PchipInterpolator(energies, values, extrapolate=False)

    @property
    def energies(self):
        return self._energies

    @property
    def values(self):
        return self._values

    @property
    def n_knots(self):
        return len(self._energies)

    @property
    def e_min(self):
        return float(self._energies[0])

    @property
    def e_max(self):
        return float(self._energies[-1])

    def in_domain(self, energy):
        return self._energies[0] <= energy <= self._energies[-1]

    def evaluate(self, energy):
        """
        value of the curve at the given energy

        Raises OutOfDomainError if the energy is outside of the knot range.
        """
        if not self.in_domain(energy):
            raise OutOfDomainError(f"energy {energy:.4g} outside of the spline domain "
                                   f"[{self.e_min:.4g}, {self.e_max:.4g}]")
        i = np.searchsorted(self._energies, energy)
        if self._energies[i] == energy:
            return float(self._values[i])
        return float(self._interpolator(energy))

    def __call__(self, energy):
        return self.evaluate(energy)

    def __eq__(self, other):
        if not isinstance(other, Spline):
            return NotImplemented
        return np.array_equal(self._energies, other._energies) and np.array_equal(self._values, other._values)

    def __repr__(self):
        return f"Spline(n_knots={self.n_knots}, e_min={self.e_min:.4g}, e_max={self.e_max:.4g})"
