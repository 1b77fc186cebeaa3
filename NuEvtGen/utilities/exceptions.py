"""
Exceptions raised by the spline cache, the event generator driver and the
command line utilities.

Each one derives from the builtin exception that would otherwise be raised,
so ``except ValueError`` or ``except KeyError`` keeps working.
"""


class ConfigurationError(ValueError):
    """
    Missing or conflicting configuration (command line or channel setup).

    ``exit_code`` is the process exit code used by the command line utilities.
    """

    def __init__(self, message, exit_code=1):
        super().__init__(message)
        self.exit_code = exit_code


class BuildFailure(RuntimeError):
    """The integration of a single channel's cross section spline failed."""

    def __init__(self, message, channel=None):
        super().__init__(message)
        self.channel = channel


class OutOfDomainError(ValueError):
    """A spline was evaluated outside of the energy range it was built for."""


class NotFoundError(KeyError):
    """No spline exists for the requested channel."""

    def __str__(self):
        # KeyError quotes its argument, we want the plain message
        return str(self.args[0]) if self.args else ""


class NoViableChannelError(RuntimeError):
    """All selection weights are zero: no interaction is possible."""


class InvalidScaleError(ValueError):
    """A path length was scaled with a negative factor."""
