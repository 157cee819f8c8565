"""Error types raised by kzstereo.

Every error is raised where it is detected and propagates unchanged up to
the command line entry point, which turns it into a one-line diagnostic and
exit status 1.
"""


class KZStereoError(Exception):
    """Base class for all kzstereo errors."""


class InvalidFraction(KZStereoError, ValueError):
    """A cost token is malformed or out of range."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"Unable to decode {token} as fraction")


class InvalidArgument(KZStereoError, ValueError):
    """A command line argument has a wrong value or count."""


class ResourceUnavailable(KZStereoError, OSError):
    """An input image could not be read."""


class ParameterDerivationError(KZStereoError, ArithmeticError):
    """Lambda cannot be derived from the occlusion cost."""


class SolverUnavailable(KZStereoError, NotImplementedError):
    """No graph-cut backend is available to run the optimization."""
