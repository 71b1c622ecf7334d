class MassDeconvError(Exception):
    """Base class for errors raised by mdkit."""


class InvalidInputError(MassDeconvError, ValueError):
    """Malformed spectrum arrays, invalid charge bounds or parameters."""


class ChargeZeroError(MassDeconvError, ZeroDivisionError):
    """Mass/charge conversion attempted at charge zero."""

    def __init__(self, message: str = "Charge cannot be zero"):
        super().__init__(message)


class ToleranceFormatError(MassDeconvError, ValueError):
    """A tolerance string could not be parsed."""


class DeconvolutionCancelled(MassDeconvError, RuntimeError):
    """The peak x charge search was aborted through a CancellationToken."""
