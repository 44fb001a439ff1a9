"""Exceptions raised while processing a request, mapped to error pages by the controller."""

from __future__ import annotations


class BgeeWebError(Exception):
    """Base class for request-processing errors."""


class InvalidRequestError(BgeeWebError):
    """The request is syntactically valid but cannot be served as asked."""


class ParameterError(InvalidRequestError):
    """An error tied to one specific request parameter."""

    def __init__(self, parameter: str, message: str = "") -> None:
        self.parameter = parameter
        super().__init__(message or f"Invalid value for parameter '{parameter}'.")


class InvalidFormatError(ParameterError):
    """A request parameter value does not match its expected format."""


class MultipleValuesNotAllowedError(ParameterError):
    """Several values were provided for a single-valued parameter."""


class ValueSizeExceededError(ParameterError):
    """A request parameter value exceeds its maximum allowed length."""


class GeneNotFoundError(InvalidRequestError):
    """No gene matches the requested identifier."""


class PageNotFoundError(BgeeWebError):
    """The requested page or action is not recognized."""


class TooManyJobsError(BgeeWebError):
    """A user has too many jobs running to start a new one."""


class ServiceUnavailableError(BgeeWebError):
    """A backing service (e.g. the SPARQL endpoint) could not be reached."""


class UnsupportedOperationError(NotImplementedError):
    """The requested operation is not available for the requested display type."""


__all__ = [
    "BgeeWebError",
    "InvalidRequestError",
    "ParameterError",
    "InvalidFormatError",
    "MultipleValuesNotAllowedError",
    "ValueSizeExceededError",
    "GeneNotFoundError",
    "PageNotFoundError",
    "TooManyJobsError",
    "ServiceUnavailableError",
    "UnsupportedOperationError",
]
