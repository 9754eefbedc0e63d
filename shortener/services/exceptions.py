"""Exceptions for the URL shortener service layer.

This module contains the exception hierarchy for the service layer,
providing domain-specific exceptions that abstract underlying implementation details.
"""


class ServiceError(Exception):
    """Base exception for all service-level errors."""
    pass


class PairNotFoundError(ServiceError):
    """No pair is stored under the requested alias."""

    def __init__(self, alias: str):
        self.alias = alias
        super().__init__(f"No pair found for alias '{alias}'")


class InvalidURLError(ServiceError):
    """The submitted URL was rejected by the validation policy."""
    pass


class GenerationExhaustedError(ServiceError):
    """No free alias was found within the allowed number of attempts."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Failed to find a free alias after {attempts} attempts")


class StoreError(ServiceError):
    """The store failed while serving the request."""
    pass


class StoreUnavailableError(StoreError):
    """The store could not be reached or did not answer in time."""
    pass


class TemplateRenderError(ServiceError):
    """The confirmation page could not be rendered."""
    pass
