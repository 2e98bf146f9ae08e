"""Exceptions raised by the TSP oracle core."""


class InvalidInputError(ValueError):
    """Raised when an instance or a configuration value cannot be solved."""


class SearchCancelled(Exception):
    """Raised inside a search episode when its cancellation token trips."""
