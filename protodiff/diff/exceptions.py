"""Diff subsystem exceptions."""


class CompareError(Exception):
    """Base class for comparison errors."""


class CompareConfigError(CompareError):
    """Invalid comparison options or options config file."""
