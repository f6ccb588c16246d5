"""Exception hierarchy shared across snipgen components."""


class SnipgenError(Exception):
    """Base class for errors raised by snipgen."""
