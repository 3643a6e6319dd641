"""Exceptions raised by the SVG adapter."""


class XastParseError(ValueError):
    """No tree could be produced from the source markup."""


class InvalidAttributeError(ValueError):
    """An attribute record has a missing name or value."""


class InvalidMutationError(ValueError):
    """A structural edit would leave the tree inconsistent."""
