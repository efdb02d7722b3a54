"""Exceptions for failures of the data the store platform hands us.

Missing records use ``protean.exceptions.ObjectNotFoundError`` and bad
input uses ``protean.exceptions.ValidationError``. The classes here cover
the remaining case: data that exists but could not be read or used.
"""


class UpstreamFailure(Exception):
    """Reading from the store's data layer failed or returned something unusable."""


class InventoryGraphError(UpstreamFailure):
    """A variant's inventory graph has an unexpected shape."""
