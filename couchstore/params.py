"""Validation of the pagination parameters.

``read_size`` is the number of rows fetched per HTTP request and ``limit``
the total number of documents a query may produce.
"""
import math
import numbers

from couchstore import exceptions

__all__ = ['DEFAULT_READ_SIZE', 'UNBOUNDED', 'parse_read_size', 'parse_limit', 'page_size']

DEFAULT_READ_SIZE = 50
UNBOUNDED = math.inf


def _is_positive_integer(value):
    return (
        isinstance(value, numbers.Integral)
        and not isinstance(value, bool)
        and value > 0
    )


def parse_read_size(value=None):
    """Return a valid read size, defaulting to `DEFAULT_READ_SIZE`.

    :raise InvalidReadSize: if `value` is not a positive integer
    """
    if value is None:
        return DEFAULT_READ_SIZE
    if not _is_positive_integer(value):
        raise exceptions.InvalidReadSize('Invalid read size: %r' % (value,))
    return int(value)


def parse_limit(value=None):
    """Return a valid query limit; `None` means `UNBOUNDED`.

    :raise InvalidLimit: if `value` is not a positive integer
    """
    if value is None or value == UNBOUNDED:
        return UNBOUNDED
    if not _is_positive_integer(value):
        raise exceptions.InvalidLimit('Invalid query limit: %r' % (value,))
    return int(value)


def page_size(read_size, remaining):
    """Number of rows to request for the next page."""
    return int(min(read_size, remaining))
