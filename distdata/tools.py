"""A collection of internal helper routines.

.. note::
   This module is intended for the internal use in dist-data and is
   not considered to be part of the API.  No effort will be made to
   keep anything in here compatible between different versions.
"""

import datetime
import os
import packaging.version
from distdata.exception import NotFoundError


class Version(packaging.version.Version):
    """A variant of packaging.version.Version.

    This version adds comparison with strings.  It is used for the
    meta-spec version of distribution metadata.

    >>> version = Version('1.4')
    >>> version == '1.4'
    True
    >>> version < '2'
    True
    >>> version = Version('2')
    >>> version >= '1.4'
    True
    >>> version == '2.0'
    True
    """
    def __lt__(self, other):
        if isinstance(other, str):
            other = type(self)(other)
        return super().__lt__(other)
    def __le__(self, other):
        if isinstance(other, str):
            other = type(self)(other)
        return super().__le__(other)
    def __eq__(self, other):
        if isinstance(other, str):
            other = type(self)(other)
        return super().__eq__(other)
    def __ge__(self, other):
        if isinstance(other, str):
            other = type(self)(other)
        return super().__ge__(other)
    def __gt__(self, other):
        if isinstance(other, str):
            other = type(self)(other)
        return super().__gt__(other)
    def __ne__(self, other):
        if isinstance(other, str):
            other = type(self)(other)
        return super().__ne__(other)
    __hash__ = packaging.version.Version.__hash__


def mtime_datetime(path):
    """Return the modification time of path as an aware UTC datetime.
    """
    try:
        mtime = os.stat(path).st_mtime
    except FileNotFoundError:
        raise NotFoundError(path)
    return datetime.datetime.fromtimestamp(mtime, tz=datetime.timezone.utc)


def strip_components(components, count=1):
    """Drop the leading count items from a sequence of path components
    and return the remaining ones joined with slashes.
    """
    return "/".join(components[count:])
