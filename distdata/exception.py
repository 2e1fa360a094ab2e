"""Exception handling.
"""

class _BaseException(Exception):
    """An exception that tries to suppress misleading context.

    `Exception Chaining and Embedded Tracebacks`_ has been introduced
    with Python 3.  Unfortunately the result is completely misleading
    most of the times.  This class supresses the context in
    :meth:`__init__`.

    .. _Exception Chaining and Embedded Tracebacks: https://www.python.org/dev/peps/pep-3134/

    """
    def __init__(self, *args):
        super().__init__(*args)
        if hasattr(self, '__cause__'):
            self.__cause__ = None

class DistDataError(_BaseException):
    pass

class ConfigurationError(DistDataError):
    pass

class ExtractionError(DistDataError):
    pass

class NotFoundError(DistDataError):
    def __init__(self, path):
        self.path = path
        super().__init__("%s: no such file or directory" % str(path))

class MetadataError(DistDataError):
    pass

class DistDataWarning(Warning):
    pass
