"""Access the data of a CPAN style software distribution

This package provides read-only access to a distribution archive
file, such as My-Sample-Distribution-0.003.tar.gz, or to an already
extracted distribution directory.  It lists the files, parses the
META.yml or META.json metadata, and derives the namespaces declared in
the distribution and the scripts it ships.
"""

from ._meta import version as __version__
from .dist import Distribution
from .exception import *
