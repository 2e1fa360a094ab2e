#! /usr/bin/python
"""Access the data of a CPAN style software distribution

This package provides read-only access to a distribution archive
file, such as My-Sample-Distribution-0.003.tar.gz, or to an already
extracted distribution directory.  The following information is
available:

+ The list of files in the distribution.

+ The metadata from META.yml or META.json, such as name, version,
  authors, licenses, and prerequisites.

+ The namespaces declared in the modules of the distribution and the
  files declaring or documenting them.

+ The scripts shipped in the bin or script directories.

An archive is extracted into a temporary directory on first access,
unless the target directory given already contains the distribution.
"""

import logging
from pathlib import Path
import re
import setuptools
from setuptools import setup
import setuptools.command.build_py

log = logging.getLogger(__name__)

def _read_version():
    try:
        text = Path("distdata", "_meta.py").read_text()
    except OSError:
        return None
    m = re.search(r'^version\s*=\s*"([^"]+)"', text, re.M)
    return m.group(1) if m else None

try:
    import setuptools_scm
    version = setuptools_scm.get_version()
except (ImportError, LookupError):
    version = _read_version()
    if not version:
        log.warning("warning: cannot determine version number")
        version = "UNKNOWN"

docstring = __doc__


class meta(setuptools.Command):

    description = "generate meta files"
    user_options = []
    meta_template = '''
version = "%(version)s"
'''

    def initialize_options(self):
        pass

    def finalize_options(self):
        pass

    def run(self):
        version = self.distribution.get_version()
        log.info("version: %s", version)
        values = {
            'version': version,
        }
        with Path("distdata", "_meta.py").open("wt") as f:
            print(self.meta_template % values, file=f)


class build_py(setuptools.command.build_py.build_py):
    def run(self):
        self.run_command('meta')
        super().run()


setup(
    name = "dist-data",
    version = version,
    description = docstring.split("\n")[0],
    long_description = docstring.split("\n", maxsplit=2)[2].strip(),
    long_description_content_type = "text/plain",
    author = "dist-data developers",
    license = "Apache-2.0",
    classifiers = [
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Libraries :: Perl Modules",
        "Topic :: System :: Archiving",
    ],
    packages = ["distdata"],
    python_requires = ">=3.12",
    install_requires = ["PyYAML", "packaging", "lark"],
    extras_require = {
        "test": ["pytest"],
    },
    cmdclass = dict(build_py=build_py, meta=meta),
)
