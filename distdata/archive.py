"""Provide the DistArchive class to read distribution archive files.
"""

import logging
from pathlib import Path, PurePosixPath
import tarfile
import zipfile
from distdata.exception import ExtractionError

log = logging.getLogger(__name__)


format_map = {
    '.tar': 'tar',
    '.tar.gz': 'tar',
    '.tgz': 'tar',
    '.tar.bz2': 'tar',
    '.tbz': 'tar',
    '.tar.xz': 'tar',
    '.zip': 'zip',
}
"""Map file name suffix to archive type."""


def _get_type(path):
    """Determine the archive type of the file at path.
    """
    name = path.name.lower()
    for suffix in sorted(format_map, key=len, reverse=True):
        if name.endswith(suffix):
            return format_map[suffix]
    # Last ressort: look at the content.
    if zipfile.is_zipfile(str(path)):
        return 'zip'
    if tarfile.is_tarfile(str(path)):
        return 'tar'
    return None


class DistArchive:

    def __init__(self):
        self.path = None
        self.type = None
        self._file = None

    def open(self, path):
        path = Path(path)
        try:
            self.type = _get_type(path)
        except OSError as e:
            raise ExtractionError(str(e))
        if self.type is None:
            raise ExtractionError("%s: unsupported archive format" % path)
        try:
            if self.type == 'tar':
                self._file = tarfile.open(str(path), 'r')
            else:
                self._file = zipfile.ZipFile(str(path), 'r')
        except (OSError, tarfile.TarError, zipfile.BadZipFile) as e:
            raise ExtractionError("%s: %s" % (path, e))
        self.path = path.resolve()
        log.debug("opened %s archive %s", self.type, self.path)
        return self

    def _check_open(self):
        if not self._file:
            raise ValueError("archive is closed.")

    @property
    def files(self):
        """List of the names of all members in archive order.
        """
        self._check_open()
        if self.type == 'tar':
            return self._file.getnames()
        else:
            return self._file.namelist()

    def is_impolite(self):
        """True unless all members are inside one top level directory.
        """
        toplevel = set()
        for name in self.files:
            parts = PurePosixPath(name).parts
            if not parts:
                continue
            if len(parts) == 1 and not self._is_dir_member(name):
                return True
            toplevel.add(parts[0])
        return len(toplevel) != 1

    def is_naughty(self):
        """True if any member would be extracted outside of the target.
        """
        for name in self.files:
            p = PurePosixPath(name)
            if p.is_absolute() or ".." in p.parts:
                return True
        return False

    def _is_dir_member(self, name):
        if self.type == 'tar':
            return self._file.getmember(name).isdir()
        else:
            return name.endswith('/')

    def extract(self, targetdir):
        self._check_open()
        if self.is_naughty():
            raise ExtractionError("%s: refusing to extract members outside "
                                  "of the target directory" % self.path)
        log.debug("extracting %s to %s", self.path, targetdir)
        try:
            if self.type == 'tar':
                self._file.extractall(path=str(targetdir), filter='tar')
            else:
                self._file.extractall(path=str(targetdir))
        except (OSError, tarfile.TarError, zipfile.BadZipFile) as e:
            raise ExtractionError("%s: %s" % (self.path, e))

    def close(self):
        if self._file:
            self._file.close()
        self._file = None

    def __enter__(self):
        return self

    def __exit__(self, type, value, tb):
        self.close()

    def __del__(self):
        self.close()
