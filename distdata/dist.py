"""Provide the Distribution class.

A :class:`Distribution` gives access to the data of a distribution
archive file or of an extracted distribution directory.  All data is
computed lazily on first access and cached for the lifetime of the
object.

.. note::
   Distribution objects are not thread safe.  Concurrent first access
   to the same object from several threads is undefined.  Use one
   object per thread or add external locking.
"""

import logging
from pathlib import Path
import shutil
import tempfile
import warnings
from distdata.archive import DistArchive
from distdata.config import Config
from distdata.exception import *
from distdata.meta import DistMeta
from distdata.namespaces import namespaces_from_file
from distdata.tools import mtime_datetime, strip_components
from distdata.tree import get_directory_tree

log = logging.getLogger(__name__)


BuildMarkers = ("Makefile.PL", "Build.PL")
"""Files marking a directory as containing an extracted distribution."""

MetaFiles = ("META.yml", "META.json")
"""Metadata files in order of preference."""

LibDir = "lib"
ModuleSuffix = ".pm"
PodSuffix = ".pod"

ScriptDirs = ("bin", "script")
"""Top level directories holding scripts, in order of precedence."""


def _meta_property(name):
    """Forward the metadata field name, None if there is no metadata.
    """
    def getter(self):
        if self.meta is None:
            return None
        return getattr(self.meta, name)
    getter.__doc__ = "The %s field of the metadata." % name
    return property(getter)


class Distribution:

    def __init__(self, path=None, *, filename=None, dir=None, **options):
        if path is None and filename is None and dir is None:
            raise ConfigurationError("need a filename or a directory")
        if path is not None:
            path = Path(path)
            if path.is_file():
                filename = path
            elif path.is_dir():
                dir = path
            else:
                raise ConfigurationError("%s is neither a file nor "
                                         "a directory" % path)
        self.filename = Path(filename) if filename is not None else None
        self.dir = Path(dir) if dir is not None else None
        self.config = Config(options)
        self._dist_dir = None
        self._archive = None
        self._files = None
        self._meta = None
        self._meta_loaded = False
        self._packages = None
        self._scripts = None
        if self.has_dir() and self.has_filename():
            self.extract_distribution()

    @classmethod
    def from_archive(cls, path, **options):
        return cls(filename=path, **options)

    @classmethod
    def from_directory(cls, path, **options):
        return cls(dir=path, **options)

    @classmethod
    def from_both(cls, archive, dir, **options):
        return cls(filename=archive, dir=dir, **options)

    def has_filename(self):
        return self.filename is not None

    def has_dir(self):
        return self.dir is not None

    def _mkdtemp(self):
        return Path(tempfile.mkdtemp(prefix=self.config.tmp_prefix,
                                     dir=self.config.tmpdir))

    @property
    def dist_dir(self):
        """The directory holding the distribution.

        This is either the directory given on creation or a new
        temporary directory.
        """
        if self._dist_dir is None:
            if self.has_dir():
                self._dist_dir = self.dir
            else:
                self._dist_dir = self._mkdtemp()
                log.debug("using temporary directory %s", self._dist_dir)
        return self._dist_dir

    @property
    def archive(self):
        if self._archive is None:
            if not self.has_filename():
                raise ConfigurationError("need a filename")
            self._archive = DistArchive().open(self.filename)
        return self._archive

    def dir_has_dist(self):
        """Check whether dist_dir already contains an extracted distribution.
        """
        d = self.dist_dir
        if not d.is_dir():
            return False
        return any((d / m).is_file() for m in BuildMarkers)

    def extract_distribution(self):
        """Extract the archive into dist_dir if needed.

        Return True if the archive has been extracted, False if there
        was nothing to do.
        """
        if not self.has_filename():
            return False
        if self.dir_has_dist():
            log.debug("%s already contains a distribution", self.dist_dir)
            return False
        strip = 1
        try:
            with self.archive as archive:
                if archive.is_impolite():
                    warnings.warn(DistDataWarning("%s: archive content is "
                                                  "not in a single top level "
                                                  "directory" % self.filename))
                    strip = 0
                ext_dir = self._mkdtemp()
                archive.extract(ext_dir)
        finally:
            self._archive = None
        try:
            self.dist_dir.mkdir(parents=True, exist_ok=True)
            for entry in get_directory_tree(ext_dir):
                relpath = strip_components(entry.components, strip)
                target = self.dist_dir / relpath
                if entry.is_dir():
                    target.mkdir(exist_ok=True)
                else:
                    shutil.move(str(entry.path), str(target))
        except OSError as e:
            raise ExtractionError("%s: %s" % (self.filename, e))
        log.debug("extracted %s to %s", self.filename, self.dist_dir)
        return True

    @property
    def files(self):
        """Map the path of all files relative to dist_dir to their
        absolute path.
        """
        if self._files is None:
            self.extract_distribution()
            if self.dist_dir.is_dir():
                log.debug("reading files in %s", self.dist_dir)
                self._files = { entry.relpath: entry.path.absolute()
                                for entry in get_directory_tree(self.dist_dir)
                                if entry.is_file() }
            else:
                log.warning("%s is not a directory", self.dist_dir)
                self._files = {}
        return self._files

    def file(self, relpath):
        return self.files.get(relpath)

    @property
    def meta(self):
        """The metadata as a :class:`~distdata.meta.DistMeta` object.
        None if the distribution has no metadata file.
        """
        if not self._meta_loaded:
            for name in MetaFiles:
                path = self.file(name)
                if path:
                    self._meta = DistMeta.load_file(path)
                    break
            else:
                log.debug("no metadata found in %s", self.dist_dir)
            self._meta_loaded = True
        return self._meta

    abstract = _meta_property('abstract')
    description = _meta_property('description')
    dynamic_config = _meta_property('dynamic_config')
    generated_by = _meta_property('generated_by')
    name = _meta_property('name')
    release_status = _meta_property('release_status')
    version = _meta_property('version')
    authors = _meta_property('authors')
    keywords = _meta_property('keywords')
    licenses = _meta_property('licenses')
    meta_spec = _meta_property('meta_spec')
    resources = _meta_property('resources')
    provides = _meta_property('provides')
    no_index = _meta_property('no_index')
    prereqs = _meta_property('prereqs')
    optional_features = _meta_property('optional_features')

    @property
    def packages(self):
        """Map namespaces to the list of files declaring or documenting them.
        """
        if self._packages is None:
            packages = {}
            for key, path in self.files.items():
                if key.endswith(ModuleSuffix):
                    namespaces = namespaces_from_file(path,
                                                      self.config.encoding)
                elif (key.startswith(LibDir + "/") and
                      key.endswith(PodSuffix)):
                    name = key[len(LibDir)+1:-len(PodSuffix)]
                    namespaces = [ name.replace("/", "::") ]
                else:
                    continue
                for ns in namespaces:
                    packages.setdefault(ns, []).append(key)
            self._packages = packages
        return self._packages

    @property
    def scripts(self):
        """Map the script names to their path relative to dist_dir.

        The script name is the path with the leading bin or script
        directory removed.  If both directories contain a script of
        the same name, the one in bin wins.
        """
        if self._scripts is None:
            scripts = {}
            for sdir in ScriptDirs:
                prefix = sdir + "/"
                for key in self.files:
                    if key.startswith(prefix):
                        scripts.setdefault(key[len(prefix):], key)
            self._scripts = scripts
        return self._scripts

    def modified(self):
        """Modification time of the archive file or the directory.
        """
        path = self.filename if self.has_filename() else self.dir
        return mtime_datetime(path)

    def __repr__(self):
        return ("%s(filename=%r, dir=%r)"
                % (self.__class__.__name__,
                   str(self.filename) if self.filename else None,
                   str(self.dir) if self.dir else None))
