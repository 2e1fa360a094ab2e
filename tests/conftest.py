"""pytest configuration.
"""

import os
from pathlib import Path
import shutil
import tarfile
import tempfile
import zipfile
import pytest
import distdata


__all__ = [
    'DataDir', 'DataContentFile', 'DataSymLink',
    'make_dist_archive', 'setup_testdata',
    'sample_basedir', 'sample_dist', 'sample_files', 'sample_meta_yml',
    'sample_archive',
]

_cleanup = True

def pytest_addoption(parser):
    parser.addoption("--no-cleanup", action="store_true", default=False,
                     help="do not clean up temporary data after the test.")

def pytest_configure(config):
    global _cleanup
    _cleanup = not config.getoption("--no-cleanup")

class TmpDir(object):
    """Provide a temporary directory.
    """
    def __init__(self):
        self.dir = Path(tempfile.mkdtemp(prefix="dist-data-test-"))
    def cleanup(self):
        if self.dir and _cleanup:
            shutil.rmtree(self.dir)
        self.dir = None
    def __enter__(self):
        return self.dir
    def __exit__(self, type, value, tb):
        self.cleanup()
    def __del__(self):
        self.cleanup()

@pytest.fixture(scope="module")
def tmpdir(request):
    with TmpDir() as td:
        yield td

@pytest.fixture(scope="function")
def testname(request):
    return request.function.__name__

def _set_fs_attrs(path, mode, mtime):
    if mode is not None:
        path.chmod(mode)
    if mtime is not None:
        os.utime(path, (mtime, mtime), follow_symlinks=False)

class DataItem:

    def __init__(self, path, mtime):
        self.path = path
        self.mtime = mtime

    @property
    def type(self):
        raise NotImplementedError

    def create(self, main_dir):
        raise NotImplementedError

class DataDir(DataItem):

    def __init__(self, path, mode=0o755, *, mtime=None):
        super().__init__(path, mtime)
        self.mode = mode

    @property
    def type(self):
        return 'd'

    def create(self, main_dir):
        path = main_dir / self.path
        path.mkdir(parents=True, exist_ok=True)
        _set_fs_attrs(path, self.mode, self.mtime)

class DataContentFile(DataItem):

    def __init__(self, path, data, mode=0o644, *, mtime=None):
        super().__init__(path, mtime)
        self.data = data
        self.mode = mode

    @property
    def type(self):
        return 'f'

    @property
    def size(self):
        return len(self.data)

    def create(self, main_dir):
        path = main_dir / self.path
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as f:
            f.write(self.data)
        _set_fs_attrs(path, self.mode, self.mtime)

class DataSymLink(DataItem):

    def __init__(self, path, target, *, mtime=None):
        super().__init__(path, mtime)
        self.target = target

    @property
    def type(self):
        return 'l'

    def create(self, main_dir):
        path = main_dir / self.path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.symlink_to(self.target)

def setup_testdata(main_dir, items):
    for item in sorted(items, key=lambda i: i.path):
        item.create(main_dir)

def make_dist_archive(path, main_dir, basedir):
    """Pack the directory basedir in main_dir into the archive at path.
    The archive format is taken from the suffix of path.
    """
    if path.name.endswith(".zip"):
        with zipfile.ZipFile(str(path), "w") as zf:
            zf.write(str(main_dir / basedir), arcname=str(basedir))
            for p in sorted((main_dir / basedir).rglob("*")):
                zf.write(str(p), arcname=str(p.relative_to(main_dir)))
    else:
        with tarfile.open(str(path), "w:gz") as tarf:
            tarf.add(str(main_dir / basedir), arcname=str(basedir))
    return path


sample_basedir = Path("My-Sample-Distribution-0.003")

sample_meta_yml = b"""---
abstract: 'My Sample Distribution'
author:
  - 'Torsten Raudssus <torsten@raudssus.de>'
build_requires:
  ExtUtils::MakeMaker: 6.30
configure_requires:
  ExtUtils::MakeMaker: 6.30
dynamic_config: 0
generated_by: 'Dist::Zilla version 4.200008, CPAN::Meta::Converter version 2.110440'
license: perl
meta-spec:
  url: http://module-build.sourceforge.net/META-spec-v1.4.html
  version: 1.4
name: My-Sample-Distribution
requires:
  Moo: 0.009008
resources:
  repository: git://github.com/Getty/p5-my-sample-distribution.git
version: 0.003
"""

sample_dist = [
    DataDir(sample_basedir),
    DataContentFile(sample_basedir / "Changes",
                    b"0.003  2011-03-12\n    - Sample release\n"),
    DataContentFile(sample_basedir / "LICENSE",
                    b"This software is copyright (c) 2011.\n"),
    DataContentFile(sample_basedir / "MANIFEST",
                    b"Changes\nLICENSE\nMANIFEST\nMETA.yml\nMakefile.PL\n"
                    b"README\nbin/my_sample_distribution\ndist.ini\n"
                    b"lib/My/Sample/Distribution.pm\n"
                    b"lib/My/Sample/Documentation.pod\nt/release-pod.t\n"),
    DataContentFile(sample_basedir / "META.yml", sample_meta_yml),
    DataContentFile(sample_basedir / "Makefile.PL",
                    b"use strict;\nuse warnings;\n"
                    b"use ExtUtils::MakeMaker 6.30;\n"
                    b"WriteMakefile( NAME => 'My::Sample::Distribution' );\n"),
    DataContentFile(sample_basedir / "README",
                    b"This archive contains the distribution "
                    b"My-Sample-Distribution, version 0.003.\n"),
    DataDir(sample_basedir / "bin"),
    DataContentFile(sample_basedir / "bin" / "my_sample_distribution",
                    b"#!/usr/bin/env perl\n"
                    b"use My::Sample::Distribution;\n"
                    b"My::Sample::Distribution->new->run;\n", 0o755),
    DataContentFile(sample_basedir / "dist.ini",
                    b"name = My-Sample-Distribution\n"),
    DataDir(sample_basedir / "lib"),
    DataDir(sample_basedir / "lib" / "My"),
    DataDir(sample_basedir / "lib" / "My" / "Sample"),
    DataContentFile(sample_basedir / "lib" / "My" / "Sample"
                    / "Distribution.pm",
                    b"package My::Sample::Distribution;\n"
                    b"BEGIN {\n  $My::Sample::Distribution::VERSION = '0.003';\n}\n"
                    b"# ABSTRACT: My Sample Distribution\n"
                    b"use Moo;\n\nsub run { 1 }\n\n1;\n\n"
                    b"__END__\n=pod\n\n"
                    b"=head1 NAME\n\nMy::Sample::Distribution\n\n=cut\n"),
    DataContentFile(sample_basedir / "lib" / "My" / "Sample"
                    / "Documentation.pod",
                    b"=head1 NAME\n\nMy::Sample::Documentation\n\n"
                    b"=head1 DESCRIPTION\n\n"
                    b"  package Not::A::Namespace;\n\n=cut\n"),
    DataDir(sample_basedir / "t"),
    DataContentFile(sample_basedir / "t" / "release-pod.t",
                    b"use Test::More;\nuse Test::Pod 1.41;\n"
                    b"all_pod_files_ok();\n"),
]
"""The content of the sample distribution."""

sample_files = [
    "Changes",
    "LICENSE",
    "MANIFEST",
    "META.yml",
    "Makefile.PL",
    "README",
    "bin/my_sample_distribution",
    "dist.ini",
    "lib/My/Sample/Distribution.pm",
    "lib/My/Sample/Documentation.pod",
    "t/release-pod.t",
]
"""The relative paths of all files in the sample distribution."""


def sample_archive(main_dir, ext="tar.gz"):
    """Create the sample distribution archive in main_dir, if it does
    not exist yet, and return its path.
    """
    path = main_dir / ("%s.%s" % (sample_basedir, ext))
    if not path.is_file():
        src_dir = main_dir / "src"
        if not (src_dir / sample_basedir).is_dir():
            setup_testdata(src_dir, sample_dist)
        make_dist_archive(path, src_dir, sample_basedir)
    return path


def pytest_report_header(config):
    """Add information on the package version used in the tests.
    """
    modpath = Path(distdata.__file__).resolve().parent
    return [ "dist-data: %s" % (distdata.__version__),
             "           %s" % (modpath)]
