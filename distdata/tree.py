"""Walk a directory tree.
"""

from pathlib import Path


class TreeEntry:
    """A file or directory found below the root of a directory tree.
    """

    def __init__(self, path, components):
        self.path = path
        self.components = tuple(components)

    @property
    def relpath(self):
        """The path relative to the root, joined with slashes.
        """
        return "/".join(self.components)

    def is_dir(self):
        return self.path.is_dir() and not self.path.is_symlink()

    def is_file(self):
        return self.path.is_file()

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self.relpath)


def iter_tree(root, _components=()):
    """Iterate over all descendants of the directory root.

    Yield a :class:`TreeEntry` for each entry, depth first.  A
    directory is yielded before its content, the entries of each
    directory are sorted by name.  Symbolic links to directories are
    yielded but not followed.
    """
    root = Path(root)
    for p in sorted(root.iterdir(), key=lambda p: p.name):
        entry = TreeEntry(p, _components + (p.name,))
        yield entry
        if entry.is_dir():
            yield from iter_tree(p, entry.components)


def get_directory_tree(root):
    """Return the list of all entries in the directory tree below root.
    """
    return list(iter_tree(root))
