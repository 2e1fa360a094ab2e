"""Extract the namespaces declared in Perl source files.

A namespace is declared by a package statement, in one of the forms::

    package Foo::Bar;
    package Foo::Bar 1.23;
    package Foo::Bar { ... }
    package Foo::Bar v1.2.3 { ... }

Package statements inside POD, comments and here-documents are
ignored, as well as everything after ``__END__`` or ``__DATA__``.
"""

import logging
from pathlib import Path
import re
from lark import Lark, Transformer
from lark.exceptions import UnexpectedInput

log = logging.getLogger(__name__)


_pkg_grammar = r"""
    statement: "package" NAMESPACE [VERSION] _END

    _END: ";" | "{"

    NAMESPACE: /[A-Za-z_]\w*(?:(?:::|')\w+)*/
    VERSION: /v?\d+(?:\.\d+)*(?:_\d+)?/

    %import common.WS
    %ignore WS
"""

class _PkgTf(Transformer):

    def statement(self, l):
        # The old style package separator ' is the same as ::
        return str(l[0]).replace("'", "::")

_pkg_parser = Lark(_pkg_grammar,
                   start='statement', parser='lalr', transformer=_PkgTf(),
                   maybe_placeholders=False)


_pod_start_re = re.compile(r"^=[a-zA-Z]")
_pod_end_re = re.compile(r"^=cut\b")
_end_re = re.compile(r"^__(?:END|DATA)__\b")
_comment_re = re.compile(r"(?:^|(?<=\s))#.*$")
_heredoc_re = re.compile(r"""<<(~?)(?:\s*(["'])([A-Za-z_]\w*)\2|([A-Za-z_]\w*))""")
_stmt_re = re.compile(r"(?:^|(?<=[;{}]))[ \t]*(package\s[^;{}]*[;{])", re.M)


def _code_lines(lines):
    """Yield the lines of Perl code, leaving out POD, here-documents,
    comments, and everything after __END__ or __DATA__.
    """
    in_pod = False
    heredocs = []
    for line in lines:
        line = line.rstrip("\r\n")
        if heredocs:
            indented, term = heredocs[0]
            if (line.strip() if indented else line) == term:
                heredocs.pop(0)
            continue
        if in_pod:
            if _pod_end_re.match(line):
                in_pod = False
            continue
        if _pod_start_re.match(line):
            in_pod = True
            continue
        if _end_re.match(line):
            break
        line = _comment_re.sub("", line)
        for m in _heredoc_re.finditer(line):
            heredocs.append((bool(m.group(1)), m.group(3) or m.group(4)))
        yield line


def namespaces_from_source(source):
    """Return the list of namespaces declared in the Perl source code.

    The namespaces are returned in the order of their first
    declaration, each one only once.
    """
    if isinstance(source, str):
        source = source.splitlines()
    lines = list(source)
    if lines and lines[0].startswith("\ufeff"):
        lines[0] = lines[0][1:]
    code = "\n".join(_code_lines(lines))
    namespaces = []
    for m in _stmt_re.finditer(code):
        try:
            ns = _pkg_parser.parse(m.group(1))
        except UnexpectedInput:
            log.debug("ignoring %r: not a package statement", m.group(1))
            continue
        if ns not in namespaces:
            namespaces.append(ns)
    return namespaces


def namespaces_from_file(path, encoding="utf-8"):
    """Return the list of namespaces declared in the Perl source file.
    """
    with Path(path).open("rt", encoding=encoding, errors="replace") as f:
        return namespaces_from_source(f)
