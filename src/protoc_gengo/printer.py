from __future__ import annotations

import posixpath
from typing import Dict, List

from protoc_gengo.models import GoIdent
from protoc_gengo.naming import clean_package_name, go_quote


class GeneratedFile:
    """Output buffer for one generated Go file.

    Lines are only ever appended. Deferred ``init`` statements collected while
    walking declarations are kept separately in :attr:`init` and written out
    by the caller once all declarations are done.
    """

    def __init__(self, filename: str, go_import_path: str):
        self.filename = filename
        self.go_import_path = go_import_path
        self.init: List[str] = []
        self._lines: List[str] = []
        self._imports: Dict[str, str] = {}
        self._import_mark = -1

    def P(self, *args) -> None:
        """Append one line made of ``args``; no arguments appends a blank line."""
        self._lines.append("".join(str(a) for a in args))

    def write(self, text: str) -> None:
        """Append a rendered block; a single trailing newline is not a line."""
        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        self._lines.extend(lines)

    def mark_imports(self) -> None:
        """Remember the current position as the place for the import block."""
        self._import_mark = len(self._lines)

    def qualified_go_ident(self, ident: GoIdent) -> str:
        """Return ``ident`` as referenced from this file, recording its import."""
        if ident.go_import_path == self.go_import_path:
            return ident.go_name
        alias = self._imports.get(ident.go_import_path)
        if alias is None:
            alias = clean_package_name(posixpath.basename(ident.go_import_path))
            self._imports[ident.go_import_path] = alias
        return f"{alias}.{ident.go_name}"

    @property
    def imports(self) -> Dict[str, str]:
        return dict(self._imports)

    def _import_lines(self) -> List[str]:
        if not self._imports:
            return []
        lines = ["import ("]
        for path in sorted(self._imports):
            lines.append(f"\t{self._imports[path]} {go_quote(path)}")
        lines.append(")")
        lines.append("")
        return lines

    def lines(self) -> List[str]:
        if self._import_mark < 0:
            lines = list(self._lines)
        else:
            lines = (
                self._lines[: self._import_mark]
                + self._import_lines()
                + self._lines[self._import_mark:]
            )
        while lines and lines[-1] == "":
            lines.pop()
        return lines

    def content(self) -> str:
        return "\n".join(self.lines()) + "\n"
