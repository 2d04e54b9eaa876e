from __future__ import annotations

import posixpath
from enum import Enum
from typing import Dict, Optional

GO_KEYWORDS = frozenset({
    "break", "case", "chan", "const", "continue", "default", "defer", "else",
    "fallthrough", "for", "func", "go", "goto", "if", "import", "interface",
    "map", "package", "range", "return", "select", "struct", "switch", "type",
    "var",
})

_GO_ESCAPES: Dict[str, str] = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}


class PathsMode(Enum):
    """Where generated files are placed relative to the output directory."""

    IMPORT = "import"
    SOURCE_RELATIVE = "source_relative"


def _is_lower(c: str) -> bool:
    return "a" <= c <= "z"


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def go_camel_case(name: str) -> str:
    """Convert a dotted/underscored proto name to a Go identifier.

    Follows protoc-gen-go's rules:
    - "foo_bar" -> "FooBar"
    - "Outer.Inner" -> "Outer_Inner"
    - a leading underscore becomes "X" ("_foo" -> "XFoo")
    """
    out = []
    i = 0
    while i < len(name):
        c = name[i]
        if c == "." and i + 1 < len(name) and _is_lower(name[i + 1]):
            # Skip over '.' in ".{{lowercase}}"
            pass
        elif c == ".":
            out.append("_")
        elif c == "_" and (i == 0 or name[i - 1] == "."):
            out.append("X")
        elif c == "_" and i + 1 < len(name) and _is_lower(name[i + 1]):
            # Skip over '_' in "_{{lowercase}}"
            pass
        elif _is_digit(c):
            out.append(c)
        else:
            if _is_lower(c):
                c = c.upper()
            out.append(c)
            while i + 1 < len(name) and _is_lower(name[i + 1]):
                i += 1
                out.append(name[i])
        i += 1
    return "".join(out)


def go_sanitized(name: str) -> str:
    """Replace characters not valid in a Go identifier and avoid keywords."""
    chars = [c if (c == "_" or c.isalnum()) else "_" for c in name]
    result = "".join(chars)
    if result in GO_KEYWORDS or not result or not result[0].isalpha():
        result = "_" + result
    return result


def clean_package_name(name: str) -> str:
    return go_sanitized(name)


def _split_go_package(go_package: str):
    """Split a go_package option into (import_path, package_name)."""
    if ";" in go_package:
        import_path, package_name = go_package.split(";", 1)
        return import_path, package_name
    return go_package, ""


def go_import_path(file_name: str, go_package: str = "", override: Optional[str] = None) -> str:
    """Resolve the Go import path of the package generated for a proto file.

    An explicit ``M<file>=<path>`` override wins over the go_package option;
    without either, the directory of the proto file is used.
    """
    if override:
        return _split_go_package(override)[0]
    if go_package:
        return _split_go_package(go_package)[0]
    return posixpath.dirname(file_name) or "."


def go_package_name(file_name: str, proto_package: str = "", go_package: str = "",
                    override: Optional[str] = None) -> str:
    for source in (override, go_package):
        if not source:
            continue
        import_path, package_name = _split_go_package(source)
        if package_name:
            return clean_package_name(package_name)
        return clean_package_name(posixpath.basename(import_path))
    if proto_package:
        return clean_package_name(proto_package)
    stem = posixpath.splitext(posixpath.basename(file_name))[0]
    return clean_package_name(stem)


def generated_filename_prefix(file_name: str, import_path: str,
                              paths: PathsMode = PathsMode.IMPORT) -> str:
    """Output file name, without suffix, for a proto file."""
    prefix = file_name
    if prefix.endswith(".proto"):
        prefix = prefix[: -len(".proto")]
    if paths is PathsMode.IMPORT and import_path not in ("", "."):
        prefix = posixpath.join(import_path, posixpath.basename(prefix))
    return prefix


def go_quote(value: str) -> str:
    """Render a Go interpreted string literal, as Go's strconv.Quote does."""
    out = ['"']
    for ch in value:
        if ch in _GO_ESCAPES:
            out.append(_GO_ESCAPES[ch])
            continue
        code = ord(ch)
        if ch.isprintable():
            out.append(ch)
        elif code < 0x20 or code == 0x7F:
            out.append(f"\\x{code:02x}")
        elif code < 0x10000:
            out.append(f"\\u{code:04x}")
        else:
            out.append(f"\\U{code:08x}")
    out.append('"')
    return "".join(out)
