from __future__ import annotations

import functools
from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from protoc_gengo.locations import LocationIndex
from protoc_gengo.models import File, GoIdent

PROTO_PACKAGE = "github.com/golang/protobuf/proto"
TEMPLATE_DIR = Path(__file__).parent.parent / "templates"


def proto_ident(name: str) -> GoIdent:
    """Identifier from the Go protobuf runtime package."""
    return GoIdent(name, PROTO_PACKAGE)


@functools.lru_cache(maxsize=1)
def get_template_env() -> Environment:
    """Environment shared by all emitters; it keeps parsed templates cached."""
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


@dataclass
class FileContext:
    """Per-file state shared by the emitters while one file is generated."""

    file: File
    locations: LocationIndex
    descriptor_var: str
