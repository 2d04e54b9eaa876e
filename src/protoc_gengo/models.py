from __future__ import annotations

from dataclasses import dataclass
from enum import Enum as _Enum
from typing import Tuple

from google.protobuf import descriptor_pb2


class SchemaRevision(_Enum):
    """Syntax revision a file was written in."""

    PROTO2 = "proto2"
    PROTO3 = "proto3"
    EDITIONS = "editions"

    @classmethod
    def from_syntax(cls, syntax: str) -> "SchemaRevision":
        if syntax in ("", "proto2"):
            return cls.PROTO2
        return cls(syntax)

    @property
    def has_legacy_enum_helpers(self) -> bool:
        """Whether enums get the Enum() and UnmarshalJSON helpers."""
        return self is not SchemaRevision.PROTO3


@dataclass(frozen=True)
class GoIdent:
    go_name: str
    go_import_path: str

    def __str__(self) -> str:
        return self.go_name


@dataclass(frozen=True)
class EnumValue:
    proto: descriptor_pb2.EnumValueDescriptorProto
    full_name: str
    go_ident: GoIdent
    path: Tuple[int, ...]

    @property
    def name(self) -> str:
        return self.proto.name

    @property
    def number(self) -> int:
        return self.proto.number


@dataclass(frozen=True)
class Enum:
    proto: descriptor_pb2.EnumDescriptorProto
    full_name: str
    go_ident: GoIdent
    path: Tuple[int, ...]
    revision: SchemaRevision
    values: Tuple[EnumValue, ...] = ()

    @property
    def name(self) -> str:
        return self.proto.name


@dataclass(frozen=True)
class Message:
    proto: descriptor_pb2.DescriptorProto
    full_name: str
    go_ident: GoIdent
    path: Tuple[int, ...]
    enums: Tuple[Enum, ...] = ()
    messages: Tuple["Message", ...] = ()

    @property
    def name(self) -> str:
        return self.proto.name


@dataclass(frozen=True)
class File:
    proto: descriptor_pb2.FileDescriptorProto
    generate: bool
    go_package_name: str
    go_import_path: str
    generated_filename_prefix: str
    revision: SchemaRevision
    enums: Tuple[Enum, ...] = ()
    messages: Tuple[Message, ...] = ()

    @property
    def path(self) -> str:
        return self.proto.name

    @property
    def package(self) -> str:
        return self.proto.package
