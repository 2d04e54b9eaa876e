from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from google.protobuf import descriptor_pb2

from protoc_gengo import naming
from protoc_gengo.locations import (
    ENUM_VALUE_FIELD,
    FILE_ENUM_FIELD,
    FILE_MESSAGE_FIELD,
    MESSAGE_ENUM_FIELD,
    MESSAGE_NESTED_FIELD,
)
from protoc_gengo.models import Enum, EnumValue, File, GoIdent, Message, SchemaRevision


@dataclass(frozen=True)
class _FileScope:
    package: str
    go_import_path: str
    revision: SchemaRevision


def _full_name(package: str, scope: str) -> str:
    return f"{package}.{scope}" if package else scope


def _scoped(parent_scope: str, name: str) -> str:
    return f"{parent_scope}.{name}" if parent_scope else name


def build_file(
    file_proto: descriptor_pb2.FileDescriptorProto,
    generate: bool = False,
    import_override: Optional[str] = None,
    paths: naming.PathsMode = naming.PathsMode.IMPORT,
) -> File:
    """Wrap a FileDescriptorProto into the File/Message/Enum tree.

    Identifiers and location paths for every nested type are computed here;
    the raw descriptors are referenced, never copied or modified. Children
    are built before their parent, so every node is immutable once created.
    """
    go_package = file_proto.options.go_package
    import_path = naming.go_import_path(file_proto.name, go_package, import_override)
    scope = _FileScope(
        package=file_proto.package,
        go_import_path=import_path,
        revision=SchemaRevision.from_syntax(file_proto.syntax),
    )

    return File(
        proto=file_proto,
        generate=generate,
        go_package_name=naming.go_package_name(
            file_proto.name, file_proto.package, go_package, import_override,
        ),
        go_import_path=import_path,
        generated_filename_prefix=naming.generated_filename_prefix(
            file_proto.name, import_path, paths,
        ),
        revision=scope.revision,
        enums=tuple(
            _build_enum(scope, enum_proto, (FILE_ENUM_FIELD, i), "", None)
            for i, enum_proto in enumerate(file_proto.enum_type)
        ),
        messages=tuple(
            _build_message(scope, message_proto, (FILE_MESSAGE_FIELD, i), "")
            for i, message_proto in enumerate(file_proto.message_type)
        ),
    )


def _build_enum(
    file: _FileScope,
    enum_proto: descriptor_pb2.EnumDescriptorProto,
    path: Tuple[int, ...],
    parent_scope: str,
    parent_ident: Optional[GoIdent],
) -> Enum:
    scope = _scoped(parent_scope, enum_proto.name)
    ident = GoIdent(naming.go_camel_case(scope), file.go_import_path)

    # Values of a nested enum are prefixed with the enclosing message name,
    # values of a top-level enum with the enum name.
    value_prefix = (parent_ident or ident).go_name
    values = tuple(
        EnumValue(
            proto=value_proto,
            full_name=_full_name(file.package, _scoped(parent_scope, value_proto.name)),
            go_ident=GoIdent(f"{value_prefix}_{value_proto.name}", file.go_import_path),
            path=path + (ENUM_VALUE_FIELD, i),
        )
        for i, value_proto in enumerate(enum_proto.value)
    )
    return Enum(
        proto=enum_proto,
        full_name=_full_name(file.package, scope),
        go_ident=ident,
        path=path,
        revision=file.revision,
        values=values,
    )


def _build_message(
    file: _FileScope,
    message_proto: descriptor_pb2.DescriptorProto,
    path: Tuple[int, ...],
    parent_scope: str,
) -> Message:
    scope = _scoped(parent_scope, message_proto.name)
    ident = GoIdent(naming.go_camel_case(scope), file.go_import_path)
    return Message(
        proto=message_proto,
        full_name=_full_name(file.package, scope),
        go_ident=ident,
        path=path,
        enums=tuple(
            _build_enum(file, enum_proto, path + (MESSAGE_ENUM_FIELD, i), scope, ident)
            for i, enum_proto in enumerate(message_proto.enum_type)
        ),
        messages=tuple(
            _build_message(file, nested_proto, path + (MESSAGE_NESTED_FIELD, i), scope)
            for i, nested_proto in enumerate(message_proto.nested_type)
        ),
    )
