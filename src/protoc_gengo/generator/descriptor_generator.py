from __future__ import annotations

import gzip
import hashlib
from typing import List

from google.protobuf import descriptor_pb2
from google.protobuf.message import EncodeError

from protoc_gengo.generator.context import FileContext, get_template_env, proto_ident
from protoc_gengo.naming import go_quote
from protoc_gengo.printer import GeneratedFile

DESCRIPTOR_VAR_PREFIX = "fileDescriptor_"
# Bytes of the sha256 digest of the file path kept in the variable name.
DESCRIPTOR_HASH_BYTES = 8
BYTES_PER_ROW = 16
COMPRESSION_LEVEL = 9


class SchemaSerializationError(Exception):
    """Raised when a file descriptor cannot be serialized for embedding."""

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"{path}: failed to serialize file descriptor: {cause}")
        self.path = path
        self.cause = cause


def descriptor_var_name(path: str) -> str:
    """Name of the Go variable holding the descriptor of the file at ``path``.

    fileDescriptor_<hex of the first 8 bytes of sha256(path)>
    """
    digest = hashlib.sha256(path.encode("utf-8")).digest()
    return DESCRIPTOR_VAR_PREFIX + digest[:DESCRIPTOR_HASH_BYTES].hex()


def strip_source_code_info(
    file_proto: descriptor_pb2.FileDescriptorProto,
) -> descriptor_pb2.FileDescriptorProto:
    """Return a copy of ``file_proto`` without source_code_info."""
    stripped = descriptor_pb2.FileDescriptorProto()
    stripped.CopyFrom(file_proto)
    stripped.ClearField("source_code_info")
    return stripped


def serialize_file_descriptor(file_proto: descriptor_pb2.FileDescriptorProto) -> bytes:
    stripped = strip_source_code_info(file_proto)
    try:
        return stripped.SerializeToString(deterministic=True)
    except EncodeError as e:
        raise SchemaSerializationError(file_proto.name, e) from e


def compress_descriptor(data: bytes) -> bytes:
    # mtime is fixed so identical input gives identical output.
    return gzip.compress(data, compresslevel=COMPRESSION_LEVEL, mtime=0)


def format_byte_rows(data: bytes, width: int = BYTES_PER_ROW) -> List[str]:
    """Render ``data`` as rows of ``0x%02x,`` values, ``width`` per row."""
    rows = []
    for start in range(0, len(data), width):
        rows.append("".join(f"0x{b:02x}," for b in data[start:start + width]))
    return rows


def generate_file_descriptor(g: GeneratedFile, ctx: FileContext) -> None:
    """Write the RegisterFile call and the gzipped descriptor table.

    Raises SchemaSerializationError if the descriptor cannot be serialized;
    the file's output must then be discarded.
    """
    blob = compress_descriptor(serialize_file_descriptor(ctx.file.proto))

    template = get_template_env().get_template("file_descriptor.go.j2")
    g.write(template.render(
        register_file=g.qualified_go_ident(proto_ident("RegisterFile")),
        quoted_path=go_quote(ctx.file.path),
        var_name=ctx.descriptor_var,
        size=len(blob),
        rows=format_byte_rows(blob),
    ))
    g.P()
