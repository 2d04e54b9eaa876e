from __future__ import annotations

import os
import subprocess
import tempfile
from typing import List, Sequence

from google.protobuf import descriptor_pb2


class ProtocError(RuntimeError):
    """Raised when protoc is missing or fails to build a descriptor set."""


def find_proto_files(root: str) -> List[str]:
    files: List[str] = []
    for dirpath, _, filenames in os.walk(root):
        for fn in filenames:
            if fn.lower().endswith(".proto"):
                files.append(os.path.join(dirpath, fn))
    # Sort for deterministic output
    files.sort()
    return files


def proto_name(proto_path: str, includes: Sequence[str]) -> str:
    """Name protoc gives ``proto_path``: relative to the first include containing it."""
    abs_path = os.path.abspath(proto_path)
    for inc in includes:
        abs_inc = os.path.abspath(inc)
        if abs_path.startswith(abs_inc.rstrip(os.sep) + os.sep):
            return os.path.relpath(abs_path, abs_inc).replace(os.sep, "/")
    return os.path.basename(proto_path)


def default_includes(proto: str) -> List[str]:
    if os.path.isdir(proto):
        return [os.path.abspath(proto)]
    return [os.path.dirname(os.path.abspath(proto))]


def build_descriptor_set(
    proto_paths: Sequence[str],
    includes: Sequence[str],
) -> descriptor_pb2.FileDescriptorSet:
    """Invoke protoc to get a descriptor set, with imports and source info."""
    # de-dup while preserving order
    seen = set()
    inc_args: List[str] = []
    for inc in includes:
        if inc and inc not in seen:
            seen.add(inc)
            inc_args.extend(["-I", inc])

    with tempfile.TemporaryDirectory() as td:
        desc_path = os.path.join(td, "descriptor_set.pb")
        cmd = [
            "protoc",
            "--include_imports",
            "--include_source_info",
            f"--descriptor_set_out={desc_path}",
        ] + inc_args + list(proto_paths)
        try:
            subprocess.run(cmd, check=True, capture_output=True)
        except FileNotFoundError as e:
            raise ProtocError(
                "'protoc' not found. Please install Protocol Buffers compiler and ensure it is in PATH."
            ) from e
        except subprocess.CalledProcessError as e:
            raise ProtocError(f"protoc failed: {e.stderr.decode('utf-8', errors='ignore')}") from e

        fds = descriptor_pb2.FileDescriptorSet()
        with open(desc_path, "rb") as f:
            fds.ParseFromString(f.read())
    return fds
