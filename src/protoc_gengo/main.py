from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2
from google.protobuf.message import DecodeError

from protoc_gengo import plugin
from protoc_gengo.protoc import (
    ProtocError,
    build_descriptor_set,
    default_includes,
    find_proto_files,
    proto_name,
)


def build_request(
    fds: descriptor_pb2.FileDescriptorSet,
    files_to_generate: Sequence[str],
    parameter: str = "",
) -> plugin_pb2.CodeGeneratorRequest:
    """Build the request protoc would send for ``files_to_generate``.

    With no explicit file list every file in the set is generated.
    """
    request = plugin_pb2.CodeGeneratorRequest()
    request.proto_file.extend(fds.file)
    if files_to_generate:
        request.file_to_generate.extend(files_to_generate)
    else:
        request.file_to_generate.extend(f.name for f in fds.file)
    request.parameter = parameter
    return request


def write_response(response: plugin_pb2.CodeGeneratorResponse, out_dir: str) -> List[str]:
    """Write the files of ``response`` under ``out_dir``; return their paths."""
    written: List[str] = []
    for f in response.file:
        out_path = os.path.join(out_dir, *f.name.split("/"))
        os.makedirs(os.path.dirname(out_path), exist_ok=True)
        Path(out_path).write_text(f.content, encoding="utf-8")
        written.append(out_path)
    return written


def generate_descriptor_set(
    fds: descriptor_pb2.FileDescriptorSet,
    files_to_generate: Sequence[str],
    out_dir: str,
    parameter: str = "",
) -> int:
    """Generate Go files for a descriptor set; returns a process exit code."""
    request = build_request(fds, files_to_generate, parameter)
    known = {f.name for f in fds.file}
    missing = [name for name in request.file_to_generate if name not in known]
    if missing:
        print(f"FATAL: not in descriptor set: {', '.join(missing)}", file=sys.stderr)
        return 1

    response = plugin.process_request(request)
    written = write_response(response, out_dir)
    if written:
        print("Generated:\n" + "\n".join(written))
    if response.error:
        print(f"FATAL: {response.error}", file=sys.stderr)
        return 1
    return 0


def _parameter_from_args(args: argparse.Namespace) -> str:
    params = [args.parameter] if args.parameter else []
    if args.jobs:
        params.append(f"jobs={args.jobs}")
    if args.verbose:
        params.append("verbose")
    return ",".join(params)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Generate Go enum and message declarations with an embedded file descriptor. "
            "Without --descriptor-set or --proto, runs as a protoc plugin on stdin/stdout."
        ),
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--descriptor-set", help="Path to a serialized FileDescriptorSet")
    source.add_argument("--proto", help="Path to a .proto file or a directory containing .proto files (recursively)")
    parser.add_argument("-I", "--include", action="append", default=[], help="protoc include directory (with --proto)")
    parser.add_argument("--file", action="append", default=[], help="File in the descriptor set to generate (repeatable; default all)")
    parser.add_argument("--out", help="Output directory for generated .pb.go file(s)")
    parser.add_argument("--parameter", default="", help="Plugin parameters, e.g. paths=source_relative,Mfoo.proto=example.com/foo")
    parser.add_argument("--jobs", type=int, default=0, help="Number of files generated in parallel")
    parser.add_argument("--verbose", action="store_true", help="Print progress to stderr")
    args = parser.parse_args(argv)

    if not args.descriptor_set and not args.proto:
        # Errors travel back to protoc inside the response.
        plugin.run()
        return 0

    if not args.out:
        parser.error("--out is required with --descriptor-set or --proto")

    parameter = _parameter_from_args(args)

    if args.descriptor_set:
        fds = descriptor_pb2.FileDescriptorSet()
        try:
            with open(args.descriptor_set, "rb") as f:
                fds.ParseFromString(f.read())
        except (OSError, DecodeError) as e:
            print(f"FATAL: cannot read descriptor set {args.descriptor_set}: {e}", file=sys.stderr)
            return 1
        return generate_descriptor_set(fds, args.file, args.out, parameter)

    if os.path.isdir(args.proto):
        inputs = find_proto_files(args.proto)
        if not inputs:
            print(f"No .proto files found under directory: {args.proto}")
            return 1
    else:
        inputs = [args.proto]
    includes = args.include or default_includes(args.proto)

    try:
        fds = build_descriptor_set(inputs, includes)
    except ProtocError as e:
        print(f"FATAL: {e}", file=sys.stderr)
        return 1

    names = args.file or [proto_name(p, includes) for p in inputs]
    return generate_descriptor_set(fds, names, args.out, parameter)


if __name__ == "__main__":
    sys.exit(main())
