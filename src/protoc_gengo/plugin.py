from __future__ import annotations

import sys
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import BinaryIO, Dict, Iterable, List, Optional

from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2

from protoc_gengo.descriptor_tree import build_file
from protoc_gengo.generator.descriptor_generator import SchemaSerializationError
from protoc_gengo.generator.file_generator import generate_file
from protoc_gengo.models import File
from protoc_gengo.naming import PathsMode
from protoc_gengo.printer import GeneratedFile

# Editions files are generated like proto2 ones; see SchemaRevision.
MINIMUM_EDITION = descriptor_pb2.EDITION_PROTO2
MAXIMUM_EDITION = descriptor_pb2.EDITION_2023


class ParameterError(ValueError):
    """Raised when a plugin parameter is unknown or malformed."""


@dataclass(frozen=True)
class PluginOptions:
    paths: PathsMode = PathsMode.IMPORT
    import_map: Dict[str, str] = field(default_factory=dict)
    partial_errors: bool = False
    jobs: int = 1
    verbose: bool = False


@dataclass
class GenerationResult:
    file: File
    generated: Optional[GeneratedFile] = None
    error: Optional[SchemaSerializationError] = None


def parse_parameter(parameter: str) -> Dict[str, str]:
    """Split a protoc parameter string into a dict.

    Pairs are separated by "," and split on the first "="; a key without a
    value maps to the empty string. Empty pairs are ignored.
    """
    params: Dict[str, str] = {}
    for param in parameter.split(","):
        if param == "":
            continue
        key, _, value = param.partition("=")
        params[key] = value
    return params


def options_from_parameter(parameter: str) -> PluginOptions:
    paths = PathsMode.IMPORT
    import_map: Dict[str, str] = {}
    partial_errors = False
    jobs = 1
    verbose = False

    for key, value in parse_parameter(parameter).items():
        if key.startswith("M") and len(key) > 1:
            import_map[key[1:]] = value
        elif key == "paths":
            try:
                paths = PathsMode(value)
            except ValueError:
                raise ParameterError(
                    f"invalid value for paths: {value!r} (expected 'import' or 'source_relative')"
                ) from None
        elif key == "errors":
            if value not in ("abort", "partial"):
                raise ParameterError(
                    f"invalid value for errors: {value!r} (expected 'abort' or 'partial')"
                )
            partial_errors = value == "partial"
        elif key == "jobs":
            try:
                jobs = int(value)
            except ValueError:
                raise ParameterError(f"invalid value for jobs: {value!r}") from None
            if jobs < 1:
                raise ParameterError(f"jobs must be at least 1, got {jobs}")
        elif key == "verbose":
            verbose = value in ("", "true", "1")
        else:
            raise ParameterError(f"unknown parameter {key!r}")

    return PluginOptions(
        paths=paths,
        import_map=import_map,
        partial_errors=partial_errors,
        jobs=jobs,
        verbose=verbose,
    )


def build_files(
    proto_files: Iterable[descriptor_pb2.FileDescriptorProto],
    files_to_generate: Iterable[str],
    options: PluginOptions,
) -> List[File]:
    """Wrap every descriptor, flagging those code generation was requested for."""
    requested = set(files_to_generate)
    return [
        build_file(
            proto,
            generate=proto.name in requested,
            import_override=options.import_map.get(proto.name),
            paths=options.paths,
        )
        for proto in proto_files
    ]


def _generate_one(file: File) -> GenerationResult:
    try:
        return GenerationResult(file=file, generated=generate_file(file))
    except SchemaSerializationError as e:
        return GenerationResult(file=file, error=e)


def generate_files(files: Iterable[File], jobs: int = 1) -> List[GenerationResult]:
    """Generate every file flagged for generation, in input order.

    Files share no state while being generated, so with ``jobs > 1`` they
    are spread across a thread pool.
    """
    selected = [f for f in files if f.generate]
    if jobs <= 1 or len(selected) <= 1:
        return [_generate_one(f) for f in selected]
    with ThreadPoolExecutor(max_workers=jobs, thread_name_prefix="gengo") as executor:
        return list(executor.map(_generate_one, selected))


def process_request(
    request: plugin_pb2.CodeGeneratorRequest,
) -> plugin_pb2.CodeGeneratorResponse:
    response = plugin_pb2.CodeGeneratorResponse()
    response.supported_features = (
        plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL
        | plugin_pb2.CodeGeneratorResponse.FEATURE_SUPPORTS_EDITIONS
    )
    response.minimum_edition = MINIMUM_EDITION
    response.maximum_edition = MAXIMUM_EDITION

    try:
        options = options_from_parameter(request.parameter)
    except ParameterError as e:
        response.error = str(e)
        return response

    files = build_files(request.proto_file, request.file_to_generate, options)
    results = generate_files(files, jobs=options.jobs)

    errors = [str(r.error) for r in results if r.error is not None]
    if errors:
        response.error = "\n".join(errors)
    if errors and not options.partial_errors:
        return response

    for result in results:
        if result.generated is None:
            continue
        out = response.file.add()
        out.name = result.generated.filename
        out.content = result.generated.content()
        if options.verbose:
            print(f"Generated: {out.name}", file=sys.stderr)
    return response


def run(input: Optional[BinaryIO] = None, output: Optional[BinaryIO] = None) -> plugin_pb2.CodeGeneratorResponse:
    """Read a CodeGeneratorRequest from ``input`` and write the response to ``output``."""
    input = input or sys.stdin.buffer
    output = output or sys.stdout.buffer
    request = plugin_pb2.CodeGeneratorRequest.FromString(input.read())
    response = process_request(request)
    output.write(response.SerializeToString())
    output.flush()
    return response
