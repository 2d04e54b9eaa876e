from __future__ import annotations

from protoc_gengo.generator.context import FileContext
from protoc_gengo.generator.descriptor_generator import descriptor_var_name, generate_file_descriptor
from protoc_gengo.generator.enum_generator import generate_enum
from protoc_gengo.generator.message_generator import generate_message
from protoc_gengo.locations import FILE_PACKAGE_FIELD, LocationIndex, resolve_comment
from protoc_gengo.models import File
from protoc_gengo.printer import GeneratedFile

GENERATED_FILE_SUFFIX = ".pb.go"
GENERATED_HEADER = "// Code generated by protoc-gen-go. DO NOT EDIT."


def generate_file(file: File) -> GeneratedFile:
    """Generate the Go source for one proto file.

    Order of the output: header, package clause and imports, top-level
    enums, top-level messages (nested types inline), the init block, and
    finally the embedded file descriptor.
    """
    ctx = FileContext(
        file=file,
        locations=LocationIndex.from_file_proto(file.proto),
        descriptor_var=descriptor_var_name(file.path),
    )
    g = GeneratedFile(file.generated_filename_prefix + GENERATED_FILE_SUFFIX, file.go_import_path)

    g.P(GENERATED_HEADER)
    g.P("// source: ", file.path)
    g.P()
    package_comment = resolve_comment(ctx.locations, [FILE_PACKAGE_FIELD])
    if package_comment:
        for line in package_comment:
            g.P("//", line)
        g.P()
    g.P("package ", file.go_package_name)
    g.P()
    g.mark_imports()

    for enum in file.enums:
        generate_enum(g, ctx, enum)
    for message in file.messages:
        generate_message(g, ctx, message)

    if g.init:
        g.P("func init() {")
        for statement in g.init:
            g.P("\t", statement)
        g.P("}")
        g.P()

    generate_file_descriptor(g, ctx)
    return g
