from __future__ import annotations

from typing import Dict, List, Set

from protoc_gengo.generator.context import FileContext, get_template_env, proto_ident
from protoc_gengo.locations import resolve_comment
from protoc_gengo.models import Enum
from protoc_gengo.naming import go_quote
from protoc_gengo.printer import GeneratedFile
from protoc_gengo.well_known import well_known_type_name

DUPLICATE_VALUE_MARKER = "// Duplicate value: "


def descriptor_indexes(path) -> List[int]:
    """Indexes locating a type within its file.

    Location paths alternate between a field number and an index into that
    field; only the indexes are kept.
    """
    return [path[i] for i in range(1, len(path), 2)]


def _build_values(ctx: FileContext, enum: Enum) -> List[Dict]:
    """Template rows for each enum value.

    The first value declared for a number owns the ``_name`` map entry;
    later values with the same number are written commented out.
    """
    seen: Set[int] = set()
    values = []
    for value in enum.values:
        quoted = go_quote(value.name)
        duplicate = value.number in seen
        seen.add(value.number)
        prefix = DUPLICATE_VALUE_MARKER if duplicate else ""
        values.append({
            "comment": resolve_comment(ctx.locations, value.path),
            "ident": value.go_ident.go_name,
            "number": value.number,
            "duplicate": duplicate,
            "name_entry": f"{prefix}{value.number}: {quoted},",
            "value_entry": f"{quoted}: {value.number},",
        })
    return values


def registration_name(ctx: FileContext, enum: Enum) -> str:
    # Registered as <proto package>.<go ident>, not the proto full name.
    return f"{ctx.file.package}.{enum.go_ident.go_name}"


def generate_enum(g: GeneratedFile, ctx: FileContext, enum: Enum) -> None:
    """Write the Go declaration of ``enum`` and queue its registration."""
    template = get_template_env().get_template("enum.go.j2")

    name = enum.go_ident.go_name
    name_map = f"{name}_name"
    value_map = f"{name}_value"
    legacy = enum.revision.has_legacy_enum_helpers
    well_known = well_known_type_name(enum.full_name, enum.name)

    g.write(template.render(
        comment=resolve_comment(ctx.locations, enum.path),
        name=name,
        quoted_name=go_quote(name),
        values=_build_values(ctx, enum),
        name_map=name_map,
        value_map=value_map,
        legacy=legacy,
        enum_name_func=g.qualified_go_ident(proto_ident("EnumName")),
        unmarshal_func=g.qualified_go_ident(proto_ident("UnmarshalJSONEnum")) if legacy else "",
        descriptor_var=ctx.descriptor_var,
        indexes=",".join(str(i) for i in descriptor_indexes(enum.path)),
        well_known_name=go_quote(well_known) if well_known else None,
    ))

    register = g.qualified_go_ident(proto_ident("RegisterEnum"))
    g.init.append(
        f"{register}({go_quote(registration_name(ctx, enum))}, {name_map}, {value_map})"
    )
