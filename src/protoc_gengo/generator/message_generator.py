from __future__ import annotations

from protoc_gengo.generator.context import FileContext, get_template_env
from protoc_gengo.generator.enum_generator import generate_enum
from protoc_gengo.locations import resolve_comment
from protoc_gengo.models import Message
from protoc_gengo.naming import go_quote
from protoc_gengo.printer import GeneratedFile
from protoc_gengo.well_known import well_known_type_name


def generate_message(g: GeneratedFile, ctx: FileContext, message: Message) -> None:
    """Write nested enums, the message struct, then nested messages."""
    for enum in message.enums:
        generate_enum(g, ctx, enum)

    template = get_template_env().get_template("message.go.j2")
    well_known = well_known_type_name(message.full_name, message.name)
    g.write(template.render(
        comment=resolve_comment(ctx.locations, message.path),
        name=message.go_ident.go_name,
        well_known_name=go_quote(well_known) if well_known else None,
    ))

    for nested in message.messages:
        generate_message(g, ctx, nested)
