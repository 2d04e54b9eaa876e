import dataclasses

import pytest
from google.protobuf import descriptor_pb2

from protoc_gengo.descriptor_tree import build_file
from protoc_gengo.models import SchemaRevision
from protoc_gengo.naming import PathsMode


def _widget_file(syntax: str = "") -> descriptor_pb2.FileDescriptorProto:
    fdp = descriptor_pb2.FileDescriptorProto(
        name="widget/widget.proto", package="example.widget", syntax=syntax,
    )
    color = fdp.enum_type.add(name="Color")
    color.value.add(name="RED", number=0)
    color.value.add(name="GREEN", number=1)

    widget = fdp.message_type.add(name="Widget")
    kind = widget.enum_type.add(name="Kind")
    kind.value.add(name="SMALL", number=0)
    part = widget.nested_type.add(name="Part")
    part.nested_type.add(name="Sub")
    fdp.message_type.add(name="Gadget")
    return fdp


class TestBuildFile:
    def test_file_level_names(self):
        file = build_file(_widget_file(), generate=True)

        assert file.path == "widget/widget.proto"
        assert file.package == "example.widget"
        assert file.generate is True
        assert file.go_package_name == "example_widget"
        assert file.go_import_path == "widget"
        assert file.generated_filename_prefix == "widget/widget"

    def test_source_relative_and_override(self):
        file = build_file(
            _widget_file(),
            import_override="example.com/gen/widgetpb",
            paths=PathsMode.SOURCE_RELATIVE,
        )
        assert file.go_import_path == "example.com/gen/widgetpb"
        assert file.go_package_name == "widgetpb"
        assert file.generated_filename_prefix == "widget/widget"

    def test_top_level_enum(self):
        file = build_file(_widget_file())
        color = file.enums[0]

        assert color.full_name == "example.widget.Color"
        assert color.go_ident.go_name == "Color"
        assert color.path == (5, 0)
        assert [v.go_ident.go_name for v in color.values] == ["Color_RED", "Color_GREEN"]
        assert [v.path for v in color.values] == [(5, 0, 2, 0), (5, 0, 2, 1)]

    def test_nested_types(self):
        file = build_file(_widget_file())
        widget, gadget = file.messages

        assert widget.path == (4, 0)
        assert gadget.path == (4, 1)
        kind = widget.enums[0]
        assert kind.full_name == "example.widget.Widget.Kind"
        assert kind.go_ident.go_name == "Widget_Kind"
        assert kind.path == (4, 0, 4, 0)
        # Nested enum values are prefixed by the message, not the enum
        assert kind.values[0].go_ident.go_name == "Widget_SMALL"

        part = widget.messages[0]
        assert part.go_ident.go_name == "Widget_Part"
        assert part.path == (4, 0, 3, 0)
        sub = part.messages[0]
        assert sub.full_name == "example.widget.Widget.Part.Sub"
        assert sub.go_ident.go_name == "Widget_Part_Sub"
        assert sub.path == (4, 0, 3, 0, 3, 0)

    def test_descriptor_is_not_copied(self):
        fdp = _widget_file()
        file = build_file(fdp)
        assert file.proto is fdp
        assert file.messages[0].proto is fdp.message_type[0]

    def test_file_without_package(self):
        fdp = descriptor_pb2.FileDescriptorProto(name="plain.proto")
        fdp.message_type.add(name="Thing")
        file = build_file(fdp)
        assert file.messages[0].full_name == "Thing"
        assert file.go_package_name == "plain"
        assert file.go_import_path == "."

    def test_nodes_are_immutable(self):
        file = build_file(_widget_file())

        with pytest.raises(dataclasses.FrozenInstanceError):
            file.generate = True
        with pytest.raises(dataclasses.FrozenInstanceError):
            file.messages[0].enums[0].values[0].full_name = "x"
        assert isinstance(file.enums, tuple)
        assert isinstance(file.messages[0].messages, tuple)
        assert isinstance(file.enums[0].values, tuple)


class TestSchemaRevision:
    @pytest.mark.parametrize("syntax, revision", [
        ("", SchemaRevision.PROTO2),
        ("proto2", SchemaRevision.PROTO2),
        ("proto3", SchemaRevision.PROTO3),
        ("editions", SchemaRevision.EDITIONS),
    ])
    def test_from_syntax(self, syntax, revision):
        assert SchemaRevision.from_syntax(syntax) is revision
        assert build_file(_widget_file(syntax)).enums[0].revision is revision

    def test_legacy_helpers(self):
        assert SchemaRevision.PROTO2.has_legacy_enum_helpers
        assert SchemaRevision.EDITIONS.has_legacy_enum_helpers
        assert not SchemaRevision.PROTO3.has_legacy_enum_helpers
