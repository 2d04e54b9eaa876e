from google.protobuf import descriptor_pb2

from protoc_gengo.locations import LocationIndex, path_key, resolve_comment


def _file_with_locations(*entries) -> descriptor_pb2.FileDescriptorProto:
    """Build a file whose source info holds (path, leading_comment) entries.

    A comment of None leaves leading_comments unset.
    """
    fdp = descriptor_pb2.FileDescriptorProto(name="test.proto")
    for path, comment in entries:
        loc = fdp.source_code_info.location.add()
        loc.path.extend(path)
        if comment is not None:
            loc.leading_comments = comment
    return fdp


class TestPathKey:
    def test_joins_with_commas(self):
        assert path_key([4, 0, 2, 1]) == "4,0,2,1"

    def test_single_and_empty(self):
        assert path_key([5]) == "5"
        assert path_key([]) == ""

    def test_no_collision_between_digit_runs(self):
        # "4021" vs "40210" would collide without a separator
        assert path_key([4, 0, 2, 1]) != path_key([4, 0, 2, 10])
        assert path_key([4, 0, 21]) != path_key([4, 0, 2, 1])

    def test_accepts_tuples_and_repeated_fields(self):
        loc = descriptor_pb2.SourceCodeInfo.Location()
        loc.path.extend([4, 1, 3, 0])
        assert path_key(loc.path) == path_key((4, 1, 3, 0))


class TestLocationIndex:
    def test_lookup_preserves_insertion_order(self):
        fdp = _file_with_locations(
            ([4, 0], " first\n"),
            ([5, 0], " enum\n"),
            ([4, 0], " second\n"),
        )
        index = LocationIndex.from_file_proto(fdp)

        found = index.lookup([4, 0])
        assert [loc.leading_comments for loc in found] == [" first\n", " second\n"]

    def test_lookup_missing_path_is_empty(self):
        index = LocationIndex.from_file_proto(_file_with_locations(([4, 0], " x\n")))
        assert index.lookup([4, 1]) == []

    def test_lookup_returns_copy(self):
        index = LocationIndex.from_file_proto(_file_with_locations(([4, 0], " x\n")))
        index.lookup([4, 0]).clear()
        assert len(index.lookup([4, 0])) == 1

    def test_file_without_source_info(self):
        index = LocationIndex.from_file_proto(descriptor_pb2.FileDescriptorProto(name="a.proto"))
        assert len(index) == 0
        assert index.leading_comment_lines([4, 0]) == []


class TestCommentResolver:
    def test_trailing_newline_stripped(self):
        index = LocationIndex.from_file_proto(_file_with_locations(([4, 0], " Widget.\n")))
        assert resolve_comment(index, [4, 0]) == [" Widget."]

    def test_multi_line_comment(self):
        index = LocationIndex.from_file_proto(
            _file_with_locations(([4, 0], " Line one.\n Line two.\n"))
        )
        assert resolve_comment(index, [4, 0]) == [" Line one.", " Line two."]

    def test_only_one_trailing_newline_removed(self):
        index = LocationIndex.from_file_proto(_file_with_locations(([4, 0], " a\n\n")))
        assert resolve_comment(index, [4, 0]) == [" a", ""]

    def test_first_entry_with_comment_wins(self):
        fdp = _file_with_locations(
            ([4, 0], None),
            ([4, 0], " chosen\n"),
            ([4, 0], " ignored\n"),
        )
        index = LocationIndex.from_file_proto(fdp)
        assert resolve_comment(index, [4, 0]) == [" chosen"]

    def test_no_comment_gives_no_lines(self):
        index = LocationIndex.from_file_proto(_file_with_locations(([4, 0], None)))
        assert resolve_comment(index, [4, 0]) == []

    def test_present_but_empty_comment_is_used(self):
        fdp = _file_with_locations(([4, 0], ""), ([4, 0], " later\n"))
        index = LocationIndex.from_file_proto(fdp)
        assert resolve_comment(index, [4, 0]) == [""]
