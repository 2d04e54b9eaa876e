from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Sequence

from google.protobuf import descriptor_pb2

# Field numbers used to build source-code-info paths.
FILE_PACKAGE_FIELD = 2        # FileDescriptorProto.package
FILE_MESSAGE_FIELD = 4        # FileDescriptorProto.message_type
FILE_ENUM_FIELD = 5           # FileDescriptorProto.enum_type
MESSAGE_NESTED_FIELD = 3      # DescriptorProto.nested_type
MESSAGE_ENUM_FIELD = 4        # DescriptorProto.enum_type
ENUM_VALUE_FIELD = 2          # EnumDescriptorProto.value

Location = descriptor_pb2.SourceCodeInfo.Location


def path_key(path: Iterable[int]) -> str:
    """Convert a location path to a string suitable for use as a dict key."""
    return ",".join(str(int(x)) for x in path)


class LocationIndex:
    """Source-code-info locations of one file, grouped by path.

    Built once per file; never modified afterwards.
    """

    def __init__(self, locations: Iterable[Location] = ()):
        buckets: Dict[str, List[Location]] = defaultdict(list)
        for loc in locations:
            buckets[path_key(loc.path)].append(loc)
        self._buckets: Dict[str, List[Location]] = dict(buckets)

    @classmethod
    def from_file_proto(cls, file_proto: descriptor_pb2.FileDescriptorProto) -> "LocationIndex":
        return cls(file_proto.source_code_info.location)

    def __len__(self) -> int:
        return len(self._buckets)

    def lookup(self, path: Sequence[int]) -> List[Location]:
        return list(self._buckets.get(path_key(path), ()))

    def leading_comment_lines(self, path: Sequence[int]) -> List[str]:
        """Lines of the first leading comment recorded for ``path``.

        Only the first location carrying a leading comment is used. One
        trailing newline is dropped before splitting; an absent comment
        yields no lines.
        """
        for loc in self._buckets.get(path_key(path), ()):
            if not loc.HasField("leading_comments"):
                continue
            text = loc.leading_comments
            if text.endswith("\n"):
                text = text[:-1]
            return text.split("\n")
        return []


def resolve_comment(index: LocationIndex, path: Sequence[int]) -> List[str]:
    return index.leading_comment_lines(path)
