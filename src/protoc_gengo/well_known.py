from __future__ import annotations

from typing import Optional

# Messages and enums that get an XXX_WellKnownType method.
WELL_KNOWN_TYPES = frozenset({
    "google.protobuf.Any",
    "google.protobuf.Duration",
    "google.protobuf.Empty",
    "google.protobuf.Struct",
    "google.protobuf.Timestamp",
    "google.protobuf.Value",
    "google.protobuf.ListValue",
    "google.protobuf.NullValue",
    "google.protobuf.DoubleValue",
    "google.protobuf.FloatValue",
    "google.protobuf.Int64Value",
    "google.protobuf.UInt64Value",
    "google.protobuf.Int32Value",
    "google.protobuf.UInt32Value",
    "google.protobuf.BoolValue",
    "google.protobuf.StringValue",
    "google.protobuf.BytesValue",
})


def is_well_known_type(full_name: str) -> bool:
    return full_name in WELL_KNOWN_TYPES


def well_known_type_name(full_name: str, name: str) -> Optional[str]:
    """Bare name to return from the marker method, or None when not well-known."""
    if is_well_known_type(full_name):
        return name
    return None
