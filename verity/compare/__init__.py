"""
Comparison engine

    from verity.compare import differences

    for diff in differences(actual, expected):
        print(diff)          # items[2].name: "a" is not "b"

Ordered structural diffs, unordered multiset matching, float tolerance rules
and JSON snapshot comparison.
"""

from .approx import DEFAULT_TOLERANCE, is_close, is_exactly_equal, values_equal
from .classify import ValueKind, classify, describe, register_schema, unregister_schema
from .json_compare import (
    JsonComparator,
    json_differences,
    load_snapshot,
    save_snapshot,
    snapshot_differences,
    to_canonical_json,
)
from .multiset import count_diff, is_containing, is_equivalent, is_in
from .structural import StructuralComparator, differences
from .types import ComparisonPath, Difference, DifferenceKind

__all__ = [
    # approx
    "DEFAULT_TOLERANCE",
    "is_close",
    "is_exactly_equal",
    "values_equal",
    # classify
    "ValueKind",
    "classify",
    "describe",
    "register_schema",
    "unregister_schema",
    # multiset
    "count_diff",
    "is_equivalent",
    "is_containing",
    "is_in",
    # structural
    "StructuralComparator",
    "differences",
    # json
    "JsonComparator",
    "json_differences",
    "to_canonical_json",
    "save_snapshot",
    "load_snapshot",
    "snapshot_differences",
    # types
    "ComparisonPath",
    "Difference",
    "DifferenceKind",
]
