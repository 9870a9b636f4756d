"""Schema nodes.

Composite formats (RecordFormat, ListFormat, VariantFormat) recurse into child
formats; leaf formats (NumberFormat, BoolFormat, StringFormat) terminate the
recursion and support the fast path.
"""
from .base import (
    FAILED,
    MISSING,
    AbstractFormat,
    Format,
    LeafFormat,
    Outcome,
    Rule,
    RuleKind,
    RulePipeline,
)
from .boolean import BoolFormat
from .number import MAX_SAFE_INTEGER, NumberFormat
from .record import Field, RecordFormat, Requiredness
from .sequence import ListFormat
from .string import StringFormat
from .variant import VariantBuilder, VariantFormat, tag_key, variant

__all__ = [
    "FAILED",
    "MISSING",
    "AbstractFormat",
    "Format",
    "LeafFormat",
    "Outcome",
    "Rule",
    "RuleKind",
    "RulePipeline",
    "BoolFormat",
    "MAX_SAFE_INTEGER",
    "NumberFormat",
    "Field",
    "RecordFormat",
    "Requiredness",
    "ListFormat",
    "StringFormat",
    "VariantBuilder",
    "VariantFormat",
    "tag_key",
    "variant",
]
