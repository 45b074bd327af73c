"""
DOM layer: parsing, per-pass scratch annotations and text flattening.
"""

from .parser import first_attr, has_leftover_markup, parse_document, safe_select
from .scratch import ScratchState, ScratchTable
from .text import (
    attr,
    children,
    class_name,
    count_letters,
    element_id,
    element_text,
    inner_trim,
    is_block,
    is_text_node,
    own_text,
    select_with_self,
    strip_markup,
    TextAccumulator,
)

__all__ = [
    "attr",
    "children",
    "class_name",
    "count_letters",
    "element_id",
    "element_text",
    "first_attr",
    "has_leftover_markup",
    "inner_trim",
    "is_block",
    "is_text_node",
    "own_text",
    "parse_document",
    "safe_select",
    "ScratchState",
    "ScratchTable",
    "select_with_self",
    "strip_markup",
    "TextAccumulator",
]
