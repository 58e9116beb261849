"""
Generic element tree: the output of the grammar, before classification of tags.
An XElement keeps the tag name exactly as written, its attributes as Literals, and its body:
raw text strings mixed with child XElements, in source order.
"""

from slidetag.document import coerce
from slidetag.errors import ParseWarning


class XElement:

    tag        = None       # tag name as written in the source, case preserved
    attrs      = None       # {attribute name: Literal}; for repeated attributes, the last occurrence
    children   = None       # list of raw text strings and XElements; no two strings are adjacent
    pos        = None       # offset of the tag name in the source text
    duplicates = ()         # names of attributes that occurred more than once

    def __init__(self, tag, attrs = None, children = None, pos = None, duplicates = ()):
        self.tag        = tag
        self.attrs      = attrs or {}
        self.children   = self._merge_strings(children or [])
        self.pos        = pos
        self.duplicates = tuple(duplicates)

    @staticmethod
    def _merge_strings(children):
        merged = []
        for child in children:
            if isinstance(child, str) and merged and isinstance(merged[-1], str):
                merged[-1] += child
            else:
                merged.append(child)
        return merged

    def elements(self):
        """Child elements, without raw text."""
        return [c for c in self.children if isinstance(c, XElement)]

    def strings(self):
        """Raw text children, without elements."""
        return [c for c in self.children if isinstance(c, str)]

    def __repr__(self):
        return f"XElement({self.tag!r}, {self.attrs!r}, {self.children!r})"


def warn(warnings, element, attribute, message, type = ParseWarning.UNKNOWN_ATTRIBUTE):
    if warnings is not None:
        warnings.append(ParseWarning(element, attribute, message, type))


def resolve(xel, allowed, warnings = None):
    """
    Convert attributes of `xel` to plain values of the kinds declared in `allowed` {name: value kind}.
    Unknown attributes and values that don't fit their kind are dropped and reported to `warnings` (if not None).
    """
    for name in xel.duplicates:
        warn(warnings, xel.tag, name, f'Duplicate attribute "{name}" on <{xel.tag}>, the last value is used',
             ParseWarning.DUPLICATE_ATTRIBUTE)

    values = {}
    for name, literal in xel.attrs.items():
        kind = allowed.get(name)
        if kind is None:
            warn(warnings, xel.tag, name, f'Unknown attribute "{name}" on <{xel.tag}>')
            continue
        try:
            values[name] = coerce(kind, literal.value)
        except ValueError as ex:
            warn(warnings, xel.tag, name, f'Invalid value of attribute "{name}" on <{xel.tag}>: {ex}',
                 ParseWarning.INVALID_VALUE)
    return values
