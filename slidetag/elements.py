"""
Element vocabulary of SlideTag: classification of tag names and construction of primitive nodes.

Every tag of the language is represented by an Element object kept in the ELEMENTS registry.
Tag names are matched case-insensitively. Primitive elements (Frame, Text, Rectangle, Ellipse, Vector, Image, Group)
are registered here; sugar elements are registered by slidetag.components.
Every element declares a static allow-list of attributes; other attributes produce a ParseWarning.
"""

from slidetag.document import Frame, Text, Rectangle, Ellipse, Vector, Image, Group
from slidetag.errors import UnknownElementError
from slidetag.inline import text_content
from slidetag.markup import resolve


########################################################################################################################################################
#####
#####  ELEMENT
#####

class Element:
    """
    A tag of the DSL vocabulary. Converts an XElement into a typed node (Primitive) through expand().
    """
    name  = None        # canonical tag name, as listed in error messages
    attrs = None        # allow-list of attributes: {name: value kind}

    def expand(self, xel, warnings = None):
        """Convert `xel`, an XElement whose tag was classified as `self`, into a Primitive."""
        raise NotImplementedError

    def values(self, xel, warnings = None):
        return resolve(xel, self.attrs, warnings)

    @staticmethod
    def children(xel, warnings = None):
        """Convert child elements of `xel`. Raw text between child elements is ignored."""
        return [convert(child, warnings) for child in xel.elements()]

    @staticmethod
    def text(xel, values, warnings = None):
        """
        Text content of a Text-bearing element as a pair (text, segments).
        The `text` attribute (taken out of `values`), if present, wins over the body.
        """
        text = values.pop('text', None)
        if text is not None: return text, None
        return text_content(xel, warnings)


class PrimitiveElement(Element):
    """Element that builds a node of a given Primitive class directly from attributes."""

    node    = None      # Primitive subclass built by this element
    aliases = None      # {alternative attribute name: field name}; the field itself wins if both are given

    def __init__(self, node, aliases = None):
        self.node    = node
        self.name    = node.tag
        self.aliases = aliases or {}
        self.attrs   = {name: kind for name, kind in node.fields.items() if name != 'segments'}
        self.attrs.update({alias: node.fields[field] for alias, field in self.aliases.items()})

    def values(self, xel, warnings = None):
        values = super().values(xel, warnings)
        for alias, field in self.aliases.items():
            value = values.pop(alias, None)
            if value is not None and field not in values:
                values[field] = value
        return values

    def expand(self, xel, warnings = None):
        values = self.values(xel, warnings)
        if self.node.iscontainer:
            return self.node(children = self.children(xel, warnings), **values)
        return self.node(**values)


class TextElement(PrimitiveElement):

    def expand(self, xel, warnings = None):
        values = self.values(xel, warnings)
        values['text'], values['segments'] = self.text(xel, values, warnings)
        return self.node(**values)


########################################################################################################################################################
#####
#####  REGISTRY
#####

ELEMENTS = {}           # {lowercase tag name: Element}; the complete vocabulary once slidetag.components is imported


def register(*elements):
    for element in elements:
        ELEMENTS[element.name.lower()] = element

def valid_tags():
    return [element.name for element in ELEMENTS.values()]

def classify(tag, pos = None):
    """Element that handles a given tag name. Raise UnknownElementError if the tag is not in the vocabulary."""
    element = ELEMENTS.get(tag.lower())
    if element is None:
        raise UnknownElementError(f"Unknown element type: <{tag}>. Valid types are: {', '.join(valid_tags())}",
                                  pos = pos, found = tag)
    return element

def convert(xel, warnings = None):
    """Convert an XElement (with all its descendants) into a typed tree of Primitives."""
    return classify(xel.tag, xel.pos).expand(xel, warnings)


register(
    PrimitiveElement(Frame, aliases = {'itemSpacing': 'gap'}),
    TextElement(Text),
    PrimitiveElement(Rectangle),
    PrimitiveElement(Ellipse),
    PrimitiveElement(Vector),
    PrimitiveElement(Image),
    PrimitiveElement(Group),
)
