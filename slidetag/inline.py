"""
Inline formatting of text content.

Inside Text-bearing elements (<Text>, <SlideTitle>, <Heading>, <Paragraph>) the body may mix raw text
with inline tags that apply style overrides to parts of the text:

    <Text>Revenue grew <B>35%</B>, <I>again</I></Text>

Inline tags nest, and overrides of nested tags are composed (inner ones win on conflicts).
The body is converted into an ordered tuple of Segments, plain runs included with an empty style.
"""

from slidetag.document import Segment
from slidetag.errors import UnknownElementError
from slidetag.markup import XElement, resolve


########################################################################################################################################################
#####
#####  INLINE TAGS
#####

class InlineTag:

    name  = None        # canonical tag name, as emitted by the serializer
    style = None        # overrides applied by the tag itself
    attrs = None        # allow-list of attributes: {name: value kind}

    def __init__(self, name, style = None, attrs = None):
        self.name  = name
        self.style = style or {}
        self.attrs = attrs or {}

    def overrides(self, xel, warnings = None):
        return {**self.style, **resolve(xel, self.attrs, warnings)}


INLINE_TAGS = [
    InlineTag('B',    {'fontWeight': 700}),
    InlineTag('I',    {'fontStyle': 'italic'}),
    InlineTag('U',    {'textDecoration': 'underline'}),
    InlineTag('S',    {'textDecoration': 'strikethrough'}),
    InlineTag('Span', attrs = Segment.STYLE_FIELDS),
]

INLINE = {tag.name.lower(): tag for tag in INLINE_TAGS}


########################################################################################################################################################
#####
#####  TEXT CONTENT
#####

def text_content(xel, warnings = None):
    """
    Extract text content of a Text-bearing element `xel`. Return a pair (text, segments).
    Without inline tags, `text` is the body stripped of outer whitespace and `segments` is None.
    With inline tags, `segments` is a tuple of Segments whose concatenated text equals `text`.
    If the body holds no text at all, `text` is None.
    """
    if not xel.elements():
        text = ''.join(xel.strings()).strip()
        return text or None, None

    segments = []
    _collect(xel, {}, segments, xel.tag, warnings)
    segments = _trim(segments)
    if not segments:
        return None, None

    return ''.join(s.text for s in segments), tuple(segments)


def _collect(xel, style, segments, owner, warnings):

    for child in xel.children:
        if isinstance(child, str):
            segments.append(Segment(child, style))
            continue

        tag = INLINE.get(child.tag.lower())
        if tag is None:
            valid = ', '.join(t.name for t in INLINE_TAGS)
            raise UnknownElementError(f"Unknown inline element <{child.tag}> inside <{owner}>. Valid inline elements are: {valid}",
                                      pos = child.pos, found = child.tag)

        _collect(child, {**style, **tag.overrides(child, warnings)}, segments, owner, warnings)


def _trim(segments):
    """Strip leading whitespace from the first non-blank segment and trailing from the last one; drop empty segments."""

    while segments and not segments[0].text.strip():
        segments.pop(0)
    while segments and not segments[-1].text.strip():
        segments.pop()
    if not segments:
        return segments

    first = segments[0]
    segments[0] = Segment(first.text.lstrip(), first.style)
    last = segments[-1]
    segments[-1] = Segment(last.text.rstrip(), last.style)

    return [s for s in segments if s.text]
