"""
Serialization of typed trees back to DSL text.

The output parses back into an equivalent tree: the same node kinds, field values, order of children and text.
Field values are written in a form that depends on their Python type:

    "..."       strings, with & < > " escaped
    {24}        numbers
    {true}      booleans
    {[8, 8]}    lists

Text with segments is written as a mix of raw text and inline tags (<B> <I> <U> <S> <Span>)
that reproduce the same segments when parsed.
"""

import json
from xml.sax.saxutils import escape as _escape

from slidetag.config import INDENT, INLINE_TEXT_LIMIT
from slidetag.document import Text, number_text


def escape(s):
    return _escape(s, {'"': '&quot;'})


########################################################################################################################################################
#####
#####  VALUES
#####

def format_value(value):
    """Attribute value in DSL syntax."""
    if isinstance(value, bool):
        return '{true}' if value else '{false}'
    if isinstance(value, (int, float)):
        return '{' + number_text(value) + '}'
    if isinstance(value, (list, tuple)):
        return '{' + json.dumps(list(value), ensure_ascii = False) + '}'
    return '"' + escape(str(value)) + '"'

def format_attrs(values):
    return ''.join(f" {name}={format_value(value)}" for name, value in values.items())


########################################################################################################################################################
#####
#####  INLINE SEGMENTS
#####

# style overrides that are written as dedicated tags rather than as <Span> attributes
INLINE_MARKS = [
    ('B', 'fontWeight',     700),
    ('I', 'fontStyle',      'italic'),
    ('U', 'textDecoration', 'underline'),
    ('S', 'textDecoration', 'strikethrough'),
]

def format_segment(segment, wrap = False):
    """
    Inline markup of a single segment. A plain segment is written as raw text,
    unless `wrap` is true: then it's enclosed in an empty <Span> to stay a separate segment after parsing.
    """
    style = dict(segment.style)
    tags  = []
    for tag, key, value in INLINE_MARKS:
        if key in style and style[key] == value:
            tags.append(tag)
            del style[key]

    markup = escape(segment.text)
    for tag in reversed(tags):
        markup = f"<{tag}>{markup}</{tag}>"
    if style or (wrap and not tags):
        markup = f"<Span{format_attrs(style)}>{markup}</Span>"
    return markup

def format_segments(segments):
    """Inline markup of a sequence of segments."""
    plain  = all(not s.style for s in segments)
    parts  = []
    raw    = False          # True if the last part written is raw text, which would merge with subsequent raw text
    for i, segment in enumerate(segments):
        wrap = not segment.style and (raw or (plain and i == 0))
        parts.append(format_segment(segment, wrap))
        raw = not segment.style and not wrap
    return ''.join(parts)


########################################################################################################################################################
#####
#####  NODES
#####

def serialize(node, indent = 0):
    """
    DSL text of a tree rooted at `node`. Nested elements are indented by INDENT per level, starting from `indent` levels.
    A node with no children and no text is written as a self-closing tag; a short one-line text is written inline.
    """
    spaces = INDENT * indent
    tag    = node.tag
    values = node.attrs()

    text = segments = None
    if isinstance(node, Text):
        text, segments = values.pop('text', None), values.pop('segments', None)
        if text is not None and not segments and text != text.strip():
            values['text'], text = text, None       # the body is stripped when parsed, so outer whitespace needs an attribute
        elif text == '':
            values['text'] = ''                     # empty content would parse back as no text

    head = f"{spaces}<{tag}{format_attrs(values)}"

    if node.children:
        body = '\n'.join(serialize(child, indent + 1) for child in node.children)
        return f"{head}>\n{body}\n{spaces}</{tag}>"

    if not text:
        return head + " />"

    content = format_segments(segments) if segments else escape(text)
    if len(text) < INLINE_TEXT_LIMIT and '\n' not in text:
        return f"{head}>{content}</{tag}>"
    return f"{head}>\n{spaces}{INDENT}{content}\n{spaces}</{tag}>"


def serialize_many(nodes):
    """DSL text of a batch of trees, one after another, as accepted by parse_many()."""
    return '\n'.join(serialize(node) for node in nodes)
