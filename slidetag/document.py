"""
Document model of SlideTag: the typed tree of slide primitives produced by the parser.

A tree is built once per parse and is IMMUTABLE afterwards. Nodes keep their children in tuples
and refuse attribute assignment; edits are done by building new nodes with Primitive.replace()
or Patch.apply(), see slidetag.tree for id-addressed editing with structural sharing.

Node kinds form a closed set:
- Frame      -- layout container with auto-layout, paint, corner radius and clipping
- Text       -- text content, optionally split into styled segments
- Rectangle, Ellipse, Vector, Image  -- shapes, no children
- Group      -- non-layout grouping of children, no paint

Attribute values are resolved ONCE, when a node is created, according to the value kind declared
for every field (string, number, boolean, size...). Consumers read plain Python values afterwards.
"""

import json, re
from types import MappingProxyType

from slidetag.errors import PatchError


########################################################################################################################################################
#####
#####  LITERALS
#####

NUMBER_FULL   = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')
NUMBER_PREFIX = re.compile(r'^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')

def to_number(s):
    """Convert a numeric literal to int if it has no fraction/exponent part, to float otherwise."""
    try:
        return int(s)
    except ValueError:
        return float(s)

def number_text(value):
    """Shortest textual form of a number, as used in serialized attributes: 48 rather than 48.0."""
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


class Literal:
    """
    Attribute value as written in DSL source, resolved to one of a closed set of kinds:
    a "string" (quoted value, or a quoted string inside braces), a "number", a "boolean",
    an "array" (JSON-like list inside braces), or an "expr" - any other brace content, kept as raw text.
    """
    STRING  = 'string'
    NUMBER  = 'number'
    BOOLEAN = 'boolean'
    ARRAY   = 'array'
    EXPR    = 'expr'

    kind  = None        # one of the kinds above
    value = None        # Python value: str, int/float, bool, list; raw text for "expr"
    raw   = None        # source text of the value, without the enclosing quotes or braces

    def __init__(self, kind, value, raw = None):
        self.kind  = kind
        self.value = value
        self.raw   = raw if raw is not None else value

    @staticmethod
    def braced(raw):
        """Resolve the content of a {...} attribute value."""
        raw = raw.strip()
        if len(raw) >= 2 and raw[0] == raw[-1] == '"':
            return Literal(Literal.STRING, raw[1:-1], raw)
        if NUMBER_FULL.match(raw):
            return Literal(Literal.NUMBER, to_number(raw), raw)
        if raw.lower() in ('true', 'false'):
            return Literal(Literal.BOOLEAN, raw.lower() == 'true', raw)
        if raw.startswith('[') and raw.endswith(']'):
            for variant in (raw, raw.replace("'", '"')):
                try:
                    value = json.loads(variant)
                except ValueError:
                    continue
                if isinstance(value, list): return Literal(Literal.ARRAY, value, raw)
        return Literal(Literal.EXPR, raw, raw)

    def __eq__(self, other):
        if not isinstance(other, Literal): return NotImplemented
        return self.kind == other.kind and self.value == other.value

    __hash__ = None

    def __repr__(self):
        return f"Literal({self.kind}, {self.value!r})"


########################################################################################################################################################
#####
#####  VALUE KINDS
#####

def as_string(value):
    if isinstance(value, str): return value
    if isinstance(value, bool): return 'true' if value else 'false'
    if isinstance(value, (int, float)): return number_text(value)
    if isinstance(value, list): return json.dumps(value, ensure_ascii = False)
    raise ValueError(f"expected a string, got {value!r}")

def as_number(value):
    if isinstance(value, bool): raise ValueError(f"expected a number, got {value!r}")
    if isinstance(value, (int, float)): return value
    if isinstance(value, str):
        match = NUMBER_PREFIX.match(value)              # leading number is taken, like in "24px"
        if match: return to_number(match.group().strip())
    raise ValueError(f"expected a number, got {value!r}")

def as_boolean(value):
    if isinstance(value, bool): return value
    if isinstance(value, (int, float)) and value in (0, 1): return bool(value)
    if isinstance(value, str) and value.strip().lower() in ('true', '1', 'false', '0'):
        return value.strip().lower() in ('true', '1')
    raise ValueError(f"expected a boolean, got {value!r}")

def as_size(value):
    if value in ('fill', 'hug'): return value
    return as_number(value)

def as_number_or_list(value):
    if isinstance(value, (list, tuple)):
        if not value or not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in value):
            raise ValueError(f"expected a list of numbers, got {value!r}")
        return list(value)
    return as_number(value)

def as_number_or_string(value):
    if isinstance(value, str):
        if NUMBER_FULL.match(value.strip()): return to_number(value.strip())
        return value
    return as_number(value)

def as_segments(value):
    return tuple(Segment.make(s) for s in value)


STRING           = 'string'
NUMBER           = 'number'
BOOLEAN          = 'boolean'
SIZE             = 'size'                   # number, or "fill" / "hug" sizing modes
NUMBER_OR_LIST   = 'number-or-list'         # single number, or a list of numbers: per side / per corner
NUMBER_OR_STRING = 'number-or-string'       # number, or a keyword / percentage like "auto", "150%", "bold"
SEGMENTS         = 'segments'

COERCE = {
    STRING:             as_string,
    NUMBER:             as_number,
    BOOLEAN:            as_boolean,
    SIZE:               as_size,
    NUMBER_OR_LIST:     as_number_or_list,
    NUMBER_OR_STRING:   as_number_or_string,
    SEGMENTS:           as_segments,
}

def coerce(kind, value):
    """Convert `value` to the value kind `kind`. Raise ValueError if the value doesn't fit."""
    return COERCE[kind](value)


########################################################################################################################################################
#####
#####  SEGMENTS
#####

class Segment:
    """
    A styled run of text inside a Text node. `style` holds the overrides of text properties
    (fontWeight, fontStyle, textDecoration...) applied to this run; empty for plain runs.
    """
    STYLE_FIELDS = {
        'fontFamily':       STRING,
        'fontSize':         NUMBER,
        'fontWeight':       NUMBER_OR_STRING,
        'fontStyle':        STRING,
        'fill':             STRING,
        'textDecoration':   STRING,
        'letterSpacing':    NUMBER_OR_STRING,
    }

    text  = None
    style = None        # read-only mapping

    def __init__(self, text, style = None):
        object.__setattr__(self, 'text', text)
        object.__setattr__(self, 'style', MappingProxyType(dict(style or {})))

    def __setattr__(self, name, value):
        raise AttributeError("Segment is immutable, create a new one instead")

    def __delattr__(self, name):
        raise AttributeError("Segment is immutable, create a new one instead")

    @staticmethod
    def make(value):
        """Segment from a Segment, a (text, style) pair, or a dict with "text" and "style" keys."""
        if isinstance(value, Segment): return value
        if isinstance(value, dict):    return Segment(value['text'], value.get('style'))
        text, style = value
        return Segment(text, style)

    def __eq__(self, other):
        if not isinstance(other, Segment): return NotImplemented
        return self.text == other.text and self.style == other.style

    __hash__ = None

    def __repr__(self):
        if not self.style: return f"Segment({self.text!r})"
        return f"Segment({self.text!r}, {dict(self.style)!r})"


########################################################################################################################################################
#####
#####  PRIMITIVES
#####

BASE_FIELDS = {
    'id':           STRING,
    'name':         STRING,
    'visible':      BOOLEAN,
    'opacity':      NUMBER,
    'x':            NUMBER,
    'y':            NUMBER,
    'width':        SIZE,
    'height':       SIZE,
    'rotation':     NUMBER,
}

PAINT_FIELDS = {
    'fill':         STRING,
    'stroke':       STRING,
    'strokeWeight': NUMBER,
}


class Primitive:
    """
    Base class of all node kinds. Fields that were not given at creation read as None.
    Subclasses declare `fields` as a dict {name: value kind}, in the order of serialization.
    """
    type = None             # node kind, lowercase: "frame", "text", ...
    tag  = None             # tag name that represents this node kind in DSL

    fields      = BASE_FIELDS
    iscontainer = False     # True in node kinds that own an ordered list of child nodes
    children    = ()        # ordered children, if any; always a tuple, empty in leaf kinds

    def __init__(self, children = None, **attrs):
        for name, value in attrs.items():
            if name not in self.fields: raise TypeError(f"<{self.tag}> has no field '{name}'")
            if value is not None: object.__setattr__(self, name, value)

        if self.iscontainer:
            object.__setattr__(self, 'children', tuple(children or ()))
        elif children:
            raise TypeError(f"<{self.tag}> can't have children")

    def __getattr__(self, name):
        # only called when regular lookup fails, i.e., for fields that were not set
        if name in type(self).fields: return None
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable, use replace() to create a modified copy")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable, use replace() to create a modified copy")

    def attrs(self):
        """Dict of all fields that are set on this node, in declaration order."""
        return {name: self.__dict__[name] for name in self.fields if name in self.__dict__}

    def replace(self, children = None, **changes):
        """
        A new node of the same kind with `changes` merged into the fields of self; None deletes a field.
        Children are taken from self unless `children` is given. Values are NOT coerced here, see Patch.
        """
        attrs = self.attrs()
        for name, value in changes.items():
            if value is None: attrs.pop(name, None)
            else:             attrs[name] = value

        if self.iscontainer:
            return type(self)(children = self.children if children is None else children, **attrs)
        return type(self)(**attrs)

    def __eq__(self, other):
        if not isinstance(other, Primitive): return NotImplemented
        return type(self) is type(other) and self.attrs() == other.attrs() and self.children == other.children

    __hash__ = None

    def __repr__(self):
        attrs = ', '.join(f"{name}={value!r}" for name, value in self.attrs().items())
        if self.children:
            attrs += (', ' if attrs else '') + f"children={list(self.children)!r}"
        return f"{type(self).__name__}({attrs})"


class Frame(Primitive):
    type = 'frame'
    tag  = 'Frame'
    iscontainer = True
    fields = {
        **BASE_FIELDS,
        **PAINT_FIELDS,
        'cornerRadius':         NUMBER_OR_LIST,
        'layoutMode':           STRING,
        'gap':                  NUMBER,
        'padding':              NUMBER_OR_LIST,
        'paddingTop':           NUMBER,
        'paddingRight':         NUMBER,
        'paddingBottom':        NUMBER,
        'paddingLeft':          NUMBER,
        'primaryAxisAlign':     STRING,
        'counterAxisAlign':     STRING,
        'primaryAxisSizing':    STRING,
        'counterAxisSizing':    STRING,
        'layoutWrap':           STRING,
        'clipsContent':         BOOLEAN,
    }


class Text(Primitive):
    """
    Text node. If `segments` is present, concatenation of all segments' text equals `text` exactly;
    segments=None (not an empty tuple) means the text has no inline formatting.
    """
    type = 'text'
    tag  = 'Text'
    fields = {
        **BASE_FIELDS,
        'text':                 STRING,
        'segments':             SEGMENTS,
        'fontFamily':           STRING,
        'fontSize':             NUMBER,
        'fontWeight':           NUMBER_OR_STRING,
        'fontStyle':            STRING,
        'textAlign':            STRING,
        'textAlignVertical':    STRING,
        'fill':                 STRING,
        'lineHeight':           NUMBER_OR_STRING,
        'letterSpacing':        NUMBER_OR_STRING,
        'textAutoResize':       STRING,
        'textDecoration':       STRING,
        'textCase':             STRING,
        'maxLines':             NUMBER,
        'stroke':               STRING,
        'strokeWeight':         NUMBER,
    }

    def __init__(self, children = None, **attrs):
        segments = attrs.get('segments')
        if segments is not None:
            segments = tuple(segments)
            joined = ''.join(s.text for s in segments)
            if attrs.get('text') is None:
                attrs['text'] = joined
            elif attrs['text'] != joined:
                raise ValueError(f"text of segments {joined!r} differs from text content {attrs['text']!r}")
            attrs['segments'] = segments
        super().__init__(children, **attrs)


class Rectangle(Primitive):
    type = 'rectangle'
    tag  = 'Rectangle'
    fields = {**BASE_FIELDS, **PAINT_FIELDS, 'cornerRadius': NUMBER_OR_LIST}

class Ellipse(Primitive):
    type = 'ellipse'
    tag  = 'Ellipse'
    fields = {**BASE_FIELDS, **PAINT_FIELDS}

class Vector(Primitive):
    type = 'vector'
    tag  = 'Vector'
    fields = {**BASE_FIELDS, 'path': STRING, 'svg': STRING, **PAINT_FIELDS}

class Image(Primitive):
    type = 'image'
    tag  = 'Image'
    fields = {**BASE_FIELDS, 'imageRef': STRING, 'src': STRING, 'scaleMode': STRING, 'cornerRadius': NUMBER_OR_LIST}

class Group(Primitive):
    type = 'group'
    tag  = 'Group'
    iscontainer = True


########################################################################################################################################################
#####
#####  PATCHES
#####

class Patch:
    """
    A set of field changes to be merged into a node, validated against the node's kind.
    A value of None deletes the field. The node kind ("type") can't be changed.
    In Text nodes, a new `text` without `segments` drops the segments (they would no longer match the text),
    while new `segments` without `text` recompute the text.
    """
    changes = None

    def __init__(self, changes = None, **kwargs):
        self.changes = dict(changes or {}, **kwargs)

    @staticmethod
    def make(patch):
        return patch if isinstance(patch, Patch) else Patch(patch)

    def apply(self, node):
        """A new node with the changes applied. Raise PatchError if the patch doesn't fit the node's kind."""
        changes  = {}
        children = None

        for name, value in self.changes.items():
            if name == 'type':
                if value != node.type: raise PatchError(f"can't change type of a node from '{node.type}' to '{value}'")
                continue
            if name == 'children':
                if not node.iscontainer: raise PatchError(f"<{node.tag}> can't have children")
                children = tuple(value or ())
                if not all(isinstance(c, Primitive) for c in children):
                    raise PatchError(f"children of <{node.tag}> must be primitive nodes")
                continue
            kind = node.fields.get(name)
            if kind is None:
                raise PatchError(f"<{node.tag}> has no field '{name}'; valid fields are: {', '.join(node.fields)}")
            if value is None:
                changes[name] = None
                continue
            try:
                changes[name] = coerce(kind, value)
            except (ValueError, TypeError, KeyError) as ex:
                raise PatchError(f"invalid value for '{name}' of <{node.tag}>: {ex}") from ex

        if isinstance(node, Text):
            if 'text' in changes and 'segments' not in changes:
                changes['segments'] = None
            elif changes.get('segments') is not None and 'text' not in changes:
                changes['text'] = None              # recomputed from segments
        try:
            return node.replace(children = children, **changes)
        except ValueError as ex:
            raise PatchError(str(ex)) from ex

    def __repr__(self):
        return f"Patch({self.changes!r})"
