"""
Exceptions and warnings of SlideTag.
"""

import json, re

from slidetag.config import CONTEXT_CHARS


########################################################################################################################################################
#####
#####  UTILITIES
#####

def position(text, pos):
    """Convert a 0-based offset in `text` to a pair of 1-based (line, column) numbers."""
    pos  = max(0, min(pos, len(text)))
    line = text.count('\n', 0, pos) + 1
    column = pos - (text.rfind('\n', 0, pos) + 1) + 1
    return line, column

def error_context(text, pos, chars = CONTEXT_CHARS):
    """
    A window of `text` around `pos`, up to `chars` characters on each side,
    with an extra line holding a caret (^) that points at `pos`.
    The caret line is inserted right below the line of the window that contains `pos`.
    """
    start  = max(0, pos - chars)
    before = text[start:pos]
    after  = text[pos:pos + chars]

    line, sep, rest = after.partition('\n')
    lead  = before.rsplit('\n', 1)[-1]
    caret = ' ' * len(lead) + '^'

    context = before + line + '\n' + caret
    if sep: context += '\n' + rest
    return context

TOKEN = re.compile(r'[A-Za-z0-9_-]+|\S')

def found_token(text, pos):
    """The piece of input found at `pos` for error reports: a name, a single character, or "end of input"."""
    if pos >= len(text): return 'end of input'
    match = TOKEN.match(text, pos)
    return match.group() if match else text[pos]


########################################################################################################################################################
#####
#####  PARSING ERRORS
#####

class ParseError(Exception):
    """
    Base class for all errors raised while converting DSL text to a tree.
    Carries the location of the error in the source text, when known.
    """
    message = None      # human-readable description of the problem, without location
    line    = None      # 1-based line number of the error position
    column  = None      # 1-based column number of the error position
    context = None      # window of the input around the error, with a caret line, see error_context()
    found   = None      # the offending token actually found at the error position, if relevant
    pos     = None      # 0-based offset of the error position in the input

    def __init__(self, message, text = None, pos = None, found = None):
        self.message = message
        self.found   = found
        self.pos     = pos
        if text is not None and pos is not None:
            self.line, self.column = position(text, pos)
            self.context = error_context(text, pos)
        super().__init__(self.make_msg())

    def locate(self, text):
        """
        Fill in line, column and context from the source `text`, if the error was raised
        with a position only (by code that works on the element tree and has no access to the source).
        """
        if self.pos is not None and self.line is None:
            self.line, self.column = position(text, self.pos)
            self.context = error_context(text, self.pos)
            self.args = (self.make_msg(),)
        return self

    def make_msg(self):
        msg = self.message
        if self.line is not None:  msg += f" at line {self.line}, column {self.column}"
        if self.found is not None: msg += f" (found: {json.dumps(self.found, ensure_ascii = False)})"
        if self.context:           msg += f"\n\nContext:\n{self.context}"
        return msg


class DSLSyntaxError(ParseError):
    """Malformed input: missing tag name, missing '=', missing value delimiter, mismatched closing tag, unexpected end of input."""

class UnknownElementError(ParseError):
    """Tag name outside of the known vocabulary."""

class ResourceLimitError(ParseError):
    """Input too long or too deeply nested to be parsed safely."""


########################################################################################################################################################
#####
#####  WARNINGS
#####

class ParseWarning:
    """
    Non-fatal problem found during parsing, like an attribute that is not recognized by its tag.
    Warnings are appended to a list supplied by the caller; they are never raised.
    """
    UNKNOWN_ATTRIBUTE   = 'unknown-attribute'
    INVALID_VALUE       = 'invalid-value'
    DUPLICATE_ATTRIBUTE = 'duplicate-attribute'

    def __init__(self, element, attribute, message, type = UNKNOWN_ATTRIBUTE):
        self.element   = element        # tag name, as written in the source
        self.attribute = attribute
        self.message   = message
        self.type      = type

    def __iter__(self):
        return iter((self.element, self.attribute, self.message))

    def __eq__(self, other):
        if not isinstance(other, ParseWarning): return NotImplemented
        return (self.type, self.element, self.attribute, self.message) == (other.type, other.element, other.attribute, other.message)

    __hash__ = None

    def __repr__(self):
        return f"ParseWarning({self.type!r}, <{self.element}> {self.attribute!r}: {self.message!r})"


########################################################################################################################################################
#####
#####  TREE EDITING
#####

class StructuralMutationError(Exception):
    """A structural edit of a tree was refused, e.g., removal of the root node."""

class PatchError(ValueError):
    """A patch can't be applied to a node: unknown field, change of node type, or a value of a wrong kind."""
