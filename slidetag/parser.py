"""
Parser of SlideTag documents: DSL text -> generic element tree (XElement) -> typed tree of Primitives.

Parsing goes in 3 steps:
1. structure check: a linear scan that enforces resource limits (input length, nesting of elements and braces)
   and matches closing tags against opening ones, before any recursive processing takes place;
2. grammar: parsimonious parses the text (see slidetag.grammar) and TreeBuilder converts the parse tree into XElements;
3. conversion: tags are classified and expanded into Primitives (see slidetag.elements, slidetag.components).
"""

import logging, re
from xml.sax.saxutils import unescape

from parsimonious.grammar import Grammar as Parsimonious
from parsimonious.nodes import NodeVisitor
from parsimonious.exceptions import ParseError as GrammarError

from slidetag.config import MAX_LENGTH, MAX_DEPTH, MAX_BRACE_DEPTH
from slidetag.document import Literal
from slidetag.errors import ParseError, DSLSyntaxError, ResourceLimitError, found_token
from slidetag.grammar import grammar
from slidetag.markup import XElement
from slidetag.elements import convert
import slidetag.components          # registers sugar elements in the vocabulary

log = logging.getLogger(__name__)


ENTITIES = {'&quot;': '"', '&apos;': "'"}         # decoded on top of &amp; &lt; &gt;

def decode(s):
    return unescape(s, ENTITIES)


########################################################################################################################################################
#####
#####  GRAMMAR
#####

class Grammar(Parsimonious):

    default = None      # shared instance; parsimonious grammars keep no state between parses

    def __init__(self):
        super(Grammar, self).__init__(grammar)

Grammar.default = Grammar()


# messages for grammar failures, by name of the rule that failed at the furthest position of input
SYNTAX_MESSAGES = {
    'document':     'Expected "<" to start an element',
    'batch':        'Expected "<" to start an element',
    'element':      'Expected "<" to start an element',
    'tag_name':     'Expected tag name after "<"',
    'close_name':   'Expected tag name after "</"',
    'equals':       'Expected "=" after attribute name',
    'value':        'Expected attribute value: a string in double quotes or a literal in braces',
    'quoted':       'Expected attribute value: a string in double quotes or a literal in braces',
    'braced':       'Expected attribute value: a string in double quotes or a literal in braces',
    'brace_end':    'Expected "}" to close attribute value',
    'empty_end':    'Expected ">" or "/>" at the end of tag',
    'body_end':     'Expected ">" or "/>" at the end of tag',
    'close_end':    'Expected ">" at the end of closing tag',
    'close':        'Expected closing tag',
    'end':          'Unexpected content after the top-level element',
}

NAME_BEFORE = re.compile(r'([A-Za-z0-9_-]+)\s*$')


########################################################################################################################################################
#####
#####  TREE BUILDER
#####

class TreeBuilder(NodeVisitor):
    """Converts a parsimonious parse tree into a tree of XElements."""

    unwrapped_exceptions = (ParseError, RecursionError)

    def __init__(self, text):
        self.text = text

    def generic_visit(self, node, children):
        return children

    def visit_document(self, node, children):
        _, element, _, _ = children
        return element

    def visit_batch(self, node, children):
        _, items, _ = children
        return [element for element, _ in items]

    def visit_element(self, node, children):
        _, _, (tag, pos), attr_list, _, (tail,) = children

        attrs, duplicates = {}, []
        for name, value in attr_list:
            if name in attrs: duplicates.append(name)
            attrs[name] = value

        body = []
        if tail is not None:
            body, (close, close_pos) = tail
            if close != tag:
                raise DSLSyntaxError(f"Mismatched closing tag: expected </{tag}>, got </{close}>",
                                     self.text, close_pos, found = f"</{close}>")

        return XElement(tag, attrs, body, pos, duplicates)

    def visit_empty_end(self, node, children):
        return None

    def visit_body_end(self, node, children):
        _, content, close = children
        return content, close

    def visit_content(self, node, children):
        return [child for (child,) in children if child is not None]

    def visit_close(self, node, children):
        return children[2]

    def visit_tag_name(self, node, children):   return node.text, node.start
    def visit_close_name(self, node, children): return node.text, node.start
    def visit_attr_name(self, node, children):  return node.text

    def visit_attrs(self, node, children):
        return [attr for _, attr in children]

    def visit_attr(self, node, children):
        name, _, _, _, value = children
        return name, value

    def visit_value(self, node, children):
        return children[0]

    def visit_quoted(self, node, children):
        raw = node.text[1:-1]
        return Literal(Literal.STRING, decode(raw), raw)

    def visit_braced(self, node, children):
        literal = Literal.braced(node.text[1:-1])
        if literal.kind == Literal.STRING:
            literal.value = decode(literal.value)
        return literal

    def visit_text(self, node, children):
        return decode(node.text)

    def visit_comment(self, node, children):    return None
    def visit_skip(self, node, children):       return None
    def visit_end(self, node, children):        return None


########################################################################################################################################################
#####
#####  STRUCTURE CHECK
#####

# tokens of element content, and tokens inside an opening tag
CONTENT_TOKEN = re.compile(r'<!--.*?(?:-->|\Z)|</|<|[^<]+', re.S)
TAG_TOKEN     = re.compile(r'\s+|<!--.*?(?:-->|\Z)|/>|>|"[^"]*"|\{|[A-Za-z0-9_-]+|=', re.S)
TAG_NAME      = re.compile(r'(?:\s+|<!--.*?(?:-->|\Z))*([A-Za-z0-9_-]+)', re.S)
CLOSE_END     = re.compile(r'(?:\s+|<!--.*?(?:-->|\Z))*>', re.S)


class Scanner:
    """
    Linear scan of the input that enforces resource limits and checks pairing of opening and closing tags.
    The scan stops silently at the first construct it doesn't recognize: such input is malformed
    and the grammar will report the problem with a more specific message.
    """

    def __init__(self, text, max_length, max_depth, max_brace_depth):
        self.text = text
        self.max_length = max_length
        self.max_depth = max_depth
        self.max_brace_depth = max_brace_depth
        self.depth   = 0          # max. nesting depth of elements reached by the scan
        self.deepest = None       # position of the first element found at this depth

    def check(self):
        text = self.text
        if len(text) > self.max_length:
            raise ResourceLimitError(f"Input too long: {len(text)} characters, the limit is {self.max_length}",
                                     text, self.max_length)

        stack = []          # (tag name, position) of open elements
        intag = False       # True when inside an opening tag, between the name and ">" or "/>"
        pos   = 0

        while pos < len(text):
            if intag:
                match = TAG_TOKEN.match(text, pos)
                if not match: return
                token = match.group()
                if token == '{':
                    pos = self._skip_braces(pos)
                    if pos is None: return
                    continue
                if token == '/>':
                    stack.pop()
                    intag = False
                elif token == '>':
                    intag = False
                pos = match.end()
                continue

            match = CONTENT_TOKEN.match(text, pos)
            token = match.group()
            if token not in ('<', '</'):
                pos = match.end()
                continue

            name = TAG_NAME.match(text, match.end())
            if not name: return
            tag, tagpos = name.groups()[0], name.start(1)

            if token == '<':
                stack.append((tag, tagpos))
                if len(stack) > self.depth:
                    self.depth, self.deepest = len(stack), match.start()
                if len(stack) > self.max_depth:
                    raise ResourceLimitError(f"Elements nested too deeply: more than {self.max_depth} levels", text, match.start())
                intag = True
                pos = name.end()
                continue

            if not stack: return
            expected, _ = stack.pop()
            if tag != expected:
                raise DSLSyntaxError(f"Mismatched closing tag: expected </{expected}>, got </{tag}>",
                                     text, tagpos, found = f"</{tag}>")
            end = CLOSE_END.match(text, name.end())
            if not end: return
            pos = end.end()

        if stack and not intag:
            tag, _ = stack[-1]
            raise DSLSyntaxError(f"Unexpected end of input: missing closing tag </{tag}>", text, len(text), found = 'end of input')

    def _skip_braces(self, pos):
        """Position right after the {...} value that starts at `pos`, or None if it's not closed."""
        text  = self.text
        depth = 0
        while pos < len(text):
            char = text[pos]
            if char == '"':
                end = text.find('"', pos + 1)
                if end < 0: return None
                pos = end + 1
                continue
            if char == '{':
                depth += 1
                if depth > self.max_brace_depth:
                    raise ResourceLimitError(f"Braces nested too deeply: more than {self.max_brace_depth} levels", text, pos)
            elif char == '}':
                depth -= 1
                if depth == 0: return pos + 1
            pos += 1
        return None


########################################################################################################################################################
#####
#####  PARSER
#####

class SlideParser:
    """
    Parser of SlideTag documents. Configuration options (max_length, max_depth, max_brace_depth)
    can be passed as keyword arguments; defaults are taken from slidetag.config.
    """

    config_default = {
        'max_length':       MAX_LENGTH,         # max. no. of characters of input text
        'max_depth':        MAX_DEPTH,          # max. nesting depth of elements
        'max_brace_depth':  MAX_BRACE_DEPTH,    # max. nesting depth of braces in attribute values
    }

    config = None

    def __init__(self, **config):
        unknown = set(config) - set(self.config_default)
        if unknown: raise TypeError(f"Unknown configuration option(s) of SlideParser: {', '.join(sorted(unknown))}")

        self.config = self.config_default.copy()
        self.config.update(**config)

    def parse(self, text, warnings = None):
        """
        Parse a document that consists of exactly one top-level element (comments and whitespace around are allowed)
        and return the root Primitive of the typed tree. Warnings are appended to `warnings` if it's a list.
        Raise a ParseError subclass on malformed input.
        """
        log.debug("parsing a document of %s characters", len(text))
        xel  = self.parse_markup(text)
        root = self._convert(xel, text, warnings)
        log.debug("parsed a document with root <%s>", root.tag)
        return root

    def parse_many(self, text, warnings = None):
        """Parse a sequence of top-level elements written back-to-back and return a list of their trees."""
        log.debug("parsing a batch of %s characters", len(text))
        roots = [self._convert(xel, text, warnings) for xel in self.parse_markup(text, 'batch')]
        log.debug("parsed a batch of %s elements", len(roots))
        return roots

    def parse_markup(self, text, rule = 'document'):
        """
        Parse `text` into generic XElement(s), without classification of tags.
        Return a single XElement for rule="document", or a list of them for rule="batch".
        """
        Scanner(text, **self.config).check()
        try:
            tree = Grammar.default[rule].parse(text)
            return TreeBuilder(text).visit(tree)
        except GrammarError as ex:
            raise self._syntax_error(ex, text) from None
        except RecursionError:
            raise self._too_deep(text) from None

    def _convert(self, xel, text, warnings):
        try:
            return convert(xel, warnings)
        except ParseError as ex:
            ex.locate(text)
            raise
        except RecursionError:
            raise self._too_deep(text) from None

    def _too_deep(self, text):
        """
        ResourceLimitError for input that passed the `max_depth` check yet exhausted the call stack
        of the grammar or conversion. Points at the first element of the deepest nesting level.
        """
        scanner = Scanner(text, **self.config)
        scanner.check()
        log.debug("call stack exhausted at nesting depth %s", scanner.depth)
        return ResourceLimitError(f"Elements nested too deeply: {scanner.depth} levels exceed the call stack available to the parser",
                                  text, scanner.deepest)

    @staticmethod
    def _syntax_error(ex, text):
        """Convert parsimonious' ParseError into DSLSyntaxError."""
        pos  = ex.pos
        rule = getattr(ex.expr, 'name', '')

        if pos >= len(text):
            return DSLSyntaxError("Unexpected end of input", text, pos, found = 'end of input')

        message = SYNTAX_MESSAGES.get(rule, "Unexpected character")
        if rule == 'equals':
            name = NAME_BEFORE.search(text, 0, pos)
            if name: message = f'Expected "=" after attribute "{name.group(1)}"'
        elif rule in ('value', 'quoted', 'braced') and text[pos] == '"':
            message = 'Unterminated string in attribute value'

        return DSLSyntaxError(message, text, pos, found = found_token(text, pos))


########################################################################################################################################################
#####
#####  SHORTCUTS
#####

def parse(text, warnings = None, **config):
    """Parse a single-element document into a typed tree. See SlideParser.parse()."""
    return SlideParser(**config).parse(text, warnings)

def parse_many(text, warnings = None, **config):
    """Parse back-to-back top-level elements into a list of typed trees. See SlideParser.parse_many()."""
    return SlideParser(**config).parse_many(text, warnings)
