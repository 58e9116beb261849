"""
Non-throwing entry point for DSL text of untrusted origin, e.g., generated by a language model.
Parsing errors are converted into Failure values carrying the location of the problem; no exception escapes.
"""

import logging, re

from slidetag.errors import ParseError
from slidetag.parser import SlideParser

log = logging.getLogger(__name__)


########################################################################################################################################################
#####
#####  RESULTS
#####

class Success:
    """Successful parse. `root` is the root Primitive, or a list of roots for validate_many()."""

    success = True
    root    = None

    def __init__(self, root):
        self.root = root

    def __bool__(self):
        return True

    def __repr__(self):
        return f"Success({self.root!r})"


class Failure:
    """Failed parse, with a flattened description of the error."""

    success = False
    error   = None      # message of the error, without location
    line    = None      # 1-based line of the error position, if known
    column  = None      # 1-based column of the error position, if known
    context = None      # excerpt of the input with a caret line pointing at the error, if known
    found   = None      # offending token, if known

    def __init__(self, error, line = None, column = None, context = None, found = None):
        self.error   = error
        self.line    = line
        self.column  = column
        self.context = context
        self.found   = found

    @staticmethod
    def from_error(ex):
        return Failure(ex.message, ex.line, ex.column, ex.context, ex.found)

    def __bool__(self):
        return False

    def __str__(self):
        msg = self.error
        if self.line is not None:  msg += f" at line {self.line}, column {self.column}"
        if self.context:           msg += f"\n\nContext:\n{self.context}"
        return msg

    def __repr__(self):
        return f"Failure({self.error!r}, line={self.line}, column={self.column})"


########################################################################################################################################################
#####
#####  VALIDATION
#####

def validate(text, warnings = None, **config):
    """Parse a single-element document. Return Success(root) or Failure(...)."""
    return _attempt(SlideParser(**config).parse, text, warnings)

def validate_many(text, warnings = None, **config):
    """Parse a batch of back-to-back elements. Return Success([root, ...]) or Failure(...)."""
    return _attempt(SlideParser(**config).parse_many, text, warnings)

def _attempt(parse, text, warnings):
    try:
        return Success(parse(text, warnings))
    except ParseError as ex:
        log.debug("invalid DSL text: %s", ex.message)
        return Failure.from_error(ex)
    except Exception as ex:
        log.warning("unexpected error while parsing DSL text", exc_info = True)
        return Failure(str(ex) or type(ex).__name__)


########################################################################################################################################################
#####
#####  PREPROCESSING
#####

NEWLINE_EXPR = re.compile(r"""\{['"]\\n['"]\}""")

def preprocess(text):
    """
    Fix common authoring mistakes before parsing. Currently: JSX-style newlines {'\\n'} and {"\\n"}
    written in text content are replaced with actual line breaks.
    """
    return NEWLINE_EXPR.sub('\n', text)
