"""
Global configuration.
"""

#####################################################################################################################################################
#####
#####  PARSER LIMITS
#####

MAX_LENGTH      = 1_000_000     # max. no. of characters in a single input text
MAX_DEPTH       = 40            # max. nesting depth of elements, inline tags included
MAX_BRACE_DEPTH = 16            # max. nesting depth of {...} inside a single attribute value

CONTEXT_CHARS   = 40            # no. of characters shown on each side of the error position in error messages


#####################################################################################################################################################
#####
#####  SERIALIZATION
#####

INDENT            = '  '        # indentation added for every nesting level of the output
INLINE_TEXT_LIMIT = 60          # text shorter than this (and without newlines) is written on the same line as its tag


#####################################################################################################################################################
#####
#####  CANVAS
#####

CANVAS_WIDTH  = 1920
CANVAS_HEIGHT = 1080

FONT_FAMILY   = 'Inter'         # default font family of all text produced by sugar elements
