"""
SlideTag: parser and tree engine of a markup language for describing slides.

    from slidetag import parse, serialize, update_by_id

    root = parse('<Slide><SlideTitle id="title">Hello</SlideTitle></Slide>')
    root = update_by_id(root, 'title', {'text': 'Hello again'})
    print(serialize(root))
"""

from slidetag.document import Literal, Segment, Primitive, Frame, Text, Rectangle, Ellipse, Vector, Image, Group, Patch
from slidetag.errors import ParseError, DSLSyntaxError, UnknownElementError, ResourceLimitError, ParseWarning, \
    StructuralMutationError, PatchError
from slidetag.parser import SlideParser, parse, parse_many
from slidetag.tree import walk, find_by_id, find_with_parent, update_by_id, replace_by_id, delete_by_id, collect_ids, \
    missing_ids, find_duplicate_ids, Location, CANNOT_DELETE_ROOT
from slidetag.serialize import serialize, serialize_many
from slidetag.validate import validate, validate_many, preprocess, Success, Failure
from slidetag.rules import check_rules, format_violations, RuleViolation
