"""
Design rules: a lint pass over a parsed slide that reports layout smells typical of generated slides.

    no-zero-gap           auto-layout frame with gap={0}
    no-white-fill         inner frame filled with white (the root slide is exempt)
    no-fixed-inner-size   inner auto-layout frame with a fixed width or height (1920 and 1080 are allowed)
    no-spacer-frames      empty frame used as a spacer/divider/separator instead of a gap on its parent

Only frames are checked, and the check descends through frames only.
"""

from slidetag.config import CANVAS_WIDTH, CANVAS_HEIGHT
from slidetag.document import Frame


class RuleViolation:

    node_id = None      # id of the offending node; None if it has no id
    rule    = None      # name of the rule
    message = None      # description of the problem
    fix     = None      # suggested correction

    def __init__(self, node_id, rule, message, fix):
        self.node_id = node_id
        self.rule    = rule
        self.message = message
        self.fix     = fix

    def __repr__(self):
        return f"RuleViolation({self.rule!r}, {self.node_id!r})"


def _is_white(color):
    return color.strip().lower() in ('#fff', '#ffffff')

def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def check_rules(root):
    """List of RuleViolations found in the tree; empty if the tree is clean."""
    violations = []
    _check(root, True, violations)
    return violations


def _check(node, isroot, violations):

    if not isinstance(node, Frame): return

    name = node.id or '(no id)'
    autolayout = node.layoutMode is not None and node.layoutMode != 'none'

    if autolayout and node.gap == 0:
        violations.append(RuleViolation(node.id, 'no-zero-gap',
            f'Frame "{name}" has gap={{0}}. Elements will be crammed together with no spacing.',
            'Use a real gap value: gap={8}, gap={16}, gap={24}, gap={32}, or gap={48}.'))

    if not isroot and node.fill and _is_white(node.fill):
        violations.append(RuleViolation(node.id, 'no-white-fill',
            f'Frame "{name}" has fill="{node.fill}". Layout frames should be transparent; a white fill is rarely intended.',
            'Remove the fill attribute. Only use fill on intentional cards/containers with a visible background color (e.g., fill="#F8F8F8").'))

    if not isroot and autolayout:
        dims = []
        if _is_number(node.width) and node.width != CANVAS_WIDTH:    dims.append(f"width={{{node.width}}}")
        if _is_number(node.height) and node.height != CANVAS_HEIGHT: dims.append(f"height={{{node.height}}}")
        if dims:
            violations.append(RuleViolation(node.id, 'no-fixed-inner-size',
                f'Frame "{name}" has fixed {" and ".join(dims)} with auto-layout. This will crop content if it grows.',
                f'Use width="fill" or width="hug" instead. Fixed dimensions should only be on the root slide frame ({CANVAS_WIDTH}x{CANVAS_HEIGHT}).'))

    if not node.children and not autolayout:
        sized = (_is_number(node.width) or node.width == 'fill') and _is_number(node.height)
        id = (node.id or '').lower()
        if sized and any(word in id for word in ('spacer', 'divider', 'separator')):
            violations.append(RuleViolation(node.id, 'no-spacer-frames',
                f'Frame "{node.id}" appears to be a spacer. Use gap on the parent frame instead of empty spacer elements.',
                'Remove this spacer frame and set an appropriate gap value on its parent.'))

    for child in node.children:
        _check(child, False, violations)


def format_violations(violations):
    """Numbered list of violations with their fixes, as a single string."""
    return '\n\n'.join(f"{i}. [{v.rule}] {v.message}\n   Fix: {v.fix}" for i, v in enumerate(violations, 1))
