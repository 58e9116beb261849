"""
Sugar elements: high-level tags that expand into subtrees of primitive nodes.

Every parameter omitted by the author takes a documented default; the defaults are part of the language
and are relied upon by authors, so they must not change silently:

    Slide        Frame 1920x1080 at (0,0), fill #ffffff, clipsContent
    SlideTitle   Text at (80,60), Inter 48/600, fill #1a1a2e
    Card         Frame at (80,180), width 800, fill #f8fafc, cornerRadius 8, padding 24, vertical, gap 16
    StatNumber   Frame (vertical, gap 8) of two Texts: value (Inter 64/700 #2563eb) and label (Inter 18/400 #6b7280)
    BulletList   Frame at (80,180), vertical, gap 16, of rows; a row is a horizontal Frame (gap 12) of a bullet and an item
    Heading      Text, level 1/2/3 -> Inter 48/700, 32/600, 24/600; other levels 32/600
    Paragraph    Text, Inter 18/400, fill #1a1a2e

Nodes created by expansion carry no id; an `id` given on the sugar element goes to the root of its expansion.
"""

import json, logging

from slidetag.config import CANVAS_WIDTH, CANVAS_HEIGHT, FONT_FAMILY
from slidetag.document import Frame, Text, STRING, NUMBER, SIZE, NUMBER_OR_LIST, NUMBER_OR_STRING, number_text
from slidetag.elements import Element, register, convert

log = logging.getLogger(__name__)


TEXT_COLOR   = '#1a1a2e'
ACCENT_COLOR = '#2563eb'
MUTED_COLOR  = '#6b7280'


########################################################################################################################################################
#####
#####  COMPONENT
#####

class Component(Element):
    """
    Sugar element. Subclasses implement build(), which receives resolved attribute values
    and returns the root of the expansion.
    """

    def expand(self, xel, warnings = None):
        values = self.values(xel, warnings)
        node = self.build(xel, values, warnings)
        log.debug("expanded <%s> into <%s>", xel.tag, node.tag)
        return node

    def build(self, xel, values, warnings):
        raise NotImplementedError


########################################################################################################################################################
#####
#####  COMPONENTS
#####

class Slide(Component):

    name  = 'Slide'
    attrs = {'id': STRING, 'name': STRING, 'x': NUMBER, 'y': NUMBER, 'fill': STRING, 'background': STRING}

    def build(self, xel, values, warnings):
        return Frame(
            id           = values.get('id'),
            name         = values.get('name') or 'Slide',
            x            = values.get('x', 0),
            y            = values.get('y', 0),
            width        = CANVAS_WIDTH,
            height       = CANVAS_HEIGHT,
            fill         = values.get('fill') or values.get('background') or '#ffffff',
            clipsContent = True,
            children     = self.children(xel, warnings),
        )


class SlideTitle(Component):

    name  = 'SlideTitle'
    attrs = {'id': STRING, 'name': STRING, 'x': NUMBER, 'y': NUMBER, 'text': STRING, 'fontFamily': STRING,
             'fontSize': NUMBER, 'fontWeight': NUMBER_OR_STRING, 'fill': STRING, 'color': STRING}

    def build(self, xel, values, warnings):
        text, segments = self.text(xel, values, warnings)
        return Text(
            id          = values.get('id'),
            name        = values.get('name') or 'SlideTitle',
            x           = values.get('x', 80),
            y           = values.get('y', 60),
            text        = text,
            segments    = segments,
            fontFamily  = values.get('fontFamily') or FONT_FAMILY,
            fontSize    = values.get('fontSize', 48),
            fontWeight  = values.get('fontWeight', 600),
            fill        = values.get('fill') or values.get('color') or TEXT_COLOR,
        )


class Card(Component):

    name  = 'Card'
    attrs = {'id': STRING, 'name': STRING, 'x': NUMBER, 'y': NUMBER, 'width': SIZE, 'height': SIZE, 'fill': STRING,
             'background': STRING, 'cornerRadius': NUMBER_OR_LIST, 'padding': NUMBER_OR_LIST, 'gap': NUMBER}

    def build(self, xel, values, warnings):
        return Frame(
            id           = values.get('id'),
            name         = values.get('name') or 'Card',
            x            = values.get('x', 80),
            y            = values.get('y', 180),
            width        = values.get('width', 800),
            height       = values.get('height'),
            fill         = values.get('fill') or values.get('background') or '#f8fafc',
            cornerRadius = values.get('cornerRadius', 8),
            padding      = values.get('padding', 24),
            layoutMode   = 'vertical',
            gap          = values.get('gap', 16),
            children     = self.children(xel, warnings),
        )


class StatNumber(Component):
    """Large metric with a label underneath."""

    name  = 'StatNumber'
    attrs = {'id': STRING, 'name': STRING, 'x': NUMBER, 'y': NUMBER, 'value': STRING, 'label': STRING}

    def build(self, xel, values, warnings):
        value = Text(text = values.get('value') or '0', fontFamily = FONT_FAMILY, fontSize = 64, fontWeight = 700, fill = ACCENT_COLOR)
        label = Text(text = values.get('label', ''), fontFamily = FONT_FAMILY, fontSize = 18, fontWeight = 400, fill = MUTED_COLOR)
        return Frame(
            id          = values.get('id'),
            name        = values.get('name') or 'StatNumber',
            x           = values.get('x', 0),
            y           = values.get('y', 0),
            layoutMode  = 'vertical',
            gap         = 8,
            children    = [value, label],
        )


class BulletList(Component):
    """
    List of bulleted items. Items are given either in the `items` attribute, as an array
    (JSON, single quotes allowed) or a comma-separated string, or as <Text> children;
    children take precedence when both are present.
    """

    name  = 'BulletList'
    attrs = {'id': STRING, 'name': STRING, 'x': NUMBER, 'y': NUMBER, 'items': STRING}

    def build(self, xel, values, warnings):

        items = self.parse_items(values['items']) if values.get('items') else []
        texts = [convert(child, warnings).text or '' for child in xel.elements() if child.tag.lower() == 'text']
        if texts: items = texts

        return Frame(
            id          = values.get('id'),
            name        = values.get('name') or 'BulletList',
            x           = values.get('x', 80),
            y           = values.get('y', 180),
            layoutMode  = 'vertical',
            gap         = 16,
            children    = [self.row(item) for item in items],
        )

    @staticmethod
    def row(item):
        bullet = Text(text = '•',  fontFamily = FONT_FAMILY, fontSize = 18, fill = ACCENT_COLOR)
        text   = Text(text = item, fontFamily = FONT_FAMILY, fontSize = 18, fill = TEXT_COLOR)
        return Frame(layoutMode = 'horizontal', gap = 12, children = [bullet, text])

    @staticmethod
    def parse_items(items):
        """List of item strings from a JSON-like array, or from a comma-separated string if that fails."""
        for variant in (items, items.replace("'", '"')):
            try:
                parsed = json.loads(variant)
            except ValueError:
                continue
            if isinstance(parsed, list):
                return [item if isinstance(item, str) else json.dumps(item) for item in parsed]
        return [item.strip() for item in items.split(',')]


class Heading(Component):
    """Section heading. Font size and weight follow `level` unless given explicitly."""

    name  = 'Heading'
    attrs = {'id': STRING, 'name': STRING, 'x': NUMBER, 'y': NUMBER, 'text': STRING, 'fontFamily': STRING,
             'fontSize': NUMBER, 'fontWeight': NUMBER_OR_STRING, 'fill': STRING, 'level': NUMBER}

    SIZES   = {1: 48,  2: 32,  3: 24}
    WEIGHTS = {1: 700, 2: 600, 3: 600}

    def build(self, xel, values, warnings):
        level = values.get('level', 2)
        text, segments = self.text(xel, values, warnings)
        return Text(
            id          = values.get('id'),
            name        = values.get('name') or f"Heading{number_text(level)}",
            x           = values.get('x'),
            y           = values.get('y'),
            text        = text,
            segments    = segments,
            fontFamily  = values.get('fontFamily') or FONT_FAMILY,
            fontSize    = values.get('fontSize', self.SIZES.get(level, 32)),
            fontWeight  = values.get('fontWeight', self.WEIGHTS.get(level, 600)),
            fill        = values.get('fill') or TEXT_COLOR,
        )


class Paragraph(Component):

    name  = 'Paragraph'
    attrs = {'id': STRING, 'name': STRING, 'x': NUMBER, 'y': NUMBER, 'width': SIZE, 'text': STRING, 'fontFamily': STRING,
             'fontSize': NUMBER, 'fontWeight': NUMBER_OR_STRING, 'fill': STRING}

    def build(self, xel, values, warnings):
        text, segments = self.text(xel, values, warnings)
        return Text(
            id          = values.get('id'),
            name        = values.get('name') or 'Paragraph',
            x           = values.get('x'),
            y           = values.get('y'),
            width       = values.get('width'),
            text        = text,
            segments    = segments,
            fontFamily  = values.get('fontFamily') or FONT_FAMILY,
            fontSize    = values.get('fontSize', 18),
            fontWeight  = values.get('fontWeight', 400),
            fill        = values.get('fill') or TEXT_COLOR,
        )


COMPONENTS = [Slide(), SlideTitle(), Card(), StatNumber(), BulletList(), Heading(), Paragraph()]

register(*COMPONENTS)
