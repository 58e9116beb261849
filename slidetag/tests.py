"""
Run:
$
$  pytest -v slidetag/

"""

import pytest

from slidetag.document import Frame, Text, Rectangle, Ellipse, Group
from slidetag.errors import ParseError, DSLSyntaxError, UnknownElementError, ResourceLimitError, ParseWarning
from slidetag.parser import SlideParser, parse, parse_many
from slidetag.tree import collect_ids

sp = SlideParser()

#####################################################################################################################################################
#####
#####  UTILITIES
#####

def nested(tag, depth):
    """Document of `depth` elements nested one in another."""
    return f"<{tag}>" * depth + f"</{tag}>" * depth

def warn_types(warnings):
    return [w.type for w in warnings]

#####################################################################################################################################################
#####
#####  PARSING
#####

def test_001_basic():
    root = sp.parse('<Frame id="root" width={100} height={50} />')
    assert isinstance(root, Frame)
    assert root.id == 'root'
    assert root.width == 100 and root.height == 50
    assert root.children == ()
    assert root.fill is None

    root = sp.parse('<Frame><Rectangle fill="#ff0000"/>stray text<Ellipse /></Frame>')
    assert [type(c) for c in root.children] == [Rectangle, Ellipse]     # raw text inside containers is ignored
    assert root.children[0].fill == '#ff0000'

    root = sp.parse('\n\n   <Frame/>  \n ')
    assert isinstance(root, Frame)

def test_002_comments():
    src = """
        <!-- leading comment -->
        <Frame id="a">
            <!-- inside -->
            < <!-- before the name --> Text id="t">Hello<!-- in text --> world</Text>
        </Frame>
        <!-- trailing comment -->
    """
    root = sp.parse(src)
    assert root.id == 'a'
    assert len(root.children) == 1
    assert root.children[0].text == 'Hello world'

    root = sp.parse('<Frame /><!-- unterminated comment <Frame>')
    assert isinstance(root, Frame)

def test_003_literals():
    root = sp.parse('<Frame x={10} opacity={0.5} visible={false} cornerRadius={[8, 8, 0, 0]} name={"quoted"} clipsContent={TRUE} />')
    assert root.x == 10 and isinstance(root.x, int)
    assert root.opacity == 0.5
    assert root.visible is False
    assert root.clipsContent is True
    assert root.cornerRadius == [8, 8, 0, 0]
    assert root.name == 'quoted'

    root = sp.parse('<Text fontSize="24px" fontWeight="bold" lineHeight="150%" letterSpacing={-0.5}>x</Text>')
    assert root.fontSize == 24
    assert root.fontWeight == 'bold'
    assert root.lineHeight == '150%'
    assert root.letterSpacing == -0.5

    root = sp.parse('<Frame width="fill" height="hug" />')
    assert root.width == 'fill' and root.height == 'hug'

def test_004_nested_braces():
    root = sp.parse('<Vector path={{"a": {"b": 1}}} svg={"}{ inside quotes"} />')
    assert root.path == '{"a": {"b": 1}}'
    assert root.svg == '}{ inside quotes'

def test_005_entities():
    root = sp.parse('<Text name="R&amp;D &quot;lab&quot;">x &lt; y &amp;&amp; y &gt; z</Text>')
    assert root.name == 'R&D "lab"'
    assert root.text == 'x < y && y > z'

def test_006_case_insensitive_tags():
    root = sp.parse('<frame><TEXT>hi</TEXT><slidetitle>T</slidetitle></frame>')
    assert isinstance(root, Frame)
    assert [c.type for c in root.children] == ['text', 'text']
    assert root.children[1].name == 'SlideTitle'

def test_007_text_content():
    assert sp.parse('<Text>  Simple text \n </Text>').text == 'Simple text'
    assert sp.parse('<Text>Simple text</Text>').segments is None
    assert sp.parse('<Text text="from attribute">ignored body</Text>').text == 'from attribute'
    assert sp.parse('<Text/>').text is None
    assert sp.parse('<Text></Text>').text is None

def test_008_parse_many():
    roots = sp.parse_many('<!-- batch --> <Frame id="a"/>\n<Text id="b">x</Text><Group id="c"><Frame/></Group>')
    assert [r.id for r in roots] == ['a', 'b', 'c']
    assert isinstance(roots[2], Group)
    assert parse_many('  ') == []

def test_009_shortcuts():
    warnings = []
    root = parse('<Frame foo="1" />', warnings)
    assert isinstance(root, Frame)
    assert len(warnings) == 1
    with pytest.raises(ResourceLimitError):
        parse('<Frame />', max_length = 5)
    with pytest.raises(TypeError, match = 'max_nodes'):
        SlideParser(max_nodes = 10)

#####################################################################################################################################################
#####
#####  ERRORS
#####

def test_010_mismatched_tag():
    with pytest.raises(DSLSyntaxError, match = r'expected </Frame>, got </Text>') as ex_info:
        sp.parse('<Frame></Text>')
    ex = ex_info.value
    assert 'Frame' in ex.message and 'Text' in ex.message
    assert ex.found == '</Text>'
    assert (ex.line, ex.column) == (1, 10)

    with pytest.raises(DSLSyntaxError, match = r'expected </Text>, got </Frame>'):
        sp.parse('<Frame>\n  <Text>Hi</Frame>\n</Frame>')

    with pytest.raises(DSLSyntaxError, match = r'expected </Frame>, got </frame>'):
        sp.parse('<Frame></frame>')                 # closing tags are case-sensitive

def test_011_missing_tag_name():
    with pytest.raises(DSLSyntaxError, match = 'Expected tag name') as ex_info:
        sp.parse('<>')
    assert (ex_info.value.line, ex_info.value.column) == (1, 2)

def test_012_missing_equals():
    with pytest.raises(DSLSyntaxError, match = 'Expected "=" after attribute "width"') as ex_info:
        sp.parse('<Frame width 100 />')
    assert ex_info.value.found == '100'
    assert ex_info.value.column == 14

def test_013_missing_value_delimiter():
    with pytest.raises(DSLSyntaxError, match = 'Expected attribute value') as ex_info:
        sp.parse('<Frame width=100 />')
    assert ex_info.value.column == 14

    with pytest.raises(DSLSyntaxError, match = 'Unterminated string'):
        sp.parse('<Frame name="abc />')

def test_014_unexpected_end():
    with pytest.raises(DSLSyntaxError, match = 'Unexpected end of input') as ex_info:
        sp.parse('<Frame>\n  <Text>Hi</Text>')
    ex = ex_info.value
    assert ex.found == 'end of input'
    assert ex.line == 2
    assert '</Frame>' in ex.message

    with pytest.raises(DSLSyntaxError, match = 'Unexpected end of input'):
        sp.parse('<Frame x="1"')
    with pytest.raises(DSLSyntaxError):
        sp.parse('')

def test_015_trailing_content():
    with pytest.raises(DSLSyntaxError, match = 'Unexpected content after the top-level element') as ex_info:
        sp.parse('<Frame/>\n<Frame/>')
    assert (ex_info.value.line, ex_info.value.column) == (2, 1)

def test_016_unknown_element():
    with pytest.raises(UnknownElementError, match = 'Valid types are: Frame, Text, Rectangle, Ellipse, Vector, Image, Group, '
                                                    'Slide, SlideTitle, Card, StatNumber, BulletList, Heading, Paragraph') as ex_info:
        sp.parse('<Frame>\n  <Button/>\n</Frame>')
    ex = ex_info.value
    assert ex.found == 'Button'
    assert (ex.line, ex.column) == (2, 4)
    assert isinstance(ex, ParseError)

def test_017_error_context():
    src = '<Frame>\n  <Text>Hi</Frame>\n</Frame>'
    with pytest.raises(DSLSyntaxError) as ex_info:
        sp.parse(src)
    ex = ex_info.value
    assert ex.line == 2
    lines = ex.context.split('\n')
    assert lines[1] == '  <Text>Hi</Frame>'
    assert lines[2] == ' ' * (ex.column - 1) + '^'
    assert 'at line 2' in str(ex)

def test_018_resource_limits():
    with pytest.raises(ResourceLimitError, match = 'too long'):
        SlideParser(max_length = 10).parse('<Frame id="long" />')

    SlideParser(max_depth = 3).parse(nested('Frame', 3))
    with pytest.raises(ResourceLimitError, match = 'nested too deeply') as ex_info:
        SlideParser(max_depth = 3).parse(nested('Frame', 4))
    assert ex_info.value.column == len('<Frame>') * 3 + 1

    with pytest.raises(ResourceLimitError):
        sp.parse(nested('Frame', 5000))             # fails fast instead of exhausting the call stack

def test_019_depth_beyond_call_stack():
    # with a high max_depth, nesting that exhausts the call stack is still reported as a resource limit
    deep = SlideParser(max_depth = 5000)
    for parse_ in (deep.parse, deep.parse_many):
        with pytest.raises(ResourceLimitError, match = 'nested too deeply: 1000 levels') as ex_info:
            parse_(nested('Frame', 1000))
        ex = ex_info.value
        assert (ex.line, ex.column) == (1, len('<Frame>') * 999 + 1)
        assert ex.found is None

    SlideParser(max_brace_depth = 3).parse('<Frame name={{{x}}} />')
    with pytest.raises(ResourceLimitError, match = 'Braces nested too deeply'):
        SlideParser(max_brace_depth = 3).parse('<Frame name={{{{x}}}} />')

#####################################################################################################################################################
#####
#####  WARNINGS
#####

def test_020_unknown_attributes():
    warnings = []
    sp.parse('<Slide layoutMode="vertical" />', warnings)
    assert len(warnings) == 1
    assert warnings[0].element == 'Slide'
    assert warnings[0].attribute == 'layoutMode'
    assert warnings[0].type == ParseWarning.UNKNOWN_ATTRIBUTE
    element, attribute, message = warnings[0]
    assert 'layoutMode' in message

    root = sp.parse('<Frame width={100} unknownThing="x" />')      # no sink: warnings are dropped
    assert root.width == 100

    warnings = []
    sp.parse('<Text>a <Span color="red">b</Span> <B weight="1">c</B></Text>', warnings)
    assert [(w.element, w.attribute) for w in warnings] == [('Span', 'color'), ('B', 'weight')]

def test_021_invalid_and_duplicate_values():
    warnings = []
    root = sp.parse('<Frame width="wide" x={1} x={2} gap={[1, 2]} />', warnings)
    assert root.width is None
    assert root.x == 2
    assert root.gap is None
    assert sorted(warn_types(warnings)) == ['duplicate-attribute', 'invalid-value', 'invalid-value']

def test_022_aliases():
    assert sp.parse('<Frame itemSpacing={10} />').gap == 10
    assert sp.parse('<Frame gap={4} itemSpacing={10} />').gap == 4

#####################################################################################################################################################
#####
#####  SUGAR ELEMENTS
#####

def test_030_slide():
    root = sp.parse('<Slide background="#0f172a"><SlideTitle>T</SlideTitle></Slide>')
    assert isinstance(root, Frame)
    assert root.name == 'Slide'
    assert (root.x, root.y, root.width, root.height) == (0, 0, 1920, 1080)
    assert root.fill == '#0f172a'
    assert root.clipsContent is True
    assert len(root.children) == 1

    assert sp.parse('<Slide/>').fill == '#ffffff'
    assert sp.parse('<Slide fill="#000" background="#111"/>').fill == '#000'

def test_031_slide_title():
    root = sp.parse('<SlideTitle>Quarterly Results</SlideTitle>')
    assert isinstance(root, Text)
    assert root.text == 'Quarterly Results'
    assert root.name == 'SlideTitle'
    assert (root.x, root.y) == (80, 60)
    assert root.fontFamily == 'Inter'
    assert root.fontSize == 48
    assert root.fontWeight == 600
    assert root.fill == '#1a1a2e'
    assert root.id is None

    root = sp.parse('<SlideTitle color="#fff" fontSize={40} x={0}>Title</SlideTitle>')
    assert root.fill == '#fff'
    assert root.fontSize == 40
    assert root.x == 0

def test_032_card():
    root = sp.parse('<Card><Text>a</Text><Text>b</Text></Card>')
    assert root.name == 'Card'
    assert (root.x, root.y, root.width) == (80, 180, 800)
    assert root.height is None
    assert root.fill == '#f8fafc'
    assert root.cornerRadius == 8
    assert root.padding == 24
    assert root.layoutMode == 'vertical'
    assert root.gap == 16
    assert [c.text for c in root.children] == ['a', 'b']

    root = sp.parse('<Card background="#fff" width="fill" padding={[8, 16]} />')
    assert root.fill == '#fff'
    assert root.width == 'fill'
    assert root.padding == [8, 16]

def test_033_stat_number():
    root = sp.parse('<StatNumber value={42} label="Active users" />')
    assert root.name == 'StatNumber'
    assert root.layoutMode == 'vertical' and root.gap == 8
    value, label = root.children
    assert (value.text, value.fontSize, value.fontWeight, value.fill) == ('42', 64, 700, '#2563eb')
    assert (label.text, label.fontSize, label.fontWeight, label.fill) == ('Active users', 18, 400, '#6b7280')

    value, label = sp.parse('<StatNumber />').children
    assert value.text == '0'
    assert label.text == ''

def test_034_bullet_list():
    root = sp.parse('''<BulletList items="['One', 'Two']" />''')
    assert root.name == 'BulletList'
    assert (root.x, root.y, root.layoutMode, root.gap) == (80, 180, 'vertical', 16)
    assert len(root.children) == 2
    row = root.children[0]
    assert (row.layoutMode, row.gap) == ('horizontal', 12)
    bullet, item = row.children
    assert (bullet.text, bullet.fontSize, bullet.fill) == ('•', 18, '#2563eb')
    assert (item.text, item.fontSize, item.fill) == ('One', 18, '#1a1a2e')

    root = sp.parse('<BulletList items="alpha, beta ,gamma" />')
    assert [row.children[1].text for row in root.children] == ['alpha', 'beta', 'gamma']

    root = sp.parse('<BulletList items={["x", "y"]} />')
    assert [row.children[1].text for row in root.children] == ['x', 'y']

    root = sp.parse('<BulletList items="ignored, items"><Text>First</Text><Text>Second</Text></BulletList>')
    assert [row.children[1].text for row in root.children] == ['First', 'Second']

    assert sp.parse('<BulletList />').children == ()

def test_035_heading():
    root = sp.parse('<Heading level={1}>Top</Heading>')
    assert (root.fontSize, root.fontWeight, root.name) == (48, 700, 'Heading1')
    root = sp.parse('<Heading>Section</Heading>')
    assert (root.fontSize, root.fontWeight, root.name) == (32, 600, 'Heading2')
    root = sp.parse('<Heading level={3}>Sub</Heading>')
    assert (root.fontSize, root.fontWeight) == (24, 600)
    root = sp.parse('<Heading level={5}>Deep</Heading>')
    assert (root.fontSize, root.fontWeight) == (32, 600)
    root = sp.parse('<Heading level={1} fontSize={40} fontWeight={500}>Custom</Heading>')
    assert (root.fontSize, root.fontWeight) == (40, 500)
    assert root.fontFamily == 'Inter' and root.fill == '#1a1a2e'

def test_036_paragraph():
    root = sp.parse('<Paragraph width={600}>Body text</Paragraph>')
    assert (root.text, root.width, root.name) == ('Body text', 600, 'Paragraph')
    assert (root.fontFamily, root.fontSize, root.fontWeight, root.fill) == ('Inter', 18, 400, '#1a1a2e')
    assert root.x is None and root.y is None

def test_037_id_propagation():
    root = sp.parse('<Card id="c1"><Text id="t1">x</Text></Card>')
    assert root.id == 'c1'
    assert root.children[0].id == 't1'

    root = sp.parse('<StatNumber id="s" value="1" />')
    assert root.id == 's'
    assert all(child.id is None for child in root.children)
    assert collect_ids(root) == ['s']

    root = sp.parse('<BulletList id="list" items="a,b" />')
    assert collect_ids(root) == ['list']

    root = sp.parse('<Slide><Card><Heading>x</Heading></Card></Slide>')
    assert collect_ids(root) == []
