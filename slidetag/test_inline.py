import pytest

from slidetag.document import Segment
from slidetag.errors import UnknownElementError
from slidetag.parser import SlideParser

sp = SlideParser()


def segments(src):
    return [(s.text, s.style) for s in sp.parse(src).segments]


#####################################################################################################################################################

def test_001_bold():
    root = sp.parse('<Text fontSize={16}>Hello <B>world</B></Text>')
    assert root.text == 'Hello world'
    assert root.segments == (Segment('Hello '), Segment('world', {'fontWeight': 700}))
    assert root.fontSize == 16

def test_002_marks():
    assert segments('<Text>Hello <I>world</I></Text>')[1] == ('world', {'fontStyle': 'italic'})
    assert segments('<Text>Hello <U>world</U></Text>')[1] == ('world', {'textDecoration': 'underline'})
    assert segments('<Text>Hello <S>world</S></Text>')[1] == ('world', {'textDecoration': 'strikethrough'})
    assert segments('<Text>Hello <b>world</b></Text>')[1] == ('world', {'fontWeight': 700})

def test_003_whitespace_preservation():
    root = sp.parse('<Text>A <B>B</B> C</Text>')
    assert root.text == 'A B C'
    assert segments('<Text>A <B>B</B> C</Text>') == [('A ', {}), ('B', {'fontWeight': 700}), (' C', {})]

    # a run of whitespace between two inline tags is a segment of its own
    root = sp.parse('<Text><B>bold</B> <I>italic</I></Text>')
    assert root.text == 'bold italic'
    assert [s.text for s in root.segments] == ['bold', ' ', 'italic']

def test_004_nesting():
    root = sp.parse('<Text><B><I>bold italic</I></B></Text>')
    assert root.text == 'bold italic'
    assert len(root.segments) == 1
    assert root.segments[0].style == {'fontWeight': 700, 'fontStyle': 'italic'}

    assert segments('<Text><U>a<S>b</S>c</U></Text>') == [
        ('a', {'textDecoration': 'underline'}),
        ('b', {'textDecoration': 'strikethrough'}),
        ('c', {'textDecoration': 'underline'}),
    ]

def test_005_span():
    src = '<Text>Normal <Span fontWeight={600} fill="#FF0000">custom</Span> text</Text>'
    assert segments(src) == [('Normal ', {}), ('custom', {'fontWeight': 600, 'fill': '#FF0000'}), (' text', {})]

    src = '<Text><Span fontSize={32} fontFamily="Mono"><B>big</B></Span></Text>'
    assert segments(src) == [('big', {'fontSize': 32, 'fontFamily': 'Mono', 'fontWeight': 700})]

def test_006_outer_trim():
    root = sp.parse("""<Text>
        Revenue grew <B>150%</B> this year.
      </Text>""")
    assert root.text == 'Revenue grew 150% this year.'
    assert root.segments[0].text == 'Revenue grew '
    assert root.segments[-1].text == ' this year.'

    root = sp.parse('<Text>  <B> padded </B>  </Text>')
    assert root.text == 'padded'
    assert root.segments == (Segment('padded', {'fontWeight': 700}),)

def test_007_empty_inline_tags():
    root = sp.parse('<Text>Hello <B></B>world</Text>')
    assert root.text == 'Hello world'
    assert [s.text for s in root.segments] == ['Hello ', 'world']

    root = sp.parse('<Text><B></B></Text>')
    assert root.text is None and root.segments is None

def test_008_sequence():
    root = sp.parse('<Text>Was <S>$99/mo</S>, now <U>$49/mo</U>.</Text>')
    assert root.text == 'Was $99/mo, now $49/mo.'
    assert [s.text for s in root.segments] == ['Was ', '$99/mo', ', now ', '$49/mo', '.']
    assert ''.join(s.text for s in root.segments) == root.text

def test_009_sugar_text():
    root = sp.parse('<SlideTitle>Growth of <B>35%</B></SlideTitle>')
    assert root.text == 'Growth of 35%'
    assert root.segments[1].style == {'fontWeight': 700}
    assert root.fontSize == 48

    assert sp.parse('<Paragraph>plain</Paragraph>').segments is None
    assert len(sp.parse('<Heading level={1}><I>x</I> y</Heading>').segments) == 2

def test_010_unknown_inline():
    with pytest.raises(UnknownElementError, match = r'Unknown inline element <Frame> inside <Text>') as ex_info:
        sp.parse('<Text>a <Frame/> b</Text>')
    assert ex_info.value.column == 10
    assert 'B, I, U, S, Span' in ex_info.value.message
