from slidetag.document import Frame, Text, Rectangle, Segment
from slidetag.parser import parse, parse_many
from slidetag.serialize import serialize, serialize_many, format_value


def roundtrip(root):
    return parse(serialize(root))


#####################################################################################################################################################

def test_001_self_closing():
    assert serialize(Rectangle(id = 'r', width = 100, fill = '#fff')) == '<Rectangle id="r" width={100} fill="#fff" />'
    assert serialize(Frame()) == '<Frame />'
    assert serialize(Text()) == '<Text />'

def test_002_values():
    assert format_value('plain') == '"plain"'
    assert format_value('a "b" & <c>') == '"a &quot;b&quot; &amp; &lt;c&gt;"'
    assert format_value(48) == '{48}'
    assert format_value(48.0) == '{48}'
    assert format_value(0.5) == '{0.5}'
    assert format_value(True) == '{true}'
    assert format_value(False) == '{false}'
    assert format_value([8, 8, 0, 0]) == '{[8, 8, 0, 0]}'

def test_003_layout():
    root = Frame(id = 'f', layoutMode = 'vertical', children = [
        Text(text = 'Short'),
        Frame(children = [Rectangle()]),
    ])
    assert serialize(root) == '\n'.join([
        '<Frame id="f" layoutMode="vertical">',
        '  <Text>Short</Text>',
        '  <Frame>',
        '    <Rectangle />',
        '  </Frame>',
        '</Frame>',
    ])

def test_004_long_text():
    text = 'x' * 60
    assert serialize(Text(text = text)) == f'<Text>\n  {text}\n</Text>'
    assert serialize(Text(text = 'two\nlines')) == '<Text>\n  two\nlines\n</Text>'
    assert serialize(Text(text = 'x' * 59)) == f"<Text>{'x' * 59}</Text>"

def test_005_escaping():
    root = Text(name = 'R&D', text = '1 < 2 & "quotes"')
    src = serialize(root)
    assert src == '<Text name="R&amp;D">1 &lt; 2 &amp; &quot;quotes&quot;</Text>'
    assert roundtrip(root) == root

def test_006_segments():
    root = parse('<Text>A <B>B</B> C</Text>')
    assert serialize(root) == '<Text>A <B>B</B> C</Text>'

    root = parse('<Text>x <Span fontSize={20} fill="#f00"><B><I>y</I></B></Span></Text>')
    assert serialize(root) == '<Text>x <Span fontSize={20} fill="#f00"><B><I>y</I></B></Span></Text>'

def test_007_segments_without_marks():
    # segments that carry no style must still produce segments after parsing
    root = parse('<Text>Hello <B></B>world</Text>')
    assert serialize(root) == '<Text><Span>Hello </Span>world</Text>'
    assert roundtrip(root) == root

    root = parse('<Text><B></B>only</Text>')
    assert root.segments == (Segment('only'),)
    assert roundtrip(root) == root

def test_008_roundtrip():
    src = """
        <Slide id="s1" background="#0f172a">
            <!-- header -->
            <SlideTitle id="title">Quarterly <B>Results</B></SlideTitle>
            <Card id="card" width="fill" padding={[16, 24]}>
                <Heading level={3}>Highlights</Heading>
                <Paragraph>Revenue grew <U>35%</U> &amp; costs fell.</Paragraph>
                <BulletList items="['One', 'Two']" />
                <StatNumber value="$1.2M" label="ARR" />
                <Text visible={false} opacity={0.8} lineHeight="150%">
                    A long paragraph of text that certainly exceeds the sixty character limit.
                </Text>
                <Text text="" />
                <Text text="  padded  " />
                <Text text="   " />
            </Card>
            <Group id="g"><Ellipse width={10} height={10} /><Vector path="M0 0 L10 10" /></Group>
            <Image src="https://example.com/a.png" scaleMode="fill" cornerRadius={4} />
        </Slide>
    """
    root = parse(src)
    again = roundtrip(root)
    assert again == root
    assert serialize(again) == serialize(root)

def test_009_serialize_many():
    roots = parse_many('<Frame id="a" /><Text id="b">x</Text>')
    src = serialize_many(roots)
    assert src == '<Frame id="a" />\n<Text id="b">x</Text>'
    assert parse_many(src) == roots

def test_010_outer_whitespace():
    # text bodies are stripped by the parser, so text with outer whitespace goes to the `text` attribute
    assert serialize(Text(text = '  padded  ')) == '<Text text="  padded  " />'
    assert serialize(Text(text = '   ')) == '<Text text="   " />'
    assert serialize(Text(text = 'inner  space')) == '<Text>inner  space</Text>'

    for src in ['<Text text="  padded  " />', '<Text text="   " />', '<Text text="\nline\n" />']:
        root = parse(src)
        assert roundtrip(root) == root
