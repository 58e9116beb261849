import slidetag.parser
from slidetag.document import Frame, Text
from slidetag.parser import parse
from slidetag.validate import validate, validate_many, preprocess, Success, Failure
from slidetag.rules import check_rules, format_violations


def rules(src):
    return [(v.rule, v.node_id) for v in check_rules(parse(src))]


#####################################################################################################################################################
#####
#####  VALIDATION
#####

def test_001_success():
    result = validate('<Slide><SlideTitle>Hi</SlideTitle></Slide>')
    assert isinstance(result, Success)
    assert result and result.success
    assert isinstance(result.root, Frame)
    assert result.root.children[0].text == 'Hi'

def test_002_failure():
    result = validate('<Frame></Text>')
    assert isinstance(result, Failure)
    assert not result and not result.success
    assert 'expected </Frame>, got </Text>' in result.error
    assert (result.line, result.column) == (1, 10)
    assert result.found == '</Text>'
    assert result.context.split('\n')[-1] == ' ' * 9 + '^'
    assert str(result).startswith(result.error + ' at line 1, column 10')

def test_003_failure_kinds():
    result = validate('<Frame><Button/></Frame>')
    assert 'Unknown element type: <Button>' in result.error
    assert result.found == 'Button'

    result = validate('<Frame>' * 5 + '</Frame>' * 5, max_depth = 3)
    assert not result
    assert 'nested too deeply' in result.error

    result = validate('<Frame>' * 1000 + '</Frame>' * 1000, max_depth = 5000)
    assert not result
    assert 'nested too deeply' in result.error
    assert result.line == 1 and result.column is not None

def test_004_warnings():
    warnings = []
    result = validate('<Frame colour="red" />', warnings)
    assert result
    assert [w.attribute for w in warnings] == ['colour']

def test_005_validate_many():
    result = validate_many('<Frame id="a"/>\n<Text id="b">x</Text>')
    assert result
    assert [node.id for node in result.root] == ['a', 'b']

    result = validate_many('<Frame id="a"/><Text>')
    assert not result
    assert result.error.startswith('Unexpected end of input')

def test_006_unexpected_error(monkeypatch):
    def broken(xel, warnings):
        raise RuntimeError("broken conversion")
    monkeypatch.setattr(slidetag.parser, 'convert', broken)

    result = validate('<Frame/>')
    assert isinstance(result, Failure)
    assert result.error == 'broken conversion'
    assert result.line is None and result.context is None

def test_007_preprocess():
    assert preprocess("<Text>One{'\\n'}Two</Text>") == '<Text>One\nTwo</Text>'
    assert preprocess('<Text>One{"\\n"}Two{"\\n"}Three</Text>') == '<Text>One\nTwo\nThree</Text>'
    assert preprocess('<Text>One\\nTwo</Text>') == '<Text>One\\nTwo</Text>'

    root = parse(preprocess("<Text>One{'\\n'}Two</Text>"))
    assert root.text == 'One\nTwo'


#####################################################################################################################################################
#####
#####  DESIGN RULES
#####

def test_010_clean():
    src = """
        <Frame id="slide" width={1920} height={1080} fill="#ffffff" layoutMode="vertical" gap={24}>
            <Frame id="row" layoutMode="horizontal" gap={16} width="fill">
                <Text>ok</Text>
            </Frame>
        </Frame>
    """
    assert check_rules(parse(src)) == []
    assert format_violations([]) == ''

def test_011_zero_gap():
    assert rules('<Frame id="root" layoutMode="vertical" gap={0} />') == [('no-zero-gap', 'root')]
    assert rules('<Frame id="root" gap={0} />') == []                                   # no auto-layout
    assert rules('<Frame id="root" layoutMode="none" gap={0} />') == []

def test_012_white_fill():
    src = '<Frame id="root" fill="#FFFFFF"><Frame id="inner" fill="#fff" /><Frame id="ok" fill="#F8F8F8" /></Frame>'
    assert rules(src) == [('no-white-fill', 'inner')]

def test_013_fixed_inner_size():
    src = """
        <Frame id="root" layoutMode="vertical" width={1920} height={1080} gap={8}>
            <Frame id="a" layoutMode="horizontal" gap={8} width={400} height={1080} />
            <Frame id="b" layoutMode="horizontal" gap={8} width={1920} />
            <Frame id="c" gap={8} width={400} />
        </Frame>
    """
    violations = check_rules(parse(src))
    assert [(v.rule, v.node_id) for v in violations] == [('no-fixed-inner-size', 'a')]
    assert 'width={400}' in violations[0].message
    assert 'height' not in violations[0].message

def test_014_spacer_frames():
    src = """
        <Frame id="root">
            <Frame id="top-spacer" width="fill" height={24} />
            <Frame id="Divider" width={100} height={1} />
            <Frame id="box" width={100} height={100} />
            <Frame id="spacer-hug" height={24} />
        </Frame>
    """
    assert rules(src) == [('no-spacer-frames', 'top-spacer'), ('no-spacer-frames', 'Divider')]

def test_015_only_frames():
    root = Frame(id = 'root', children = [
        Text(id = 'text', fill = '#fff'),
        Frame(id = 'inner', children = [Frame(id = 'deep', fill = '#ffffff')]),
    ])
    assert [(v.rule, v.node_id) for v in check_rules(root)] == [('no-white-fill', 'deep')]

def test_016_format():
    violations = check_rules(parse('<Frame id="root" layoutMode="vertical" gap={0}><Frame fill="#fff"/></Frame>'))
    text = format_violations(violations)
    parts = text.split('\n\n')
    assert len(parts) == 2
    assert parts[0].startswith('1. [no-zero-gap] Frame "root" has gap={0}.')
    assert parts[0].split('\n')[1].startswith('   Fix: ')
    assert parts[1].startswith('2. [no-white-fill] Frame "(no id)" has fill="#fff".')
