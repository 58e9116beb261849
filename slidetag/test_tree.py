import pytest

from slidetag.document import Frame, Text, Rectangle, Segment, Patch
from slidetag.errors import PatchError, StructuralMutationError
from slidetag.parser import parse
from slidetag.tree import find_by_id, find_with_parent, update_by_id, replace_by_id, delete_by_id, collect_ids, \
    missing_ids, find_duplicate_ids, walk, Location, CANNOT_DELETE_ROOT


SRC = """
    <Frame id="root">
        <Frame id="header">
            <Text id="title">Title</Text>
            <Text id="subtitle">Subtitle</Text>
        </Frame>
        <Frame id="body">
            <Rectangle id="box" fill="#000" />
            <Text>no id</Text>
        </Frame>
    </Frame>
"""

def tree():
    return parse(SRC)


#####################################################################################################################################################
#####
#####  QUERIES
#####

def test_001_find():
    root = tree()
    assert find_by_id(root, 'title').text == 'Title'
    assert find_by_id(root, 'root') is root
    assert find_by_id(root, 'missing') is None
    assert find_by_id(root, None) is None

def test_002_find_first_in_preorder():
    root = parse('<Frame><Frame><Text id="x">deep</Text></Frame><Text id="x">shallow</Text></Frame>')
    assert find_by_id(root, 'x').text == 'deep'

def test_003_find_with_parent():
    root = tree()
    loc = find_with_parent(root, 'subtitle')
    assert isinstance(loc, Location)
    assert loc.node.text == 'Subtitle'
    assert loc.parent.id == 'header'
    assert loc.index == 1

    node, parent, index = find_with_parent(root, 'root')
    assert node is root and parent is None and index == -1

    assert find_with_parent(root, 'missing') is None

def test_004_collect_ids():
    root = tree()
    assert collect_ids(root) == ['root', 'header', 'title', 'subtitle', 'body', 'box']
    assert [n.type for n in walk(root)] == ['frame', 'frame', 'text', 'text', 'frame', 'rectangle', 'text']
    assert missing_ids(root) == ['root.children[1].children[1] (text at index 6)']

def test_005_duplicate_ids():
    root = parse('<Frame id="a"><Text id="b">1</Text><Text id="a">2</Text><Text id="b">3</Text><Text id="b">4</Text></Frame>')
    assert find_duplicate_ids(root) == ['a', 'b']
    assert find_duplicate_ids(tree()) == []


#####################################################################################################################################################
#####
#####  EDITS
#####

def test_010_update():
    root = tree()
    new = update_by_id(root, 'title', {'text': 'New title', 'fill': '#ff0000'})
    assert new is not root
    title = find_by_id(new, 'title')
    assert (title.text, title.fill) == ('New title', '#ff0000')
    assert find_by_id(root, 'title').text == 'Title'                # the original tree is untouched

    # structural sharing: only the path from the root to the changed node is rebuilt
    assert new.children[1] is root.children[1]
    assert new.children[0] is not root.children[0]
    assert new.children[0].children[1] is root.children[0].children[1]

def test_011_update_missing_id():
    root = tree()
    assert update_by_id(root, 'missing-id', {'text': 'x'}) is root
    assert replace_by_id(root, 'missing-id', Text(text = 'x')) is root
    assert delete_by_id(root, 'missing-id') is root

def test_012_update_delete_field():
    root = tree()
    new = update_by_id(root, 'box', {'fill': None, 'cornerRadius': 4})
    box = find_by_id(new, 'box')
    assert box.fill is None
    assert 'fill' not in box.attrs()
    assert box.cornerRadius == 4

def test_013_update_coercion():
    root = tree()
    box = find_by_id(update_by_id(root, 'box', {'width': '120', 'visible': 'false'}), 'box')
    assert box.width == 120
    assert box.visible is False
    box = find_by_id(update_by_id(root, 'box', Patch(width = 'fill')), 'box')
    assert box.width == 'fill'

def test_014_invalid_patches():
    root = tree()
    with pytest.raises(PatchError, match = "has no field 'fontSize'"):
        update_by_id(root, 'box', {'fontSize': 12})
    with pytest.raises(PatchError, match = 'change type'):
        update_by_id(root, 'box', {'type': 'ellipse'})
    with pytest.raises(PatchError, match = "invalid value for 'opacity'"):
        update_by_id(root, 'box', {'opacity': 'very'})
    with pytest.raises(PatchError, match = "can't have children"):
        update_by_id(root, 'box', {'children': []})

    assert update_by_id(root, 'box', {'type': 'rectangle'}) == root      # same type is accepted as a no-op

def test_015_update_text_and_segments():
    root = parse('<Frame><Text id="t">Hello <B>world</B></Text></Frame>')

    text = find_by_id(update_by_id(root, 't', {'text': 'Plain'}), 't')
    assert text.text == 'Plain'
    assert text.segments is None

    segments = [Segment('A', {'fontStyle': 'italic'}), ('B', {})]
    text = find_by_id(update_by_id(root, 't', {'segments': segments}), 't')
    assert text.text == 'AB'
    assert text.segments == (Segment('A', {'fontStyle': 'italic'}), Segment('B'))

    with pytest.raises(PatchError):
        update_by_id(root, 't', {'text': 'xyz', 'segments': [('A', {})]})

def test_016_update_children():
    root = tree()
    new = update_by_id(root, 'body', {'children': [Rectangle(id = 'r2')]})
    assert collect_ids(new) == ['root', 'header', 'title', 'subtitle', 'body', 'r2']

def test_017_replace():
    root = tree()
    subtree = Frame(id = 'new-header', children = [Text(id = 'only', text = 'Only')])
    new = replace_by_id(root, 'header', subtree)
    assert new.children[0] is subtree
    assert new.children[1] is root.children[1]
    assert collect_ids(new) == ['root', 'new-header', 'only', 'body', 'box']

    assert replace_by_id(root, 'root', subtree) is subtree

def test_018_delete():
    root = tree()
    new = delete_by_id(root, 'subtitle')
    assert collect_ids(new) == ['root', 'header', 'title', 'body', 'box']
    assert len(new.children[0].children) == 1
    assert new.children[1] is root.children[1]

def test_019_delete_root():
    root = tree()
    result = delete_by_id(root, 'root')
    assert result is CANNOT_DELETE_ROOT
    assert result is not None
    with pytest.raises(StructuralMutationError, match = 'root'):
        raise result.error('root')

def test_020_immutability():
    root = tree()
    with pytest.raises(AttributeError):
        root.id = 'other'
    with pytest.raises(AttributeError):
        del root.children
    assert isinstance(root.children, tuple)
    assert Rectangle().children == ()

def test_021_segment_immutability():
    root = parse('<Text>Hello <B>world</B></Text>')
    segment = root.segments[1]
    with pytest.raises(AttributeError):
        segment.text = 'there'
    with pytest.raises(AttributeError):
        del segment.style
    with pytest.raises(TypeError):
        segment.style['fontWeight'] = 400
    assert segment == Segment('world', {'fontWeight': 700})
    assert ''.join(s.text for s in root.segments) == root.text

    style = {'fontStyle': 'italic'}
    segment = Segment('x', style)
    style['fontStyle'] = 'normal'                   # the segment keeps its own copy
    assert segment.style == {'fontStyle': 'italic'}
