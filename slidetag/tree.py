"""
Id-addressed queries and edits of typed trees.

All functions are pure: nodes are never modified, and edits return a new root that shares all unchanged
subtrees with the old one. Only the nodes on the path from the root to the edited node are rebuilt,
so `new_root is root` tells whether anything changed, and the same holds for every subtree.
Lookups by id return the first match in pre-order (parent before children, earlier siblings first).
"""

from slidetag.document import Patch
from slidetag.errors import StructuralMutationError


########################################################################################################################################################
#####
#####  RESULTS
#####

class Location:
    """A node found in a tree, with its parent and its index among the parent's children (-1 and None for the root)."""

    node   = None
    parent = None
    index  = -1

    def __init__(self, node, parent = None, index = -1):
        self.node   = node
        self.parent = parent
        self.index  = index

    def __iter__(self):
        return iter((self.node, self.parent, self.index))

    def __repr__(self):
        parent = self.parent.tag if self.parent is not None else None
        return f"Location({self.node.tag} id={self.node.id!r}, parent={parent}, index={self.index})"


class RootDeletion:
    """
    Result of delete_by_id() when the id points to the root node, which can't be deleted.
    Use error() to get an exception to be raised.
    """
    def error(self, id = None):
        what = f"root node '{id}'" if id is not None else "root node"
        return StructuralMutationError(f"Cannot delete the {what}: a tree must keep its root; replace it instead")

    def __repr__(self):
        return 'CANNOT_DELETE_ROOT'

CANNOT_DELETE_ROOT = RootDeletion()


########################################################################################################################################################
#####
#####  TRAVERSAL
#####

def walk(root):
    """Iterate over all nodes of the tree in pre-order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))

def walk_with_paths(root):
    """Iterate over (node, path) pairs in pre-order, where `path` is a tuple of child indices from the root."""
    stack = [(root, ())]
    while stack:
        node, path = stack.pop()
        yield node, path
        stack.extend((child, path + (i,)) for i, child in reversed(list(enumerate(node.children))))

def _path_to(root, id):
    """List of nodes on the path from the root to the first node with a given id, and the child indices; or None."""
    if id is None: return None
    for node, path in walk_with_paths(root):
        if node.id == id:
            nodes = [root]
            for i in path: nodes.append(nodes[-1].children[i])
            return nodes, path
    return None


########################################################################################################################################################
#####
#####  QUERIES
#####

def find_by_id(root, id):
    if id is None: return None
    for node in walk(root):
        if node.id == id: return node
    return None

def find_with_parent(root, id):
    """Location of the first node with a given id, or None."""
    found = _path_to(root, id)
    if found is None: return None
    nodes, path = found
    if not path: return Location(root)
    return Location(nodes[-1], nodes[-2], path[-1])

def collect_ids(root):
    """All ids present in the tree, in pre-order."""
    return [node.id for node in walk(root) if node.id is not None]

def missing_ids(root):
    """Descriptions of all nodes that have no id, like "root.children[1] (text at index 3)"; index counts nodes in pre-order."""
    missing = []
    for index, (node, path) in enumerate(walk_with_paths(root)):
        if node.id is None:
            location = 'root' + ''.join(f".children[{i}]" for i in path)
            missing.append(f"{location} ({node.type} at index {index})")
    return missing

def find_duplicate_ids(root):
    """Ids that occur more than once in the tree, in order of their first occurrence."""
    seen, duplicates = set(), []
    for id in collect_ids(root):
        if id in seen and id not in duplicates: duplicates.append(id)
        seen.add(id)
    return duplicates


########################################################################################################################################################
#####
#####  EDITS
#####

def _rebuild(nodes, path, node):
    """
    Put `node` in place of the last node of `nodes` and rebuild its ancestors; node=None removes the last node.
    Return the new root.
    """
    for parent, i in zip(reversed(nodes[:-1]), reversed(path)):
        children = list(parent.children)
        if node is None: del children[i]
        else:            children[i] = node
        node = parent.replace(children = children)
    return node

def update_by_id(root, id, patch):
    """
    Merge `patch` (a Patch, or a dict of field values) into the first node with a given id.
    Return the new root, or the same `root` object if no node has this id. Raise PatchError if the patch doesn't fit the node.
    """
    found = _path_to(root, id)
    if found is None: return root
    nodes, path = found
    return _rebuild(nodes, path, Patch.make(patch).apply(nodes[-1]))

def replace_by_id(root, id, subtree):
    """Swap the first node with a given id, together with its descendants, for `subtree`. Return the new root."""
    found = _path_to(root, id)
    if found is None: return root
    nodes, path = found
    return _rebuild(nodes, path, subtree)

def delete_by_id(root, id):
    """
    Remove the first node with a given id from its parent. Return the new root, or the same `root` if the id is absent.
    If the id points to the root itself, return CANNOT_DELETE_ROOT.
    """
    found = _path_to(root, id)
    if found is None: return root
    nodes, path = found
    if not path: return CANNOT_DELETE_ROOT
    return _rebuild(nodes, path, None)
