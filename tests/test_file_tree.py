"""
回收站目录树测试
"""
import os
import pytest
from trashbin.errors import NotADirectory, NodeNotFound
from trashbin.file_tree import unique_segment
from trashbin.trash_item import RootTrashItem, NestedTrashItem, VirtualDirectory
from conftest import USER, write_file, trash_path


@pytest.fixture
def tree(backend):
    return backend.tree


def names(items):
    return [item.name for item in items]


class TestListRoot:

    def test_single_file(self, tree, trashed):
        trashed('report.txt', 1000)
        items = tree.list_root(USER)
        assert len(items) == 1
        item = items[0]
        assert isinstance(item, RootTrashItem)
        assert item.name == 'report.txt'
        assert item.deleted_at == 1000
        assert item.original_location == 'report.txt'
        assert item.trash_path == '/report.txt.d1000'
        assert item.is_root
        assert not item.is_virtual_directory

    def test_empty_trash(self, tree):
        assert tree.list_root(USER) == []

    def test_file_from_subfolder_is_under_virtual_directory(self, tree, trashed):
        trashed('report.txt', 1000, location='docs')
        items = tree.list_root(USER)
        assert len(items) == 1
        folder = items[0]
        assert isinstance(folder, VirtualDirectory)
        assert folder.name == 'docs'
        assert folder.size == 0
        assert folder.is_dir
        assert folder.file_id == 0
        assert folder.storage_path is None
        assert folder.trash_path == '/docs'

        children = tree.list_folder(folder)
        assert len(children) == 1
        child = children[0]
        assert child.name == 'report.txt'
        assert child.original_location == 'docs/report.txt'
        assert child.trash_path == '/docs/report.txt.d1000'
        assert child.storage_path == '/report.txt.d1000'

    def test_record_without_physical_entry_is_skipped(self, tree, store, trashed):
        store.add(USER, 'ghost.txt', '.', 5)
        trashed('real.txt', 6)
        assert names(tree.list_root(USER)) == ['real.txt']

    def test_root_file_does_not_hide_virtual_directory(self, tree, trashed):
        trashed('a.txt', 1, location='docs')
        trashed('docs', 2)
        items = tree.list_root(USER)
        assert [(type(item), item.trash_path) for item in items] == [
            (RootTrashItem, '/docs.d2'),
            (VirtualDirectory, '/docs'),
        ]
        assert names(tree.list_folder(items[1])) == ['a.txt']

    def test_orphan_record_does_not_hide_virtual_directory(self, tree, store, trashed):
        store.add(USER, 'docs', '.', 2)
        trashed('a.txt', 1, location='docs')
        items = tree.list_root(USER)
        assert len(items) == 1
        assert isinstance(items[0], VirtualDirectory)
        assert names(tree.list_folder(items[0])) == ['a.txt']


class TestListFolder:

    def test_index_only_subfolder_becomes_virtual_directory(self, tree, trashed):
        trashed('notes.txt', 1000, location='docs/old')
        trashed('docs', 2000, children=['a.txt'])

        root = tree.list_root(USER)
        assert names(root) == ['docs']
        docs = root[0]
        assert isinstance(docs, RootTrashItem)

        children = tree.list_folder(docs)
        assert names(children) == ['a.txt', 'old']
        nested, old = children
        assert isinstance(nested, NestedTrashItem)
        assert nested.original_location == 'docs/a.txt'
        assert nested.trash_path == '/docs.d2000/a.txt'
        assert nested.deleted_at == 2000
        assert isinstance(old, VirtualDirectory)
        assert old.original_location == 'docs/old'

        notes = tree.list_folder(old)
        assert names(notes) == ['notes.txt']
        assert notes[0].original_location == 'docs/old/notes.txt'

    def test_physical_subfolder_is_listed_physically(self, tree, trashed):
        trashed('notes.txt', 1000, location='docs/old')
        trashed('docs', 2000, children=['a.txt', 'old/'])

        docs = tree.list_root(USER)[0]
        children = tree.list_folder(docs)
        assert names(children) == ['a.txt', 'old']
        old = children[1]
        assert isinstance(old, NestedTrashItem)

        notes = tree.list_folder(old)
        assert names(notes) == ['notes.txt']
        assert notes[0].original_location == 'docs/old/notes.txt'
        assert notes[0].storage_path == '/notes.txt.d1000'

    def test_nested_items_keep_physical_path_below_virtual_directory(self, tree, trashed):
        trashed('project', 3000, location='work', children=['src/main.py'])
        work = tree.list_root(USER)[0]
        project = tree.list_folder(work)[0]
        src = tree.list_folder(project)[0]
        assert src.trash_path == '/work/project.d3000/src'
        assert src.storage_path == '/project.d3000/src'
        main = tree.list_folder(src)[0]
        assert main.original_location == 'work/project/src/main.py'
        assert main.deleted_at == 3000

    def test_virtual_directory_next_to_physical_file_with_same_name(self, tree, trashed):
        trashed('notes.txt', 1000, location='docs/old')
        trashed('docs', 2000, children=['old'])

        docs = tree.list_root(USER)[0]
        children = tree.list_folder(docs)
        assert [(item.name, item.trash_path) for item in children] == [
            ('old', '/docs.d2000/old'),
            ('old', '/docs.d2000/old (2)'),
        ]
        assert len({item.trash_path for item in children}) == len(children)

        folder = tree.resolve(USER, '/docs.d2000/old (2)')
        assert isinstance(folder, VirtualDirectory)
        assert folder.original_location == 'docs/old'
        assert names(tree.list_folder(folder)) == ['notes.txt']
        assert isinstance(tree.resolve(USER, '/docs.d2000/old'), NestedTrashItem)

    def test_depth_filtering(self, tree, trashed):
        trashed('x.txt', 1, location='a/b/c/d')
        assert names(tree.list_folder(tree.resolve(USER, '/a/b'))) == ['c']
        assert names(tree.list_folder(tree.resolve(USER, '/a/b/c'))) == ['d']

    def test_file_is_not_a_directory(self, tree, trashed):
        trashed('report.txt', 1000)
        item = tree.list_root(USER)[0]
        with pytest.raises(NotADirectory):
            tree.list_folder(item)


class TestListPhysical:

    def test_trash_root_uses_recorded_locations(self, tree, trashed, data_folder):
        trashed('r.txt', 10, location='docs')
        write_file(trash_path(data_folder, 'loose.d7'))
        write_file(trash_path(data_folder, 'junk'))
        items = tree.list_physical(USER, '/')
        assert [(item.name, item.original_location) for item in items] == [
            ('loose', 'loose'),
            ('r.txt', 'docs/r.txt'),
        ]

    def test_missing_directory(self, tree):
        with pytest.raises(NotADirectory):
            tree.list_physical(USER, '/nope.d1/sub')

    def test_subdirectory_requires_parent(self, tree, trashed):
        trashed('docs', 2000, children=['sub/a.txt'])
        with pytest.raises(ValueError):
            tree.list_physical(USER, '/docs.d2000/sub')

    def test_nested_entries_use_root_timestamp(self, tree, trashed):
        trashed('docs', 2000, children=['sub/a.txt', 'sub/b.txt'])
        docs = tree.list_root(USER)[0]
        sub = tree.list_folder(docs)[0]
        items = tree.list_physical(USER, '/docs.d2000/sub', sub)
        assert names(items) == ['a.txt', 'b.txt']
        assert {item.deleted_at for item in items} == {2000}


class TestResolve:

    def test_root(self, tree):
        assert tree.resolve(USER, '/') is None

    def test_missing_segment(self, tree, trashed):
        trashed('report.txt', 1000)
        with pytest.raises(NodeNotFound):
            tree.resolve(USER, '/report.txt')

    def test_nested_path(self, tree, trashed, data_folder):
        root = trashed('docs', 2000, children=['sub/a.txt'])
        item = tree.resolve(USER, '/docs.d2000/sub/a.txt')
        assert item.name == 'a.txt'
        assert item.size == os.path.getsize(os.path.join(root, 'sub', 'a.txt'))


def test_unique_segment():
    assert unique_segment('old', set()) == 'old'
    assert unique_segment('old', {'old'}) == 'old (2)'
    assert unique_segment('old', {'old', 'old (2)'}) == 'old (3)'
