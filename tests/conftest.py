"""
测试公共fixture
"""
import os
import pytest
from trashbin.backend import TrashBackend
from trashbin.location_index import LocationIndex, LocationIndexStore
from trashbin.name_codec import encode
from trashbin.storage import Filesystem
from trashbin.trashbin import Trashbin

USER = 'alice'


def write_file(path, content='x'):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)


@pytest.fixture
def data_folder(tmp_path):
    folder = tmp_path / 'data'
    folder.mkdir()
    return str(folder)


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / 'files_trash.db')


@pytest.fixture
def store(db_path):
    return LocationIndexStore(db_path)


@pytest.fixture
def index(store):
    return LocationIndex(store)


@pytest.fixture
def trashbin(data_folder, store):
    return Trashbin(data_folder, store)


@pytest.fixture
def backend(index, trashbin, data_folder):
    return TrashBackend(index, trashbin, Filesystem(data_folder))


@pytest.fixture
def user_file(data_folder):
    """在用户文件目录中创建文件"""
    def create(path, content='x', user=USER):
        full_path = os.path.join(data_folder, user, 'files', path)
        write_file(full_path, content)
        return full_path
    return create


@pytest.fixture
def trashed(data_folder, store):
    """
    直接在回收站中放入一个根条目并写入索引

    children 为None时创建文件，否则创建文件夹；以 / 结尾的子项为空文件夹
    """
    def create(name, timestamp, location='.', children=None, content='x', user=USER):
        root = os.path.join(data_folder, user, 'files_trashbin', 'files', encode(name, timestamp))
        if children is None:
            write_file(root, content)
        else:
            os.makedirs(root, exist_ok=True)
            for child in children:
                if child.endswith('/'):
                    os.makedirs(os.path.join(root, child), exist_ok=True)
                else:
                    write_file(os.path.join(root, child), content)
        store.add(user, name, location, timestamp)
        return root
    return create


def user_path(data_folder, path, user=USER):
    return os.path.join(data_folder, user, 'files', path)


def trash_path(data_folder, path, user=USER):
    return os.path.join(data_folder, user, 'files_trashbin', 'files', path)
