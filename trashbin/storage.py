#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
存储访问模块

数据目录结构:
    <DATA_FOLDER>/<user>/files/                  用户文件
    <DATA_FOLDER>/<user>/files_trashbin/files/   回收站
"""
import os
from dataclasses import dataclass
from datetime import datetime
from .path_utils import normalize_path, get_relative_path, get_local_relative_path
from .utils import get_total_size

DIRECTORY_MIMETYPE = 'httpd/unix-directory'
FILES_FOLDER = 'files'


@dataclass(frozen=True)
class EntryInfo:
    """存储中一个文件或文件夹的元数据"""
    name: str
    path: str
    size: int
    mtime: int
    is_dir: bool
    id: int

    @property
    def type(self):
        return 'dir' if self.is_dir else 'file'

    @property
    def modified(self):
        return datetime.fromtimestamp(self.mtime).strftime('%Y-%m-%d %H:%M:%S')


def get_entry_info(local_path, rel_path):
    """读取本地路径的元数据，路径不存在时返回None"""
    try:
        stat = os.stat(local_path)
    except OSError:
        return None
    is_dir = os.path.isdir(local_path)
    return EntryInfo(
        name=os.path.basename(local_path.rstrip(os.sep)),
        path=rel_path,
        size=get_total_size(local_path) if is_dir else stat.st_size,
        mtime=int(stat.st_mtime),
        is_dir=is_dir,
        id=stat.st_ino,
    )


class Storage:
    """挂载在某个虚拟路径下的本地存储"""

    def __init__(self, datadir, mount_point='/'):
        self.datadir = os.path.abspath(datadir)
        self.mount_point = normalize_path(mount_point)

    def get_mount_point(self):
        return self.mount_point


class UserStorage(Storage):
    """用户文件存储，回收站只处理这种存储"""

    def __init__(self, data_folder, user):
        super().__init__(os.path.join(data_folder, user, FILES_FOLDER),
                         f"/{user}/{FILES_FOLDER}")
        self.user = user


class Filesystem:
    """根据虚拟路径定位存储"""

    def __init__(self, data_folder):
        self.data_folder = os.path.abspath(data_folder)

    def resolve_mount(self, path):
        """
        解析虚拟路径所在的存储

        Returns:
            tuple: (存储对象, 存储内部路径)
        """
        path = normalize_path(path)
        parts = path.strip('/').split('/')
        if len(parts) >= 2 and parts[1] == FILES_FOLDER:
            storage = UserStorage(self.data_folder, parts[0])
        else:
            storage = Storage(self.data_folder)
        internal_path = get_relative_path(path, storage.get_mount_point()) or '/'
        return storage, internal_path.strip('/')

    def get_view(self, root=''):
        return View(self.data_folder, root)


class View:
    """以某个虚拟目录为根的文件视图"""

    def __init__(self, data_folder, root=''):
        self.data_folder = os.path.abspath(data_folder)
        self.root = normalize_path(root)

    def get_absolute_path(self, path=''):
        return normalize_path(self.root + '/' + path)

    def get_relative_path(self, path):
        """虚拟绝对路径相对于视图根目录的路径，不在视图内时返回None"""
        return get_relative_path(path, self.root)

    def get_local_path(self, path=''):
        local_path = os.path.join(self.data_folder,
                                  self.get_absolute_path(path).lstrip('/'))
        if get_local_relative_path(local_path, self.data_folder) is None:
            return None
        return local_path

    def file_exists(self, path):
        local_path = self.get_local_path(path)
        return local_path is not None and os.path.lexists(local_path)

    def is_dir(self, path):
        local_path = self.get_local_path(path)
        return local_path is not None and os.path.isdir(local_path)

    def get(self, path):
        """获取路径的元数据，不存在时返回None"""
        local_path = self.get_local_path(path)
        if local_path is None:
            return None
        return get_entry_info(local_path, normalize_path(path))

    def list_directory(self, path):
        """列出目录内容，按名称排序"""
        local_path = self.get_local_path(path)
        if local_path is None or not os.path.isdir(local_path):
            return []
        entries = []
        for entry in sorted(os.listdir(local_path)):
            info = get_entry_info(os.path.join(local_path, entry),
                                  normalize_path(path + '/' + entry))
            if info is not None:
                entries.append(info)
        return entries

    def get_by_id(self, file_id):
        """按文件ID查找视图中的节点"""
        local_root = self.get_local_path()
        if local_root is None or not os.path.isdir(local_root):
            return []
        found = []
        for dirpath, dirnames, filenames in os.walk(local_root):
            for entry in dirnames + filenames:
                local_path = os.path.join(dirpath, entry)
                try:
                    if os.stat(local_path).st_ino != file_id:
                        continue
                except OSError:
                    continue
                rel_path = os.path.relpath(local_path, local_root).replace(os.sep, '/')
                found.append(get_entry_info(local_path, normalize_path(rel_path)))
        return [info for info in found if info is not None]
