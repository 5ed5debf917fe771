#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
回收站目录树构建模块

回收站存储里只有被直接删除的根条目，删除前已经从某个文件夹里删掉的文件
只在位置索引里留有记录。列出目录时把两者合并:
    物理模式  目录在回收站存储中真实存在，直接读取其内容
    虚拟模式  目录只能从位置索引推断，按记录生成文件条目和虚拟目录
"""
import logging
from .errors import NotADirectory, NodeNotFound, RecordNotFound
from .location_index import FileEntry
from .name_codec import encode, decode, timestamp_from_path, split_path
from .trash_item import RootTrashItem, NestedTrashItem, VirtualDirectory
from .utils import join_location

logger = logging.getLogger(__name__)


def unique_segment(name, taken):
    """在同一层中为条目挑选未被占用的路径段: old -> old (2) -> old (3)"""
    if name not in taken:
        return name
    counter = 2
    while f"{name} ({counter})" in taken:
        counter += 1
    return f"{name} ({counter})"


class TrashTreeBuilder:
    """列出回收站目录的子条目"""

    def __init__(self, index, trashbin):
        self.index = index
        self.trashbin = trashbin

    def list_root(self, user):
        """列出回收站根目录"""
        return self.list_virtual(user, '.')

    def list_folder(self, folder):
        """列出回收站中某个文件夹的子条目"""
        if isinstance(folder, VirtualDirectory):
            return self.list_virtual(folder.user, folder.original_location, folder)

        view = self.trashbin.get_trash_view(folder.user)
        if not view.is_dir(folder.storage_path):
            raise NotADirectory(f"不是文件夹: {folder.trash_path}")

        items = self.list_physical(folder.user, folder.storage_path, folder)
        # 文件夹删除前就已删除的子条目只在索引里
        items += self.list_virtual(folder.user, folder.original_location, folder,
                                   siblings=items)
        return items

    def list_physical(self, user, directory, parent=None):
        """
        读取回收站存储中真实存在的目录

        Args:
            user: 用户名
            directory: 回收站中的目录路径，'/' 表示回收站根目录
            parent: 目录对应的条目，根目录为None

        Returns:
            list: TrashItem列表

        Raises:
            NotADirectory: 目录不存在
            ValueError: 列出子目录时没有传入父条目
        """
        view = self.trashbin.get_trash_view(user)
        is_root = directory.strip('/') == ''
        if not is_root and not view.is_dir(directory):
            raise NotADirectory(f"目录不存在: {directory}")

        entries = view.list_directory(directory)
        if is_root:
            return self._map_root_entries(user, entries, parent)
        if parent is None:
            raise ValueError(f"列出子目录需要父条目: {directory}")
        # 子目录中的条目没有时间戳后缀，统一使用根条目的时间戳
        timestamp = timestamp_from_path(directory)
        return self._map_nested_entries(user, entries, parent, timestamp)

    def _map_root_entries(self, user, entries, parent):
        locations = self.index.original_locations(user)
        parent_trash_path = parent.trash_path if parent is not None else ''
        items = []
        for entry in entries:
            try:
                name, timestamp = decode(entry.name)
            except RecordNotFound:
                logger.debug(f"跳过无法解析的回收站条目: {entry.name}")
                continue
            items.append(RootTrashItem(
                name=name,
                original_location=locations.get((name, timestamp), name),
                deleted_at=timestamp,
                trash_path=f"{parent_trash_path}/{entry.name}",
                user=user,
                info=entry,
            ))
        return items

    def _map_nested_entries(self, user, entries, parent, timestamp):
        items = []
        for entry in entries:
            items.append(NestedTrashItem(
                name=entry.name,
                original_location=join_location(parent.original_location, entry.name),
                deleted_at=timestamp,
                trash_path=parent.child_trash_path(entry.name),
                physical_path=f"{parent.storage_path}/{entry.name}",
                user=user,
                info=entry,
            ))
        return items

    def list_virtual(self, user, virtual_dir, parent=None, siblings=()):
        """
        按位置索引生成目录内容

        同名的物理文件夹已经合并了虚拟目录下的记录，此时不再单独列出虚拟目录；
        名称被其他条目占用的虚拟目录换用 "名称 (2)" 这样的路径段。

        Args:
            user: 用户名
            virtual_dir: 原始位置，'.' 表示用户文件根目录
            parent: 目录对应的条目，根目录为None
            siblings: 同一层已经列出的物理条目
        """
        view = self.trashbin.get_trash_view(user)
        parent_trash_path = parent.trash_path if parent is not None else ''
        items = []
        directories = []
        for entry in self.index.find_under(user, virtual_dir):
            if not isinstance(entry, FileEntry):
                directories.append(entry)
                continue
            physical_name = encode(entry.id, entry.deleted_at)
            info = view.get(physical_name)
            if info is None:
                # 索引和存储可能暂时不一致
                logger.debug(f"回收站中缺少索引记录对应的条目: {user}/{physical_name}")
                continue
            items.append(RootTrashItem(
                name=entry.id,
                original_location=join_location(entry.location, entry.id),
                deleted_at=entry.deleted_at,
                trash_path=f"{parent_trash_path}/{physical_name}",
                user=user,
                info=info,
            ))

        listed = list(siblings) + items
        merged = {item.name for item in listed if item.is_dir}
        taken = {item.trash_path.rsplit('/', 1)[-1] for item in listed}
        for entry in directories:
            if entry.name in merged:
                continue
            segment = unique_segment(entry.name, taken)
            taken.add(segment)
            items.append(VirtualDirectory(
                name=entry.name,
                original_location=entry.location,
                deleted_at=entry.deleted_at,
                trash_path=f"{parent_trash_path}/{segment}",
                user=user,
            ))
        return items

    def resolve(self, user, trash_path):
        """
        按回收站路径逐级查找条目

        Args:
            user: 用户名
            trash_path: 例如 /docs.d2000/old/notes.txt.d1000

        Returns:
            TrashItem，路径为根目录时返回None

        Raises:
            NodeNotFound: 路径中的某一级不存在
        """
        item = None
        for segment in split_path(trash_path):
            children = self.list_root(user) if item is None else self.list_folder(item)
            matched = None
            for child in children:
                if child.trash_path.rsplit('/', 1)[-1] == segment:
                    matched = child
                    break
            if matched is None:
                raise NodeNotFound(f"回收站中不存在: {trash_path}")
            item = matched
        return item
