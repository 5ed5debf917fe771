#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
回收站后端
列出、恢复、永久删除回收站条目，以及把文件移入回收站
"""
import logging
from contextlib import contextmanager
from .errors import ReentrantTrashOperation, UnsupportedStorage, NodeNotFound
from .file_tree import TrashTreeBuilder
from .name_codec import encode
from .path_utils import normalize_path
from .storage import UserStorage
from .trash_item import RootTrashItem, VirtualDirectory

logger = logging.getLogger(__name__)


class DeletionContext:
    """
    一次删除流程的上下文

    记录正在移入回收站的路径。存储层的钩子可能在移动过程中再次触发删除，
    同一路径的嵌套调用会被拒绝。
    """

    def __init__(self):
        self.in_flight = set()

    @contextmanager
    def guard(self, path):
        if path in self.in_flight:
            raise ReentrantTrashOperation(path)
        self.in_flight.add(path)
        try:
            yield path
        finally:
            self.in_flight.discard(path)


class TrashBackend:
    """回收站后端"""

    def __init__(self, index, trashbin, filesystem):
        self.index = index
        self.trashbin = trashbin
        self.filesystem = filesystem
        self.tree = TrashTreeBuilder(index, trashbin)

    def list_trash_root(self, user):
        return self.tree.list_root(user)

    def list_trash_folder(self, folder):
        return self.tree.list_folder(folder)

    def get_item(self, user, trash_path):
        """按回收站路径查找条目，根目录返回None"""
        return self.tree.resolve(user, trash_path)

    def restore_item(self, item):
        """
        恢复条目

        虚拟目录会逐个恢复其下的所有记录，中途失败不回滚，
        只要有一个失败就返回False。
        """
        user = item.user
        if isinstance(item, VirtualDirectory):
            success = True
            for record in self.index.descendants(user, item.original_location):
                file = '/' + encode(record.id, record.timestamp)
                if not self.trashbin.restore(user, file, record.id, record.timestamp):
                    success = False
            return success
        if isinstance(item, RootTrashItem):
            return self.trashbin.restore(user, item.storage_path, item.name, item.deleted_at)
        return self.trashbin.restore(user, item.storage_path, item.name, None)

    def remove_item(self, item):
        """永久删除条目，虚拟目录的处理方式与恢复相同"""
        user = item.user
        if isinstance(item, VirtualDirectory):
            success = True
            for record in self.index.descendants(user, item.original_location):
                if not self.trashbin.delete(user, record.id, record.timestamp):
                    success = False
            return success
        if isinstance(item, RootTrashItem):
            return self.trashbin.delete(user, item.name, item.deleted_at)
        # 子条目没有自己的时间戳，按回收站路径删除
        return self.trashbin.delete(user, item.storage_path, None)

    def empty_trash(self, user):
        """
        清空回收站

        Returns:
            list: 被删除的根条目，回收站为空时为空列表
        """
        removed = []
        for item in self.tree.list_physical(user, '/'):
            if self.remove_item(item):
                removed.append(item)
        return removed

    def move_to_trash(self, storage, internal_path, context=None):
        """
        删除流程的入口，把存储中的文件移入回收站

        Args:
            storage: 文件所在的存储
            internal_path: 存储内部路径
            context: 删除流程上下文，嵌套调用时必须传入同一个对象

        Returns:
            bool: 是否成功
        """
        if context is None:
            context = DeletionContext()
        try:
            if not isinstance(storage, UserStorage):
                raise UnsupportedStorage(f"不支持的存储: {type(storage).__name__}")
            normalized = normalize_path(storage.get_mount_point() + '/' + internal_path)
            with context.guard(normalized):
                view = self.filesystem.get_view(f"/{storage.user}/files")
                files_path = view.get_relative_path(normalized)
                if not files_path or files_path == '/':
                    logger.warning(f"路径不在用户文件目录中: {normalized}")
                    return False
                return self.trashbin.move_to_trash(storage.user, files_path.strip('/'), context)
        except (UnsupportedStorage, ReentrantTrashOperation) as e:
            logger.warning(f"无法移入回收站: {e}")
            return False

    def get_trash_node_by_id(self, user, file_id):
        """按文件ID查找回收站中的节点，找不到时返回None"""
        try:
            view = self.trashbin.get_trash_view(user)
            if not view.is_dir('/'):
                raise NodeNotFound(f"用户没有回收站: {user}")
            nodes = view.get_by_id(file_id)
        except NodeNotFound as e:
            logger.debug(str(e))
            return None
        return nodes[-1] if nodes else None
