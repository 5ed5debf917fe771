#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
回收站数据移动模块
负责把文件移入回收站、恢复到原位置以及永久删除
"""
import logging
import os
import posixpath
import shutil
import time
from .errors import RecordNotFound
from .name_codec import encode, decode, split_path
from .storage import View, FILES_FOLDER
from .utils import join_location

logger = logging.getLogger(__name__)

TRASH_FOLDER = 'files_trashbin/files'


def get_unique_filename(directory, filename):
    """
    目标位置已被占用时生成新的文件名

    report.txt -> report (restored).txt -> report (restored 2).txt
    """
    if not os.path.lexists(os.path.join(directory, filename)):
        return filename
    if os.path.isdir(os.path.join(directory, filename)):
        name, ext = filename, ''
    else:
        name, ext = os.path.splitext(filename)
    candidate = f"{name} (restored){ext}"
    counter = 2
    while os.path.lexists(os.path.join(directory, candidate)):
        candidate = f"{name} (restored {counter}){ext}"
        counter += 1
    return candidate


class Trashbin:
    """本地存储上的回收站数据操作"""

    def __init__(self, data_folder, store, trash_folder=TRASH_FOLDER):
        self.data_folder = os.path.abspath(data_folder)
        self.store = store
        self.trash_folder = trash_folder.strip('/')
        self.hooks = []

    def add_hook(self, callback):
        """注册移入回收站前调用的钩子 callback(user, files_path, context)"""
        self.hooks.append(callback)

    def get_trash_view(self, user):
        return View(self.data_folder, f"/{user}/{self.trash_folder}")

    def get_files_view(self, user):
        return View(self.data_folder, f"/{user}/{FILES_FOLDER}")

    def move_to_trash(self, user, files_path, context=None, timestamp=None):
        """
        把用户文件移入回收站

        Args:
            user: 用户名
            files_path: 相对用户文件根目录的路径
            context: 删除流程的上下文，原样传给钩子
            timestamp: 删除时间戳，默认为当前时间

        Returns:
            bool: 是否成功
        """
        files_path = files_path.strip('/')
        files_view = self.get_files_view(user)
        if not files_path or not files_view.file_exists(files_path):
            logger.warning(f"要删除的文件不存在: {user}/{files_path}")
            return False

        for hook in self.hooks:
            hook(user, files_path, context)

        name = posixpath.basename(files_path)
        location = posixpath.dirname(files_path) or '.'
        trash_view = self.get_trash_view(user)
        timestamp = int(timestamp if timestamp is not None else time.time())
        while trash_view.file_exists(encode(name, timestamp)):
            timestamp += 1

        target = trash_view.get_local_path(encode(name, timestamp))
        try:
            os.makedirs(os.path.dirname(target), exist_ok=True)
            shutil.move(files_view.get_local_path(files_path), target)
        except OSError as e:
            logger.error(f"移入回收站失败: {user}/{files_path}: {e}")
            return False

        self.store.add(user, name, location, timestamp)
        logger.info(f"已移入回收站: {user}/{files_path} -> {encode(name, timestamp)}")
        return True

    def _get_target_location(self, user, file, filename, timestamp):
        """计算恢复目标相对用户文件根目录的路径"""
        if timestamp is not None:
            location = self.store.get_location(user, filename, timestamp)
            if location is None:
                logger.warning(f"索引中没有记录 {filename}.d{timestamp}，恢复到根目录")
                location = '.'
            return join_location(location, filename)

        # 子条目没有自己的记录，位置由根条目的记录加上相对路径得到
        parts = split_path(file)
        root_name, root_timestamp = decode(parts[0])
        location = self.store.get_location(user, root_name, root_timestamp) or '.'
        return join_location(location, '/'.join([root_name] + parts[1:]))

    def restore(self, user, file, filename, timestamp=None):
        """
        从回收站恢复条目

        Args:
            user: 用户名
            file: 条目在回收站中的路径
            filename: 条目原始名称
            timestamp: 根条目的删除时间戳，子条目为None

        Returns:
            bool: 是否成功
        """
        trash_view = self.get_trash_view(user)
        if not trash_view.file_exists(file):
            logger.warning(f"回收站中不存在: {user}{file}")
            return False

        try:
            target_path = self._get_target_location(user, file, filename, timestamp)
        except RecordNotFound as e:
            logger.warning(f"无法确定恢复位置: {e}")
            return False

        files_view = self.get_files_view(user)
        parent_dir = files_view.get_local_path(posixpath.dirname(target_path))
        if parent_dir is None:
            logger.warning(f"无效的恢复位置: {target_path}")
            return False

        try:
            os.makedirs(parent_dir, exist_ok=True)
            target_name = get_unique_filename(parent_dir, posixpath.basename(target_path))
            shutil.move(trash_view.get_local_path(file), os.path.join(parent_dir, target_name))
        except OSError as e:
            logger.error(f"恢复失败: {user}{file}: {e}")
            return False

        if timestamp is not None:
            self.store.remove(user, filename, timestamp)
        logger.info(f"已恢复: {user}{file} -> {posixpath.dirname(target_path) or '.'}/{target_name}")
        return True

    def delete(self, user, filename, timestamp=None):
        """
        永久删除回收站中的条目

        根条目的索引记录在数据删除成功后才移除，数据已经不存在时也一并清理。

        Args:
            user: 用户名
            filename: 根条目为原始名称，子条目为回收站中的路径
            timestamp: 根条目的删除时间戳，子条目为None

        Returns:
            bool: 是否删除了数据
        """
        file = encode(filename, timestamp) if timestamp is not None else filename

        trash_view = self.get_trash_view(user)
        local_path = trash_view.get_local_path(file)
        if local_path is None or not os.path.lexists(local_path):
            logger.warning(f"回收站中不存在: {user}/{file.lstrip('/')}")
            if timestamp is not None:
                self.store.remove(user, filename, timestamp)
            return False

        info = trash_view.get(file)
        try:
            if os.path.isdir(local_path) and not os.path.islink(local_path):
                shutil.rmtree(local_path)
            else:
                os.remove(local_path)
        except OSError as e:
            logger.error(f"永久删除失败: {user}/{file.lstrip('/')}: {e}")
            return False

        if timestamp is not None:
            self.store.remove(user, filename, timestamp)
        logger.info(f"已永久删除: {user}/{file.lstrip('/')} ({info.size if info else 0} 字节)")
        return True
