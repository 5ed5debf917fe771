#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
回收站位置索引模块

files_trash 表为每个回收站根条目保存一条记录:
    id         被删除条目的名称
    user       所属用户
    timestamp  删除时间戳
    location   删除前所在的目录（相对用户文件根目录，根目录为 '.'）
"""
import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from .utils import join_location

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrashRecord:
    """位置索引中的一条记录"""
    id: str
    user: str
    location: str
    timestamp: int

    @property
    def original_location(self):
        return join_location(self.location, self.id)


@dataclass(frozen=True)
class FileEntry:
    """直接位于被查询目录下的回收站根条目"""
    id: str
    deleted_at: int
    location: str


@dataclass(frozen=True)
class VirtualDirectoryEntry:
    """由更深层记录推断出来的目录"""
    name: str
    deleted_at: int
    location: str


class LocationIndexStore:
    """基于sqlite的位置索引存储"""

    def __init__(self, db_path):
        self.db_path = db_path
        self._init_db()

    @contextmanager
    def _connect(self):
        conn = sqlite3.connect(self.db_path)
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _init_db(self):
        """初始化索引表"""
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS files_trash (
                    id TEXT NOT NULL,
                    user TEXT NOT NULL,
                    timestamp INTEGER NOT NULL,
                    location TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_trash_user_location
                ON files_trash(user, location)
            """)

    def add(self, user, item_id, location, timestamp):
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO files_trash (id, user, timestamp, location) VALUES (?, ?, ?, ?)",
                (item_id, user, int(timestamp), location or '.')
            )

    def remove(self, user, item_id, timestamp):
        """删除一条记录，返回是否删除了记录"""
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM files_trash WHERE user = ? AND id = ? AND timestamp = ?",
                (user, item_id, int(timestamp))
            )
            return cursor.rowcount > 0

    def get_location(self, user, item_id, timestamp):
        """查询条目删除前所在的目录，不存在时返回None"""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT location FROM files_trash WHERE user = ? AND id = ? AND timestamp = ?",
                (user, item_id, int(timestamp))
            ).fetchone()
        return row[0] if row else None

    def query_by_user_and_prefix(self, user, prefix=None):
        """
        查询用户在某个目录及其子目录下的记录

        Args:
            user: 用户名
            prefix: 目录位置，None或 '.' 表示该用户的全部记录

        Returns:
            list: TrashRecord列表，按写入顺序排列
        """
        sql = "SELECT id, user, location, timestamp FROM files_trash WHERE user = ?"
        params = [user]
        if prefix and prefix != '.':
            # 用substr比较前缀，避免LIKE对 % 和 _ 的特殊处理
            sql += " AND (location = ? OR substr(location, 1, ?) = ?)"
            params += [prefix, len(prefix) + 1, prefix + '/']
        sql += " ORDER BY rowid"
        with self._connect() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [TrashRecord(row[0], row[1], row[2], int(row[3])) for row in rows]

    def all_for_user(self, user):
        return self.query_by_user_and_prefix(user)


class LocationIndex:
    """按层级查询回收站记录"""

    def __init__(self, store):
        self.store = store

    def find_under(self, user, virtual_dir='.'):
        """
        查询某个目录下一层的条目

        location 等于 virtual_dir 的记录是该层的文件条目；
        更深的记录按下一段路径合并成虚拟目录，每个名称只保留第一次出现的记录。
        与文件条目同名的虚拟目录也会返回，是否合并由调用方根据存储中的条目决定。

        Returns:
            list: FileEntry 在前，VirtualDirectoryEntry 在后
        """
        virtual_dir = (virtual_dir or '.').strip('/') or '.'
        depth = 0 if virtual_dir == '.' else virtual_dir.count('/') + 1

        files = []
        directories = {}
        for record in self.store.query_by_user_and_prefix(user, virtual_dir):
            if record.location == virtual_dir:
                files.append(FileEntry(record.id, record.timestamp, record.location))
                continue
            segment = record.location.split('/')[depth]
            if segment in directories:
                continue
            directories[segment] = VirtualDirectoryEntry(
                segment, record.timestamp, join_location(virtual_dir, segment))

        return files + list(directories.values())

    def descendants(self, user, location):
        """某个目录及其所有子目录下的记录"""
        return self.store.query_by_user_and_prefix(user, location)

    def original_locations(self, user):
        """
        用户全部记录的原始位置表

        Returns:
            dict: {(名称, 时间戳): 原始路径}
        """
        locations = {}
        for record in self.store.all_for_user(user):
            locations[(record.id, record.timestamp)] = record.original_location
        return locations
