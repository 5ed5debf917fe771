#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
回收站条目模型

每次列出回收站时重新生成，不做持久化。三种条目:
    RootTrashItem     回收站根目录中的物理条目，名称带 .d<时间戳> 后缀
    NestedTrashItem   位于某个根条目内部的物理条目
    VirtualDirectory  只存在于位置索引中的推断目录
"""
from dataclasses import dataclass
from typing import Optional
from .name_codec import encode
from .storage import EntryInfo, DIRECTORY_MIMETYPE


@dataclass(frozen=True)
class TrashItem:
    name: str
    original_location: str
    deleted_at: int
    trash_path: str
    user: str
    info: Optional[EntryInfo] = None

    is_root = False
    is_virtual_directory = False

    @property
    def storage_path(self):
        """条目在回收站存储中的物理路径"""
        return self.trash_path

    @property
    def is_dir(self):
        return self.info is not None and self.info.is_dir

    @property
    def size(self):
        return self.info.size if self.info is not None else 0

    @property
    def type(self):
        return 'dir' if self.is_dir else 'file'

    @property
    def mimetype(self):
        return DIRECTORY_MIMETYPE if self.is_dir else 'file'

    @property
    def file_id(self):
        return self.info.id if self.info is not None else 0

    def child_trash_path(self, name):
        return f"{self.trash_path}/{name}"


@dataclass(frozen=True)
class RootTrashItem(TrashItem):
    is_root = True

    @property
    def storage_path(self):
        return '/' + encode(self.name, self.deleted_at)


@dataclass(frozen=True)
class NestedTrashItem(TrashItem):
    # 父级可能位于虚拟目录下，物理路径单独保存
    physical_path: str = ''

    @property
    def storage_path(self):
        return self.physical_path or self.trash_path


@dataclass(frozen=True)
class VirtualDirectory(TrashItem):
    is_virtual_directory = True

    @property
    def storage_path(self):
        return None

    @property
    def is_dir(self):
        return True
