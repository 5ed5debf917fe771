#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
回收站异常定义
"""


class TrashError(Exception):
    """回收站操作异常的基类"""


class NotADirectory(TrashError):
    """请求列出的路径既不是物理目录，也无法推断为虚拟目录"""


class RecordNotFound(TrashError):
    """索引记录或物理元数据不存在"""


class UnsupportedStorage(TrashError):
    """存储类型不受支持"""


class ReentrantTrashOperation(TrashError):
    """同一路径的删除操作正在进行中"""

    def __init__(self, path):
        super().__init__(f"路径正在移入回收站: {path}")
        self.path = path


class NodeNotFound(TrashError):
    """回收站中找不到对应节点"""
