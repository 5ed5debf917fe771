#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
回收站条目命名模块

根目录下的条目名格式为 <原始名称>.d<删除时间戳>，
子目录中的条目不带后缀，时间戳取自路径的第一段。
"""
import re
from .errors import RecordNotFound

SUFFIX_PATTERN = re.compile(r'^(?P<name>.*)\.d(?P<timestamp>\d+)$', re.DOTALL)


def encode(name, deleted_at):
    """生成回收站根目录中的条目名"""
    return f"{name}.d{int(deleted_at)}"


def decode(entry_name):
    """
    解析回收站根目录中的条目名

    Args:
        entry_name: 形如 report.txt.d1000 的条目名

    Returns:
        tuple: (原始名称, 删除时间戳)

    Raises:
        RecordNotFound: 条目名不带 .d<时间戳> 后缀
    """
    match = SUFFIX_PATTERN.match(entry_name)
    if not match:
        raise RecordNotFound(f"无效的回收站条目名: {entry_name}")
    return match.group('name'), int(match.group('timestamp'))


def split_path(path):
    """按 / 拆分路径，忽略空段"""
    return [part for part in path.split('/') if part]


def timestamp_from_path(directory):
    """从回收站路径的第一段取出删除时间戳"""
    parts = split_path(directory)
    if not parts:
        raise RecordNotFound('回收站根目录没有时间戳')
    return decode(parts[0])[1]
