#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
回收站条目信息模块
把条目转换为接口返回的字典
"""
from datetime import datetime
from .utils import format_size

SORT_KEYS = {
    'name': lambda item: item['name'].lower(),
    'mtime': lambda item: item['mtime'],
    'size': lambda item: item['size'],
}


def format_trash_item(item):
    """获取回收站条目信息"""
    return {
        'id': item.file_id,
        'name': item.name,
        'path': item.trash_path,
        'size': item.size,
        'size_human': format_size(item.size),
        'mtime': item.deleted_at,
        'modified': datetime.fromtimestamp(item.deleted_at).strftime('%Y-%m-%d %H:%M:%S'),
        'type': item.type,
        'mimetype': item.mimetype,
        'is_dir': item.is_dir,
        'original_location': item.original_location or '',
        'is_root': item.is_root,
        'is_virtual': item.is_virtual_directory,
    }


def format_trash_items(items, sort_attribute='', descending=False):
    """格式化条目列表，sort_attribute为空时保持原顺序"""
    result = [format_trash_item(item) for item in items]
    if sort_attribute:
        result = sort_items(result, sort_attribute, descending)
    return result


def sort_items(items, sort_attribute='name', descending=False):
    """
    排序条目，文件夹总是排在文件前面

    Raises:
        ValueError: 不支持的排序字段
    """
    if sort_attribute not in SORT_KEYS:
        raise ValueError(f"不支持的排序字段: {sort_attribute}")
    key = SORT_KEYS[sort_attribute]
    folders = sorted([i for i in items if i['is_dir']], key=key, reverse=descending)
    files = sorted([i for i in items if not i['is_dir']], key=key, reverse=descending)
    return folders + files


def format_entry_info(info):
    """获取存储节点信息"""
    return {
        'id': info.id,
        'name': info.name,
        'path': info.path,
        'size': info.size,
        'size_human': format_size(info.size),
        'modified': info.modified,
        'type': info.type,
        'is_dir': info.is_dir,
    }
