#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
工具函数模块
"""
import os
import re

# 用户名只允许字母、数字、点、下划线、连字符和@
USER_PATTERN = re.compile(r'^[A-Za-z0-9_.@-]+$')


def is_valid_user(user):
    """检查用户名是否可以作为目录名使用"""
    if not user or user in ['.', '..']:
        return False
    return USER_PATTERN.match(user) is not None


def format_size(size):
    """格式化文件大小"""
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    return f"{size:.2f} PB"


def get_total_size(directory):
    """计算目录总大小"""
    total = 0
    for dirpath, dirnames, filenames in os.walk(directory):
        for filename in filenames:
            filepath = os.path.join(dirpath, filename)
            try:
                total += os.path.getsize(filepath)
            except OSError:
                pass
    return total


def join_location(location, name):
    """拼接原始位置，'.' 表示用户文件根目录"""
    if not location or location == '.':
        return name
    return f"{location}/{name}"
