#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
路径处理工具模块
"""
import os
import posixpath


def normalize_path(path):
    """规范化虚拟路径：以 / 开头，去掉多余的 /、. 和结尾的 /"""
    if not path:
        return '/'
    normalized = posixpath.normpath('/' + path.replace('\\', '/'))
    # normpath 会保留开头的 //
    if normalized.startswith('//'):
        normalized = '/' + normalized.lstrip('/')
    return normalized


def get_relative_path(path, root):
    """获取相对于 root 的路径，不在 root 之下时返回None"""
    root = normalize_path(root)
    path = normalize_path(path)
    if path == root:
        return '/'
    if not path.startswith(root.rstrip('/') + '/'):
        return None
    return path[len(root.rstrip('/')):]


def get_local_relative_path(path, base_folder):
    """获取相对于本地目录的路径，越界时返回None"""
    base_folder = os.path.abspath(base_folder)
    abs_path = os.path.abspath(path)
    if abs_path != base_folder and not abs_path.startswith(base_folder + os.sep):
        return None
    return os.path.relpath(abs_path, base_folder)
