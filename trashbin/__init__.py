#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
回收站模块
"""
from . import utils, path_utils, name_codec, storage, location_index, trash_item, trashbin, file_tree, file_info, backend
from .backend import TrashBackend, DeletionContext
from .errors import (
    TrashError, NotADirectory, RecordNotFound, UnsupportedStorage,
    ReentrantTrashOperation, NodeNotFound,
)

__all__ = [
    'utils', 'path_utils', 'name_codec', 'storage', 'location_index', 'trash_item',
    'trashbin', 'file_tree', 'file_info', 'backend',
    'TrashBackend', 'DeletionContext',
    'TrashError', 'NotADirectory', 'RecordNotFound', 'UnsupportedStorage',
    'ReentrantTrashOperation', 'NodeNotFound',
]
