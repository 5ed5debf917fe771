#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
回收站Web应用
支持浏览、恢复和永久删除回收站中的文件和文件夹
"""
import logging
import os
import socket
from flask import Flask, Blueprint, current_app, request, jsonify
import config

# 导入自定义模块
from trashbin import utils, file_info
from trashbin.backend import TrashBackend
from trashbin.errors import NotADirectory, NodeNotFound
from trashbin.location_index import LocationIndex, LocationIndexStore
from trashbin.storage import Filesystem
from trashbin.trashbin import Trashbin

logger = logging.getLogger(__name__)

bp = Blueprint('trash', __name__)

CONFIG_KEYS = [
    'DATA_FOLDER', 'TRASH_FOLDER', 'INDEX_DB', 'USER_HEADER', 'DEFAULT_USER',
    'SECRET_KEY', 'LOG_LEVEL', 'LOG_FORMAT',
]


def create_app(test_config=None):
    """创建应用，test_config 中的配置项覆盖 config.py"""
    app = Flask(__name__)
    for key in CONFIG_KEYS:
        app.config[key] = getattr(config, key)
    if test_config:
        app.config.update(test_config)

    logging.basicConfig(level=app.config['LOG_LEVEL'], format=app.config['LOG_FORMAT'])

    # 确保数据目录存在
    os.makedirs(app.config['DATA_FOLDER'], exist_ok=True)
    index_dir = os.path.dirname(app.config['INDEX_DB'])
    if index_dir:
        os.makedirs(index_dir, exist_ok=True)

    store = LocationIndexStore(app.config['INDEX_DB'])
    trashbin = Trashbin(app.config['DATA_FOLDER'], store, app.config['TRASH_FOLDER'])
    app.extensions['trash_backend'] = TrashBackend(
        LocationIndex(store), trashbin, Filesystem(app.config['DATA_FOLDER']))

    app.register_blueprint(bp)
    register_error_handlers(app)
    return app


def get_backend():
    return current_app.extensions['trash_backend']


def get_user():
    """当前用户，认证由外部负责"""
    user = request.headers.get(current_app.config['USER_HEADER']) or request.args.get('user')
    return user or current_app.config['DEFAULT_USER']


def invalid_user_response():
    return jsonify({'success': False, 'error': '无效的用户名'}), 400


# ==================== 路由处理 ====================

@bp.route('/api/trash', methods=['GET'])
def list_trash():
    """列出回收站目录"""
    user = get_user()
    if not utils.is_valid_user(user):
        return invalid_user_response()

    directory = request.args.get('dir', '/').strip()
    sort_attribute = request.args.get('sort', '').strip()
    descending = request.args.get('desc', '0') in ['1', 'true']
    if sort_attribute and sort_attribute not in file_info.SORT_KEYS:
        return jsonify({'success': False, 'error': f'不支持的排序字段: {sort_attribute}'}), 400

    backend = get_backend()
    folder = backend.get_item(user, directory)
    if folder is None:
        items = backend.list_trash_root(user)
    else:
        items = backend.list_trash_folder(folder)

    return jsonify({
        'success': True,
        'dir': directory,
        'items': file_info.format_trash_items(items, sort_attribute, descending),
        'count': len(items)
    })


@bp.route('/api/trash/restore', methods=['POST'])
def restore_item():
    """恢复回收站中的文件或文件夹"""
    user = get_user()
    if not utils.is_valid_user(user):
        return invalid_user_response()

    data = request.get_json(silent=True) or {}
    item_path = data.get('path', '').strip()
    if not item_path or item_path == '/':
        return jsonify({'success': False, 'error': '路径不能为空'}), 400

    backend = get_backend()
    item = backend.get_item(user, item_path)
    if item is None:
        return jsonify({'success': False, 'error': '路径不能为空'}), 400
    if not backend.restore_item(item):
        return jsonify({'success': False, 'error': '恢复失败', 'item': file_info.format_trash_item(item)}), 500

    return jsonify({
        'success': True,
        'message': '恢复成功',
        'item': file_info.format_trash_item(item)
    })


@bp.route('/api/trash/delete', methods=['DELETE'])
def permanent_delete():
    """永久删除回收站中的文件"""
    user = get_user()
    if not utils.is_valid_user(user):
        return invalid_user_response()

    data = request.get_json(silent=True) or {}
    item_path = data.get('path', '').strip()
    if not item_path or item_path == '/':
        return jsonify({'success': False, 'error': '路径不能为空'}), 400

    backend = get_backend()
    item = backend.get_item(user, item_path)
    if item is None:
        return jsonify({'success': False, 'error': '路径不能为空'}), 400
    if not backend.remove_item(item):
        return jsonify({'success': False, 'error': '永久删除失败'}), 500

    return jsonify({'success': True, 'message': '永久删除成功'})


@bp.route('/api/trash/empty', methods=['POST'])
def empty_trash():
    """清空回收站"""
    user = get_user()
    if not utils.is_valid_user(user):
        return invalid_user_response()

    removed = get_backend().empty_trash(user)
    return jsonify({
        'success': True,
        'message': f'已清空回收站，删除了 {len(removed)} 个项目',
        'deleted_count': len(removed)
    })


@bp.route('/api/trash/node/<int:file_id>', methods=['GET'])
def get_trash_node(file_id):
    """按文件ID查找回收站中的节点"""
    user = get_user()
    if not utils.is_valid_user(user):
        return invalid_user_response()

    node = get_backend().get_trash_node_by_id(user, file_id)
    if node is None:
        return jsonify({'success': False, 'error': '文件不存在'}), 404
    return jsonify({'success': True, 'node': file_info.format_entry_info(node)})


@bp.route('/api/delete', methods=['DELETE'])
def delete_item():
    """删除文件或文件夹（移入回收站）"""
    user = get_user()
    if not utils.is_valid_user(user):
        return invalid_user_response()

    data = request.get_json(silent=True) or {}
    item_path = data.get('path', '').strip().strip('/')
    if not item_path:
        return jsonify({'success': False, 'error': '路径不能为空'}), 400

    backend = get_backend()
    storage, internal_path = backend.filesystem.resolve_mount(f"/{user}/files/{item_path}")
    if not backend.move_to_trash(storage, internal_path):
        return jsonify({'success': False, 'error': '删除失败'}), 400

    return jsonify({'success': True, 'message': '删除成功'})


# ==================== 错误处理 ====================

def register_error_handlers(app):

    @app.errorhandler(NodeNotFound)
    def handle_node_not_found(e):
        """回收站中不存在的路径"""
        return jsonify({'success': False, 'error': str(e)}), 404

    @app.errorhandler(NotADirectory)
    def handle_not_a_directory(e):
        """对文件请求目录列表"""
        return jsonify({'success': False, 'error': str(e)}), 404

    @app.errorhandler(404)
    def not_found(e):
        """处理404错误"""
        return jsonify({'success': False, 'error': '页面不存在'}), 404

    @app.errorhandler(500)
    def internal_error(e):
        """处理500错误"""
        return jsonify({'success': False, 'error': '服务器内部错误'}), 500


# ==================== 主程序入口 ====================

if __name__ == '__main__':
    try:
        hostname = socket.gethostname()
        local_ip = socket.gethostbyname(hostname)
    except OSError:
        local_ip = 'localhost'

    print(f"""
    ========================================
    回收站服务已启动
    ========================================
    本地访问: http://127.0.0.1:{config.PORT}
    局域网访问: http://{local_ip}:{config.PORT}
    数据目录: {config.DATA_FOLDER}
    索引数据库: {config.INDEX_DB}
    调试模式: {config.DEBUG}
    ========================================
    """)

    create_app().run(host=config.HOST, port=config.PORT, debug=config.DEBUG)
