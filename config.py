#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
配置文件
用于管理应用的各项配置参数
"""

# 服务器配置
HOST = '0.0.0.0'  # 监听所有网络接口，支持局域网访问
PORT = 8000       # 服务端口
DEBUG = True      # 调试模式，生产环境建议设置为False

# 存储配置
DATA_FOLDER = 'data'  # 用户数据目录，每个用户一个子目录
# 用户文件:   <DATA_FOLDER>/<用户>/files
# 回收站:     <DATA_FOLDER>/<用户>/files_trashbin/files
TRASH_FOLDER = 'files_trashbin/files'
INDEX_DB = 'data/files_trash.db'  # 回收站位置索引数据库

# 用户配置（认证不在本应用范围内）
USER_HEADER = 'X-Trash-User'  # 从该请求头读取当前用户
DEFAULT_USER = 'admin'        # 请求中没有用户时使用

# 安全配置
SECRET_KEY = 'your-secret-key-here-change-in-production'  # Flask会话密钥，生产环境请修改

# 日志配置
LOG_LEVEL = 'INFO'
LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'
