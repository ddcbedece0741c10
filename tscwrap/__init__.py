# -*- coding: utf-8 -*-
"""
tscwrap - TypeScript 增量构建与监控工具
"""

__version__ = '0.1.0'
