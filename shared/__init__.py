"""
共享数据模型
"""
