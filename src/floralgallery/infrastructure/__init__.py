"""
基础设施层：内容存储、元数据获取、账本客户端与日志。
"""
