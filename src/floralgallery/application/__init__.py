"""
应用层：端口定义与工作流编排。
"""
