"""
核心模块：错误分类、工作流状态机、依赖注入。
"""
