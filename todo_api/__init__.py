"""
Todo REST API：按用户隔离的待办事项服务（FastAPI + MongoDB + JWT）
"""
