# app/core/errors.py
"""
业务异常

services 层只抛这些异常（或原样抛出底层异常），
由 RPC 路由统一翻译成客户端可见的错误响应。
"""
from __future__ import annotations


class AppError(Exception):
    """业务异常基类；code 对应 RPC 错误码。"""
    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AppError):
    """引用的用户/记录不存在（仅写路径抛出；读路径返回 None）"""
    code = "NOT_FOUND"


class ConflictError(AppError):
    """唯一约束冲突，例如重复邮箱"""
    code = "CONFLICT"


class ReadingGenerationError(AppError):
    """外部解读服务调用失败或返回内容不合法"""
    code = "INTERNAL_SERVER_ERROR"
