"""
文档工具：ObjectId 校验 / 转换，以及时间戳
"""

import time

from bson import ObjectId


def is_object_id(value: str) -> bool:
    """是否为合法的 24 位十六进制 ObjectId 字符串"""
    return isinstance(value, str) and ObjectId.is_valid(value) and len(value) == 24


def to_object_id(value: str | ObjectId) -> ObjectId:
    """转换为 ObjectId；调用方需先用 is_object_id 校验"""
    if isinstance(value, ObjectId):
        return value
    return ObjectId(value)


def now_ms() -> int:
    """当前时间（epoch 毫秒）"""
    return int(time.time() * 1000)
