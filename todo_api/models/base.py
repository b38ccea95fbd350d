"""
模型基类：Mongo 文档 <-> API 响应的字段映射

- Python 侧使用 snake_case，文档与 JSON 均为 camelCase
- 文档主键 `_id`（ObjectId）在 API 中以 24 位十六进制字符串 `id` 输出
"""

from typing import Annotated

from bson import ObjectId
from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _stringify_id(v: object) -> str:
    if isinstance(v, ObjectId):
        return str(v)
    return v


ObjectIdStr = Annotated[str, BeforeValidator(_stringify_id)]


class DocumentModel(BaseModel):
    """从 Mongo 文档构造的记录基类"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: ObjectIdStr = Field(validation_alias=AliasChoices("_id", "id"))

    @classmethod
    def from_document(cls, doc: dict):
        return cls.model_validate(doc)
