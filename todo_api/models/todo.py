"""
Todo 数据模型

不变量：completed_at 非空 当且仅当 completed 为 True。
"""

from pydantic import BaseModel, ConfigDict, field_validator

from todo_api.models.base import DocumentModel, ObjectIdStr


def _clean_text(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("text must not be empty")
    return v


class Todo(DocumentModel):
    """单个 Todo 条目（对应 todos 集合中的一条文档）"""

    text: str
    completed: bool = False
    completed_at: int | None = None
    owner_id: ObjectIdStr


class TodoCreate(BaseModel):
    """POST /todos 请求体"""

    text: str

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        return _clean_text(v)


class TodoUpdate(BaseModel):
    """PATCH /todos/:id 请求体：只接受 text / completed，其余字段忽略"""

    model_config = ConfigDict(extra="ignore")

    text: str | None = None
    completed: bool | None = None

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _clean_text(v)


class TodoEnvelope(BaseModel):
    todo: Todo


class TodoList(BaseModel):
    todos: list[Todo]
