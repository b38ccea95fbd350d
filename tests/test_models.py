from bson import ObjectId

from todo_api.models import Todo, TodoUpdate, User, UserPublic


def test_todo_from_document_maps_ids_and_camel_case():
    oid, owner = ObjectId(), ObjectId()
    todo = Todo.from_document(
        {"_id": oid, "text": "t", "completed": True, "completedAt": 5, "ownerId": owner}
    )

    assert todo.id == str(oid)
    assert todo.owner_id == str(owner)
    assert todo.model_dump(by_alias=True) == {
        "id": str(oid),
        "text": "t",
        "completed": True,
        "completedAt": 5,
        "ownerId": str(owner),
    }


def test_user_document_keeps_credentials_out_of_public_view():
    oid = ObjectId()
    user = User.from_document(
        {
            "_id": oid,
            "name": "n",
            "email": "n@gmail.com",
            "passwordHash": "hash",
            "tokens": [{"access": "auth", "token": "tok"}],
        }
    )

    assert user.password_hash == "hash"
    assert user.tokens[0].token == "tok"
    public = UserPublic(id=user.id, name=user.name, email=user.email)
    assert set(public.model_dump(by_alias=True)) == {"id", "name", "email"}


def test_todo_update_ignores_unknown_fields():
    update = TodoUpdate.model_validate({"completed": True, "ownerId": "x", "completedAt": 1})
    assert update.completed is True
    assert update.text is None
    assert not hasattr(update, "ownerId")
