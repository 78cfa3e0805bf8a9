from typing import Any, Protocol, runtime_checkable

from beanie import PydanticObjectId
from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

NIL_OBJECT_ID = PydanticObjectId(b"\x00" * 12)


@runtime_checkable
class ModelInterface(Protocol):
    """The capabilities a record type needs in order to be seeded.

    Any class providing these three methods can be used as a seed item or lookup prototype, no base class is
    required.
    """

    def exists(self) -> bool:
        """Whether the record already carries a persisted identity."""
        ...

    def get_id(self) -> Any:
        """Return the identity value, or its empty value when the record has none."""
        ...

    def set_id(self, id: Any) -> None:
        """Assign an identity to the record."""
        ...


def is_generated_id(value: Any) -> bool:
    """Whether the identity value is of the kind the store generates itself (ObjectId)."""
    return isinstance(value, ObjectId)


def is_empty_id(value: Any) -> bool:
    return value is None or value == NIL_OBJECT_ID


class MongoModel(BaseModel):
    """Base pydantic model for documents identified by an ObjectId stored under ``_id``.

    A new model carries the nil ObjectId until an identity is generated for it.

    Example:
        .. code-block:: python

            from mongoseed.database import MongoModel

            class User(MongoModel):
                name: str
                email: str

            user = User(name="John", email="john@example.com")
            assert not user.exists()
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    id: PydanticObjectId = Field(default=NIL_OBJECT_ID, alias="_id")

    def exists(self) -> bool:
        return self.id != NIL_OBJECT_ID

    def get_id(self) -> PydanticObjectId:
        return self.id

    def set_id(self, id: Any) -> None:
        self.id = id
