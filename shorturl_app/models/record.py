import json

from pydantic import BaseModel, Field


class Record(BaseModel):
    """
    A stored short URL.

    `id` is the storage key and is never part of the stored value; backends
    persist only `url` and `visits` and re-attach the key on read.
    """

    id: str
    url: str = Field(..., min_length=1)
    visits: int = Field(0, ge=0)

    def to_storage(self) -> str:
        """Encode the value half of the record as a JSON string."""
        return self.model_dump_json(include={"url", "visits"})

    @classmethod
    def from_storage(cls, identifier: str, raw: str) -> "Record":
        """
        Decode a stored JSON value back into a Record.

        Raises:
            ValueError: if the value is not JSON or not a valid record
                (pydantic.ValidationError is a ValueError subclass)
        """
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("stored value is not an object")
        return cls.model_validate({**data, "id": identifier})
