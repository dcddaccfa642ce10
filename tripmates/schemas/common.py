from typing import Any, ClassVar

from pydantic import BaseModel, model_validator


class PartialUpdate(BaseModel):
    """
    Body of a PATCH request.

    Only the fields the client actually sent are applied. Sending ``null``
    clears an optional column; sending ``null`` for a column listed in
    ``non_nullable`` is rejected.
    """

    non_nullable: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def _reject_null_required(self) -> "PartialUpdate":
        for field_name in self.model_fields_set & self.non_nullable:
            if getattr(self, field_name) is None:
                raise ValueError(f"{field_name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)
