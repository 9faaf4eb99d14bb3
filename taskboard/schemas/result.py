from typing import Any, Literal, Union

from pydantic import BaseModel

from ..errors import ErrorKind, TaskboardError


class Success(BaseModel):
    success: Literal[True] = True
    message: str
    data: Any = None


class Failure(BaseModel):
    success: Literal[False] = False
    kind: ErrorKind
    message: str

    @classmethod
    def from_error(cls, exc: TaskboardError) -> "Failure":
        return cls(kind=exc.kind, message=exc.message)


Result = Union[Success, Failure]
