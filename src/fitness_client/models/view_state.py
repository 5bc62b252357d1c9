"""
Fetch view-state — tagged variant over Idle, Loading, Loaded, Failed.
"""

from typing import Any, Literal, Union

from pydantic import BaseModel

from fitness_client.errors import FitnessClientError, NotFoundError


class Idle(BaseModel):
    status: Literal["idle"] = "idle"

    model_config = {"frozen": True}


class Loading(BaseModel):
    status: Literal["loading"] = "loading"

    model_config = {"frozen": True}


class Loaded(BaseModel):
    status: Literal["loaded"] = "loaded"
    payload: Any

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return isinstance(self.payload, (list, tuple)) and len(self.payload) == 0


class Failed(BaseModel):
    status: Literal["failed"] = "failed"
    error: FitnessClientError

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def kind(self) -> str:
        return self.error.code

    @property
    def is_not_found(self) -> bool:
        return isinstance(self.error, NotFoundError)


FetchState = Union[Idle, Loading, Loaded, Failed]
