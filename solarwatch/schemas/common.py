from pydantic import BaseModel


class Success(BaseModel):
    success: bool = True


class Created(Success):
    id: int


class ErrorBody(BaseModel):
    """Body of every non-2xx response."""

    error: str
