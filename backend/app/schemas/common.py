"""Common schema components."""
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response."""
    error: str


class MessageResponse(BaseModel):
    message: str
