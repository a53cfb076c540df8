from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Success body shared by every endpoint; errors use AppError.to_body()."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
