"""Base model configuration for harness data structures."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Frozen base model that rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid")
