from pydantic import BaseModel, ConfigDict


class ABaseModel(BaseModel):
    """Model with arbitrary types allowed and assignment validation."""
    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)
