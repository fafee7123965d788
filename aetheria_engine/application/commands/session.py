from pydantic import BaseModel, ConfigDict, Field

SaveId = str


class StartSessionCommand(BaseModel):
    """A Command DTO representing the intent to begin a new adventure."""
    model_config = ConfigDict(str_strip_whitespace=True)

    character_name: str = Field(min_length=1)


class LoadSessionCommand(BaseModel):
    """A Command DTO representing the intent to resume a saved adventure."""
    save_id: SaveId
