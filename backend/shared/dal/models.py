"""Records and request inputs for the data access layer."""

from pydantic import BaseModel, ConfigDict, Field


class RecordId(BaseModel, frozen=True):
    """Id of a row created, updated or deleted by a statement."""

    id: int


class Player(BaseModel, frozen=True):
    id: int
    email: str
    name: str


class PlayerInput(BaseModel, frozen=True):
    """Client-supplied player fields. The id is always assigned by storage."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    email: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=50)


class Game(BaseModel, frozen=True):
    id: int
    time: str


class GameInput(BaseModel, frozen=True):
    model_config = ConfigDict(extra="ignore")

    time: str = Field(min_length=1)


class PlayerScore(BaseModel, frozen=True):
    """A player's row in a game's standings (PlayerGame joined with Player)."""

    id: int  # player id
    name: str
    email: str
    score: int


class ScoreInput(BaseModel, frozen=True):
    """One PlayerGame association: a player's score in a game."""

    model_config = ConfigDict(populate_by_name=True)

    game_id: int = Field(validation_alias="gameID", serialization_alias="gameID")
    player_id: int = Field(validation_alias="playerID", serialization_alias="playerID")
    score: int
