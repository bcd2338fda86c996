"""
Data contracts for BoardGameGeek game records.

These Pydantic models describe a game as parsed from a /thing
response. Field names follow BGG's own vocabulary because the
site reads them verbatim from the published JSON.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

BGG_BOARDGAME_URL = "https://boardgamegeek.com/boardgame/{bgg_id}"


class Range(BaseModel):
    """Minimum/maximum pair (players or minutes). None means unknown."""

    model_config = ConfigDict(frozen=True)

    min: int | None = None
    max: int | None = None


class Ratings(BaseModel):
    """Community rating statistics."""

    model_config = ConfigDict(frozen=True)

    average: float | None = Field(default=None, description="Mean user rating")
    bayesaverage: float | None = Field(default=None, description="Geek rating")
    usersrated: int | None = Field(default=None, description="Number of ratings")


class GameRecord(BaseModel):
    """
    A game as parsed from one <item> fragment of a /thing response.

    Numeric fields are None when the source omits them, so that
    "unknown" never turns into zero downstream.
    """

    model_config = ConfigDict(frozen=True)

    bgg_id: int = Field(..., gt=0, description="BoardGameGeek object id")
    name: str | None = Field(default=None, description="Primary display name")
    yearpublished: int | None = Field(default=None, description="Publication year")

    players: Range = Field(default_factory=Range)
    playtime: Range = Field(default_factory=Range, description="Minutes")

    thumbnail: str | None = Field(default=None, description="Thumbnail image URL")
    image: str | None = Field(default=None, description="Full image URL")

    categories: list[str] = Field(default_factory=list)
    mechanics: list[str] = Field(default_factory=list)

    ratings: Ratings = Field(default_factory=Ratings)

    bgg_url: str | None = Field(default=None, description="Game page on boardgamegeek.com")

    @classmethod
    def url_for(cls, bgg_id: int) -> str:
        """Build the public game page URL for an id."""
        return BGG_BOARDGAME_URL.format(bgg_id=bgg_id)


# Type alias for object ids
BGGId = Annotated[int, Field(gt=0, description="BoardGameGeek object id")]
