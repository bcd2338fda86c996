"""
Schema of the published games document.

This is the only artifact the site reads: it is fetched once per
page load and treated as read-only.
"""

from datetime import datetime, timezone
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class OutputDocument(BaseModel):
    """
    The published catalog.

    Games are plain JSON objects because local override fields are
    free-form and may replace any remote field.
    """

    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="UTC timestamp of generation",
    )
    source: str = Field(..., description="Provenance label of the remote data")
    games: list[dict[str, Any]] = Field(default_factory=list, description="Merged games, by name")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "generated_at": "2026-01-15T10:30:00.000Z",
                "source": "BoardGameGeek XMLAPI2 /thing?stats=1",
                "games": [
                    {
                        "bgg_id": 13,
                        "name": "CATAN",
                        "yearpublished": 1995,
                        "players": {"min": 3, "max": 4},
                        "playtime": {"min": 60, "max": 120},
                        "thumbnail": "https://cf.geekdo-images.com/thumb.jpg",
                        "image": "https://cf.geekdo-images.com/image.jpg",
                        "categories": ["Negotiation"],
                        "mechanics": ["Dice Rolling", "Trading"],
                        "ratings": {"average": 7.1, "bayesaverage": 6.9, "usersrated": 120000},
                        "bgg_url": "https://boardgamegeek.com/boardgame/13",
                        "note": "",
                    }
                ],
            }
        }
    )

    TIMESTAMP_FORMAT: ClassVar[str] = "%Y-%m-%dT%H:%M:%S.%f"

    @field_serializer("generated_at")
    def serialize_generated_at(self, value: datetime) -> str:
        """ISO-8601 in UTC with millisecond precision and a Z suffix."""
        value = value.astimezone(timezone.utc)
        return value.strftime(self.TIMESTAMP_FORMAT)[:-3] + "Z"
