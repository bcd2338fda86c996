"""
Manifest data model.
"""

from dataclasses import dataclass, field

ID_FIELD = "bgg_id"
NOTE_FIELD = "note"
LIST_KEY = "games"


class ManifestError(Exception):
    """Raised when the manifest is missing or has no usable entries."""

    pass


@dataclass(frozen=True)
class ManifestEntry:
    """A tracked game plus its locally authored fields."""

    bgg_id: int
    note: str | None = None
    overrides: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        """Flatten back to the key/value form used in the manifest file."""
        data: dict[str, object] = {ID_FIELD: self.bgg_id}
        if self.note is not None:
            data[NOTE_FIELD] = self.note
        data.update(self.overrides)
        return data
