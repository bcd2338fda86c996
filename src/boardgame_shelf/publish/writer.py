"""
Writer for the published games document.
"""

import json
from pathlib import Path

from boardgame_shelf.config import get_settings
from boardgame_shelf.logger import get_logger
from boardgame_shelf.publish.schemas import OutputDocument
from boardgame_shelf.utils import atomic_write_text


class DocumentWriter:
    """
    Writes the games document for the site.

    The file is replaced atomically, so the site never serves a
    half-written document.

    Example:
        >>> writer = DocumentWriter(output_path=Path("site/games.json"))
        >>> writer.write(document)
        PosixPath('site/games.json')
    """

    def __init__(self, *, output_path: Path | None = None) -> None:
        """
        Initialize the writer.

        Args:
            output_path: Destination file (defaults to the configured path)
        """
        self._output_path = output_path or get_settings().paths.output_path
        self._logger = get_logger(__name__, component="document_writer")

    @property
    def output_path(self) -> Path:
        """Destination file."""
        return self._output_path

    def render(self, document: OutputDocument) -> str:
        """Serialize a document as indented JSON."""
        return json.dumps(document.model_dump(mode="json"), indent=2, ensure_ascii=False) + "\n"

    def write(self, document: OutputDocument) -> Path:
        """
        Write a document to the output path.

        Args:
            document: Document to write

        Returns:
            Path: Path where data was written
        """
        atomic_write_text(self._output_path, self.render(document))

        self._logger.info(
            "Wrote games document",
            output_path=str(self._output_path),
            games=len(document.games),
        )

        return self._output_path
