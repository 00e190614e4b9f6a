"""Reading sections of the spine and the table of contents."""

from pydantic import BaseModel, ConfigDict

from epub_decoder.models.item import Item


class Section(BaseModel):
    """A position in a reading order, pointing at a manifest item."""

    model_config = ConfigDict(frozen=True)

    content: Item
    reading_order: int
    title: str | None = None
    linear: bool = True
    sub_section: bool = False

    def renumbered(self, reading_order: int) -> "Section":
        """Copy of this section at a new position."""
        return self.model_copy(update={"reading_order": reading_order})
