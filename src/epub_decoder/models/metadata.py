"""Metadata records from the package document's <metadata> block."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class DocumentMetadata(BaseModel):
    """Generic <meta> entry (EPUB 3 property form or EPUB 2 name/content form)."""

    kind: Literal["meta"] = "meta"
    id: str | None = None
    name: str | None = None
    value: str | None = None
    refines_to: str | None = None
    property: str | None = None
    scheme: str | None = None
    content: str | None = None
    refinements: list["DocumentMetadata"] = Field(default_factory=list)


class DublinCoreMetadata(BaseModel):
    """Dublin Core element such as dc:title or dc:creator."""

    kind: Literal["dublin_core"] = "dublin_core"
    key: str
    id: str | None = None
    value: str | None = None
    refinements: list[DocumentMetadata] = Field(default_factory=list)


Metadata = Annotated[
    Union[DublinCoreMetadata, DocumentMetadata],
    Field(discriminator="kind"),
]
