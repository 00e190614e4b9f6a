"""Decoder configuration."""

from pydantic import BaseModel, ConfigDict


class DecoderConfig(BaseModel):
    """Options controlling how an EPUB is resolved."""

    model_config = ConfigDict(frozen=True)

    container_path: str = "META-INF/container.xml"
    file_extension: str = ".epub"
    # Raise instead of skipping when a nav link points outside the manifest
    strict_navigation: bool = False
    encoding: str = "utf-8"


DEFAULT_CONFIG = DecoderConfig()
