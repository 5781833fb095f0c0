"""Metadata container returned by the readers."""

from pydantic import BaseModel, ConfigDict, Field

from .directory import Directory, HeifDirectory, IccDirectory
from .file import FileInfo


class Metadata(BaseModel):
    """Everything collected from one HEIF file.

    - heif: container values, box inventory and walk diagnostics
    - icc: the first embedded ICC profile, if any
    - exif_payloads: raw EXIF item buffers in the order they were captured
    - icc_payloads: raw ICC profile buffers in the order they were captured
    """

    file_info: FileInfo | None = None
    heif: HeifDirectory = Field(default_factory=HeifDirectory)
    icc: IccDirectory | None = None
    exif_payloads: list[bytes] = Field(default_factory=list)
    icc_payloads: list[bytes] = Field(default_factory=list)

    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")

    @property
    def directories(self) -> list[Directory]:
        """Return all populated directories."""
        directories: list[Directory] = [self.heif]
        if self.icc is not None:
            directories.append(self.icc)
        return directories

    @property
    def errors(self) -> list[str]:
        """Return the errors of every directory."""
        return [error for directory in self.directories for error in directory.errors]

    @property
    def has_errors(self) -> bool:
        return any(directory.has_errors for directory in self.directories)

    @property
    def filename(self) -> str | None:
        return self.file_info.filename if self.file_info else None


class ExtractionResult(BaseModel):
    """Byte artifacts and colour classification for one file."""

    exif: bytes | None = None
    icc: bytes | None = None
    combined: bytes | None = None
    is_display_p3: bool = False
    errors: list[str] = Field(default_factory=list)

    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")

    @property
    def has_exif(self) -> bool:
        return self.exif is not None
