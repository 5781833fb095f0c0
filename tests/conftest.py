"""Pytest configuration and fixtures."""

import pytest

from builders import EXIF_ITEM, heif_with_idat_exif, heif_with_mdat_exif, icc_profile
from heifmeta.config import HeifMetaConfig, reset_config


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keep user config files and HEIFMETA_* variables out of the tests."""
    for key in ("MAX_DEPTH", "ALLOW_REWIND", "P3_PROFILES", "WHITE_POINT_TOLERANCE"):
        monkeypatch.delenv(f"HEIFMETA_{key}", raising=False)
    monkeypatch.setattr("heifmeta.config.CONFIG_LOCATIONS", [])
    reset_config()
    yield
    reset_config()


@pytest.fixture
def config() -> HeifMetaConfig:
    """Default configuration."""
    return HeifMetaConfig()


@pytest.fixture
def exif_item() -> bytes:
    """An Exif item as stored in a HEIF file, header included."""
    return EXIF_ITEM


@pytest.fixture
def p3_profile() -> bytes:
    """An Apple-style Display P3 ICC profile."""
    return icc_profile()


@pytest.fixture
def idat_heif(p3_profile) -> bytes:
    """A file with the Exif item in idat and a Display P3 profile."""
    return heif_with_idat_exif(icc=p3_profile)


@pytest.fixture
def mdat_heif(p3_profile) -> bytes:
    """A file with the Exif item in mdat and meta first."""
    return heif_with_mdat_exif(icc=p3_profile)


@pytest.fixture
def heif_file(tmp_path, idat_heif):
    """The idat file written to disk."""
    path = tmp_path / "photo.heic"
    path.write_bytes(idat_heif)
    return path
