"""Shared test fixtures."""

import logging
from pathlib import Path

import pytest
from PIL import Image

from fakes import SMALL_GEOMETRY, FakeBus, device_info_response
from photoframe.config.settings import reset_settings
from photoframe.display.geometry import PanelGeometry
from photoframe.utils.logging import ROOT_LOGGER_NAME


@pytest.fixture
def small_geometry() -> PanelGeometry:
    return SMALL_GEOMETRY


@pytest.fixture
def fake_bus() -> FakeBus:
    return FakeBus(read_data=device_info_response(SMALL_GEOMETRY.width, SMALL_GEOMETRY.height))


@pytest.fixture
def gradient_image() -> Image.Image:
    """Horizontal RGB gradient, wider than tall."""
    image = Image.new("RGB", (64, 32))
    image.putdata([(x * 4, x * 4, x * 4) for _ in range(32) for x in range(64)])
    return image


@pytest.fixture
def write_artifact(tmp_path: Path):
    """Write a prepared artifact under tmp_path and return its catalog path."""

    def _write(name: str, geometry: PanelGeometry = SMALL_GEOMETRY, value: int = 0) -> str:
        relative = f"photos/processed/{name}.png"
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("L", geometry.size, value).save(path, "PNG")
        return "/" + relative

    return _write


@pytest.fixture(autouse=True)
def isolated_settings():
    """Reset global settings and package log handlers around every test."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(logger.handlers)
    reset_settings()
    yield
    reset_settings()
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
