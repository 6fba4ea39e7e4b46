"""
Shared fixtures: images generated in memory with Pillow, and a Flask app.
"""

import io

import pytest
from PIL import Image

from app import create_app
from config import TestConfig


def photo_like(size=(480, 320)):
    """RGB image with gradients and noise, compresses like a photograph"""
    red = Image.linear_gradient("L").resize(size)
    green = Image.radial_gradient("L").resize(size)
    blue = Image.effect_noise(size, 48)
    return Image.merge("RGB", (red, green, blue))


def encode(img, fmt, **params):
    buf = io.BytesIO()
    img.save(buf, format=fmt, **params)
    return buf.getvalue()


@pytest.fixture
def photo():
    return photo_like()


@pytest.fixture
def jpeg_bytes(photo):
    return encode(photo, "JPEG", quality=100)


@pytest.fixture
def png_bytes(photo):
    return encode(photo, "PNG")


@pytest.fixture
def webp_bytes(photo):
    return encode(photo, "WEBP", quality=100)


@pytest.fixture
def gif_bytes(photo):
    return encode(photo.convert("P"), "GIF")


@pytest.fixture
def rgba_png_bytes():
    img = Image.new("RGBA", (64, 64), (0, 0, 0, 0))
    img.paste((255, 0, 0, 255), (32, 0, 64, 64))
    return encode(img, "PNG")


@pytest.fixture
def app():
    return create_app(TestConfig)


@pytest.fixture
def client(app):
    return app.test_client()
