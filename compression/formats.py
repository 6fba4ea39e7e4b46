"""Supported image formats and their MIME types"""

from enum import Enum


class ImageFormat(Enum):
    JPEG = "image/jpeg"
    PNG = "image/png"
    WEBP = "image/webp"

    @property
    def mimetype(self) -> str:
        return self.value

    @property
    def pil_format(self) -> str:
        """Format name Pillow uses for open() and save()"""
        return self.name

    @staticmethod
    def from_mimetype(mimetype: str | None) -> "ImageFormat | None":
        """
        Map a declared MIME type to a format.

        Parameters after ';' and letter case are ignored. Returns None for
        anything outside the accepted set.
        """
        if not mimetype:
            return None
        key = mimetype.split(";", 1)[0].strip().lower()
        return MIMETYPE_MAP.get(key)


# image/jpg is not a registered type but browsers and clients still send it
MIMETYPE_MAP = {
    "image/jpeg": ImageFormat.JPEG,
    "image/jpg": ImageFormat.JPEG,
    "image/png": ImageFormat.PNG,
    "image/webp": ImageFormat.WEBP,
}
