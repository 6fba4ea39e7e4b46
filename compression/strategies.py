"""
Per-format encoding strategies.

Every strategy decodes the upload as its own format only, re-encodes it
with Pillow using that format's quality knobs, and hands back the new
bytes. Pixel dimensions, orientation and the embedded color profile are
left untouched.
"""

import io
import logging
from abc import ABC, abstractmethod

from PIL import Image

from compression.errors import EncodeFailure
from compression.formats import ImageFormat

logger = logging.getLogger(__name__)

PNG_MAX_COLORS = 256
PNG_MIN_COLORS = 2


class EncodingStrategy(ABC):
    """Base class for format-specific re-encoders"""

    format: ImageFormat

    def encode(self, data: bytes, quality: int | None) -> bytes:
        """
        Re-encode image bytes at the given quality.

        Args:
            data: raw bytes claimed to be an image of this strategy's format
            quality: format-specific quality value, passed through unchecked;
                None (a form value that was not a number) fails the encode

        Returns:
            the re-encoded image bytes

        Raises:
            EncodeFailure: the bytes are not a decodable image of this format,
                or the encoder rejected the parameters
        """
        try:
            if quality is None:
                raise ValueError("quality is not a number")
            with Image.open(io.BytesIO(data), formats=[self.format.pil_format]) as img:
                # force a full decode so truncated data fails here
                img.load()
                output = io.BytesIO()
                self._save(img, output, quality)
        except Exception as e:
            logger.warning(f"{self.format.name} encode failed: {e}")
            raise EncodeFailure() from e

        encoded = output.getvalue()
        logger.debug(
            f"{self.format.name} q={quality}: {len(data)} -> {len(encoded)} bytes"
        )
        return encoded

    @abstractmethod
    def _save(self, img: Image.Image, output: io.BytesIO, quality: int) -> None:
        """Write img to output in this strategy's format"""

    @staticmethod
    def _color_params(img: Image.Image) -> dict:
        icc_profile = img.info.get("icc_profile")
        return {"icc_profile": icc_profile} if icc_profile else {}


def _has_alpha(img: Image.Image) -> bool:
    return img.mode in ("RGBA", "LA", "PA") or "transparency" in img.info


class JpegStrategy(EncodingStrategy):
    """JPEG with optimized Huffman tables and progressive scan always on"""

    format = ImageFormat.JPEG

    def _save(self, img, output, quality):
        params = self._color_params(img)
        if img.mode not in ("L", "RGB", "CMYK"):
            img = img.convert("RGB")
        img.save(
            output,
            format="JPEG",
            quality=quality,
            optimize=True,
            progressive=True,
            **params,
        )


class PngStrategy(EncodingStrategy):
    """
    PNG with palette quantization and maximum deflate effort.

    PNG has no lossy quality setting, so quality is mapped onto the number
    of palette colors. Nearby quality values can give near-identical files.
    """

    format = ImageFormat.PNG

    def _save(self, img, output, quality):
        params = self._color_params(img)
        colors = palette_colors(quality)

        if _has_alpha(img):
            quantized = img.convert("RGBA").quantize(
                colors=colors, method=Image.Quantize.FASTOCTREE
            )
        else:
            quantized = img.convert("RGB").quantize(colors=colors)

        quantized.save(
            output,
            format="PNG",
            optimize=True,
            compress_level=9,
            **params,
        )


class WebpStrategy(EncodingStrategy):
    """Lossy WebP at the requested quality"""

    format = ImageFormat.WEBP

    def _save(self, img, output, quality):
        params = self._color_params(img)
        if img.mode not in ("RGB", "RGBA"):
            img = img.convert("RGBA" if _has_alpha(img) else "RGB")
        img.save(output, format="WEBP", quality=quality, **params)


def palette_colors(quality: int) -> int:
    """Palette size for a PNG quality value, clamped to [2, 256]"""
    colors = round(PNG_MAX_COLORS * quality / 100)
    return max(PNG_MIN_COLORS, min(PNG_MAX_COLORS, colors))


_STRATEGIES = {
    ImageFormat.JPEG: JpegStrategy(),
    ImageFormat.PNG: PngStrategy(),
    ImageFormat.WEBP: WebpStrategy(),
}


def dispatch(fmt: ImageFormat) -> EncodingStrategy:
    """
    Pick the strategy for a validated format.

    Raises LookupError for anything else; the validator never lets such a
    value through, so that is a programming error.
    """
    try:
        return _STRATEGIES[fmt]
    except KeyError:
        raise LookupError(f"No encoding strategy for {fmt!r}") from None
