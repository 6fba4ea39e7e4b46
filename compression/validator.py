"""Upload checks that run before any decoding work"""

import re
from dataclasses import dataclass

from compression.errors import MissingFile, SizeExceeded, UnsupportedFormat
from compression.formats import ImageFormat

MAX_FILE_SIZE = 20 * 1024 * 1024  # 20MB
DEFAULT_QUALITY = 70

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class UploadRequest:
    data: bytes | None
    declared_type: str | None
    # raw form value, parsed during validation
    quality: int | str | None = DEFAULT_QUALITY


@dataclass(frozen=True)
class ValidatedUpload:
    data: bytes
    format: ImageFormat
    declared_type: str
    # None when the form value had no leading integer
    quality: int | None

    @property
    def size(self) -> int:
        return len(self.data)


def parse_quality(raw) -> int | None:
    """
    Read the leading integer of the raw form value: "7.5" -> 7, "70abc" -> 70.

    Missing or empty values fall back to DEFAULT_QUALITY. A value with no
    leading integer gives None, which the encoder rejects. The range is not
    checked here; out-of-range values go to the encoder as-is.
    """
    if raw is None or raw == "":
        return DEFAULT_QUALITY
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    match = _LEADING_INT.match(str(raw))
    if match is None:
        return None
    return int(match.group(1))


def validate(upload: UploadRequest) -> ValidatedUpload:
    """
    Check presence, size and declared format, in that order.

    Only metadata and byte length are inspected; the declared type is
    trusted and content is never sniffed here.
    """
    if upload.data is None:
        raise MissingFile()

    if len(upload.data) > MAX_FILE_SIZE:
        raise SizeExceeded()

    fmt = ImageFormat.from_mimetype(upload.declared_type)
    if fmt is None:
        raise UnsupportedFormat()

    return ValidatedUpload(
        data=upload.data,
        format=fmt,
        declared_type=upload.declared_type.split(";", 1)[0].strip().lower(),
        quality=parse_quality(upload.quality),
    )
