"""
Image re-encoding pipeline: validate, dispatch, encode, build the response.
"""

from compression.errors import (
    CompressionError,
    EncodeFailure,
    MissingFile,
    SizeExceeded,
    UnsupportedFormat,
    ValidationError,
)
from compression.formats import ImageFormat
from compression.response import (
    COMPRESSED_SIZE_HEADER,
    ORIGINAL_SIZE_HEADER,
    CompressionResponse,
    EncodingResult,
    build,
)
from compression.strategies import EncodingStrategy, dispatch
from compression.validator import (
    DEFAULT_QUALITY,
    MAX_FILE_SIZE,
    UploadRequest,
    ValidatedUpload,
    parse_quality,
    validate,
)


def compress_upload(upload: UploadRequest) -> CompressionResponse:
    """
    Run one upload through the whole pipeline.

    Raises ValidationError before any decoding happens, or EncodeFailure
    when the declared format's strategy cannot handle the bytes.
    """
    validated = validate(upload)
    strategy = dispatch(validated.format)
    encoded = strategy.encode(validated.data, validated.quality)
    return build(validated, encoded)


__all__ = [
    "COMPRESSED_SIZE_HEADER",
    "CompressionError",
    "CompressionResponse",
    "DEFAULT_QUALITY",
    "EncodeFailure",
    "EncodingResult",
    "EncodingStrategy",
    "ImageFormat",
    "MAX_FILE_SIZE",
    "MissingFile",
    "ORIGINAL_SIZE_HEADER",
    "SizeExceeded",
    "UnsupportedFormat",
    "UploadRequest",
    "ValidatedUpload",
    "ValidationError",
    "build",
    "compress_upload",
    "dispatch",
    "parse_quality",
    "validate",
]
