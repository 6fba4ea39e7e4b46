"""Packaging of encoded bytes with their size metadata"""

from dataclasses import dataclass, field

from compression.validator import ValidatedUpload

ORIGINAL_SIZE_HEADER = "X-Original-Size"
COMPRESSED_SIZE_HEADER = "X-Compressed-Size"


@dataclass(frozen=True)
class EncodingResult:
    data: bytes
    original_size: int
    compressed_size: int


@dataclass(frozen=True)
class CompressionResponse:
    body: bytes
    content_type: str
    headers: dict = field(default_factory=dict)
    result: EncodingResult | None = None


def build(original: ValidatedUpload, encoded: bytes) -> CompressionResponse:
    result = EncodingResult(
        data=encoded,
        original_size=original.size,
        compressed_size=len(encoded),
    )
    headers = {
        "Content-Length": str(result.compressed_size),
        ORIGINAL_SIZE_HEADER: str(result.original_size),
        COMPRESSED_SIZE_HEADER: str(result.compressed_size),
    }
    return CompressionResponse(
        body=encoded,
        content_type=original.declared_type,
        headers=headers,
        result=result,
    )
