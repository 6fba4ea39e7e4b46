import pytest

from compression import (
    DEFAULT_QUALITY,
    MAX_FILE_SIZE,
    ImageFormat,
    MissingFile,
    SizeExceeded,
    UnsupportedFormat,
    UploadRequest,
    parse_quality,
    validate,
)


def test_missing_payload_is_rejected():
    with pytest.raises(MissingFile):
        validate(UploadRequest(data=None, declared_type="image/png"))


@pytest.mark.parametrize("declared_type", ["image/png", "image/gif", None])
def test_oversized_payload_is_rejected_regardless_of_type(declared_type):
    upload = UploadRequest(data=b"\x00" * (MAX_FILE_SIZE + 1), declared_type=declared_type)
    with pytest.raises(SizeExceeded) as exc:
        validate(upload)
    assert exc.value.message == "File size exceeds 20MB limit."
    assert exc.value.status_code == 400


def test_payload_at_the_ceiling_is_accepted():
    validated = validate(UploadRequest(data=b"\x00" * MAX_FILE_SIZE, declared_type="image/webp"))
    assert validated.size == MAX_FILE_SIZE


@pytest.mark.parametrize(
    "declared_type", ["image/gif", "image/bmp", "application/pdf", "text/plain", "", None]
)
def test_unsupported_declared_types(declared_type):
    with pytest.raises(UnsupportedFormat):
        validate(UploadRequest(data=b"abc", declared_type=declared_type))


@pytest.mark.parametrize(
    "declared_type, fmt",
    [
        ("image/jpeg", ImageFormat.JPEG),
        ("image/jpg", ImageFormat.JPEG),
        ("IMAGE/JPEG", ImageFormat.JPEG),
        ("image/png", ImageFormat.PNG),
        ("image/webp; charset=binary", ImageFormat.WEBP),
    ],
)
def test_accepted_declared_types(declared_type, fmt):
    validated = validate(UploadRequest(data=b"abc", declared_type=declared_type))
    assert validated.format is fmt


def test_declared_type_is_trusted_without_sniffing(png_bytes):
    # PNG content declared as JPEG passes validation; decoding catches it later
    validated = validate(UploadRequest(data=png_bytes, declared_type="image/jpeg"))
    assert validated.format is ImageFormat.JPEG
    assert validated.declared_type == "image/jpeg"


def test_size_is_checked_before_format():
    upload = UploadRequest(data=b"\x00" * (MAX_FILE_SIZE + 1), declared_type="image/gif")
    with pytest.raises(SizeExceeded):
        validate(upload)


def test_quality_defaults_and_parsing():
    assert validate(UploadRequest(data=b"x", declared_type="image/png", quality=None)).quality == DEFAULT_QUALITY
    assert parse_quality("") == DEFAULT_QUALITY
    assert parse_quality(" 35 ") == 35
    assert parse_quality(90) == 90


def test_out_of_range_quality_passes_through():
    assert parse_quality("150") == 150
    assert parse_quality("-5") == -5


@pytest.mark.parametrize("raw, expected", [("7.5", 7), ("70abc", 70), ("  40", 40), ("+15", 15)])
def test_quality_uses_leading_integer(raw, expected):
    assert parse_quality(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "high", ".5", " "])
def test_quality_without_leading_integer_is_left_for_the_encoder(raw):
    assert parse_quality(raw) is None


def test_unparseable_quality_does_not_fail_validation():
    validated = validate(UploadRequest(data=b"x", declared_type="image/png", quality="abc"))
    assert validated.quality is None
