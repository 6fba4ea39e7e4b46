from flask import Blueprint, request, jsonify, current_app, Response
from werkzeug.exceptions import RequestEntityTooLarge

from compression import (
    MAX_FILE_SIZE,
    CompressionError,
    SizeExceeded,
    UploadRequest,
    ValidationError,
    compress_upload,
)

compress_image_bp = Blueprint("compress_image", __name__, url_prefix="/api/compress")


def read_upload():
    """Collect the multipart form into an UploadRequest"""
    file = request.files.get("file")
    quality = request.form.get("quality")

    # browsers send an empty part with no filename when nothing was chosen
    if file is None or not file.filename:
        return UploadRequest(data=None, declared_type=None, quality=quality)

    # one byte past the ceiling is enough for the size check to reject it
    return UploadRequest(
        data=file.read(MAX_FILE_SIZE + 1),
        declared_type=file.mimetype,
        quality=quality,
    )


@compress_image_bp.app_errorhandler(RequestEntityTooLarge)
def request_too_large(e):
    return jsonify({"error": SizeExceeded.message}), SizeExceeded.status_code


@compress_image_bp.route("", methods=["POST"])
def compress_image():
    try:
        compressed = compress_upload(read_upload())
    except ValidationError as e:
        return jsonify({"error": e.message}), e.status_code
    except Exception:
        # EncodeFailure lands here too; the cause stays in the server log only
        current_app.logger.exception("Compression Error")
        return jsonify({"error": CompressionError.message}), CompressionError.status_code

    current_app.logger.info(
        "Compressed %s: %s -> %s bytes",
        compressed.content_type,
        compressed.result.original_size,
        compressed.result.compressed_size,
    )
    return Response(
        compressed.body,
        status=200,
        mimetype=compressed.content_type,
        headers=compressed.headers,
    )
