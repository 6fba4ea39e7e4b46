from flask import Flask, jsonify
from flask_cors import CORS
import logging

from compression import COMPRESSED_SIZE_HEADER, ORIGINAL_SIZE_HEADER
from config import Config
from routes.compress_image import compress_image_bp


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # browsers only let scripts read custom headers that are exposed
    CORS(
        app,
        origins=app.config["CORS_ORIGINS"],
        expose_headers=[ORIGINAL_SIZE_HEADER, COMPRESSED_SIZE_HEADER],
    )

    app.register_blueprint(compress_image_bp)

    # =========================
    # HEALTH CHECK
    # =========================
    @app.route("/", methods=["GET"])
    def health():
        return jsonify({
            "status": "Image compressor backend running",
            "endpoints": ["/api/compress"]
        })

    return app


app = create_app()


# =========================
# START SERVER
# =========================
if __name__ == "__main__":
    app.logger.info("Starting image compressor on %s:%s", Config.HOST, Config.PORT)
    app.run(host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)
