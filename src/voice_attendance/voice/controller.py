from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..container import Container
from ..core.exceptions import ValidationError
from .request import VoiceRequest

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/", methods=["POST"], endpoint="voice_webhook")
    def voice_webhook():
        body = request.get_json(silent=True)
        try:
            voice_request = VoiceRequest.from_envelope(body)
        except ValidationError as e:
            logger.warning("Rejected request: %s", e)
            return jsonify({"error": str(e)}), 400

        logger.debug("Handling %s %s", voice_request.request_type, voice_request.intent_name)
        response = container.router.handle(voice_request)
        return jsonify(response.to_envelope())

    @app.route("/", methods=["GET"], endpoint="health")
    @app.route("/<path:_path>", methods=["GET"], endpoint="health_any")
    def health(_path=None):
        return jsonify(
            {
                "status": "OK",
                "message": "Attendance Skill is running",
                "timestamp": now_local().isoformat(),
            }
        )
