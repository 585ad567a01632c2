from __future__ import annotations

from flask import Flask, jsonify, request

from ..capture.image_source import StaticImageSource
from ..container import Container
from ..core.constants import MSG_EMPLOYEE_MISSING, MSG_IMAGE_MISSING
from ..core.exceptions import CaptureError


def register(app: Flask, container: Container) -> None:
    scanner = container.scanner

    def state_response(accepted: bool = True):
        payload = scanner.snapshot().to_dict()
        payload["success"] = accepted
        payload["redirect"] = container.navigator.pop_route()
        return jsonify(payload), 200 if accepted else 409

    @app.route("/qr/scan/state", methods=["GET"], endpoint="qr_scan_state")
    def qr_scan_state():
        return state_response()

    @app.route("/qr/scan/camera", methods=["POST"], endpoint="qr_scan_camera")
    def qr_scan_camera():
        """Open the kiosk camera and start looking for a QR code."""
        return state_response(scanner.start_camera())

    @app.route("/qr/scan/image", methods=["POST"], endpoint="qr_scan_image")
    def qr_scan_image():
        """Decode an uploaded picture and run the check-in with its payload."""
        if "image" not in request.files:
            return jsonify({"success": False, "message": MSG_IMAGE_MISSING}), 400
        return state_response(scanner.select_image(request.files["image"].stream))

    @app.route("/qr/scan/select", methods=["POST"], endpoint="qr_scan_select")
    def qr_scan_select():
        data = request.get_json(silent=True) or {}
        employee_id = str(data.get("employee_id") or "").strip()
        if not employee_id:
            return jsonify({"success": False, "message": MSG_EMPLOYEE_MISSING}), 400
        return state_response(scanner.select_employee(employee_id))

    @app.route("/qr/scan/acknowledge", methods=["POST"], endpoint="qr_scan_acknowledge")
    def qr_scan_acknowledge():
        return state_response(scanner.acknowledge())

    @app.route("/qr/scan/reset", methods=["POST"], endpoint="qr_scan_reset")
    def qr_scan_reset():
        scanner.reset()
        return state_response()

    @app.route("/api/qr/decode", methods=["POST"], endpoint="api_qr_decode")
    def api_qr_decode():
        """Decode only: return the QR payload of an uploaded image without checking in."""
        if "image" not in request.files:
            return jsonify({"success": False, "message": MSG_IMAGE_MISSING}), 400
        try:
            buffer = StaticImageSource(request.files["image"].stream).load()
        except CaptureError as e:
            return jsonify({"success": False, "message": str(e)}), 400

        report = container.decoder.decode_with_report(buffer)
        return jsonify({
            "success": report.text is not None,
            "data": report.text,
            "attempt": report.attempt.index if report.attempt else None,
            "fallback": report.used_fallback,
        }), 200
