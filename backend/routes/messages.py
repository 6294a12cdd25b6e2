from flask import Blueprint, current_app, jsonify, request

from backend.services.meters import RegistryFullError
from backend.services.pipeline import ModuleError
from src.meter import MeterError

bp = Blueprint("messages", __name__)


@bp.route("/messages", methods=["POST"])
def receive_message():
    """Accept one message posted by the media pipeline.

    Expects a JSON body with:
    - data (str): Loudness report ("<pipe>:<planes>:<level>:<max>:...")
      or an error notice ("error:<message>").
    - viewer_id (str, optional): Target viewer. Defaults to "pipe-<n>" for
      loudness reports.

    Returns:
        flask.Response: JSON with ``viewer_id`` and either ``status`` (error
        notices) or ``channels`` (loudness reports). 400 for malformed
        messages, 503 when no more viewers can be created.
    """
    try:
        data = request.get_json(silent=True) or {}
        text = data.get("data")
        viewer_id, message = current_app.extensions["meters"].handle_message(
            data.get("viewer_id"), text
        )
        if isinstance(message, ModuleError):
            return jsonify({"viewer_id": viewer_id, "status": message.status_text()}), 200
        return jsonify({"viewer_id": viewer_id, "channels": message.planes}), 200
    except MeterError as e:
        return jsonify({"error": str(e)}), 400
    except RegistryFullError:
        return jsonify(
            {"error": "Server is busy. Too many viewers are active right now."}
        ), 503
    except Exception as e:
        current_app.logger.exception("messages: failed")
        return jsonify({"error": f"Message handling failed: {str(e)}"}), 500
