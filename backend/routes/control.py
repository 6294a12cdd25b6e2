from flask import Blueprint, current_app, jsonify, request

from backend.services.pipeline import build_command
from src.meter import PipelineMessageError

bp = Blueprint("control", __name__)


@bp.route("/control", methods=["POST"])
def send_control():
    """Queue a control command for the media pipeline.

    Expects a JSON body with:
    - action (str): "set_uri", "stop" or "quit".
    - mode (str): For set_uri, one of udp, ssm, amt, any.
    - source (str, optional): Source address for source-specific multicast.
    - group (str): For set_uri, multicast group address.
    - port (int): For set_uri, multicast port.
    - relay (str, optional): AMT relay address.

    Returns:
        flask.Response: JSON with the queued record under key "command".
        400 with an error message if the command is invalid.
    """
    try:
        data = request.get_json(silent=True) or {}
        command = build_command(data.get("action"), data)
        current_app.extensions["outbox"].push(command)
        current_app.logger.info("control: queued %s", command)
        return jsonify({"command": command}), 200
    except PipelineMessageError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        current_app.logger.exception("control: failed")
        return jsonify({"error": f"Control command failed: {str(e)}"}), 500


@bp.route("/control/pending", methods=["GET"])
def pending_controls():
    """Hand every queued control record to the pipeline, oldest first."""
    commands = current_app.extensions["outbox"].drain()
    return jsonify({"commands": commands}), 200
