import base64

from flask import Blueprint, current_app, jsonify, request

from backend.services.meters import RegistryFullError, UnknownViewerError
from src.meter import MeterError

bp = Blueprint("viewers", __name__)


def _unknown(viewer_id: str):
    return jsonify({"error": f"Unknown viewer {viewer_id}"}), 404


@bp.route("/viewers/<viewer_id>/levels", methods=["POST"])
def update_levels(viewer_id: str):
    """Push one snapshot to a viewer's meter.

    Expects a JSON body with ``values`` and ``peaks``, two numeric lists of
    the same length.

    Returns:
        flask.Response: JSON describing the meter after the update. 400 if
        the lists are missing or differ in length.
    """
    try:
        data = request.get_json(silent=True) or {}
        values = data.get("values")
        peaks = data.get("peaks")
        if not isinstance(values, list) or not isinstance(peaks, list):
            return jsonify({"error": "values and peaks must be lists"}), 400
        meters = current_app.extensions["meters"]
        meters.update(viewer_id, values, peaks)
        return jsonify(meters.describe(viewer_id)), 200
    except MeterError as e:
        return jsonify({"error": str(e)}), 400
    except RegistryFullError:
        return jsonify(
            {"error": "Server is busy. Too many viewers are active right now."}
        ), 503
    except Exception as e:
        current_app.logger.exception("levels: failed for %s", viewer_id)
        return jsonify({"error": f"Level update failed: {str(e)}"}), 500


@bp.route("/viewers/<viewer_id>", methods=["GET"])
def describe_viewer(viewer_id: str):
    try:
        return jsonify(current_app.extensions["meters"].describe(viewer_id)), 200
    except UnknownViewerError:
        return _unknown(viewer_id)


@bp.route("/viewers/<viewer_id>/frame", methods=["GET"])
def viewer_frame(viewer_id: str):
    """Return the meter's current frame.

    Returns:
        flask.Response: JSON with Base64-encoded PNG under ``image`` and a
        suggested ``filename``. 404 for unknown viewers.
    """
    try:
        png = current_app.extensions["meters"].frame_png(viewer_id)
    except UnknownViewerError:
        return _unknown(viewer_id)
    except Exception as e:
        current_app.logger.exception("frame: failed for %s", viewer_id)
        return jsonify({"error": f"Frame rendering failed: {str(e)}"}), 500

    image_base64 = base64.b64encode(png).decode("utf-8")
    return jsonify({"image": image_base64, "filename": f"{viewer_id}_meter.png"}), 200


@bp.route("/viewers/<viewer_id>", methods=["DELETE"])
def remove_viewer(viewer_id: str):
    if not current_app.extensions["meters"].remove(viewer_id):
        return _unknown(viewer_id)
    return jsonify({"removed": viewer_id}), 200
