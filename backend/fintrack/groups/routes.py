from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from fintrack.groups.registry import get_registry

groups_bp = Blueprint("groups", __name__)


@groups_bp.route("/", methods=["GET"])
@jwt_required()
def list_groups():
    """List the configured expense groups."""
    return jsonify({"groups": [g.to_dict() for g in get_registry().all()]})
