# fintrack/shared_expenses/routes.py

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from fintrack.groups.registry import get_registry
from fintrack.shared_expenses.models import CreateExpenseRequest
from fintrack.shared_expenses.services import SharedExpenseService

shared_expenses_bp = Blueprint("shared_expenses", __name__)


@shared_expenses_bp.route("/", methods=["POST"])
@jwt_required()
def create_expense():
    """
    Create a shared expense.

    Request body:
    {
        "groupId": "family",
        "paidBy": "...",
        "totalAmount": 300.00,
        "splitType": "equal|percentage|custom",
        "participants": [
            {"userId": "...", "userName": "Asha", "percentage": 60, "customAmount": 180}
        ],
        "description": "Dinner",          // optional
        "category": "Food",               // optional
        "paymentMethod": "Cash",          // optional
        "date": "2024-05-01T19:00:00Z"    // optional, defaults to now
    }
    """
    expense_request = CreateExpenseRequest.from_payload(
        request.get_json(silent=True), created_by=get_jwt_identity()
    )
    expense = SharedExpenseService.create_expense(expense_request, get_registry())
    return jsonify(expense.to_dict()), 201


@shared_expenses_bp.route("/group/<group_id>", methods=["GET"])
@jwt_required()
def list_group_expenses(group_id):
    """All expenses of a group, most recent first."""
    expenses = SharedExpenseService.list_group_expenses(group_id)
    return jsonify([e.to_dict() for e in expenses])


@shared_expenses_bp.route("/user/<user_id>", methods=["GET"])
@jwt_required()
def list_user_expenses(user_id):
    """Expenses the user created, paid for or takes part in."""
    expenses = SharedExpenseService.list_user_expenses(user_id)
    return jsonify([e.to_dict() for e in expenses])


@shared_expenses_bp.route("/<expense_id>", methods=["GET"])
@jwt_required()
def get_expense(expense_id):
    return jsonify(SharedExpenseService.get_expense(expense_id).to_dict())


@shared_expenses_bp.route("/<expense_id>/mark-paid/<user_id>", methods=["PUT"])
@jwt_required()
def mark_paid(expense_id, user_id):
    """Mark one participant's share as paid. Safe to repeat."""
    expense = SharedExpenseService.mark_paid(expense_id, user_id)
    return jsonify(expense.to_dict())


@shared_expenses_bp.route("/<expense_id>", methods=["DELETE"])
@jwt_required()
def delete_expense(expense_id):
    expense = SharedExpenseService.delete_expense(expense_id)
    return jsonify(expense.to_dict())
