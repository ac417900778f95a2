"""Settlement routes: balances and pairwise-netted settlement plans."""
from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from fintrack.core import BalanceAggregator, DebtGraphSimplifier
from fintrack.utils.money import ZERO, to_cents

settlements_bp = Blueprint("settlements", __name__)


@settlements_bp.route("/balance/<group_id>/<user_id>", methods=["GET"])
@jwt_required()
def get_balance(group_id, user_id):
    """
    Balance summary for a user in a group.

    Returns:
    {
        "groupId": "family",
        "userId": "...",
        "totalOwed": 40.00,         // user owes others
        "totalOwedToUser": 200.00,  // others owe user
        "netBalance": 160.00
    }
    """
    balance = BalanceAggregator.for_group(group_id, user_id)
    return jsonify({"groupId": group_id, "userId": user_id, **balance.to_dict()})


@settlements_bp.route("/plan/<group_id>", methods=["GET"])
@jwt_required()
def get_settlement_plan(group_id):
    """
    Who owes whom in a group, with reciprocal debts netted.

    Returns:
    {
        "groupId": "family",
        "transfers": [
            {"from": "...", "fromName": "Ravi", "to": "...", "toName": "Asha", "amount": 60.00}
        ],
        "totalAmount": 60.00
    }
    """
    transfers = DebtGraphSimplifier.for_group(group_id)
    total = sum((t.amount for t in transfers), ZERO)
    return jsonify({
        "groupId": group_id,
        "transfers": [t.to_dict() for t in transfers],
        "totalAmount": to_cents(total),
    })
