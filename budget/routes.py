# budget/routes.py
from flask import Blueprint, request, jsonify, session, current_app

from budget.storage import (
    EXPENSE_CATEGORIES, get_expenses, add_expense, update_expense, delete_expense
)
from budget.summary import summarize_budget, budget_tips
from trips.storage import get_trip_by_id
from user_auth.utils import login_required_user
from utils.itinerary_utils import parse_date


def _validate_expense(data, partial=False):
    """Returns an error message, or None when the payload is acceptable."""
    if not partial:
        for field in ['category', 'amount', 'date']:
            if field not in data:
                return f"Missing required field: {field}"
    if 'category' in data and data['category'] not in EXPENSE_CATEGORIES:
        return f"category must be one of {', '.join(EXPENSE_CATEGORIES)}."
    if 'amount' in data:
        amount = data['amount']
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount <= 0:
            return "amount must be a positive number."
    if 'date' in data:
        try:
            parse_date(data['date'])
        except (TypeError, ValueError):
            return "date must be a valid ISO date (YYYY-MM-DD)."
    return None


def create_budget_bp(db_instance):
    budget_bp = Blueprint('budget_bp', __name__, url_prefix='/trips/<trip_id>')

    @budget_bp.route('/expenses', methods=['GET'])
    @login_required_user
    def list_expenses(trip_id):
        user_uid = session.get('user_uid')
        return jsonify({"expenses": get_expenses(db_instance, trip_id, user_uid)}), 200

    @budget_bp.route('/expenses', methods=['POST'])
    @login_required_user
    def create_expense(trip_id):
        user_uid = session.get('user_uid')
        data = request.get_json(silent=True) or {}

        error = _validate_expense(data)
        if error:
            return jsonify({"error": error}), 400
        if not get_trip_by_id(db_instance, trip_id, user_uid):
            return jsonify({"error": "Trip not found."}), 404

        try:
            expense = add_expense(db_instance, trip_id, user_uid, data)
        except RuntimeError as e:
            current_app.logger.error(f"Error adding expense for user {user_uid}: {e}", exc_info=True)
            return jsonify({"error": "Failed to add expense"}), 500
        return jsonify({"message": "Expense added", "expense": expense}), 201

    @budget_bp.route('/expenses/<expense_id>', methods=['PATCH'])
    @login_required_user
    def edit_expense(trip_id, expense_id):
        user_uid = session.get('user_uid')
        data = request.get_json(silent=True) or {}

        error = _validate_expense(data, partial=True)
        if error:
            return jsonify({"error": error}), 400
        if not update_expense(db_instance, trip_id, expense_id, user_uid, data):
            return jsonify({"error": "Expense not found."}), 404
        return jsonify({"message": "Expense updated"}), 200

    @budget_bp.route('/expenses/<expense_id>', methods=['DELETE'])
    @login_required_user
    def remove_expense(trip_id, expense_id):
        user_uid = session.get('user_uid')
        if not delete_expense(db_instance, trip_id, expense_id, user_uid):
            return jsonify({"error": "Expense not found."}), 404
        return jsonify({"message": "Expense deleted"}), 200

    @budget_bp.route('/budget', methods=['GET'])
    @login_required_user
    def budget_overview(trip_id):
        user_uid = session.get('user_uid')
        trip = get_trip_by_id(db_instance, trip_id, user_uid)
        if not trip:
            return jsonify({"error": "Trip not found."}), 404

        summary = summarize_budget(trip.get('budget'), get_expenses(db_instance, trip_id, user_uid))
        return jsonify({"summary": summary, "tips": budget_tips(summary)}), 200

    return budget_bp
