# budget/storage.py
import datetime
import logging

logger = logging.getLogger(__name__)

EXPENSES_COLLECTION = 'expenses'

EXPENSE_CATEGORIES = ['accommodation', 'food', 'transportation', 'activities', 'other']
EXPENSE_FIELDS = ['category', 'amount', 'description', 'date']


def get_expenses(db, trip_id, user_id):
    """Expenses the user recorded for a trip, oldest date first. [] on failure."""
    try:
        docs = (db.collection(EXPENSES_COLLECTION)
                .where('tripId', '==', trip_id)
                .where('userId', '==', user_id)
                .stream())
        expenses = [{"id": doc.id, **doc.to_dict()} for doc in docs]
        expenses.sort(key=lambda expense: expense.get('date') or '')
        return expenses
    except Exception as e:
        logger.error(f"Error fetching expenses for trip {trip_id}: {e}")
        return []


def add_expense(db, trip_id, user_id, expense_data):
    """Stores the expense and returns it with its id. Raises on failure."""
    expense = {field: expense_data[field] for field in EXPENSE_FIELDS if field in expense_data}
    expense.update({
        "tripId": trip_id,
        "userId": user_id,
        "createdAt": datetime.datetime.now(datetime.timezone.utc),
    })
    try:
        _, doc_ref = db.collection(EXPENSES_COLLECTION).add(expense)
    except Exception as e:
        logger.error(f"Error adding expense to trip {trip_id}: {e}")
        raise RuntimeError("Failed to add expense") from e
    return {"id": doc_ref.id, **expense}


def _owned_expense_ref(db, trip_id, expense_id, user_id):
    expense_ref = db.collection(EXPENSES_COLLECTION).document(expense_id)
    doc = expense_ref.get()
    if not doc.exists:
        return None
    expense = doc.to_dict()
    if expense.get('tripId') != trip_id:
        return None
    if expense.get('userId') != user_id:
        logger.warning(f"User {user_id} does not own expense {expense_id}")
        return None
    return expense_ref


def update_expense(db, trip_id, expense_id, user_id, updates):
    try:
        expense_ref = _owned_expense_ref(db, trip_id, expense_id, user_id)
        if expense_ref is None:
            return False
        changes = {field: updates[field] for field in EXPENSE_FIELDS if field in updates}
        if changes:
            expense_ref.update(changes)
        return True
    except Exception as e:
        logger.error(f"Error updating expense {expense_id}: {e}")
        return False


def delete_expense(db, trip_id, expense_id, user_id):
    try:
        expense_ref = _owned_expense_ref(db, trip_id, expense_id, user_id)
        if expense_ref is None:
            return False
        expense_ref.delete()
        return True
    except Exception as e:
        logger.error(f"Error deleting expense {expense_id}: {e}")
        return False
