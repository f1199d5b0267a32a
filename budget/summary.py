# budget/summary.py

from budget.storage import EXPENSE_CATEGORIES

HIGH_SPEND_RATIO = 80
DOMINANT_CATEGORY_RATIO = 40


def summarize_budget(total_budget, expenses):
    """Totals, remaining amount and a per-category breakdown of a trip's expenses."""
    total_budget = total_budget or 0
    by_category = {category: 0.0 for category in EXPENSE_CATEGORIES}
    for expense in expenses:
        category = expense.get('category')
        if category not in by_category:
            category = 'other'
        by_category[category] += float(expense.get('amount') or 0)

    spent = sum(by_category.values())
    percent_spent = (spent / total_budget * 100) if total_budget > 0 else 0.0

    categories = []
    for category, amount in by_category.items():
        share = (amount / spent * 100) if spent > 0 else 0.0
        categories.append({"category": category, "spent": round(amount, 2), "percentOfSpent": round(share, 1)})

    return {
        "total": total_budget,
        "spent": round(spent, 2),
        "remaining": round(total_budget - spent, 2),
        "percentSpent": round(percent_spent, 1),
        "overBudget": spent > total_budget,
        "categories": categories,
    }


def budget_tips(summary):
    """Rule-based suggestions shown next to the budget summary."""
    if summary['spent'] == 0:
        return [{
            "title": "Track your expenses",
            "description": "Start adding expenses to get personalized budget optimization tips",
        }]

    tips = []
    if summary['overBudget']:
        tips.append({
            "title": "Over budget",
            "description": f"You have spent {abs(summary['remaining']):,.2f} more than planned.",
        })
    elif summary['percentSpent'] > HIGH_SPEND_RATIO:
        tips.append({
            "title": "Budget almost used",
            "description": f"{summary['percentSpent']}% of the budget is spent. Consider free activities for the rest of the trip.",
        })

    top = max(summary['categories'], key=lambda c: c['spent'])
    if top['percentOfSpent'] > DOMINANT_CATEGORY_RATIO:
        tips.append({
            "title": f"High {top['category']} spending",
            "description": f"{top['category'].capitalize()} accounts for {top['percentOfSpent']}% of your spending.",
        })
    return tips
