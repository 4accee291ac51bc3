"""
Streamlit Frontend for Expense Tracker

This is the user interface for logging daily expenses and keeping an eye
on monthly category budgets.

DESIGN PRINCIPLES:
1. Adding an expense takes a few seconds
2. Category is suggested from the note, but the user has the final say
3. Clear error messages in simple language
4. Visual feedback for every change (short notification)
5. No hidden actions

Every number on screen is recomputed from the stored expenses; nothing
derived is ever saved.
"""

from datetime import date

import streamlit as st

from expense_tracker.config import validate_all_settings
from expense_tracker.models.expense import (
    EMAIL_MAX_LENGTH,
    NOTE_MAX_LENGTH,
    ExpenseDraft,
    PaymentMethod,
)
from expense_tracker.orchestrator import ExpenseTracker, create_app_components
from expense_tracker.reports import (
    format_inr,
    format_percentage,
    format_relative_date,
)
from expense_tracker.services.storage import StorageError
from expense_tracker.validation import (
    ExpenseValidator,
    InvalidInputError,
    default_expense_date,
)


# Page configuration
st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💸",
    layout="centered",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .warning-box {
        padding: 16px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
    .error-box {
        padding: 16px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
    .big-number {
        font-size: 2.2em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


def get_tracker() -> ExpenseTracker:
    """Get or create this browser session's tracker."""
    if "tracker" not in st.session_state:
        st.session_state.tracker = create_app_components()
    return st.session_state.tracker


def show_notification(tracker: ExpenseTracker) -> None:
    """Show the current confirmation message, if it has not expired."""
    notification = tracker.notification()
    if notification:
        st.success(notification.message)


def category_label(tracker: ExpenseTracker, category_id: str) -> str:
    category = tracker.catalog.get(category_id)
    if category is None:
        return "Unknown"
    return category.name


def main():
    """Main application entry point."""
    tracker = get_tracker()

    if tracker.current_user is None:
        render_sign_in_page(tracker)
        return

    # Sidebar navigation
    st.sidebar.title("💸 Expense Tracker")
    st.sidebar.caption(f"Signed in as {tracker.current_user.email}")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["🏠 Dashboard", "➕ Add Expense", "📋 Expenses", "🎯 Budgets", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    if st.sidebar.button("🚪 Sign Out"):
        tracker.sign_out()
        st.rerun()

    show_notification(tracker)

    # Route to appropriate page
    if page == "🏠 Dashboard":
        render_dashboard_page(tracker)
    elif page == "➕ Add Expense":
        render_add_page(tracker)
    elif page == "📋 Expenses":
        render_expenses_page(tracker)
    elif page == "🎯 Budgets":
        render_budgets_page(tracker)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_sign_in_page(tracker: ExpenseTracker):
    """Render the sign-in page."""
    st.title("💸 Expense Tracker")
    st.markdown("Track where your money goes, one expense at a time.")

    with st.form("sign_in"):
        email = st.text_input(
            "Email",
            placeholder="you@example.com",
            max_chars=EMAIL_MAX_LENGTH,
        )
        submitted = st.form_submit_button("Continue", type="primary")

    if submitted:
        try:
            tracker.sign_in(email)
            st.rerun()
        except InvalidInputError as e:
            st.error(ExpenseValidator.get_user_friendly_summary(e.result))
        except StorageError as e:
            st.error(f"Could not save your account: {e}")


def render_dashboard_page(tracker: ExpenseTracker):
    """Render the dashboard page."""
    today = date.today()
    dashboard = tracker.dashboard(today)
    summary = dashboard.summary

    st.title("🏠 Dashboard")

    col1, col2 = st.columns(2)
    with col1:
        st.markdown("**Today**")
        st.markdown(
            f'<div class="big-number">{format_inr(summary.today_total)}</div>',
            unsafe_allow_html=True,
        )
    with col2:
        st.markdown(f"**{dashboard.month_label}**")
        st.markdown(
            f'<div class="big-number">{format_inr(summary.month_total)}</div>',
            unsafe_allow_html=True,
        )

    # Budget alerts
    for alert in dashboard.alerts:
        name = alert.category.name if alert.category else "Unknown"
        if alert.status.value == "over_limit":
            st.markdown(f"""
            <div class="error-box">
                <strong>🚨 {name}</strong>: over budget by {format_inr(alert.overspent_by)}
                ({format_percentage(alert.percentage)} of {format_inr(alert.budget.monthly_limit)})
            </div>
            """, unsafe_allow_html=True)
        else:
            st.markdown(f"""
            <div class="warning-box">
                <strong>⚠️ {name}</strong>: {format_percentage(alert.percentage)} used,
                {format_inr(alert.remaining)} left
            </div>
            """, unsafe_allow_html=True)

    st.markdown("---")
    st.subheader("Where it went this month")
    if not summary.category_spends:
        st.info("No expenses this month yet. Use 'Add Expense' to log one.")
    for spend in summary.category_spends:
        st.markdown(
            f"**{spend.category.name}**: "
            f"{format_inr(spend.amount)} ({format_percentage(spend.percentage)})"
        )
        st.progress(min(spend.percentage / 100, 1.0))

    st.markdown("---")
    st.subheader("Recent expenses")
    if not summary.recent:
        st.caption("Nothing logged yet.")
    for expense in summary.recent:
        st.markdown(
            f"{category_label(tracker, expense.category_id)} · "
            f"**{format_inr(expense.amount)}** · "
            f"{format_relative_date(expense.expense_date, today)}"
            + (f" · _{expense.note}_" if expense.note else "")
        )


def render_add_page(tracker: ExpenseTracker):
    """Render the add-expense form."""
    st.title("➕ Add Expense")

    category_ids = tracker.catalog.ids()

    note = st.text_input(
        "Note (optional)",
        placeholder="e.g., Swiggy order, Uber to office",
        help="We'll suggest a category from the note",
        max_chars=NOTE_MAX_LENGTH,
    )
    suggestion = tracker.suggest_category(note)
    if suggestion:
        st.caption(f"Suggested category: {suggestion.name}")

    with st.form("add_expense", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            amount = st.text_input("Amount (₹) *", placeholder="0")
            payment_method = st.selectbox(
                "Paid with",
                options=list(PaymentMethod),
                format_func=lambda x: x.value,
            )
        with col2:
            expense_date = st.date_input("Date *", value=default_expense_date())
            category_id = st.selectbox(
                "Category",
                options=[None] + category_ids,
                index=category_ids.index(suggestion.id) + 1 if suggestion else 0,
                format_func=lambda x: "Choose..." if x is None else category_label(tracker, x),
            )
        submitted = st.form_submit_button("💾 Save Expense", type="primary")

    if submitted:
        draft = ExpenseDraft(
            amount=amount,
            payment_method=payment_method,
            category_id=category_id,
            note=note,
            expense_date=expense_date,
        )
        try:
            tracker.add_expense(draft)
            st.rerun()
        except InvalidInputError as e:
            st.error(ExpenseValidator.get_user_friendly_summary(e.result))
        except StorageError as e:
            st.error(f"Failed to save: {e}")


def render_expenses_page(tracker: ExpenseTracker):
    """Render the expenses list with search, filter, edit and delete."""
    st.title("📋 Expenses")
    today = date.today()

    col1, col2 = st.columns(2)
    with col1:
        search_term = st.text_input("Search", placeholder="Note or amount")
    with col2:
        category_filter = st.selectbox(
            "Filter by Category",
            options=[None] + tracker.catalog.ids(),
            format_func=lambda x: "All Categories" if x is None else category_label(tracker, x),
        )

    st.markdown("---")

    groups = tracker.expenses_by_day(search_term, category_filter)
    if not groups:
        st.info("No expenses found.")
        return

    for day, expenses in groups:
        st.subheader(format_relative_date(day, today))
        for expense in expenses:
            title = f"{category_label(tracker, expense.category_id)} · {format_inr(expense.amount)}"
            if expense.note:
                title += f" · {expense.note}"
            with st.expander(title):
                render_edit_form(tracker, expense)


def render_edit_form(tracker: ExpenseTracker, expense):
    """Edit / delete controls for one expense."""
    category_ids = tracker.catalog.ids()

    with st.form(f"edit_{expense.id}"):
        amount = st.text_input("Amount (₹)", value=str(expense.amount))
        payment_method = st.selectbox(
            "Paid with",
            options=list(PaymentMethod),
            index=list(PaymentMethod).index(expense.payment_method),
            format_func=lambda x: x.value,
        )
        category_id = st.selectbox(
            "Category",
            options=category_ids,
            index=category_ids.index(expense.category_id) if expense.category_id in category_ids else 0,
            format_func=lambda x: category_label(tracker, x),
        )
        expense_date = st.date_input("Date", value=expense.expense_date)
        note = st.text_input(
            "Note",
            value=expense.note or "",
            max_chars=NOTE_MAX_LENGTH,
        )

        col1, col2 = st.columns(2)
        with col1:
            save = st.form_submit_button("✅ Save Changes", type="primary")
        with col2:
            delete = st.form_submit_button("🗑️ Delete")

    if save:
        draft = ExpenseDraft(
            amount=amount,
            payment_method=payment_method,
            category_id=category_id,
            note=note,
            expense_date=expense_date,
        )
        try:
            tracker.update_expense(expense.id, draft)
            st.rerun()
        except InvalidInputError as e:
            st.error(ExpenseValidator.get_user_friendly_summary(e.result))
        except StorageError as e:
            st.error(f"Failed to save: {e}")

    if delete:
        try:
            tracker.delete_expense(expense.id)
            st.rerun()
        except StorageError as e:
            st.error(f"Failed to delete: {e}")


def render_budgets_page(tracker: ExpenseTracker):
    """Render the budget manager."""
    st.title("🎯 Budgets")
    st.markdown("Set a monthly limit for any category.")

    for row in tracker.budget_overview(date.today()):
        category = row.category
        with st.container(border=True):
            st.markdown(f"**{category.name}**: spent {format_inr(row.spent)}")

            if row.has_budget:
                usage = row.usage
                st.progress(min(usage.percentage / 100, 1.0))
                if usage.status.value == "over_limit":
                    st.error(f"Over by {format_inr(usage.overspent_by)}")
                elif usage.status.value == "near_limit":
                    st.warning(f"{format_inr(usage.remaining)} left")
                else:
                    st.caption(
                        f"{format_percentage(usage.percentage)} of "
                        f"{format_inr(usage.budget.monthly_limit)} used"
                    )

            with st.form(f"budget_{category.id}"):
                limit = st.text_input(
                    "Monthly limit (₹)",
                    value=str(row.usage.budget.monthly_limit) if row.has_budget else "",
                )
                if st.form_submit_button("Set Budget"):
                    try:
                        tracker.set_budget(category.id, limit)
                        st.rerun()
                    except InvalidInputError as e:
                        st.error(ExpenseValidator.get_user_friendly_summary(e.result))
                    except StorageError as e:
                        st.error(f"Failed to save: {e}")


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")

    status = validate_all_settings()

    sections = [
        ("Storage", "storage"),
        ("Application", "app"),
    ]

    for name, key in sections:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "Settings are read from environment variables or a `.env` file, "
        "e.g. `STORAGE_BACKEND=json` and `STORAGE_DATA_DIR=~/.expense_tracker`."
    )


if __name__ == "__main__":
    main()
