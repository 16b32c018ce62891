"""
Streamlit weekly budget dashboard.
"""
import streamlit as st
import pandas as pd
import plotly.express as px
from datetime import date
import logging
import os
import sys

# Add parent directory to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from budget.models import Frequency
from budget.recurrence import parse_date
from budget.bills import paid_this_month, total_amount, unpaid_due_this_month
from budget.income import income_total, monthly_income, next_pay_date
from budget.planner import build_dashboard
from budget.windows import is_in_current_month
from budget.savings import goal_progress, remaining_to_target, total_savings
from budget.transactions import (
    average_daily_spending, filter_by_category, filter_by_search_query,
    group_transactions_by_date, monthly_spending, today_spending,
    transaction_count_this_month
)
from app.config import configure_logging, load_settings
from app.state import FinanceState, create_store
from app.utils import days_until_label, format_currency, format_display_date, format_friendly_date
from db.store import RecordKind, StoreError
from db.supabase_client import SupabaseRecordStore

logger = logging.getLogger(__name__)

BILL_FREQUENCIES = [f.value for f in Frequency]
INCOME_FREQUENCIES = [
    Frequency.WEEKLY.value, Frequency.FORTNIGHTLY.value,
    Frequency.MONTHLY.value, Frequency.ONE_TIME.value
]
ALL_CATEGORIES = "All"

# Page configuration
st.set_page_config(
    page_title="Moniva",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded"
)


def init_session_state():
    """Create the finance state once per session and load its records."""
    if 'finance' not in st.session_state:
        settings = load_settings()
        configure_logging(settings.log_level)
        st.session_state.finance = FinanceState(create_store(settings))
    try:
        st.session_state.finance.load_initial_data()
    except StoreError as e:
        st.error(f"Error loading data: {str(e)}")


def run_write(action, *args) -> bool:
    """Run a state change and report store failures in the page."""
    try:
        action(*args)
        return True
    except StoreError as e:
        st.error(f"Could not save change: {str(e)}")
        return False


def show_dashboard_page(finance: FinanceState):
    """Show weekly budget dashboard."""
    today = date.today()
    records = finance.snapshot()
    bills = records[RecordKind.BILLS]
    transactions = records[RecordKind.TRANSACTIONS]

    summary = build_dashboard(records[RecordKind.INCOMES], bills, transactions, today)
    plan = summary.plan

    st.header("📊 This Week")
    st.caption(f"Week {summary.week_of_month} of the month · {summary.week_range}")

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Income This Week", format_currency(summary.weekly_income))
    with col2:
        st.metric("Bills Due This Week", format_currency(summary.bills_due_this_week_total))
    with col3:
        st.metric("Spent This Week", format_currency(summary.weekly_spending))
    with col4:
        st.metric("Available", format_currency(summary.available_balance))

    st.divider()

    st.subheader("Weekly Bill Target")
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Set Aside", format_currency(plan.final_weekly_target))
    with col2:
        st.metric("Monthly Average / Week", format_currency(plan.weekly_average_target))
    with col3:
        st.metric("Buffer for Later Bills", format_currency(plan.buffer_contribution))

    if plan.bills_due_this_week:
        df_week = pd.DataFrame([
            {
                "Bill": bill.description,
                "Amount": format_currency(bill.amount),
                "Due": bill.due_date.strftime("%d/%m/%Y"),
                "Status": "Overdue" if bill.is_overdue else days_until_label(bill.due_date, today)
            }
            for bill in plan.bills_due_this_week
        ])
        st.dataframe(df_week, use_container_width=True, hide_index=True)
    else:
        st.info("No bills due this week.")

    st.divider()

    st.subheader("Spending")
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Today", format_currency(today_spending(transactions, today)))
    with col2:
        st.metric("This Month", format_currency(monthly_spending(transactions, today)))
    with col3:
        st.metric("Daily Average", format_currency(average_daily_spending(transactions, today)))
    with col4:
        st.metric("Transactions This Month", transaction_count_this_month(transactions, today))

    month_rows = [
        {"Category": t.category or "Uncategorised", "Amount": float(t.amount)}
        for t in transactions
        if parse_date(t.date) and is_in_current_month(parse_date(t.date), today)
    ]
    if month_rows:
        df_spend = pd.DataFrame(month_rows).groupby("Category", as_index=False).sum()
        fig = px.pie(df_spend, values="Amount", names="Category", title="Spending by Category This Month")
        st.plotly_chart(fig, use_container_width=True)


def show_bills_page(finance: FinanceState):
    """Show this month's bills with pay, edit, delete and add forms."""
    today = date.today()
    st.header("🧾 Bills")

    upcoming = unpaid_due_this_month(finance.bills, today)
    paid = paid_this_month(finance.bills, today)

    col1, col2 = st.columns(2)
    with col1:
        st.metric("Still to Pay This Month", format_currency(total_amount(upcoming)))
    with col2:
        st.metric("Paid This Month", format_currency(total_amount(paid)))

    if upcoming:
        df_bills = pd.DataFrame([
            {
                "Bill": bill.description,
                "Frequency": bill.frequency,
                "Amount": format_currency(bill.amount),
                "Due": format_display_date(bill.due_date),
                "Status": "Overdue" if bill.is_overdue else days_until_label(bill.due_date, today)
            }
            for bill in upcoming
        ])
        st.dataframe(df_bills, use_container_width=True, hide_index=True)
    else:
        st.info("Nothing left to pay this month.")

    if finance.bills:
        labels = {bill.id: f"{bill.description} ({format_currency(bill.amount)})" for bill in finance.bills}
        selected = st.selectbox("Bill", list(labels), format_func=labels.get, key="bill_select")
        bill = next(b for b in finance.bills if b.id == selected)

        col1, col2 = st.columns(2)
        with col1:
            if st.button("Mark Paid", key=f"paid_{bill.id}"):
                if run_write(finance.mark_bill_paid, bill.id):
                    st.rerun()
        with col2:
            if st.button("🗑️ Delete Bill", key=f"del_bill_{bill.id}"):
                if run_write(finance.remove, RecordKind.BILLS, bill.id):
                    st.rerun()

        with st.expander("Edit Bill"):
            with st.form(f"edit_bill_{bill.id}"):
                description = st.text_input("Description", value=bill.description)
                amount = st.number_input("Amount", min_value=0.0, step=10.0, format="%.2f",
                                         value=float(bill.amount))
                if st.form_submit_button("Update Bill"):
                    fields = {"description": description, "amount": amount}
                    if run_write(finance.update, RecordKind.BILLS, bill.id, fields):
                        st.rerun()

    with st.expander("Add Bill"):
        with st.form("add_bill"):
            description = st.text_input("Description")
            amount = st.number_input("Amount", min_value=0.0, step=10.0, format="%.2f")
            frequency = st.selectbox("Frequency", BILL_FREQUENCIES, index=2)
            start_date = st.date_input("First Due Date", value=today)
            if st.form_submit_button("Save Bill"):
                fields = {
                    "description": description,
                    "amount": amount,
                    "frequency": frequency,
                    "start_date": start_date.isoformat(),
                    "status": "unpaid"
                }
                if run_write(finance.add, RecordKind.BILLS, fields):
                    st.success(f"Added {description}")
                    st.rerun()


def show_income_page(finance: FinanceState):
    """Show incomes and the add-income form."""
    today = date.today()
    st.header("💵 Income")

    st.metric("Expected This Month", format_currency(income_total(monthly_income(finance.incomes, today))))

    for income in finance.incomes:
        pay_date = next_pay_date(income, today)
        col1, col2, col3, col4 = st.columns([3, 2, 2, 1])
        with col1:
            st.write(f"**{income.description}** ({income.frequency})")
        with col2:
            st.write(format_currency(income.amount))
        with col3:
            st.write(days_until_label(pay_date, today) if pay_date else "Invalid start date")
        with col4:
            if st.button("🗑️", key=f"del_income_{income.id}"):
                if run_write(finance.remove, RecordKind.INCOMES, income.id):
                    st.rerun()

    with st.expander("Add Income"):
        with st.form("add_income"):
            description = st.text_input("Description")
            amount = st.number_input("Amount", min_value=0.0, step=100.0, format="%.2f")
            frequency = st.selectbox("Frequency", INCOME_FREQUENCIES, index=1)
            start_date = st.date_input("First Pay Date", value=today)
            received = st.date_input("Last Received", value=today)
            if st.form_submit_button("Save Income"):
                fields = {
                    "description": description,
                    "amount": amount,
                    "frequency": frequency,
                    "start_date": start_date.isoformat(),
                    "date": received.isoformat()
                }
                if run_write(finance.add, RecordKind.INCOMES, fields):
                    st.rerun()


def show_transactions_page(finance: FinanceState):
    """Show transactions grouped by day, with search and category filters."""
    today = date.today()
    st.header("💳 Transactions")

    categories = sorted({t.category for t in finance.transactions if t.category})
    col1, col2 = st.columns([3, 1])
    with col1:
        query = st.text_input("Search")
    with col2:
        category = st.selectbox("Category", [ALL_CATEGORIES] + categories)

    shown = filter_by_search_query(finance.transactions, query)
    if category != ALL_CATEGORIES:
        shown = filter_by_category(shown, category)

    for day, items in group_transactions_by_date(shown):
        st.subheader(format_friendly_date(day, today) or day)
        for t in items:
            col1, col2, col3, col4 = st.columns([3, 2, 2, 1])
            with col1:
                st.write(t.description)
            with col2:
                st.write(t.category)
            with col3:
                st.write(format_currency(t.amount))
            with col4:
                if st.button("🗑️", key=f"del_transaction_{t.id}"):
                    if run_write(finance.remove, RecordKind.TRANSACTIONS, t.id):
                        st.rerun()

    with st.expander("Add Transaction"):
        with st.form("add_transaction"):
            description = st.text_input("Description")
            amount = st.number_input("Amount", min_value=0.0, step=1.0, format="%.2f")
            category = st.text_input("Category")
            spent_on = st.date_input("Date", value=today)
            if st.form_submit_button("Save Transaction"):
                fields = {
                    "description": description,
                    "amount": amount,
                    "category": category,
                    "date": spent_on.isoformat()
                }
                if run_write(finance.add, RecordKind.TRANSACTIONS, fields):
                    st.rerun()


def show_savings_page(finance: FinanceState):
    """Show savings goals."""
    st.header("🏦 Savings")
    st.metric("Total Saved", format_currency(total_savings(finance.savings)))

    for goal in finance.savings:
        col1, col2 = st.columns([5, 1])
        with col1:
            st.write(
                f"**{goal.name}**: {format_currency(goal.current_amount)} of "
                f"{format_currency(goal.target_amount)} "
                f"({format_currency(remaining_to_target(goal))} to go)"
            )
            st.progress(float(goal_progress(goal)))
        with col2:
            if st.button("🗑️", key=f"del_goal_{goal.id}"):
                if run_write(finance.remove, RecordKind.SAVINGS, goal.id):
                    st.rerun()

    with st.expander("Add Savings Goal"):
        with st.form("add_savings"):
            name = st.text_input("Name")
            target = st.number_input("Target", min_value=0.0, step=100.0, format="%.2f")
            current = st.number_input("Saved So Far", min_value=0.0, step=10.0, format="%.2f")
            if st.form_submit_button("Save Goal"):
                fields = {"name": name, "target_amount": target, "current_amount": current}
                if run_write(finance.add, RecordKind.SAVINGS, fields):
                    st.rerun()


def main():
    """Main application."""
    init_session_state()
    finance = st.session_state.finance

    st.title("💰 Moniva")

    with st.sidebar:
        st.title("Navigation")
        page = st.radio("Go to", ["Dashboard", "Bills", "Income", "Transactions", "Savings"])

        st.divider()
        if st.button("Refresh"):
            try:
                finance.load_initial_data(force=True)
            except StoreError as e:
                st.error(f"Error loading data: {str(e)}")

        if isinstance(finance.store, SupabaseRecordStore) and st.button("Test Connection"):
            if finance.store.test_connection():
                st.success("Connected to Supabase")
            else:
                st.error("Could not reach Supabase")

    if page == "Dashboard":
        show_dashboard_page(finance)
    elif page == "Bills":
        show_bills_page(finance)
    elif page == "Income":
        show_income_page(finance)
    elif page == "Transactions":
        show_transactions_page(finance)
    elif page == "Savings":
        show_savings_page(finance)


if __name__ == "__main__":
    main()
