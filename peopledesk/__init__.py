"""
PeopleDesk - HR Data Layer

Record stores, query engine, lifecycle rules and resource facades for
payroll, leave, attendance, benefits, assets and expenses.
"""

__version__ = "1.0.0"
