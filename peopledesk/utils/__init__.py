"""
PeopleDesk - Utilities Package
"""
