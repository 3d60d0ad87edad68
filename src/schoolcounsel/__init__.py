"""
SchoolCounsel: multi-tenant school counselling records API.
"""

__version__ = "0.1.0"
