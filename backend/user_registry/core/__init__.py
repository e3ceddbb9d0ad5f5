"""
Core module - Domain errors, date helpers and field validation.
"""
