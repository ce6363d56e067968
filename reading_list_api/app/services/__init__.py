"""
Service layer.

The book store encapsulates the reading list and its validation rules
so that API handlers stay thin.
"""
