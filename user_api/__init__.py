"""
User registry API.

A FastAPI service exposing CRUD operations over a single User resource, with
field grammar validation, collection uniqueness checks, pagination, filtering
and sorting.
"""

__version__ = "0.1.0"
