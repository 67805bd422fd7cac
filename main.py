"""
User API
========
Simple entry point for running the application with ``python main.py``.

The FastAPI application is defined in user_api/main.py and imported here.
"""

from user_api.main import app, run

__all__ = ["app"]

if __name__ == "__main__":
    run()
