"""
Point the app at a throwaway in-memory SQLite database and create the schema
before any test module imports the app.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"

from wellness_api.db import Base, engine  # noqa: E402
from wellness_api import models  # noqa: E402,F401

Base.metadata.create_all(bind=engine)
