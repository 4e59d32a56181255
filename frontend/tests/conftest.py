"""
The end-to-end client test talks to the real app; give it an in-memory
SQLite database before anything imports wellness_api.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"

from wellness_api.db import Base, engine  # noqa: E402
from wellness_api import models  # noqa: E402,F401

Base.metadata.create_all(bind=engine)
