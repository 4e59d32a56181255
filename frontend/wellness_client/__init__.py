"""Python client for the wellness sessions API: auth context, editor, views."""
from wellness_client.api import ApiError, WellnessApi
from wellness_client.auth_context import AuthContext, FileTokenStore, MemoryTokenStore
from wellness_client.debounce import Debouncer
from wellness_client.editor import AutoSaveStatus, SessionEditor, SessionForm
from wellness_client.views import BrowseView, ManageView

__all__ = [
    "ApiError", "WellnessApi",
    "AuthContext", "FileTokenStore", "MemoryTokenStore",
    "Debouncer",
    "AutoSaveStatus", "SessionEditor", "SessionForm",
    "BrowseView", "ManageView",
]
