"""Website document editor."""
from landingpad.editor.defaults import get_default_content, DEFAULT_SETTINGS
from landingpad.editor.document import Element, Page, Project, WebsiteSettings
from landingpad.editor.store import EditorStore

__all__ = [
    "get_default_content",
    "DEFAULT_SETTINGS",
    "Element",
    "Page",
    "Project",
    "WebsiteSettings",
    "EditorStore",
]
