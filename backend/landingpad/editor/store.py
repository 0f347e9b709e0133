"""Editor state engine for a single website document.

The store owns one ``Project`` plus the editor focus state (current page,
selected element, open panel) and a bounded undo/redo history made of whole
project snapshots. Every mutating operation works on a deep copy of the live
project and swaps it in as a new object, so a snapshot on either stack is never
shared with the live state.

Mutations that would break a document invariant (deleting the home page,
touching an unknown id, reordering out of range) are silent no-ops: they
return ``False`` and leave both the project and the history untouched.

The store is not thread-safe. It expects one caller driving it, the way a
single editor tab does; callers that share it across tasks must serialize
mutations themselves.
"""
import copy
import re
import uuid
from typing import List, Optional

from landingpad.config import settings
from landingpad.editor.defaults import get_default_content
from landingpad.editor.document import Element, Page, Project, apply_updates
from landingpad.editor.persistence import ProjectPersistence
from landingpad.utils.exceptions import ExternalServiceError, SaveFailedError
from landingpad.utils.logger import logger


def page_slug(name: str) -> str:
    """Lowercase the name and collapse each non-alphanumeric run into '-'."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower())


class EditorStore:
    """In-memory editing state for one project."""

    def __init__(
        self,
        persistence: Optional[ProjectPersistence] = None,
        history_limit: Optional[int] = None,
    ):
        self.persistence = persistence
        self.history_limit = settings.editor_history_limit if history_limit is None else history_limit

        self.project: Optional[Project] = None
        self.current_page_id: Optional[str] = None
        self.selected_element_id: Optional[str] = None
        self.open_panel: Optional[str] = None
        self.undo_stack: List[Project] = []
        self.redo_stack: List[Project] = []
        self.is_saving = False
        self.last_save_error: Optional[str] = None

    # Focus state

    def set_project(self, project: Project) -> None:
        """Load a project, resetting focus and history."""
        self.project = project
        self.current_page_id = project.pages[0].id if project.pages else None
        self.selected_element_id = None
        self.undo_stack = []
        self.redo_stack = []

    def set_current_page(self, page_id: str) -> None:
        self.current_page_id = page_id
        self.selected_element_id = None

    def select_element(self, element_id: Optional[str]) -> None:
        self.selected_element_id = element_id

    def set_open_panel(self, panel: Optional[str]) -> None:
        self.open_panel = panel

    @property
    def current_page(self) -> Optional[Page]:
        if self.project is None or self.current_page_id is None:
            return None
        return self.project.find_page(self.current_page_id)

    @property
    def selected_element(self) -> Optional[Element]:
        page = self.current_page
        if page is None or self.selected_element_id is None:
            return None
        return page.find_element(self.selected_element_id)

    @property
    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    # History

    def _draft(self) -> Project:
        return copy.deepcopy(self.project)

    def _commit(self, project: Project) -> None:
        self.undo_stack.append(self.project)
        if len(self.undo_stack) > self.history_limit:
            del self.undo_stack[0]
        self.redo_stack = []
        self.project = project

    def undo(self) -> bool:
        if not self.undo_stack or self.project is None:
            return False
        previous = self.undo_stack.pop()
        self.redo_stack.insert(0, self.project)
        self.project = copy.deepcopy(previous)
        return True

    def redo(self) -> bool:
        if not self.redo_stack or self.project is None:
            return False
        following = self.redo_stack.pop(0)
        self.undo_stack.append(self.project)
        self.project = copy.deepcopy(following)
        return True

    # Project

    def update_project_settings(self, partial: dict) -> bool:
        """Deep-merge a partial settings dict (document keys, e.g. ``globalStyles``)."""
        if self.project is None:
            return False
        project = self._draft()
        project.settings = project.settings.merged(partial)
        self._commit(project)
        return True

    # Pages

    def add_page(self, name: str) -> Optional[str]:
        """Append a page and focus it. Returns the new page id."""
        if self.project is None:
            return None
        project = self._draft()
        page = Page(
            id=str(uuid.uuid4()),
            name=name,
            slug=page_slug(name),
            is_home=len(project.pages) == 0,
        )
        project.pages.append(page)
        self._commit(project)
        self.current_page_id = page.id
        return page.id

    def update_page(self, page_id: str, updates: dict) -> bool:
        """Shallow-merge page attributes. The id, elements and home flag are not updatable here."""
        if self.project is None or self.project.find_page(page_id) is None:
            return False
        project = self._draft()
        project.pages = [
            apply_updates(page, updates, exclude=("id", "elements", "is_home"))
            if page.id == page_id else page
            for page in project.pages
        ]
        self._commit(project)
        return True

    def delete_page(self, page_id: str) -> bool:
        if self.project is None or len(self.project.pages) <= 1:
            return False
        target = self.project.find_page(page_id)
        if target is None or target.is_home:
            return False

        project = self._draft()
        project.pages = [page for page in project.pages if page.id != page_id]
        self._commit(project)
        if self.current_page_id == page_id:
            self.current_page_id = project.pages[0].id
        self.selected_element_id = None
        return True

    def set_home_page(self, page_id: str) -> bool:
        if self.project is None or self.project.find_page(page_id) is None:
            return False
        project = self._draft()
        for page in project.pages:
            page.is_home = page.id == page_id
        self._commit(project)
        return True

    # Elements

    def add_element(self, page_id: str, element_type: str, position: Optional[int] = None) -> Optional[str]:
        """Append an element with default content and select it. Returns the new element id."""
        if self.project is None:
            return None
        project = self._draft()
        page = project.find_page(page_id)
        if page is None:
            return None

        element = Element(
            id=str(uuid.uuid4()),
            type=element_type,
            content=get_default_content(element_type),
            position=page.next_position() if position is None else position,
        )
        page.elements.append(element)
        self._commit(project)
        self.selected_element_id = element.id
        return element.id

    def update_element(self, page_id: str, element_id: str, updates: dict) -> bool:
        if self.project is None:
            return False
        page = self.project.find_page(page_id)
        if page is None or page.find_element(element_id) is None:
            return False

        project = self._draft()
        page = project.find_page(page_id)
        page.elements = [
            apply_updates(element, updates, exclude=("id",)) if element.id == element_id else element
            for element in page.elements
        ]
        self._commit(project)
        return True

    def delete_element(self, page_id: str, element_id: str) -> bool:
        if self.project is None:
            return False
        page = self.project.find_page(page_id)
        if page is None or page.find_element(element_id) is None:
            return False

        project = self._draft()
        page = project.find_page(page_id)
        page.elements = [e for e in page.elements if e.id != element_id]
        self._commit(project)
        if self.selected_element_id == element_id:
            self.selected_element_id = None
        return True

    def reorder_elements(self, page_id: str, start_index: int, end_index: int) -> bool:
        """Move the element at ``start_index`` (by position order) to ``end_index``.

        Positions on the page are rewritten to 0..N-1 afterwards.
        """
        if self.project is None:
            return False
        page = self.project.find_page(page_id)
        if page is None:
            return False
        count = len(page.elements)
        if not (0 <= start_index < count and 0 <= end_index < count):
            return False

        project = self._draft()
        page = project.find_page(page_id)
        ordered = page.sorted_elements()
        moved = ordered.pop(start_index)
        ordered.insert(end_index, moved)
        for index, element in enumerate(ordered):
            element.position = index
        page.elements = ordered
        self._commit(project)
        return True

    # Persistence

    async def save_project(self) -> None:
        """
        Persist the current project through the persistence collaborator.

        Edits made while the save is in flight stay in the store and go out
        with the next save. A failure leaves the project untouched.

        Raises:
            SaveFailedError: If there is no collaborator or it failed
        """
        if self.project is None:
            return
        if self.persistence is None:
            raise SaveFailedError("No persistence backend is configured")

        snapshot = copy.deepcopy(self.project)
        self.is_saving = True
        try:
            await self.persistence.save_project(snapshot)
            self.last_save_error = None
            logger.info(f"Project saved: {snapshot.id}")
        except ExternalServiceError as e:
            self.last_save_error = e.message
            logger.error(f"Error saving project {snapshot.id}: {e.message}")
            raise SaveFailedError(f"Could not save project: {e.message}") from e
        finally:
            self.is_saving = False

    async def load_project(self, project_id: str) -> Project:
        """Fetch a project through the collaborator and make it the live document."""
        if self.persistence is None:
            raise ExternalServiceError("No persistence backend is configured")
        project = await self.persistence.load_project(project_id)
        self.set_project(project)
        return project
