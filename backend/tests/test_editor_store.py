import pytest

from landingpad.constants import ELEMENT_TYPES
from landingpad.editor import EditorStore, Project, get_default_content
from landingpad.editor.defaults import DEFAULT_SETTINGS, default_pages
from landingpad.editor.document import Element
from landingpad.editor.store import page_slug
from landingpad.utils.exceptions import ExternalServiceError, SaveFailedError


def make_store(**kwargs) -> EditorStore:
    store = EditorStore(**kwargs)
    store.set_project(Project.from_dict({"id": "site-1", "name": "Acme", "pages": default_pages()}))
    return store


def home_count(store: EditorStore) -> int:
    return sum(1 for p in store.project.pages if p.is_home)


def test_set_project_fills_settings_and_focuses_first_page() -> None:
    store = make_store()
    assert store.project.settings.to_dict() == DEFAULT_SETTINGS
    assert store.current_page_id == "home"
    assert not store.can_undo
    assert not store.can_redo


def test_page_slug_collapses_non_alphanumeric_runs() -> None:
    assert page_slug("About Us") == "about-us"
    assert page_slug("Prices & Plans!") == "prices-plans-"


def test_add_page_is_not_home_and_home_cannot_be_deleted() -> None:
    store = make_store()
    about_id = store.add_page("About")

    about = store.project.find_page(about_id)
    assert about.is_home is False
    assert about.slug == "about"
    assert store.current_page_id == about_id

    before = store.project.to_dict()
    undo_depth = len(store.undo_stack)
    assert store.delete_page("home") is False
    assert store.project.to_dict() == before
    assert len(store.undo_stack) == undo_depth


def test_last_page_cannot_be_deleted() -> None:
    store = make_store()
    store.set_home_page("home")
    assert store.delete_page("home") is False
    assert len(store.project.pages) == 1


def test_delete_page_moves_focus_and_clears_selection() -> None:
    store = make_store()
    about_id = store.add_page("About")
    store.add_element(about_id, "text")

    assert store.delete_page(about_id) is True
    assert store.current_page_id == "home"
    assert store.selected_element_id is None


def test_set_home_page_keeps_exactly_one_home() -> None:
    store = make_store()
    about_id = store.add_page("About")
    store.add_page("Contact")

    assert store.set_home_page(about_id) is True
    assert home_count(store) == 1
    assert store.project.home_page().id == about_id

    assert store.set_home_page("missing") is False
    assert home_count(store) == 1


def test_update_page_cannot_change_identity_or_home_flag() -> None:
    store = make_store()
    assert store.update_page("home", {"name": "Start", "id": "other", "is_home": False}) is True
    page = store.project.pages[0]
    assert page.name == "Start"
    assert page.id == "home"
    assert page.is_home is True


@pytest.mark.parametrize("element_type", ELEMENT_TYPES)
def test_every_element_type_has_default_content(element_type) -> None:
    store = make_store()
    element_id = store.add_element("home", element_type)
    element = store.project.pages[0].find_element(element_id)
    assert element.content
    assert element.content == get_default_content(element_type)
    assert store.selected_element_id == element_id


def test_default_content_is_a_fresh_copy() -> None:
    first = get_default_content("features")
    first["features"].clear()
    assert len(get_default_content("features")["features"]) == 3
    assert get_default_content("unknown") == {}


def test_add_element_to_unknown_page_is_rejected() -> None:
    store = make_store()
    assert store.add_element("missing", "hero") is None
    assert not store.can_undo


def test_reorder_moves_element_and_keeps_positions_dense() -> None:
    store = make_store()
    page = store.project.pages[0]
    page.elements = [
        Element(id="elem1", type="text", content={}, position=1),
        Element(id="elem2", type="image", content={}, position=2),
    ]
    hero_id = store.add_element("home", "hero", position=0)

    assert store.reorder_elements("home", 0, 2) is True

    elements = store.project.pages[0].sorted_elements()
    assert [e.id for e in elements] == ["elem1", "elem2", hero_id]
    assert [e.position for e in elements] == [0, 1, 2]


def test_reorder_out_of_range_is_a_no_op() -> None:
    store = make_store()
    store.add_element("home", "hero")
    depth = len(store.undo_stack)
    assert store.reorder_elements("home", 0, 5) is False
    assert len(store.undo_stack) == depth


def test_update_element_replaces_content_whole() -> None:
    store = make_store()
    element_id = store.add_element("home", "hero")
    store.update_element("home", element_id, {"content": {"headline": "Fresh bread"}, "id": "hijack"})

    element = store.project.pages[0].find_element(element_id)
    assert element.content == {"headline": "Fresh bread"}


def test_update_project_settings_deep_merges() -> None:
    store = make_store()
    store.update_project_settings({"colors": {"primary": "#FF0000"}})
    colors = store.project.settings.colors
    assert colors["primary"] == "#FF0000"
    assert colors["accent"] == DEFAULT_SETTINGS["colors"]["accent"]
    assert store.project.settings.fonts == DEFAULT_SETTINGS["fonts"]


def test_undo_then_redo_restores_state() -> None:
    store = make_store()
    store.add_page("About")
    after = store.project.to_dict()

    assert store.undo() is True
    assert len(store.project.pages) == 1
    assert store.redo() is True
    assert store.project.to_dict() == after


def test_undo_after_five_updates_returns_to_second() -> None:
    store = make_store()
    element_id = store.add_element("home", "text")
    states = []
    for n in range(1, 6):
        store.update_element("home", element_id, {"content": {"headline": f"Version {n}"}})
        states.append(store.project.pages[0].find_element(element_id).content)

    for _ in range(3):
        store.undo()

    assert store.project.pages[0].find_element(element_id).content == states[1]


def test_new_mutation_clears_redo() -> None:
    store = make_store()
    store.add_page("About")
    store.undo()
    assert store.can_redo
    store.add_page("Contact")
    assert not store.can_redo


def test_history_is_bounded() -> None:
    store = make_store(history_limit=3)
    for n in range(5):
        store.add_page(f"Page {n}")
    assert len(store.undo_stack) == 3


def test_undo_snapshots_are_not_shared_with_live_project() -> None:
    store = make_store()
    element_id = store.add_element("home", "hero")
    store.update_element("home", element_id, {"content": {"headline": "Fresh bread"}})

    store.project.pages[0].find_element(element_id).content["headline"] = "changed in place"
    store.undo()

    restored = store.project.pages[0].find_element(element_id)
    assert restored.content["headline"] == get_default_content("hero")["headline"]


def test_set_current_page_clears_selection() -> None:
    store = make_store()
    store.add_element("home", "hero")
    about_id = store.add_page("About")
    store.set_current_page(about_id)
    assert store.selected_element_id is None
    assert store.current_page.id == about_id


def test_undo_and_redo_walk_a_mixed_edit_history() -> None:
    store = make_store()
    states = [store.project.to_dict()]
    ids = {}

    def record(result) -> None:
        assert result not in (False, None)
        states.append(store.project.to_dict())

    record(store.update_project_settings({"colors": {"primary": "#111111"}}))
    ids["about"] = store.add_page("About")
    record(ids["about"])
    ids["hero"] = store.add_element(ids["about"], "hero")
    record(ids["hero"])
    ids["text"] = store.add_element(ids["about"], "text")
    record(ids["text"])
    record(store.update_element(ids["about"], ids["hero"], {"content": {"headline": "Hi"}}))
    record(store.reorder_elements(ids["about"], 0, 1))
    record(store.delete_element(ids["about"], ids["text"]))
    ids["contact"] = store.add_page("Contact")
    record(ids["contact"])
    record(store.set_home_page(ids["contact"]))
    record(store.update_page("home", {"name": "Start"}))
    record(store.delete_page("home"))

    steps = len(states) - 1
    for expected in reversed(states[:-1]):
        assert store.undo() is True
        assert store.project.to_dict() == expected
    assert store.undo() is False
    assert store.project.to_dict() == states[0]

    for expected in states[1:]:
        assert store.redo() is True
        assert store.project.to_dict() == expected
    assert store.redo() is False
    assert len(store.undo_stack) == steps


def test_exactly_one_home_page_through_mixed_page_edits() -> None:
    store = make_store()
    about_id = store.add_page("About")
    contact_id = store.add_page("Contact")
    assert home_count(store) == 1

    store.set_home_page(contact_id)
    assert home_count(store) == 1
    assert store.delete_page(contact_id) is False
    assert store.delete_page("home") is True
    assert home_count(store) == 1

    pricing_id = store.add_page("Pricing")
    store.set_home_page(pricing_id)
    assert store.delete_page(contact_id) is True
    assert store.delete_page(about_id) is True
    assert [p.id for p in store.project.pages] == [pricing_id]
    assert store.delete_page(pricing_id) is False
    assert home_count(store) == 1

    while store.undo():
        assert home_count(store) == 1
    while store.redo():
        assert home_count(store) == 1


def test_zero_history_limit_keeps_no_snapshots() -> None:
    store = make_store(history_limit=0)
    store.add_page("About")
    assert store.history_limit == 0
    assert not store.can_undo
    assert store.undo() is False


class RecordingPersistence:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.saved = []

    async def save_project(self, project):
        if self.fail:
            raise ExternalServiceError("Save rejected with status 500")
        self.saved.append(project.to_dict())

    async def load_project(self, project_id):
        return Project.from_dict({"id": project_id, "name": "Loaded", "pages": default_pages()})


@pytest.mark.asyncio
async def test_save_project_sends_snapshot() -> None:
    persistence = RecordingPersistence()
    store = make_store(persistence=persistence)
    store.add_page("About")

    await store.save_project()

    assert persistence.saved == [store.project.to_dict()]
    assert store.is_saving is False
    assert store.last_save_error is None


@pytest.mark.asyncio
async def test_failed_save_keeps_local_edits() -> None:
    store = make_store(persistence=RecordingPersistence(fail=True))
    store.add_page("About")
    before = store.project.to_dict()

    with pytest.raises(SaveFailedError) as exc_info:
        await store.save_project()

    assert store.project.to_dict() == before
    assert store.is_saving is False
    assert "500" in store.last_save_error
    assert exc_info.value.user_message.endswith("Your local edits are safe.")


@pytest.mark.asyncio
async def test_save_without_persistence_fails() -> None:
    store = make_store()
    with pytest.raises(SaveFailedError):
        await store.save_project()


@pytest.mark.asyncio
async def test_load_project_resets_history() -> None:
    store = make_store(persistence=RecordingPersistence())
    store.add_page("About")
    project = await store.load_project("site-2")
    assert project.name == "Loaded"
    assert store.project.id == "site-2"
    assert not store.can_undo
