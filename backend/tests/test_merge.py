from landingpad.editor.merge import deep_merge, shallow_merge


def test_deep_merge_keeps_nested_siblings() -> None:
    base = {"colors": {"primary": "#000000", "accent": "#111111"}, "fonts": {"body": "Inter"}}
    merged = deep_merge(base, {"colors": {"primary": "#FF0000"}})
    assert merged == {
        "colors": {"primary": "#FF0000", "accent": "#111111"},
        "fonts": {"body": "Inter"},
    }


def test_deep_merge_does_not_mutate_inputs() -> None:
    base = {"colors": {"primary": "#000000"}}
    override = {"colors": {"primary": "#FF0000"}}
    deep_merge(base, override)
    assert base == {"colors": {"primary": "#000000"}}
    assert override == {"colors": {"primary": "#FF0000"}}


def test_deep_merge_ignores_none_and_replaces_lists() -> None:
    base = {"title": "Old", "items": [1, 2, 3]}
    merged = deep_merge(base, {"title": None, "items": [4]})
    assert merged == {"title": "Old", "items": [4]}


def test_shallow_merge_replaces_nested_values_whole() -> None:
    base = {"content": {"headline": "Hi", "ctaText": "Go"}, "position": 0}
    merged = shallow_merge(base, {"content": {"headline": "Hello"}})
    assert merged["content"] == {"headline": "Hello"}
    assert merged["position"] == 0


def test_shallow_merge_skips_excluded_keys() -> None:
    merged = shallow_merge({"id": "a", "name": "Home"}, {"id": "b", "name": "Start"}, exclude=("id",))
    assert merged == {"id": "a", "name": "Start"}
