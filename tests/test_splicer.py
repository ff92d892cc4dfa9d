from types import SimpleNamespace

from stealstickers.services.splicer import splice

ENTRY = object()


def _nest(levels: int, leaf: dict) -> dict:
    node = leaf
    for _ in range(levels):
        node = {"children": [node]}
    return node


def test_root_options_gets_one_entry() -> None:
    root = {"options": ["a", "b"]}
    assert splice(root, ENTRY) is True
    assert root["options"] == ["a", "b", ENTRY]


def test_bare_list_root_is_treated_as_options() -> None:
    root = ["copy", "reply"]
    assert splice(root, ENTRY) is True
    assert root[-1] is ENTRY


def test_options_at_depth_three() -> None:
    options: list = []
    root = _nest(3, {"options": options})
    assert splice(root, ENTRY) is True
    assert options == [ENTRY]


def test_options_beyond_depth_bound_is_not_touched() -> None:
    options: list = []
    root = _nest(11, {"options": options})
    snapshot = repr(root)
    assert splice(root, ENTRY) is False
    assert options == []
    assert repr(root) == snapshot


def test_options_at_depth_limit_is_found() -> None:
    options: list = []
    root = _nest(10, {"options": options})
    assert splice(root, ENTRY) is True
    assert options == [ENTRY]


def test_depth_bound_is_a_parameter() -> None:
    options: list = []
    root = _nest(3, {"options": options})
    assert splice(root, ENTRY, max_depth=2) is False
    assert splice(root, ENTRY, max_depth=3) is True


def test_first_match_in_preorder_wins() -> None:
    first: list = []
    second: list = []
    root = {
        "children": [
            {"children": {"options": first}},
            {"options": second},
        ]
    }
    assert splice(root, ENTRY) is True
    assert first == [ENTRY]
    assert second == []


def test_single_child_node_is_followed() -> None:
    options: list = []
    root = {"children": {"children": {"options": options}}}
    assert splice(root, ENTRY) is True
    assert options == [ENTRY]


def test_react_element_props_shape() -> None:
    options = ["mark_unread"]
    child = SimpleNamespace(props={"options": options})
    root = SimpleNamespace(props={"children": [None, "text", child]})
    assert splice(root, ENTRY) is True
    assert options == ["mark_unread", ENTRY]


def test_immutable_options_is_not_replaced() -> None:
    root = {"options": ("a", "b")}
    assert splice(root, ENTRY) is False
    assert root == {"options": ("a", "b")}


def test_no_options_anywhere() -> None:
    root = {"children": [{"children": []}, {"title": "x"}]}
    assert splice(root, ENTRY) is False
    assert "options" not in root


def test_none_and_scalars() -> None:
    assert splice(None, ENTRY) is False
    assert splice("text", ENTRY) is False
    assert splice(42, ENTRY) is False
