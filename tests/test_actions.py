import pytest

from templscan.actions import Action, ActionType, action_from_string, action_to_string


def test_navigate_from_string():
    assert action_from_string("navigate") is ActionType.NAVIGATE


def test_unknown_action_is_none():
    assert action_from_string("fly") is None


def test_set_method_display_name():
    assert action_from_string("setmethod") is ActionType.SET_METHOD
    assert action_to_string(ActionType.SET_METHOD) == "set-method"


@pytest.mark.parametrize("action_type", [a for a in ActionType if a is not ActionType.SET_METHOD])
def test_round_trip(action_type):
    assert action_from_string(action_to_string(action_type)) is action_type


def test_every_action_has_a_name():
    names = {action_to_string(a) for a in ActionType}
    assert "" not in names
    assert len(names) == len(ActionType)


def test_action_values_are_consecutive_from_one():
    names = [
        "navigate", "script", "click", "rightclick", "text", "screenshot",
        "time", "select", "files", "waitload", "getresource", "extract",
        "setmethod", "addheader", "setheader", "deleteheader", "setbody",
        "waitevent", "keyboard", "debug", "sleep",
    ]
    values = [int(action_from_string(name)) for name in names]
    assert values == list(range(1, 22))


def test_get_arg():
    action = Action(action_type="navigate", data={"url": "{{BaseURL}}"})
    assert action.get_arg("url") == "{{BaseURL}}"
    assert action.get_arg("missing") == ""


def test_str_with_name_and_data():
    action = Action(action_type="click", name="btn", data={"selector": "button"})
    assert str(action) == "click Name:btn selector:button"


def test_str_without_data():
    assert str(Action(action_type="waitload")) == "waitload "


def test_str_multiple_args_has_no_trailing_comma():
    action = Action(action_type="setheader", data={"part": "request", "key": "Test"})
    text = str(action)
    assert not text.endswith(",")
    assert "part:request" in text
    assert "key:Test" in text