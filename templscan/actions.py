"""Browser actions used by headless templates."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class ActionType(IntEnum):
    """Kinds of actions a headless browser can perform."""

    NAVIGATE = 1
    SCRIPT = 2
    CLICK = 3
    RIGHT_CLICK = 4
    TEXT_INPUT = 5
    SCREENSHOT = 6
    TIME_INPUT = 7
    SELECT_INPUT = 8
    FILES_INPUT = 9
    WAIT_LOAD = 10
    GET_RESOURCE = 11
    EXTRACT = 12
    SET_METHOD = 13
    ADD_HEADER = 14
    SET_HEADER = 15
    DELETE_HEADER = 16
    SET_BODY = 17
    WAIT_EVENT = 18
    KEYBOARD = 19
    DEBUG = 20
    SLEEP = 21


_STRING_TO_ACTION: dict[str, ActionType] = {
    "navigate": ActionType.NAVIGATE,
    "script": ActionType.SCRIPT,
    "click": ActionType.CLICK,
    "rightclick": ActionType.RIGHT_CLICK,
    "text": ActionType.TEXT_INPUT,
    "screenshot": ActionType.SCREENSHOT,
    "time": ActionType.TIME_INPUT,
    "select": ActionType.SELECT_INPUT,
    "files": ActionType.FILES_INPUT,
    "waitload": ActionType.WAIT_LOAD,
    "getresource": ActionType.GET_RESOURCE,
    "extract": ActionType.EXTRACT,
    "setmethod": ActionType.SET_METHOD,
    "addheader": ActionType.ADD_HEADER,
    "setheader": ActionType.SET_HEADER,
    "deleteheader": ActionType.DELETE_HEADER,
    "setbody": ActionType.SET_BODY,
    "waitevent": ActionType.WAIT_EVENT,
    "keyboard": ActionType.KEYBOARD,
    "debug": ActionType.DEBUG,
    "sleep": ActionType.SLEEP,
}

_ACTION_TO_STRING: dict[ActionType, str] = {
    action: name for name, action in _STRING_TO_ACTION.items()
}
_ACTION_TO_STRING[ActionType.SET_METHOD] = "set-method"


def action_from_string(name: str) -> ActionType | None:
    """Return the action type for a template name, or None if unknown."""
    return _STRING_TO_ACTION.get(name)


def action_to_string(action_type: ActionType) -> str:
    """Return the display name of an action type."""
    return _ACTION_TO_STRING.get(action_type, "")


@dataclass
class Action:
    """A single step taken by the browser."""

    action_type: str
    data: dict[str, str] = field(default_factory=dict)
    name: str = ""
    description: str = ""

    def __str__(self) -> str:
        text = self.action_type
        if self.name:
            text += f" Name:{self.name}"
        text += " " + "".join(f"{key}:{value}," for key, value in self.data.items())
        return text.removesuffix(",")

    def get_arg(self, name: str) -> str:
        """Return the named argument, or an empty string."""
        return self.data.get(name, "")