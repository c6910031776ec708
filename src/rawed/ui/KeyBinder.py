# rawed/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
The KeyBinder class translates decoded key events into editor actions.

Configurable command keys (quit, save, find, find next) are read from the
``[keybindings]`` section of the configuration as specs such as ``"ctrl+q"``
and resolved into `KeyEvent`s. Keys whose meaning is fixed (arrows, Home/End,
paging, Enter, Backspace, Delete) are dispatched by their `KeyKind`.
Printable bytes without a binding insert themselves; every other unbound
key is ignored.

Main Methods:
1. handle_input: Dispatches one `KeyEvent` and reports whether a redraw is needed.
2. _load_keybindings: Parses the configured bindings into events.
3. _decode_keystring: Turns a spec such as ``"ctrl+s"`` into a `KeyEvent`.
4. _setup_action_map: Builds the event -> action table.
5. lookup: Reverse lookup from a key spec to the bound action name.
"""

import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

from rawed.ui.KeyDecoder import KeyEvent, KeyKind, classify_byte
from rawed.ui.TerminalRawMode import TerminalError

if TYPE_CHECKING:
    from rawed.core.Rawed import Rawed


DEFAULT_KEYBINDINGS: dict[str, str] = {
    "quit": "ctrl+q",
    "save_file": "ctrl+s",
    "find": "ctrl+f",
    "find_next": "ctrl+n",
}

NAMED_KEYS: dict[str, KeyKind] = {
    "up": KeyKind.UP, "down": KeyKind.DOWN, "left": KeyKind.LEFT, "right": KeyKind.RIGHT,
    "home": KeyKind.HOME, "end": KeyKind.END,
    "pageup": KeyKind.PAGE_UP, "pgup": KeyKind.PAGE_UP,
    "pagedown": KeyKind.PAGE_DOWN, "pgdn": KeyKind.PAGE_DOWN,
    "delete": KeyKind.DELETE, "del": KeyKind.DELETE,
    "enter": KeyKind.ENTER, "backspace": KeyKind.BACKSPACE,
    "esc": KeyKind.ESCAPE, "escape": KeyKind.ESCAPE,
}

# Kinds that carry the raw byte but are bound by kind alone.
_KIND_ONLY_LOOKUP = {KeyKind.ENTER, KeyKind.BACKSPACE}


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Class KeyBinder
    ====================
    Maps key events to editor action methods.

    Attributes:
        editor (Rawed): Editor whose action methods are invoked.
        config (dict): Editor configuration (``keybindings`` section is used).
        keybindings (dict[str, list[KeyEvent]]): Action name -> bound events.
        action_map (dict[KeyEvent, Callable]): Event -> action for command keys.
        kind_map (dict[KeyKind, Callable]): Fixed handlers for motion/edit keys.
    """

    def __init__(self, editor: "Rawed") -> None:
        logging.debug("KeyBinder initialized with editor: %s", editor)
        self.editor = editor
        self.config = editor.config

        self.keybindings = self._load_keybindings()
        self.action_map = self._setup_action_map()
        self.kind_map = self._setup_kind_map()

    # ---------------------- Handle Input --------------------
    def handle_input(self, event: KeyEvent) -> bool:
        """Dispatches a single key event to the matching editor action.

        Args:
            event (KeyEvent): The decoded key.

        Returns:
            bool: True if the editor should redraw, False otherwise.

        Raises:
            Nothing from the action itself: exceptions are logged with their
            traceback and reported through the status line. `TerminalError`
            is the exception, since the terminal is unusable at that point.
        """
        logging.debug("handle_input: Received key event -> %s", event)
        action = self._resolve(event)

        if action is None:
            logging.debug("handle_input: Ignoring unbound key %s", event)
            return False

        try:
            redraw = bool(action())
        except TerminalError:
            raise
        except Exception as e_handler:
            logging.exception("Input handler error for key %s", event)
            self.editor._set_status_message(f"Input handler error: {str(e_handler)[:50]}")
            redraw = True

        if action != self.editor.exit_editor:
            self.editor.reset_quit_counter()
        return redraw

    def _resolve(self, event: KeyEvent) -> Optional[Callable[[], Any]]:
        action = self.action_map.get(event)
        if action is None and event.kind in _KIND_ONLY_LOOKUP:
            action = self.action_map.get(KeyEvent(event.kind))
        if action is None:
            action = self.kind_map.get(event.kind)
        if action is None and event.kind is KeyKind.CHAR and event.byte is not None:
            byte = event.byte
            return lambda: self.editor.insert_char(byte)
        return action

    # ---------------------- Bindings --------------------
    def _load_keybindings(self) -> dict[str, list[KeyEvent]]:
        """Loads the configured command bindings, falling back to the defaults.

        A binding may be a single spec, a list of specs, or a ``|``-separated
        string. Invalid specs are logged and skipped; an empty value disables
        the action.
        """
        user_keybindings_config: dict[str, object] = self.config.get("keybindings", {})
        parsed_keybindings: dict[str, list[KeyEvent]] = {}

        for action, default_spec in DEFAULT_KEYBINDINGS.items():
            spec_from_config = user_keybindings_config.get(action, default_spec)
            if not spec_from_config:
                logging.debug("Keybinding for action %r is disabled or empty.", action)
                continue

            if isinstance(spec_from_config, list):
                specs_to_process = spec_from_config
            elif isinstance(spec_from_config, str) and "|" in spec_from_config:
                specs_to_process = [s.strip() for s in spec_from_config.split("|")]
            else:
                specs_to_process = [spec_from_config]

            events: list[KeyEvent] = []
            for key_spec_item in specs_to_process:
                try:
                    event = self._decode_keystring(key_spec_item)
                except ValueError as e:
                    logging.error(
                        "Error parsing keybinding item %r for action %r: %s. "
                        "This specific binding for the action will be ignored.",
                        key_spec_item, action, e,
                    )
                    continue
                if event not in events:
                    events.append(event)

            if events:
                parsed_keybindings[action] = events
            else:
                logging.warning("No valid keys found for action %r after parsing. It will not be bound.", action)

        logging.debug("Loaded and parsed keybindings: %s", parsed_keybindings)
        return parsed_keybindings

    def _decode_keystring(self, key_input: object) -> KeyEvent:
        """Decodes a key spec into the `KeyEvent` the decoder produces for it.

        Accepted forms: ``"ctrl+<letter>"`` (also ``"ctrl-<letter>"`` and
        ``"^<letter>"``), a named key (``"up"``, ``"pagedown"``, ``"del"``, ...)
        or a single printable character.

        Raises:
            ValueError: If the spec is empty, of the wrong type, unknown, or a
                ctrl letter the decoder reports as Enter or Backspace.
        """
        if not isinstance(key_input, str):
            raise ValueError(f"Invalid key_input type: {type(key_input)}. Expected str.")
        s = key_input.strip().lower()
        if not s:
            raise ValueError("Key string cannot be empty.")

        if s.startswith("^") and len(s) == 2:
            s = "ctrl+" + s[1]
        if s.startswith(("ctrl+", "ctrl-")):
            base = s[5:]
            if len(base) != 1 or not ("a" <= base <= "z"):
                raise ValueError(f"Unsupported ctrl combination: {key_input!r}")
            event = KeyEvent.ctrl(base)
            # ctrl+h/j/m arrive as Backspace or Enter and can never match
            decoded = classify_byte(event.byte).kind
            if decoded is not KeyKind.CTRL:
                raise ValueError(f"{key_input!r} is decoded as {decoded.name.lower()}, not a ctrl key")
            return event

        if s in NAMED_KEYS:
            return KeyEvent(NAMED_KEYS[s])

        raw = key_input.strip()
        if len(raw) == 1 and 0x20 <= ord(raw) < 0x7F:
            return KeyEvent.char(raw)

        raise ValueError(f"Unknown key name: {key_input!r}")

    def _setup_action_map(self) -> dict[KeyEvent, Callable[[], Any]]:
        """Builds the event -> action table for the configurable commands."""
        logging.debug("Setting up action map for KeyBinder.")
        action_to_method_map: dict[str, Callable[[], Any]] = {
            "quit": self.editor.exit_editor,
            "save_file": self.editor.save_file,
            "find": self.editor.find_prompt,
            "find_next": self.editor.find_next,
        }

        final_key_action_map: dict[KeyEvent, Callable[[], Any]] = {}
        for action_name, events in self.keybindings.items():
            method = action_to_method_map.get(action_name)
            if method is None:
                logging.warning("No editor method for configured action %r.", action_name)
                continue
            for event in events:
                if event in final_key_action_map:
                    logging.warning(
                        "Key %s is bound more than once; %r overrides the earlier binding.",
                        event, action_name,
                    )
                final_key_action_map[event] = method
        return final_key_action_map

    def _setup_kind_map(self) -> dict[KeyKind, Callable[[], Any]]:
        return {
            KeyKind.UP: self.editor.handle_up,
            KeyKind.DOWN: self.editor.handle_down,
            KeyKind.LEFT: self.editor.handle_left,
            KeyKind.RIGHT: self.editor.handle_right,
            KeyKind.HOME: self.editor.handle_home,
            KeyKind.END: self.editor.handle_end,
            KeyKind.PAGE_UP: self.editor.handle_page_up,
            KeyKind.PAGE_DOWN: self.editor.handle_page_down,
            KeyKind.ENTER: self.editor.handle_enter,
            KeyKind.BACKSPACE: self.editor.handle_backspace,
            KeyKind.DELETE: self.editor.handle_delete,
        }

    def lookup(self, key_spec: str) -> Optional[str]:
        """Finds the action name bound to a key spec such as ``"ctrl+s"``."""
        try:
            decoded_key = self._decode_keystring(key_spec)
        except ValueError:
            return None

        for action_name, events in self.keybindings.items():
            if decoded_key in events:
                return action_name
        return None
