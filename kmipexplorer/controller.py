"""Explorer controller: directory ownership, action dispatch and reconciliation.

Every mutation of the directory and of the page stack happens on the UI
thread. Network calls run through ``BackgroundRunner`` and come back as
closures drained from the ``UpdateQueue`` by the main loop.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .actions.effects import activate_effect, destroy_effect
from .actions.protocol import ActionRequest, ConfirmPrompt, Effect, Operation, Reconcile
from .directory_model import Directory, FilterCategory, TypeFilter
from .errors import ExplorerError
from .forms import CreateKeyForm, ModalForm, RegisterForm, RekeyForm, RevokeForm
from .forms.fields import is_printable
from .input import ENTER_KEYS, KeyBinding, KeyRegistry
from .key_material import ClipboardResult, KeyMaterialViewer, copy_text_to_clipboard
from .kmip.client import KmipClient
from .kmip.types import AttributeSet, ManagedObject
from .runtime.updates import BackgroundRunner, SpawnHook, UpdateQueue

logger = logging.getLogger(__name__)


class Mode(Enum):
    IDLE = "idle"
    LOADING = "loading"
    ACTION_PENDING = "action-pending"
    ERROR_SHOWN = "error-shown"


class Page(str, Enum):
    MAIN = "main"
    ERROR = "error"
    CONFIRM = "confirm"
    REVOKE = "revoke"
    REKEY = "rekey"
    CREATE = "create"
    REGISTER = "register"
    KEY_MATERIAL = "key-material"


class Focus(Enum):
    TABLE = "table"
    ATTRIBUTES = "attributes"
    SEARCH = "search"


CONFIRM_BUTTONS = ("Yes", "No")
_FORM_PAGES = frozenset({Page.REVOKE, Page.REKEY, Page.CREATE, Page.REGISTER})


@dataclass
class ConfirmState:
    prompt: ConfirmPrompt
    request: ActionRequest
    choice: int = 1


class ExplorerController:
    """Owns the directory, the type filter, the forms and the page stack."""

    def __init__(
        self,
        client: KmipClient,
        *,
        updates: UpdateQueue | None = None,
        spawn: SpawnHook | None = None,
        clock: Callable[[], datetime] | None = None,
        copy_text: Callable[[str], ClipboardResult] = copy_text_to_clipboard,
        style: str = "monokai",
        no_color: bool = False,
    ) -> None:
        self.client = client
        self.updates = updates if updates is not None else UpdateQueue()
        self.runner = BackgroundRunner(self.updates, self.show_error, spawn)
        self.directory = Directory(clock)
        self.type_filter = TypeFilter()
        self.pages: list[Page] = [Page.MAIN]
        self.focus = Focus.TABLE
        self.error_message = ""
        self.confirm: ConfirmState | None = None
        self.attributes_scroll = 0
        self.table_height = 10
        self.dirty = True
        self._loading = 0
        self._actions = 0

        self.create_form = CreateKeyForm()
        self.register_form = RegisterForm()
        self.revoke_form = RevokeForm()
        self.rekey_form = RekeyForm()
        self.key_material = KeyMaterialViewer(copy_text=copy_text, style=style, no_color=no_color)
        self._forms: dict[Page, ModalForm] = {
            Page.CREATE: self.create_form,
            Page.REGISTER: self.register_form,
            Page.REVOKE: self.revoke_form,
            Page.REKEY: self.rekey_form,
        }
        for page, form in self._forms.items():
            form.on_cancel(self._hider(page))
        self.create_form.on_done(lambda effect: self._form_done(Page.CREATE, Operation.CREATE, effect, None))
        self.register_form.on_done(lambda effect: self._form_done(Page.REGISTER, Operation.REGISTER, effect, None))
        self.key_material.on_done(self._hider(Page.KEY_MATERIAL))

        self.directory.title = self.type_filter.title
        self.directory.on_selection_changed(self._selection_changed).on_content_updated(self._content_updated)
        self.type_filter.on_change(self._filter_changed)
        self._table_keys = self._build_table_keys()

    # State

    @property
    def mode(self) -> Mode:
        if Page.ERROR in self.pages:
            return Mode.ERROR_SHOWN
        if self.confirm is not None or self._actions > 0 or self.active_page in _FORM_PAGES:
            return Mode.ACTION_PENDING
        if self._loading > 0:
            return Mode.LOADING
        return Mode.IDLE

    @property
    def active_page(self) -> Page:
        return self.pages[-1]

    def _show_page(self, page: Page) -> None:
        if page in self.pages:
            self.pages.remove(page)
        self.pages.append(page)
        self.dirty = True

    def hide_page(self, page: Page) -> None:
        if page is not Page.MAIN and page in self.pages:
            self.pages.remove(page)
        self.focus = Focus.TABLE
        self.dirty = True

    def _hider(self, page: Page) -> Callable[[], None]:
        return lambda: self.hide_page(page)

    # Observers

    def _selection_changed(self, _selection: AttributeSet | None) -> None:
        self.attributes_scroll = 0
        if self.directory.get_selection() is None and self.focus is Focus.ATTRIBUTES:
            self.focus = Focus.TABLE
        self.dirty = True

    def _content_updated(self) -> None:
        self.dirty = True

    def _filter_changed(self, category: FilterCategory, label: str) -> None:
        logger.info("type filter changed to %s", label)
        self.directory.title = self.type_filter.title
        self.directory.clear()
        self.refresh(reset_selection=True)

    # Loading

    def start(self) -> None:
        self.refresh(reset_selection=True)

    def _loading_done(self) -> None:
        self._loading -= 1
        self.dirty = True

    def refresh(self, reset_selection: bool = False) -> None:
        """Reload every object matching the current filter in the background."""
        object_type = self.type_filter.object_type
        client = self.client

        def work() -> list[AttributeSet]:
            return [client.get_attributes(uid) for uid in client.locate(object_type)]

        def apply(objects: list[AttributeSet]) -> None:
            self._loading_done()
            logger.info("refresh loaded %d objects", len(objects))
            self.directory.set_objects(objects, reset_selection=reset_selection)

        logger.info("refresh started (filter=%s)", object_type.value if object_type else "all")
        self._loading += 1
        self.runner.submit("refresh", work, apply, on_failure=self._loading_done)

    def update(self, uid: str) -> None:
        """Re-fetch one object's attributes and patch the directory."""
        client = self.client

        def apply(attributes: AttributeSet) -> None:
            self._loading_done()
            self.directory.update_object(attributes)

        self._loading += 1
        self.runner.submit(f"update {uid}", lambda: client.get_attributes(uid), apply, on_failure=self._loading_done)

    def get_content(self, uid: str) -> None:
        client = self.client

        def apply(obj: ManagedObject) -> None:
            self._loading_done()
            self.key_material.set_content(obj)
            self._show_page(Page.KEY_MATERIAL)

        self._loading += 1
        self.runner.submit(f"get {uid}", lambda: client.get(uid), apply, on_failure=self._loading_done)

    # Actions

    def request_action(self, operation: Operation, effect: Effect, target: str | None = None) -> ActionRequest:
        """Take ownership of ``effect``; confirm first when the operation is destructive."""
        request = ActionRequest.build(operation, effect, target)
        if request.prompt is not None:
            self.confirm = ConfirmState(prompt=request.prompt, request=request)
            self._show_page(Page.CONFIRM)
        else:
            self.execute(request)
        return request

    def answer_confirm(self, accepted: bool) -> None:
        state = self.confirm
        self.confirm = None
        self.hide_page(Page.CONFIRM)
        if state is None:
            return
        if accepted:
            self.execute(state.request)
        else:
            logger.info("%s of %s cancelled", state.request.operation.value, state.request.target)
            state.request.discard()

    def execute(self, request: ActionRequest) -> None:
        """Run the effect in the background and reconcile on success."""
        client = self.client

        def apply(_result: object) -> None:
            self._action_done()
            logger.info("%s of %s succeeded", request.operation.value, request.target or "new object")
            self.reconcile(request)

        logger.info("%s of %s started", request.operation.value, request.target or "new object")
        self._actions += 1
        self.runner.submit(
            request.operation.value, lambda: request.execute(client), apply, on_failure=self._action_done
        )

    def _action_done(self) -> None:
        self._actions -= 1
        self.dirty = True

    def reconcile(self, request: ActionRequest) -> None:
        """Bring the directory in line with a mutation the server accepted."""
        if request.reconcile is Reconcile.REMOVE and request.target is not None:
            self.directory.remove_object(request.target)
        elif request.reconcile is Reconcile.UPDATE and request.target is not None:
            self.update(request.target)
        elif request.reconcile is Reconcile.REFRESH:
            self.refresh(reset_selection=False)

    def _form_done(self, page: Page, operation: Operation, effect: Effect, target: str | None) -> None:
        self.hide_page(page)
        self.request_action(operation, effect, target)

    def _selected_uid(self) -> str | None:
        selection = self.directory.get_selection()
        return selection.uid if selection is not None else None

    def activate_selected(self) -> None:
        uid = self._selected_uid()
        if uid is not None:
            self.request_action(Operation.ACTIVATE, activate_effect(), uid)

    def destroy_selected(self) -> None:
        uid = self._selected_uid()
        if uid is not None:
            self.request_action(Operation.DESTROY, destroy_effect(), uid)

    def open_revoke(self) -> None:
        uid = self._selected_uid()
        if uid is None:
            return
        self.revoke_form.on_done(lambda effect: self._form_done(Page.REVOKE, Operation.REVOKE, effect, uid))
        self._show_page(Page.REVOKE)

    def open_rekey(self) -> None:
        selection = self.directory.get_selection()
        if selection is None:
            return
        uid = selection.uid
        self.rekey_form.prepare(selection.object_type())
        self.rekey_form.on_done(lambda effect: self._form_done(Page.REKEY, Operation.REKEY, effect, uid))
        self._show_page(Page.REKEY)

    def open_create(self) -> None:
        self._show_page(Page.CREATE)

    def open_register(self) -> None:
        self._show_page(Page.REGISTER)

    def get_selected_content(self) -> None:
        uid = self._selected_uid()
        if uid is not None:
            self.get_content(uid)

    # Errors

    def show_error(self, exc: ExplorerError) -> None:
        self.error_message = str(exc)
        self._show_page(Page.ERROR)

    def acknowledge_error(self) -> None:
        self.error_message = ""
        self.hide_page(Page.ERROR)

    # Periodic work

    def drain_updates(self) -> int:
        ran = self.updates.drain()
        if ran:
            self.dirty = True
        return ran

    def tick(self) -> None:
        if self.directory.refresh_ages():
            self.dirty = True

    # Key handling

    def _build_table_keys(self) -> KeyRegistry:
        def move(delta: int) -> Callable[[], bool]:
            return lambda: self.directory.move_selection(delta)

        def page(direction: int) -> Callable[[], bool]:
            return lambda: self.directory.move_selection(direction * max(1, self.table_height - 1))

        def focus(target: Focus) -> Callable[[], bool]:
            def handler() -> bool:
                self.focus = target
                return True

            return handler

        registry = KeyRegistry(has_selection=lambda: self.directory.get_selection() is not None)
        return registry.register(
            KeyBinding(("CTRL_R",), lambda: self.refresh(reset_selection=False)),
            KeyBinding(("C",), self.open_create),
            KeyBinding(("R",), self.open_register),
            KeyBinding(("TAB",), self.type_filter.next),
            KeyBinding(("SHIFT_TAB",), self.type_filter.prev),
            KeyBinding(("/",), focus(Focus.SEARCH)),
            KeyBinding(("UP", "k"), move(-1)),
            KeyBinding(("DOWN", "j"), move(1)),
            KeyBinding(("PAGE_UP",), page(-1)),
            KeyBinding(("PAGE_DOWN",), page(1)),
            KeyBinding(("HOME", "g"), lambda: self.directory.set_selection(1)),
            KeyBinding(("END", "G"), lambda: self.directory.set_selection(len(self.directory))),
            KeyBinding(("ESC",), self.directory.clear_selection),
            KeyBinding((" ",), self.get_selected_content, needs_selection=True),
            KeyBinding(("a",), self.activate_selected, needs_selection=True),
            KeyBinding(("r",), self.open_revoke, needs_selection=True),
            KeyBinding(("CTRL_D",), self.destroy_selected, needs_selection=True),
            KeyBinding(("CTRL_T",), self.open_rekey, needs_selection=True),
            KeyBinding(tuple(ENTER_KEYS), focus(Focus.ATTRIBUTES), needs_selection=True),
        )

    def _handle_confirm_key(self, key: str) -> None:
        state = self.confirm
        if state is None:
            self.hide_page(Page.CONFIRM)
            return
        if key in {"LEFT", "RIGHT", "TAB", "SHIFT_TAB", "h", "l"}:
            state.choice = 1 - state.choice
        elif key in ENTER_KEYS or key == " ":
            self.answer_confirm(CONFIRM_BUTTONS[state.choice] == "Yes")
        elif key in {"y", "Y"}:
            self.answer_confirm(True)
        elif key in {"ESC", "n", "N"}:
            self.answer_confirm(False)

    def _handle_search_key(self, key: str) -> None:
        if key == "ESC":
            self.directory.set_query("")
            self.focus = Focus.TABLE
        elif key in ENTER_KEYS:
            self.focus = Focus.TABLE
        elif key == "BACKSPACE":
            self.directory.set_query(self.directory.query[:-1])
        elif key == "CTRL_U":
            self.directory.set_query("")
        elif is_printable(key):
            self.directory.set_query(self.directory.query + key)

    def _handle_attributes_key(self, key: str) -> bool:
        if key == "q":
            return True
        if key == "ESC":
            self.attributes_scroll = 0
            self.focus = Focus.TABLE
        elif key in {"DOWN", "j"}:
            self.attributes_scroll += 1
        elif key in {"UP", "k"}:
            self.attributes_scroll = max(0, self.attributes_scroll - 1)
        elif key in {"HOME", "g"}:
            self.attributes_scroll = 0
        return False

    def handle_key(self, key: str) -> bool:
        """Dispatch one key token; return ``True`` when the user asked to quit."""
        if not key:
            return False
        self.dirty = True
        page = self.active_page
        if page is Page.ERROR:
            if key in ENTER_KEYS or key in {"ESC", " "}:
                self.acknowledge_error()
            return False
        if page is Page.CONFIRM:
            self._handle_confirm_key(key)
            return False
        if page is Page.KEY_MATERIAL:
            self.key_material.handle_key(key)
            return False
        form = self._forms.get(page)
        if form is not None:
            form.handle_key(key)
            return False
        if self.focus is Focus.SEARCH:
            self._handle_search_key(key)
            return False
        if self.focus is Focus.ATTRIBUTES:
            return self._handle_attributes_key(key)
        if key == "q":
            return True
        self._table_keys.dispatch(key)
        return False


__all__ = ["CONFIRM_BUTTONS", "ConfirmState", "ExplorerController", "Focus", "Mode", "Page"]
