"""Full-screen prompt_toolkit front end for a typing session."""

from __future__ import annotations

import logging

from prompt_toolkit import Application
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import HSplit, Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.widgets import Frame

from typebench.core.session import Phase, SessionSnapshot, TypingSession
from typebench.core.timer import TICK_INTERVAL
from typebench.core.tracker import BACKSPACE
from typebench.ui.colors import build_style
from typebench.ui.render import header_text, render_results, render_target, stats_text

logger = logging.getLogger(__name__)


class SessionScreen:
    """Paints a session and forwards keystrokes to it until the results are dismissed."""

    def __init__(self, session: TypingSession) -> None:
        self._session = session
        self._snapshot = session.snapshot()
        self._app = Application(
            layout=self._build_layout(),
            key_bindings=self._build_key_bindings(),
            style=build_style(),
            full_screen=True,
            refresh_interval=TICK_INTERVAL,
            before_render=self._on_before_render,
        )

    def run(self) -> SessionSnapshot:
        self._app.run()
        return self._session.snapshot()

    def _on_before_render(self, _app: Application) -> None:
        self._session.tick()
        self._snapshot = self._session.snapshot()

    def _build_layout(self) -> Layout:
        header = Window(FormattedTextControl(lambda: [("class:header", header_text(self._snapshot))]), height=1)
        stats = Window(FormattedTextControl(lambda: stats_text(self._snapshot)), height=1, style="class:stats")
        body = Window(FormattedTextControl(self._body_text), wrap_lines=True)
        hint = Window(FormattedTextControl(self._hint_text), height=1, style="class:hint")
        return Layout(HSplit([header, stats, Frame(body, title=self._session.config.describe()), hint]))

    def _body_text(self) -> FormattedText:
        if self._snapshot.finished:
            return FormattedText(render_results(self._snapshot))
        return FormattedText(render_target(self._snapshot))

    def _hint_text(self) -> str:
        if self._snapshot.finished:
            return ""
        if not self._snapshot.started:
            return "Press any key to start. Press Esc to quit."
        return "Press Esc to quit"

    def _start_if_waiting(self) -> bool:
        """Start the clock on the first keypress; that key is not typed."""
        if self._session.phase is not Phase.NOT_STARTED:
            return False
        self._session.start()
        self._snapshot = self._session.snapshot()
        return True

    def _build_key_bindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add(Keys.Escape, eager=True)
        @kb.add("c-c")
        def _(event: KeyPressEvent) -> None:
            if self._session.phase is Phase.FINISHED:
                event.app.exit()
            else:
                self._session.abort()

        @kb.add(Keys.Backspace)
        def _(event: KeyPressEvent) -> None:
            if self._session.phase is Phase.FINISHED:
                event.app.exit()
                return
            if self._start_if_waiting():
                return
            self._session.apply(BACKSPACE)

        @kb.add(Keys.Any)
        def _(event: KeyPressEvent) -> None:
            if self._session.phase is Phase.FINISHED:
                event.app.exit()
                return
            if self._start_if_waiting():
                return
            key = event.data
            if len(key) != 1 or not key.isprintable():
                return
            self._session.apply(key)

        return kb


def run_session(session: TypingSession) -> SessionSnapshot:
    """Run ``session`` in the terminal and return its final snapshot."""
    logger.info("Starting %s", session.config.describe())
    return SessionScreen(session).run()
