"""Textual integration for map change listeners. Opt-in, requires textual.

Listeners that update widgets must not fire while the widget tree is being
rebuilt or before the app is running, and must run on the UI thread. The
guard, the NoMatches handling and the thread marshaling live here so the
core package stays free of any Textual coupling.

The pause set is owned by this module, keyed by id(app); an id is present
exactly while the app is inside a pause() block.
"""

import logging
import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

logger = logging.getLogger("slotdict.textual")

_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Suspend guarded listeners during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def map_change_listener(app, mapping, listener, *, before=False):
    """Register listener(key, value, mapping) on mapping, guarded for app.

    Returns the disposer from the underlying registration.

    Usage:
        prices = Dict()
        dispose = map_change_listener(
            app, prices,
            lambda key, value, m: app.query_one(f"#{key}").update(str(value)),
        )
    """
    _main = threading.get_ident()

    def _guarded(key, value, source):
        if not is_safe(app):
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe, key, value, source)
        else:
            _safe(key, value, source)

    def _safe(key, value, source):
        try:
            listener(key, value, source)
        except NoMatches:
            logger.debug("Dropped change for %r: widget not mounted", key)

    return mapping.map_changes().add_listener(_guarded, before=before)
