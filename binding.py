"""Keep relative timestamps inside a parsed page up to date.

A BindingManager owns one Binding per element: the target datetime and the
recurring timer that re-renders it. Disposing stops the timer but keeps the
record, so binding the element again reuses the datetime read the first time
(by then the title attribute holds display text). Every refresh runs under
the manager's lock, so ticks from different elements never interleave.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable

from bs4 import BeautifulSoup, Tag

from timeago import (
    Settings,
    coerce,
    distance,
    element_datetime,
    in_words,
    is_time,
    locale_string,
)

logger = logging.getLogger(__name__)

# Public action name -> BindingManager method
ACTIONS = {
    "init": "init",
    "update": "update",
    "updateFromDOM": "update_from_dom",
    "update_from_dom": "update_from_dom",
    "dispose": "dispose",
}


class UnknownActionError(ValueError):
    """Raised for an action name the binding surface doesn't support."""


class RepeatingTimer:
    """Calls ``callback`` every ``interval`` seconds until cancelled.

    The next run is armed only after the previous one returns, so runs never
    overlap. Cancelling from inside the callback stops the re-arm.
    """

    def __init__(self, interval: float, callback: Callable[[], None]):
        self.interval = interval
        self.callback = callback
        self._timer: threading.Timer | None = None
        self._cancelled = False
        self._lock = threading.Lock()

    def start(self) -> None:
        self._arm()

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _arm(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._timer = threading.Timer(self.interval, self._run)
            self._timer.daemon = True
            self._timer.start()

    def _run(self) -> None:
        try:
            self.callback()
        except Exception as e:
            logger.error(f"Timer callback failed: {e}", exc_info=True)
        self._arm()


@dataclass
class Binding:
    tag: Tag
    datetime: datetime | None
    timer: RepeatingTimer | None = None
    active: bool = True


class BindingManager:
    """Bind, refresh and dispose relative-time elements of one document."""

    def __init__(
        self,
        document: BeautifulSoup,
        settings: Settings | None = None,
        timer_factory: Callable[[float, Callable[[], None]], RepeatingTimer] = RepeatingTimer,
        clock: Callable[[], datetime] | None = None,
    ):
        self.document = document
        self.settings = settings if settings is not None else Settings()
        self.timer_factory = timer_factory
        # Returns the current aware datetime; None means the wall clock.
        self.clock = clock
        self._bindings: dict[int, Binding] = {}
        self._lock = threading.RLock()

    # --- action surface ---

    def timeago(self, targets: Tag | Iterable[Tag], action: str | None = None, arg=None):
        """Apply a named action to one element or a collection of elements."""
        method = ACTIONS.get(action or "init")
        if method is None:
            raise UnknownActionError(f"Unknown function name '{action}' for timeago")
        fn = getattr(self, method)
        tags = [targets] if isinstance(targets, Tag) else list(targets)
        for tag in tags:
            if method in ("init", "update"):
                fn(tag, arg)
            else:
                fn(tag)
        return targets

    def bind_all(self, selector: str = "time.timeago") -> list[Tag]:
        """Bind every element in the document matching a CSS selector."""
        tags = self.document.select(selector)
        self.timeago(tags)
        logger.debug(f"Bound {len(tags)} elements matching {selector!r}")
        return tags

    # --- per-element operations ---

    def init(self, tag: Tag, timestamp=None) -> None:
        """Bind an element, render it now and schedule periodic refreshes."""
        with self._lock:
            binding = self._bindings.get(id(tag))
            if binding is None:
                binding = self._create(tag, timestamp)
            else:
                if timestamp is not None:
                    binding.datetime = coerce(timestamp)
                    self._set_locale_title(binding)
                binding.active = True

            self.refresh(tag)

            if not binding.active:
                return  # auto-disposed during the first refresh
            interval = self.settings.refresh_millis
            if interval > 0 and binding.timer is None:
                binding.timer = self.timer_factory(interval / 1000, lambda: self.refresh(tag))
                binding.timer.start()

    def update(self, tag: Tag, timestamp) -> None:
        """Point an element at a new timestamp and re-render it."""
        with self._lock:
            parsed = coerce(timestamp)
            binding = self._bindings.get(id(tag))
            if binding is None:
                binding = Binding(tag=tag, datetime=parsed)
                self._bindings[id(tag)] = binding
            else:
                binding.datetime = parsed
                binding.active = True
            self._set_locale_title(binding)
            self.refresh(tag)

    def update_from_dom(self, tag: Tag) -> None:
        """Re-read the timestamp from the element's attribute and re-render."""
        with self._lock:
            binding = self._bindings.get(id(tag))
            if binding is None:
                binding = Binding(tag=tag, datetime=None)
                self._bindings[id(tag)] = binding
            binding.datetime = element_datetime(tag)
            binding.active = True
            self.refresh(tag)

    def refresh(self, tag: Tag) -> None:
        with self._lock:
            settings = self.settings
            if settings.auto_dispose and not self.is_attached(tag):
                logger.info(f"<{tag.name}> element left the document, disposing")
                self.dispose(tag)
                return

            binding = self._bindings.get(id(tag))
            if binding is None or not binding.active or binding.datetime is None:
                return

            now = self.clock() if self.clock is not None else None
            delta = distance(binding.datetime, now)
            if settings.cutoff == 0 or abs(delta) < settings.cutoff:
                tag.string = in_words(delta, settings)

    def dispose(self, tag: Tag) -> None:
        """Cancel the element's refresh timer. Safe to repeat."""
        with self._lock:
            binding = self._bindings.get(id(tag))
            if binding is None or not binding.active:
                return
            binding.active = False
            if binding.timer is not None:
                binding.timer.cancel()
                binding.timer = None
            logger.debug(f"Disposed <{tag.name}> binding")

    def close(self) -> None:
        """Dispose every binding and drop the records."""
        with self._lock:
            for binding in list(self._bindings.values()):
                self.dispose(binding.tag)
            self._bindings.clear()

    # --- queries ---

    def is_bound(self, tag: Tag) -> bool:
        binding = self._bindings.get(id(tag))
        return binding is not None and binding.active

    def binding(self, tag: Tag) -> Binding | None:
        return self._bindings.get(id(tag))

    def is_attached(self, tag: Tag) -> bool:
        return any(parent is self.document for parent in tag.parents)

    def __len__(self) -> int:
        return sum(1 for b in self._bindings.values() if b.active)

    # --- helpers ---

    def _create(self, tag: Tag, timestamp) -> Binding:
        parsed = coerce(timestamp) if timestamp is not None else element_datetime(tag)
        binding = Binding(tag=tag, datetime=parsed)
        self._bindings[id(tag)] = binding

        text = tag.get_text().strip()
        if self.settings.locale_title:
            self._set_locale_title(binding)
        elif text and not (is_time(tag) and tag.get("title")):
            tag["title"] = text
        logger.debug(f"Bound <{tag.name}> to {parsed}")
        return binding

    def _set_locale_title(self, binding: Binding) -> None:
        if self.settings.locale_title and binding.datetime is not None:
            binding.tag["title"] = locale_string(binding.datetime)
