"""Searchable single-value picker over a list of strings.

Holds the state and behaviour of the dropdown independently of Toga;
SearchableSelectView renders it. Two modes:

- local: the displayed list is the options containing the query,
  case-insensitively, recomputed on every keystroke.
- remote: keystrokes update the query at once, and on_search is called once
  the input has been quiet for debounce_time seconds. A query equal to the
  last one sent is not sent again.

Each remote search takes a request token; only the reply to the newest token
is shown, so a slow reply to an older query never overwrites a newer one.
"""
import logging
import threading


class SearchableSelect:
    """State of one searchable dropdown.

    Args:
        options: initial option list
        value: committed value, may be a free-form value not in options
        on_change: called with the new value when the user selects an option
        placeholder: shown when no value is committed
        loading: caller-side loading flag (e.g. initial fetch in progress)
        on_search: remote search callable, query -> list of strings, or None
            to keep the current list (caller skips short queries this way)
        server_search_enabled: use on_search instead of local filtering
        debounce_time: quiet period before a remote search, in seconds
        on_search_error: called with the exception when on_search fails
        on_update: called with this object whenever the state changes; may
            run on the timer thread
        timer_factory: threading.Timer compatible factory
    """

    def __init__(self, options=None, value='', on_change=None, placeholder='', loading=False,
                 on_search=None, server_search_enabled=False, debounce_time=0.5,
                 on_search_error=None, on_update=None, timer_factory=threading.Timer):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.placeholder = placeholder
        self.on_change = on_change
        self.on_search = on_search
        self.server_search_enabled = bool(server_search_enabled and on_search is not None)
        self.debounce_time = debounce_time
        self.on_search_error = on_search_error
        self.on_update = on_update
        self._timer_factory = timer_factory

        self._lock = threading.Lock()
        self._options = list(options or [])
        self._loading = loading
        self.value = value or ''
        self.query = ''
        self.is_open = False

        self._timer = None
        self._last_sent_query = None
        self._request_token = 0
        self._searching = False
        self._disposed = False

    @property
    def options(self):
        with self._lock:
            return list(self._options)

    @property
    def loading(self):
        return self._loading

    @loading.setter
    def loading(self, value):
        self._loading = bool(value)
        self._notify()

    @property
    def is_searching(self):
        """True while the newest remote search has not answered."""
        with self._lock:
            return self._searching

    @property
    def displayed_options(self):
        with self._lock:
            return self._displayed_options()

    def _displayed_options(self):
        if self.server_search_enabled:
            return list(self._options)
        needle = self.query.lower()
        return [option for option in self._options if needle in option.lower()]

    @property
    def display_text(self):
        """Text of the closed dropdown: the committed value or the placeholder."""
        return self.value or self.placeholder

    @property
    def show_searching(self):
        return self._loading or self.is_searching

    @property
    def show_no_options(self):
        with self._lock:
            return not (self._loading or self._searching) and not self._displayed_options()

    def set_options(self, options):
        """Replace the option domain, e.g. after the initial fetch."""
        with self._lock:
            self._options = list(options or [])
        self._notify()

    def open(self):
        with self._lock:
            if self._disposed or self.is_open:
                return
            self.is_open = True
        self._notify()

    def close(self):
        """Close the popover, dropping the query and any pending search."""
        with self._lock:
            if not self.is_open:
                return
            self.is_open = False
            self.query = ''
            self._cancel_timer()
        self._notify()

    def toggle(self):
        if self.is_open:
            self.close()
        else:
            self.open()

    def click_outside(self):
        """A click outside the popover closes it without changing the value."""
        self.close()

    def type_query(self, text):
        """Update the search text from a keystroke."""
        with self._lock:
            if self._disposed:
                return
            self.is_open = True
            self.query = text or ''
            if self.server_search_enabled:
                self._schedule_search(self.query)
        self._notify()

    def select(self, option):
        """Commit one of the displayed options and close the popover.

        Raises:
            ValueError: when option is not currently displayed
        """
        with self._lock:
            if option not in self._displayed_options():
                raise ValueError(f"{option!r} is not one of the displayed options")
            self.value = option
        if self.on_change:
            self.on_change(option)
        self.close()
        self._notify()

    def dispose(self):
        """Stop all activity; replies arriving later are ignored."""
        with self._lock:
            self._disposed = True
            self._cancel_timer()
            self._searching = False

    # Remote search

    def _cancel_timer(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _schedule_search(self, query):
        self._cancel_timer()
        timer = self._timer_factory(self.debounce_time, self._fire_search, args=[query])
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _fire_search(self, query):
        with self._lock:
            # A timer cancelled too late still runs; its query is superseded
            if self._disposed or not self.is_open or query != self.query:
                return
            if not query.strip() or query == self._last_sent_query:
                return
            self._last_sent_query = query
            self._request_token += 1
            token = self._request_token
            self._searching = True
        self._notify()
        self._run_search(query, token)

    def _run_search(self, query, token):
        try:
            results = self.on_search(query)
        except Exception as e:
            self.logger.warning(f"Search for {query!r} failed: {e}")
            with self._lock:
                if token == self._request_token:
                    self._searching = False
                    # Allow the same text to be retried
                    self._last_sent_query = None
                disposed = self._disposed
            if not disposed:
                self._notify()
                if self.on_search_error:
                    self.on_search_error(e)
            return

        with self._lock:
            if self._disposed:
                return
            if token != self._request_token:
                self.logger.debug(f"Dropping stale results for {query!r}")
                return
            self._searching = False
            if results is not None:
                self._options = list(results)
        self._notify()

    def _notify(self):
        if self.on_update and not self._disposed:
            self.on_update(self)
