"""Toga rendering of a SearchableSelect."""
import toga
from toga.style import Pack
from toga.style.pack import COLUMN

SEARCH_PLACEHOLDER = "Search..."
SEARCHING_TEXT = "Searching..."
NO_OPTIONS_TEXT = "No options found"


class SearchableSelectView:
    """Builds the widgets of one dropdown and keeps them in step with its state.

    The closed dropdown is a button showing the value or placeholder. Opening
    it reveals a search input, a status line and one button per displayed
    option. State changes can arrive from the debounce timer thread, so every
    redraw is scheduled on the app's event loop.
    """

    def __init__(self, app, select, on_open=None):
        """
        Args:
            app: toga.App owning the event loop
            select: SearchableSelect holding the state
            on_open: called with this view when the popover opens, so the
                form can close the other dropdowns
        """
        self.app = app
        self.select = select
        self.on_open = on_open
        self.select.on_update = self._schedule_render
        self.layout = None
        self.toggle_button = None
        self.search_input = None
        self.status_label = None
        self.options_box = None
        self.popover = None
        self._was_open = False

    def create_layout(self):
        self.toggle_button = toga.Button(
            self.select.display_text,
            on_press=self.on_toggle,
            style=Pack(padding=(0, 0, 5, 0))
        )
        self.search_input = toga.TextInput(
            placeholder=SEARCH_PLACEHOLDER,
            on_change=self.on_query_change,
            style=Pack(padding=(0, 0, 5, 0))
        )
        self.status_label = toga.Label('', style=Pack(padding=5, color='#666666'))
        self.options_box = toga.Box(style=Pack(direction=COLUMN))
        self.popover = toga.Box(
            children=[self.search_input, self.status_label, self.options_box],
            style=Pack(direction=COLUMN, padding=(0, 0, 10, 0), visibility='hidden')
        )
        self.layout = toga.Box(
            children=[self.toggle_button, self.popover],
            style=Pack(direction=COLUMN)
        )
        self.render()
        return self.layout

    def on_toggle(self, widget):
        self.select.toggle()

    def on_query_change(self, widget):
        # Ignore the change event caused by clearing the input on close
        if not self.select.is_open and not widget.value:
            return
        self.select.type_query(widget.value)

    def on_option_press(self, option):
        try:
            self.select.select(option)
        except ValueError:
            # List changed between render and press
            self.render()

    def _schedule_render(self, select):
        self.app.loop.call_soon_threadsafe(self.render)

    def render(self):
        """Copy the SearchableSelect state onto the widgets."""
        if self.layout is None:
            return
        select = self.select
        self.toggle_button.text = select.display_text
        self.toggle_button.enabled = not select.loading

        if select.is_open and not self._was_open and self.on_open:
            self.on_open(self)
        self._was_open = select.is_open

        self.popover.style.visibility = 'visible' if select.is_open else 'hidden'
        if not select.is_open:
            if self.search_input.value:
                self.search_input.value = ''
            return

        if select.show_searching:
            self.status_label.text = SEARCHING_TEXT
        elif select.show_no_options:
            self.status_label.text = NO_OPTIONS_TEXT
        else:
            self.status_label.text = ''

        for child in list(self.options_box.children):
            self.options_box.remove(child)
        if select.show_searching:
            return
        for option in select.displayed_options:
            label = f"✓ {option}" if option == select.value else option
            self.options_box.add(toga.Button(
                label,
                on_press=lambda w, option=option: self.on_option_press(option),
                style=Pack(padding=(0, 0, 2, 0))
            ))
