"""UI Manager for Intake App - home screen and shared status line."""
import toga
from toga.style import Pack
from toga.style.pack import COLUMN


class UIManager:
    """Manages the home screen and the status line shown on every screen."""

    def __init__(self, app):
        self.app = app
        self.main_window = None
        self.status_label = None
        self._status_text = 'Ready'

    def _create_button(self, label, action=None, padding=(5, 10, 10, 10), **style_kwargs):
        """Create a button with consistent styling."""
        style = Pack(padding=padding, **style_kwargs)
        return toga.Button(label, on_press=action, style=style)

    def _create_label(self, text, padding=(5, 10, 5, 10), font_size=None, font_weight=None, color=None, **style_kwargs):
        """Create a label with consistent styling."""
        style_dict = {'padding': padding}
        if font_size:
            style_dict['font_size'] = font_size
        if font_weight:
            style_dict['font_weight'] = font_weight
        if color:
            style_dict['color'] = color
        style_dict.update(style_kwargs)
        return toga.Label(text, style=Pack(**style_dict))

    def _create_box(self, children=None, direction=COLUMN, padding=10, **style_kwargs):
        """Create a box container with consistent styling."""
        return toga.Box(children=children or [], style=Pack(direction=direction, padding=padding, **style_kwargs))

    def create_status_label(self):
        """Status line for the screen being built; the newest one receives messages."""
        self.status_label = self._create_label(self._status_text, padding=(10, 10, 10, 10), color='#666666')
        return self.status_label

    def show_status(self, message):
        self._status_text = message or ''
        if self.status_label is not None:
            self.status_label.text = self._status_text

    def create_main_ui(self):
        """Create the home screen."""
        header_label = self._create_label('Field Sales Intake', padding=(10, 10, 20, 10), font_size=24)

        new_form_button = self._create_button('New Order Form', self.app.intake_handler.show_form)
        reload_button = self._create_button('Reload Lists', self.app.intake_handler.load_form_data)
        admin_button = self._create_button('Admin', self.app.admin_handler.show_admin)

        api_label = self._create_label(f"Server: {self.app.config.api_base_url}", color='#666666')

        main_box = self._create_box(
            children=[header_label, new_form_button, reload_button, admin_button, api_label, self.create_status_label()],
            direction=COLUMN
        )

        self.main_window.content = main_box

    def show_home(self, widget=None):
        self.create_main_ui()
