import toga
from toga.style import Pack
from toga.style.pack import COLUMN


class LoginUI:
    """API-key prompt guarding the admin area."""

    def __init__(self, app, on_login_success):
        self.app = app
        self.on_login_success = on_login_success
        self.layout = self.create_layout()

    def create_layout(self):
        main_box = toga.Box(style=Pack(direction=COLUMN, padding=20))

        main_box.add(toga.Label("Admin Login", style=Pack(padding=(0, 0, 20, 0), font_size=20, font_weight='bold', text_align='center')))

        self.api_key_input = toga.PasswordInput(placeholder="API Key", on_confirm=self.login, style=Pack(padding=(0, 0, 20, 0)))

        self.login_button = toga.Button("Login", on_press=self.login, style=Pack(padding=(0, 0, 10, 0)))
        self.back_button = toga.Button("Back", on_press=self.app.ui_manager.show_home, style=Pack(padding=(0, 0, 10, 0)))

        self.status_label = toga.Label("", style=Pack(color='red', text_align='center'))

        main_box.add(self.api_key_input)
        main_box.add(self.login_button)
        main_box.add(self.back_button)
        main_box.add(self.status_label)

        return main_box

    def login(self, widget):
        api_key = self.api_key_input.value
        if not api_key or not api_key.strip():
            self.status_label.text = "Please enter an API key"
            return

        self.status_label.text = "Verifying..."
        self.login_button.enabled = False

        # Verify the key on the thread pool
        future = self.app.executor.submit(self._login_async, api_key)
        future.add_done_callback(lambda f: self.app.loop.call_soon_threadsafe(self._on_login_complete, f))

    def _login_async(self, api_key):
        """Verify the key in a background thread."""
        return self.app.admin_session.login(api_key)

    def _on_login_complete(self, future):
        """Handle verification result on the main thread."""
        self.login_button.enabled = True
        try:
            success, error, submissions = future.result()
            if success:
                self.on_login_success(submissions)
            else:
                self.status_label.text = error
        except Exception as e:
            self.status_label.text = f"Login error: {str(e)}"
