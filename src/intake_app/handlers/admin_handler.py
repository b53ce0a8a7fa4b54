"""Admin area handlers for IntakeApp."""
import logging

from ..services.api_service import APIError, AuthorizationError


class AdminHandler:
    """Handles the API-key gated admin area.

    Every admin call goes through the AdminSession; when the backend rejects
    the key the session is cleared and the key prompt is shown again.
    """

    def __init__(self, app):
        self.app = app
        self.session = app.admin_session
        self.logger = logging.getLogger(self.__class__.__name__)
        self.login_ui = None
        from ..ui.admin_view import AdminView
        self.view = AdminView(self)

    def _run_in_background(self, func, callback, *args, **kwargs):
        future = self.app.executor.submit(func, *args, **kwargs)
        future.add_done_callback(lambda f: self.app.loop.call_soon_threadsafe(callback, f))
        return future

    def _call_admin(self, func, callback, *args):
        """Run an admin API call with the session key in the background."""
        return self._run_in_background(self.session.call, callback, func, *args)

    def _handle_error(self, error, default_message):
        """Report a failed admin call; returns True when the user must log in again."""
        if isinstance(error, AuthorizationError):
            self.app.ui_manager.show_status(error.message or "Authentication required")
            self.show_login()
            return True
        message = error.message if isinstance(error, APIError) else default_message
        self.logger.error(f"{default_message}: {error}")
        self.app.ui_manager.show_status(message or default_message)
        return False

    # Entry and authentication

    def show_admin(self, widget=None):
        if self.session.is_authenticated():
            self.load_submissions()
        else:
            self.show_login()

    def show_login(self):
        from ..ui.login_ui import LoginUI
        self.app.state.clear_admin_state()
        self.login_ui = LoginUI(self.app, self.on_login_success)
        self.app.main_window.content = self.login_ui.layout

    def on_login_success(self, submissions):
        self.app.state.submissions = submissions
        self.app.ui_manager.show_status("API key verified successfully")
        self.show_submissions()

    def logout(self, widget=None):
        self.session.logout()
        self.app.state.clear_admin_state()
        self.app.ui_manager.show_status("Logged out")
        self.app.ui_manager.show_home()

    # Submissions

    def show_submissions(self, widget=None):
        self.app.main_window.content = self.view.create_submissions_layout(self.app.state.submissions)

    def load_submissions(self, widget=None):
        self.app.ui_manager.show_status("Loading submissions...")
        self._call_admin(self.app.api_service.get_submissions, self._on_submissions_loaded)

    def _on_submissions_loaded(self, future):
        try:
            submissions = future.result()
        except (APIError, OSError) as e:
            self._handle_error(e, "Failed to fetch submissions")
            return
        self.app.state.submissions = submissions
        self.app.ui_manager.show_status(f"Loaded {len(submissions)} submissions")
        self.show_submissions()

    def show_submission(self, submission_id):
        self.app.ui_manager.show_status("Loading submission...")
        self._call_admin(self.app.api_service.get_submission, self._on_submission_loaded, submission_id)

    def _on_submission_loaded(self, future):
        try:
            submission = future.result()
        except (APIError, OSError) as e:
            self._handle_error(e, "Failed to fetch submission details")
            return
        self.app.state.current_submission = submission
        self.app.ui_manager.show_status('')
        self.app.main_window.content = self.view.create_submission_layout(submission)

    # Settings

    def show_settings(self, widget=None):
        """Show the managed lists, refreshing them from the backend."""
        self.app.main_window.content = self.view.create_settings_layout(
            self.app.state.salesmen, self.app.state.building_types
        )
        self._run_in_background(self._fetch_managed_lists, self._on_managed_lists_loaded)

    def _fetch_managed_lists(self):
        api = self.app.api_service
        return api.get_salesmen(), api.get_building_types()

    def _on_managed_lists_loaded(self, future):
        try:
            salesmen, building_types = future.result()
        except (APIError, OSError) as e:
            self._handle_error(e, "Failed to fetch settings")
            return
        self.app.state.salesmen = salesmen
        self.app.state.building_types = building_types
        self.view.show_managed_lists(salesmen, building_types)

    def add_salesman(self, name):
        name = (name or '').strip()
        if not name:
            self.app.ui_manager.show_status("Please enter a salesman name")
            return None
        return self._call_admin(self.app.api_service.add_salesman, self._on_salesman_added, name)

    def _on_salesman_added(self, future):
        try:
            salesmen = future.result()
        except (APIError, OSError) as e:
            self._handle_error(e, "Failed to add salesman")
            return
        if salesmen is not None:
            self.app.state.salesmen = salesmen
            self.app.intake_handler.salesman_select.set_options(salesmen)
        self.app.ui_manager.show_status("Salesman added successfully")
        self.view.show_managed_lists(self.app.state.salesmen, self.app.state.building_types)
        self.view.clear_setting_inputs()

    def add_building_type(self, name):
        name = (name or '').strip()
        if not name:
            self.app.ui_manager.show_status("Please enter a building type")
            return None
        return self._call_admin(self.app.api_service.add_building_type, self._on_building_type_added, name)

    def _on_building_type_added(self, future):
        try:
            building_types = future.result()
        except (APIError, OSError) as e:
            self._handle_error(e, "Failed to add building type")
            return
        if building_types is not None:
            self.app.state.building_types = building_types
            self.app.intake_handler.building_type_select.set_options(building_types)
        self.app.ui_manager.show_status("Building type added successfully")
        self.view.show_managed_lists(self.app.state.salesmen, self.app.state.building_types)
        self.view.clear_setting_inputs()
