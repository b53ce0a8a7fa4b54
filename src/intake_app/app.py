"""Field Intake App - Main application."""
import toga

from .state import SessionState
from .handlers.intake_handler import IntakeHandler
from .handlers.admin_handler import AdminHandler
from .ui_manager import UIManager
from .config_manager import ConfigManager
from .services.api_service import APIService
from .services.auth_service import AdminSession, FileKeyStore
from .services.image_service import ImageService
from .services.location_service import LocationService, toga_location_provider
from .logging_config import setup_logging
import logging
import concurrent.futures


class IntakeApp(toga.App):
    """Main IntakeApp class."""

    def __init__(self, config=None, key_store=None):
        self.logger = logging.getLogger(self.__class__.__name__)
        self._config = config
        self._key_store = key_store
        super().__init__(formal_name='Field Sales Intake', app_id='com.fieldintake.intakeapp')

    def startup(self):
        """Initialize the app"""
        setup_logging()
        self.logger.info("Starting IntakeApp initialization")

        self.config = self._config or ConfigManager()
        self.logger.info(f"Configuration loaded: API URL={self.config.api_base_url}")

        # Services
        self.api_service = APIService.from_config(self.config)
        self.admin_session = AdminSession(self.api_service, self._key_store or FileKeyStore())
        self.image_service = ImageService(self.config.thumbnail_max_size)
        self.location_service = LocationService(toga_location_provider(self), timeout=self.config.location_timeout)
        self.logger.debug("Services initialized")

        self.state = SessionState()

        # Thread pool executor for network calls
        self.executor = concurrent.futures.ThreadPoolExecutor(max_workers=4)

        # Handlers
        self.intake_handler = IntakeHandler(self)
        self.admin_handler = AdminHandler(self)
        self.logger.debug("Handlers initialized")

        self.ui_manager = UIManager(self)
        self.main_window = toga.MainWindow(title=self.formal_name)
        self.ui_manager.main_window = self.main_window
        self.ui_manager.create_main_ui()

        cmd_home = toga.Command(
            self.ui_manager.show_home,
            text='Home',
            tooltip='Back to the home screen',
            group=toga.Group.FILE,
            section=1
        )
        cmd_new_form = toga.Command(
            self.intake_handler.show_form,
            text='New Order Form',
            tooltip='Start a new order form',
            group=toga.Group.FILE,
            section=1
        )
        cmd_admin = toga.Command(
            self.admin_handler.show_admin,
            text='Admin',
            tooltip='Submissions and settings',
            group=toga.Group.FILE,
            section=2
        )
        self.main_window.toolbar.add(cmd_home, cmd_new_form, cmd_admin)

        self.main_window.show()

        # Fetch option lists in the background so the form opens ready
        self.intake_handler.load_form_data()
        self.logger.info("IntakeApp initialization completed successfully")

    def on_exit(self):
        self.logger.info("Shutting down")
        self.intake_handler.shutdown()
        self.executor.shutdown(wait=False, cancel_futures=True)
        return True


def main():
    return IntakeApp()
