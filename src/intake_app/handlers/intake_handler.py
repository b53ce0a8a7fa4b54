"""Intake form handlers for IntakeApp."""
import logging

import toga

from shared.enums import FormField, PhotoType
from ..services.api_service import APIError
from ..services.form_pipeline import FormPipeline, SubmissionOutcome, UNEXPECTED_FAILURE_MESSAGE
from ..services.location_service import LocationUnavailableError
from ..ui.searchable_select import SearchableSelect

LOAD_FAILED_MESSAGE = "Failed to load form data. Please refresh the page."
LOCATION_CAPTURED_MESSAGE = "Location captured successfully"
SUBMIT_SUCCESS_MESSAGE = "Form submitted successfully!"
FIX_ERRORS_MESSAGE = "Please fix the highlighted fields"


class IntakeHandler:
    """Handles the intake form: option lists, field edits, photos and submit."""

    def __init__(self, app):
        self.app = app
        self.logger = logging.getLogger(self.__class__.__name__)
        config = app.config
        self.pipeline = FormPipeline(app.api_service, config.max_upload_bytes)

        self.salesman_select = SearchableSelect(
            placeholder="Select a salesman",
            on_change=lambda value: self.set_field(FormField.SALESMAN_NAME, value),
            on_search=self.search_salesmen,
            server_search_enabled=True,
            debounce_time=config.search_debounce,
            on_search_error=lambda e: self._post_status("Failed to search salesmen"),
        )
        self.village_select = SearchableSelect(
            placeholder="Select or type village name",
            on_change=lambda value: self.set_field(FormField.VILLAGE, value),
            on_search=self.search_villages,
            server_search_enabled=True,
            debounce_time=config.village_search_debounce,
            on_search_error=lambda e: self._post_status("Failed to search villages"),
        )
        self.building_type_select = SearchableSelect(
            placeholder="Select building type",
            on_change=lambda value: self.set_field(FormField.BUILDING_TYPE, value),
        )

        from ..ui.intake_view import IntakeView
        self.view = IntakeView(self)

    @property
    def selects(self):
        return (self.salesman_select, self.village_select, self.building_type_select)

    def _run_in_background(self, func, callback, *args):
        """Run func on the executor and hand the future to callback on the UI loop."""
        future = self.app.executor.submit(func, *args)
        future.add_done_callback(lambda f: self.app.loop.call_soon_threadsafe(callback, f))
        return future

    def _post_status(self, message):
        """Show a status message from any thread."""
        self.app.loop.call_soon_threadsafe(self.app.ui_manager.show_status, message)

    # Form display

    def show_form(self, widget=None):
        self.app.main_window.content = self.view.create_form_layout()
        if not self.app.state.building_types and not self.app.state.options_loading:
            self.load_form_data()

    def start_new_form(self, widget=None):
        self.app.state.reset_form_state()
        for select in self.selects:
            select.value = ''
            select.close()
        self.show_form()

    # Option lists

    def load_form_data(self, widget=None):
        """Fetch building types plus the initial salesman and village lists."""
        self.app.state.options_loading = True
        for select in self.selects:
            select.loading = True
        self._run_in_background(self._fetch_form_data, self._on_form_data_loaded)

    def _fetch_form_data(self):
        api = self.app.api_service
        building_types = api.get_building_types()
        salesmen = api.search_salesmen("")
        villages = api.search_villages("")
        return building_types, salesmen, villages

    def _on_form_data_loaded(self, future):
        state = self.app.state
        state.options_loading = False
        try:
            state.building_types, state.salesmen, state.villages = future.result()
        except APIError as e:
            self.logger.error(f"Error fetching form data: {e.message}")
            self.app.ui_manager.show_status(LOAD_FAILED_MESSAGE)
        else:
            self.building_type_select.set_options(state.building_types)
            self.salesman_select.set_options(state.salesmen)
            self.village_select.set_options(state.villages)
            self.logger.info(f"Loaded {len(state.building_types)} building types, {len(state.salesmen)} salesmen, {len(state.villages)} villages")
        finally:
            for select in self.selects:
                select.loading = False

    def search_salesmen(self, query):
        """Remote search for salesmen; None keeps the list for short queries."""
        if len(query.strip()) < self.app.config.salesman_min_query:
            return None
        return self.app.api_service.search_salesmen(query)

    def search_villages(self, query):
        """Remote search for villages; None keeps the list for short queries."""
        if len(query.strip()) < self.app.config.village_min_query:
            return None
        return self.app.api_service.search_villages(query)

    # Field edits

    def set_field(self, name, value):
        """Update one draft field and drop its stale error."""
        name = FormField(name).value
        self.app.state.draft.set_field(name, value)
        if self.app.state.field_errors.pop(name, None) is not None:
            self.view.show_field_errors(self.app.state.field_errors)

    def on_text_change(self, name):
        """on_change callback for a text input bound to the given field."""
        return lambda widget: self.set_field(name, widget.value)

    def toggle_operator(self, operator, enabled):
        self.app.state.draft.toggle_operator(operator, enabled)
        if self.app.state.draft.operators:
            self.app.state.field_errors.pop(FormField.OPERATORS.value, None)
            self.view.show_field_errors(self.app.state.field_errors)

    # Photos

    async def pick_photos(self, widget):
        dialog = toga.OpenFileDialog(
            "Select building photos",
            file_types=PhotoType.file_extensions(),
            multiple_select=True,
        )
        paths = await self.app.main_window.dialog(dialog)
        if paths:
            self.add_photos(paths)

    def add_photos(self, paths):
        """Attach photo files to the draft.

        Returns:
            dict: {path: error message} for the files that were skipped
        """
        attachments, failures = self.app.image_service.load_attachments(paths)
        draft = self.app.state.draft
        for attachment in attachments:
            if draft.find_photo(attachment.filename) is None:
                draft.building_photos.append(attachment)
        if attachments:
            self.app.state.field_errors.pop(FormField.BUILDING_PHOTOS.value, None)
        if failures:
            self.app.ui_manager.show_status(f"Skipped {len(failures)} file(s) that are not valid photos")
        self.view.refresh_photos()
        self.view.show_field_errors(self.app.state.field_errors)
        return failures

    def remove_photo(self, filename):
        draft = self.app.state.draft
        photo = draft.find_photo(filename)
        if photo is not None:
            draft.building_photos.remove(photo)
            self.view.refresh_photos()

    # Location

    async def capture_location(self, widget=None):
        """Fill the coordinates field from the device position."""
        self.view.set_location_busy(True)
        try:
            coordinates = await self.app.location_service.capture_coordinates()
        except LocationUnavailableError as e:
            self.logger.warning(f"Location capture failed: {e}")
            self.app.ui_manager.show_status(str(e))
            return None
        finally:
            self.view.set_location_busy(False)

        self.set_field(FormField.COORDINATES, coordinates)
        self.view.set_coordinates(coordinates)
        self.app.ui_manager.show_status(LOCATION_CAPTURED_MESSAGE)
        return coordinates

    # Submission

    def submit_draft(self):
        """Validate and send the current draft; blocking."""
        return self.pipeline.submit(self.app.state.draft)

    def submit_form(self, widget=None):
        state = self.app.state
        if state.submitting:
            return
        state.submitting = True
        self.view.set_submitting(True)
        self.app.ui_manager.show_status("Submitting...")
        self._run_in_background(self.submit_draft, self._on_submit_complete)

    def _on_submit_complete(self, future):
        state = self.app.state
        state.submitting = False
        self.view.set_submitting(False)
        try:
            outcome = future.result()
        except Exception:
            self.logger.exception("Submission crashed")
            outcome = SubmissionOutcome(message=UNEXPECTED_FAILURE_MESSAGE)

        state.field_errors = dict(outcome.field_errors)
        self.view.show_field_errors(state.field_errors)

        if outcome.success:
            state.last_submission_id = outcome.submission_id
            state.reset_form_state()
            for select in self.selects:
                select.value = ''
            self.app.ui_manager.show_status(SUBMIT_SUCCESS_MESSAGE)
            self.app.main_window.content = self.view.create_success_layout(outcome.submission_id)
        elif outcome.has_field_errors:
            self.app.ui_manager.show_status(FIX_ERRORS_MESSAGE)
        else:
            self.app.ui_manager.show_status(outcome.message)
        return outcome

    def shutdown(self):
        for select in self.selects:
            select.dispose()
