"""Intake form UI views."""
import toga
from toga.style import Pack
from toga.style.pack import COLUMN, ROW

from shared.enums import FormField, Operator
from shared.utils import format_file_size
from .select_view import SearchableSelectView


class IntakeView:
    """View class for the intake form and the success screen.

    Handles all widget construction; IntakeHandler holds the logic.
    """

    def __init__(self, handler):
        """Initialize the intake view.

        Args:
            handler: IntakeHandler instance that handles business logic
        """
        self.handler = handler
        self.app = handler.app
        self.form_box = None
        self.select_views = []
        self.inputs = {}
        self.error_labels = {}
        self.operator_switches = {}
        self.photos_box = None
        self.location_button = None
        self.submit_button = None

    def _field_label(self, text):
        return toga.Label(text, style=Pack(padding=(10, 0, 2, 0), font_weight='bold'))

    def _error_label(self, form_field):
        label = toga.Label('', style=Pack(padding=(0, 0, 5, 0), color='red'))
        self.error_labels[form_field.value] = label
        return label

    def _text_input(self, form_field, placeholder=None, multiline=False):
        draft = self.app.state.draft
        widget_class = toga.MultilineTextInput if multiline else toga.TextInput
        widget = widget_class(
            value=draft.get_field(form_field.value),
            placeholder=placeholder,
            on_change=self.handler.on_text_change(form_field),
            style=Pack(padding=(0, 0, 2, 0))
        )
        self.inputs[form_field.value] = widget
        return widget

    def _select(self, select):
        view = SearchableSelectView(self.app, select, on_open=self._close_other_selects)
        self.select_views.append(view)
        return view.create_layout()

    def _close_other_selects(self, opened_view):
        for view in self.select_views:
            if view is not opened_view:
                view.select.click_outside()

    def create_form_layout(self):
        """Build the intake form for the current draft.

        Returns:
            toga.ScrollContainer: the form, scrollable on small screens
        """
        self.select_views = []
        self.inputs = {}
        self.error_labels = {}
        self.operator_switches = {}
        handler = self.handler
        draft = self.app.state.draft

        for select, form_field in (
            (handler.salesman_select, FormField.SALESMAN_NAME),
            (handler.village_select, FormField.VILLAGE),
            (handler.building_type_select, FormField.BUILDING_TYPE),
        ):
            select.value = draft.get_field(form_field.value)

        title = toga.Label("Order Information Form", style=Pack(padding=(0, 0, 15, 0), font_size=20, font_weight='bold'))

        self.location_button = toga.Button(
            "Get Location",
            on_press=handler.capture_location,
            style=Pack(padding=(0, 0, 0, 5))
        )
        coordinates_row = toga.Box(
            children=[self._text_input(FormField.COORDINATES, "latitude,longitude"), self.location_button],
            style=Pack(direction=ROW)
        )
        self.inputs[FormField.COORDINATES.value].style.flex = 1

        operators_row = toga.Box(style=Pack(direction=ROW, padding=(0, 0, 2, 0)))
        for operator in Operator:
            switch = toga.Switch(
                operator.value,
                value=operator.value in draft.operators,
                on_change=lambda w, op=operator.value: handler.toggle_operator(op, w.value),
                style=Pack(padding=(0, 10, 0, 0))
            )
            self.operator_switches[operator.value] = switch
            operators_row.add(switch)

        self.photos_box = toga.Box(style=Pack(direction=COLUMN))
        photos_button = toga.Button("Add Photos", on_press=handler.pick_photos, style=Pack(padding=(0, 0, 5, 0)))

        self.submit_button = toga.Button("Submit", on_press=handler.submit_form, style=Pack(padding=(15, 0, 10, 0)))

        self.form_box = toga.Box(
            children=[
                title,
                self._field_label("Salesman Name*"), self._select(handler.salesman_select),
                self._error_label(FormField.SALESMAN_NAME),
                self._field_label("Building Type*"), self._select(handler.building_type_select),
                self._error_label(FormField.BUILDING_TYPE),
                self._field_label("Customer Name*"), self._text_input(FormField.CUSTOMER_NAME),
                self._error_label(FormField.CUSTOMER_NAME),
                self._field_label("Customer Address*"), self._text_input(FormField.CUSTOMER_ADDRESS, multiline=True),
                self._error_label(FormField.CUSTOMER_ADDRESS),
                self._field_label("Customer Home No*"), self._text_input(FormField.CUSTOMER_HOME_NO),
                self._error_label(FormField.CUSTOMER_HOME_NO),
                self._field_label("Village*"), self._select(handler.village_select),
                self._error_label(FormField.VILLAGE),
                self._field_label("Coordinates*"), coordinates_row,
                self._error_label(FormField.COORDINATES),
                self._field_label("Operators*"), operators_row,
                self._error_label(FormField.OPERATORS),
                self._field_label("Remarks"), self._text_input(FormField.REMARKS, multiline=True),
                self._error_label(FormField.REMARKS),
                self._field_label("Building Photos"), photos_button, self.photos_box,
                self._error_label(FormField.BUILDING_PHOTOS),
                self.submit_button,
                self.app.ui_manager.create_status_label(),
            ],
            style=Pack(direction=COLUMN, padding=20)
        )
        self.refresh_photos()
        self.show_field_errors(self.app.state.field_errors)
        self.set_submitting(self.app.state.submitting)
        return toga.ScrollContainer(content=self.form_box, horizontal=False, style=Pack(flex=1))

    def show_field_errors(self, field_errors):
        """Show each message under its field and clear the others."""
        for name, label in self.error_labels.items():
            label.text = field_errors.get(name, '')

    def refresh_photos(self):
        if self.photos_box is None:
            return
        for child in list(self.photos_box.children):
            self.photos_box.remove(child)
        for photo in self.app.state.draft.building_photos:
            row = toga.Box(style=Pack(direction=ROW, padding=(2, 0)))
            thumbnail = self.app.image_service.thumbnail_for(photo)
            if thumbnail:
                row.add(toga.ImageView(toga.Image(src=thumbnail), style=Pack(width=48, height=48, padding=(0, 5, 0, 0))))
            row.add(toga.Label(f"{photo.filename} ({format_file_size(photo.size)})", style=Pack(flex=1)))
            row.add(toga.Button(
                "Remove",
                on_press=lambda w, name=photo.filename: self.handler.remove_photo(name)
            ))
            self.photos_box.add(row)

    def set_location_busy(self, busy):
        if self.location_button is not None:
            self.location_button.enabled = not busy
            self.location_button.text = "Locating..." if busy else "Get Location"

    def set_coordinates(self, coordinates):
        widget = self.inputs.get(FormField.COORDINATES.value)
        if widget is not None:
            widget.value = coordinates

    def set_submitting(self, submitting):
        if self.submit_button is not None:
            self.submit_button.enabled = not submitting
            self.submit_button.text = "Submitting..." if submitting else "Submit"

    def create_success_layout(self, submission_id):
        """Confirmation screen shown after the backend accepts a submission."""
        return toga.Box(
            children=[
                toga.Label("Form submitted successfully!", style=Pack(padding=(0, 0, 10, 0), font_size=20, font_weight='bold')),
                toga.Label(f"Submission ID: {submission_id}", style=Pack(padding=(0, 0, 20, 0))),
                toga.Button("Submit Another Form", on_press=self.handler.start_new_form, style=Pack(padding=(0, 0, 10, 0))),
                toga.Button("Home", on_press=self.app.ui_manager.show_home, style=Pack(padding=(0, 0, 10, 0))),
            ],
            style=Pack(direction=COLUMN, padding=20)
        )
