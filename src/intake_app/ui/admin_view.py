"""Admin area UI views."""
import toga
from toga.style import Pack
from toga.style.pack import COLUMN, ROW

SUBMISSION_HEADINGS = ['ID', 'Date', 'Salesman', 'Customer', 'Village', 'Building Type']


class AdminView:
    """View class for the admin area.

    Builds the submissions table, the submission detail and the settings
    screen. AdminHandler holds the logic.
    """

    def __init__(self, handler):
        self.handler = handler
        self.app = handler.app
        self.submissions_table = None
        self.salesman_input = None
        self.building_type_input = None
        self.salesmen_list = None
        self.building_types_list = None

    def _nav_bar(self):
        handler = self.handler
        return toga.Box(
            children=[
                toga.Button("Submissions", on_press=handler.load_submissions, style=Pack(padding=(0, 5, 0, 0))),
                toga.Button("Settings", on_press=handler.show_settings, style=Pack(padding=(0, 5, 0, 0))),
                toga.Button("Home", on_press=self.app.ui_manager.show_home, style=Pack(padding=(0, 5, 0, 0))),
                toga.Button("Logout", on_press=handler.logout),
            ],
            style=Pack(direction=ROW, padding=(0, 0, 15, 0))
        )

    def _title(self, text):
        return toga.Label(text, style=Pack(padding=(0, 0, 10, 0), font_size=18, font_weight='bold'))

    def create_submissions_layout(self, submissions):
        rows = [
            (s.id, s.timestamp, s.salesman_name, s.customer_name, s.village, s.building_type)
            for s in submissions
        ]
        self.submissions_table = toga.Table(
            headings=SUBMISSION_HEADINGS,
            data=rows,
            on_activate=self.on_submission_activate,
            style=Pack(flex=1)
        )
        children = [self._nav_bar(), self._title("Form Submissions")]
        if rows:
            children.append(self.submissions_table)
        else:
            children.append(toga.Label("No submissions found", style=Pack(padding=10, color='#666666')))
        children.append(self.app.ui_manager.create_status_label())
        return toga.Box(children=children, style=Pack(direction=COLUMN, padding=20, flex=1))

    def on_submission_activate(self, widget, row=None, **kwargs):
        if row is not None:
            self.handler.show_submission(row.id)

    def create_submission_layout(self, submission):
        """Read-only detail of one submission."""
        details = [
            ("Submission ID", submission.id),
            ("Date", submission.timestamp),
            ("Salesman", submission.salesman_name),
            ("Customer Name", submission.customer_name),
            ("Customer Address", submission.customer_address),
            ("Customer Home No", submission.customer_home_no or '-'),
            ("Village", submission.village),
            ("Coordinates", submission.coordinates),
            ("Building Type", submission.building_type),
            ("Operators", ', '.join(submission.operators) or '-'),
            ("Remarks", submission.remarks or '-'),
        ]
        box = toga.Box(style=Pack(direction=COLUMN, padding=20))
        box.add(self._nav_bar())
        box.add(self._title("Submission Details"))
        for label, value in details:
            box.add(toga.Box(
                children=[
                    toga.Label(f"{label}:", style=Pack(width=150, font_weight='bold')),
                    toga.Label(str(value), style=Pack(flex=1)),
                ],
                style=Pack(direction=ROW, padding=(2, 0))
            ))

        box.add(self._title("Building Photos"))
        if submission.building_photos:
            for url in submission.building_photos:
                box.add(toga.Label(url, style=Pack(padding=(2, 0))))
        else:
            box.add(toga.Label("No photos", style=Pack(color='#666666')))

        box.add(toga.Button("Back to Submissions", on_press=self.handler.show_submissions, style=Pack(padding=(15, 0, 0, 0))))
        box.add(self.app.ui_manager.create_status_label())
        return toga.ScrollContainer(content=box, horizontal=False, style=Pack(flex=1))

    def create_settings_layout(self, salesmen, building_types):
        self.salesman_input = toga.TextInput(placeholder="Enter new salesman name", style=Pack(flex=1, padding=(0, 5, 0, 0)))
        self.building_type_input = toga.TextInput(placeholder="Enter new building type", style=Pack(flex=1, padding=(0, 5, 0, 0)))
        self.salesmen_list = toga.Selection(items=list(salesmen), style=Pack(padding=(5, 0, 15, 0)))
        self.building_types_list = toga.Selection(items=list(building_types), style=Pack(padding=(5, 0, 15, 0)))

        add_salesman_row = toga.Box(
            children=[
                self.salesman_input,
                toga.Button("Add Salesman", on_press=lambda w: self.handler.add_salesman(self.salesman_input.value)),
            ],
            style=Pack(direction=ROW)
        )
        add_building_type_row = toga.Box(
            children=[
                self.building_type_input,
                toga.Button("Add Building Type", on_press=lambda w: self.handler.add_building_type(self.building_type_input.value)),
            ],
            style=Pack(direction=ROW)
        )
        return toga.Box(
            children=[
                self._nav_bar(),
                self._title("Salesmen"), add_salesman_row, self.salesmen_list,
                self._title("Building Types"), add_building_type_row, self.building_types_list,
                self.app.ui_manager.create_status_label(),
            ],
            style=Pack(direction=COLUMN, padding=20)
        )

    def show_managed_lists(self, salesmen, building_types):
        if self.salesmen_list is not None:
            self.salesmen_list.items = list(salesmen)
        if self.building_types_list is not None:
            self.building_types_list.items = list(building_types)

    def clear_setting_inputs(self):
        for widget in (self.salesman_input, self.building_type_input):
            if widget is not None:
                widget.value = ''
