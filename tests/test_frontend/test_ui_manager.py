"""Tests for UI manager and views."""
from unittest.mock import Mock, patch

import pytest

from shared.models import Attachment
from shared.schemas import FormSubmission
from src.intake_app.ui.searchable_select import SearchableSelect


def widget_factory(*args, **kwargs):
    widget = Mock()
    widget.children = []
    widget.value = kwargs.get('value', '')
    return widget


@pytest.fixture
def mock_toga():
    toga = Mock()
    for name in ('Box', 'Button', 'Label', 'TextInput', 'MultilineTextInput', 'Switch',
                 'ScrollContainer', 'Table', 'Selection', 'ImageView', 'Image', 'PasswordInput'):
        setattr(toga, name, Mock(side_effect=widget_factory))
    return toga


class TestUIManager:
    """Test UI manager functionality."""

    def test_ui_manager_initialization(self):
        mock_app = Mock()
        from src.intake_app.ui_manager import UIManager

        ui_manager = UIManager(mock_app)
        assert ui_manager.app == mock_app
        assert ui_manager.main_window is None
        assert ui_manager.status_label is None

    def test_create_main_ui(self, mock_toga):
        from src.intake_app.ui_manager import UIManager

        with patch('src.intake_app.ui_manager.toga', mock_toga):
            mock_app = Mock()
            ui_manager = UIManager(mock_app)
            ui_manager.main_window = Mock()
            ui_manager.create_main_ui()

        labels = [c.args[0] for c in mock_toga.Button.call_args_list]
        assert labels == ['New Order Form', 'Reload Lists', 'Admin']
        assert ui_manager.status_label is not None
        assert ui_manager.main_window.content is not None

    def test_show_status_survives_screen_changes(self, mock_toga):
        from src.intake_app.ui_manager import UIManager

        with patch('src.intake_app.ui_manager.toga', mock_toga):
            ui_manager = UIManager(Mock())
            ui_manager.show_status('Saved')
            label = ui_manager.create_status_label()

        assert mock_toga.Label.call_args.args[0] == 'Saved'
        ui_manager.show_status('Next')
        assert label.text == 'Next'


class TestSearchableSelectView:

    def test_render_open_remote_results(self, mock_app, mock_toga):
        from src.intake_app.ui.select_view import NO_OPTIONS_TEXT, SearchableSelectView

        select = SearchableSelect(options=['Shop', 'Terrace'], placeholder='Select building type')
        with patch('src.intake_app.ui.select_view.toga', mock_toga):
            view = SearchableSelectView(mock_app, select)
            view.create_layout()
            assert view.toggle_button.text == 'Select building type'

            select.type_query('ter')
            option_labels = [c.args[0] for c in mock_toga.Button.call_args_list[1:]]
            assert option_labels == ['Terrace']
            assert view.popover.style.visibility == 'visible'

            select.type_query('zzz')
            assert view.status_label.text == NO_OPTIONS_TEXT

            select.close()
            assert view.popover.style.visibility == 'hidden'

    def test_option_press_selects(self, mock_app, mock_toga):
        from src.intake_app.ui.select_view import SearchableSelectView

        on_change = Mock()
        select = SearchableSelect(options=['Shop'], on_change=on_change)
        with patch('src.intake_app.ui.select_view.toga', mock_toga):
            view = SearchableSelectView(mock_app, select)
            view.create_layout()
            select.open()
            view.on_option_press('Shop')

        on_change.assert_called_once_with('Shop')
        assert view.toggle_button.text == 'Shop'

    def test_on_open_callback(self, mock_app, mock_toga):
        from src.intake_app.ui.select_view import SearchableSelectView

        on_open = Mock()
        select = SearchableSelect(options=['Shop'])
        with patch('src.intake_app.ui.select_view.toga', mock_toga):
            view = SearchableSelectView(mock_app, select, on_open=on_open)
            view.create_layout()
            view.on_toggle(None)
        on_open.assert_called_once_with(view)


class TestIntakeView:

    def test_create_form_layout(self, mock_app, mock_toga):
        from src.intake_app.handlers.intake_handler import IntakeHandler

        mock_app.image_service.thumbnail_for.return_value = None
        mock_app.state.draft.building_photos = [Attachment.from_bytes('a.jpg', b'abc')]
        handler = IntakeHandler(mock_app)
        with patch('src.intake_app.ui.intake_view.toga', mock_toga), \
                patch('src.intake_app.ui.select_view.toga', mock_toga):
            handler.view.create_form_layout()

        view = handler.view
        assert set(view.error_labels) == {
            'salesmanName', 'customerName', 'customerAddress', 'customerHomeNo', 'village',
            'coordinates', 'buildingType', 'operators', 'remarks', 'buildingPhotos',
        }
        assert list(view.operator_switches) == ['CGS', 'FS', 'SIP']
        assert len(view.select_views) == 3
        mock_toga.ScrollContainer.assert_called_once()

    def test_show_field_errors(self, mock_app, mock_toga):
        from src.intake_app.handlers.intake_handler import IntakeHandler

        handler = IntakeHandler(mock_app)
        with patch('src.intake_app.ui.intake_view.toga', mock_toga), \
                patch('src.intake_app.ui.select_view.toga', mock_toga):
            handler.view.create_form_layout()
            handler.view.show_field_errors({'village': "Village name is required"})

        assert handler.view.error_labels['village'].text == "Village name is required"
        assert handler.view.error_labels['remarks'].text == ''

    def test_opening_one_select_closes_others(self, mock_app, mock_toga):
        from src.intake_app.handlers.intake_handler import IntakeHandler

        handler = IntakeHandler(mock_app)
        with patch('src.intake_app.ui.intake_view.toga', mock_toga), \
                patch('src.intake_app.ui.select_view.toga', mock_toga):
            handler.view.create_form_layout()
            handler.building_type_select.open()
            handler.salesman_select.open()

        assert handler.salesman_select.is_open
        assert not handler.building_type_select.is_open
        handler.shutdown()

    def test_view_methods_before_layout(self, mock_app):
        from src.intake_app.handlers.intake_handler import IntakeHandler

        view = IntakeHandler(mock_app).view
        view.refresh_photos()
        view.set_location_busy(True)
        view.set_coordinates('1,2')
        view.set_submitting(True)


class TestAdminView:

    def test_submissions_table(self, mock_app, mock_toga):
        from src.intake_app.ui.admin_view import AdminView, SUBMISSION_HEADINGS

        handler = Mock(app=mock_app)
        with patch('src.intake_app.ui.admin_view.toga', mock_toga):
            view = AdminView(handler)
            view.create_submissions_layout([FormSubmission(id='1', salesmanName='Ahmad')])

        kwargs = mock_toga.Table.call_args.kwargs
        assert kwargs['headings'] == SUBMISSION_HEADINGS
        assert kwargs['data'][0][0] == '1'
        assert kwargs['data'][0][2] == 'Ahmad'

    def test_activate_row_opens_detail(self, mock_app):
        from src.intake_app.ui.admin_view import AdminView

        handler = Mock(app=mock_app)
        view = AdminView(handler)
        view.on_submission_activate(None, row=Mock(id='5'))
        handler.show_submission.assert_called_once_with('5')

    def test_submission_detail(self, mock_app, mock_toga):
        from src.intake_app.ui.admin_view import AdminView

        handler = Mock(app=mock_app)
        submission = FormSubmission(id='5', operators=['CGS', 'SIP'], buildingPhotos=['http://x/a.jpg'])
        with patch('src.intake_app.ui.admin_view.toga', mock_toga):
            AdminView(handler).create_submission_layout(submission)

        label_texts = [c.args[0] for c in mock_toga.Label.call_args_list if c.args]
        assert 'CGS, SIP' in label_texts
        assert 'http://x/a.jpg' in label_texts

    def test_settings_lists(self, mock_app, mock_toga):
        from src.intake_app.ui.admin_view import AdminView

        handler = Mock(app=mock_app)
        with patch('src.intake_app.ui.admin_view.toga', mock_toga):
            view = AdminView(handler)
            view.create_settings_layout(['Ahmad'], ['Shop'])
            view.show_managed_lists(['Ahmad', 'Zainal'], ['Shop'])
            view.clear_setting_inputs()

        assert view.salesmen_list.items == ['Ahmad', 'Zainal']
        assert view.salesman_input.value == ''
