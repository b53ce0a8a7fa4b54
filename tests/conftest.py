"""Pytest configuration and fixtures for intake client tests."""
import io
import concurrent.futures
from unittest.mock import Mock

import pytest
from PIL import Image

from shared.models import Attachment, FormDraft
from src.intake_app.config_manager import ConfigManager
from src.intake_app.state import SessionState


class FakeTimer:
    """threading.Timer stand-in fired by hand from tests."""

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or []
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.function(*self.args, **self.kwargs)


class FakeTimerFactory:
    """Records every timer created so tests can fire the pending one."""

    def __init__(self):
        self.timers = []

    def __call__(self, interval, function, args=None, kwargs=None):
        timer = FakeTimer(interval, function, args, kwargs)
        self.timers.append(timer)
        return timer

    @property
    def pending(self):
        return [t for t in self.timers if t.started and not t.cancelled]

    def fire_pending(self):
        for timer in self.pending:
            timer.fire()


class ImmediateExecutor:
    """Executor running submitted work synchronously."""

    def __init__(self):
        self.submitted = []

    def submit(self, func, *args, **kwargs):
        self.submitted.append(func)
        future = concurrent.futures.Future()
        try:
            future.set_result(func(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


class ImmediateLoop:
    """Event loop stand-in running callbacks at once."""

    def call_soon_threadsafe(self, callback, *args):
        callback(*args)


class MockApp:
    """Mock app class for testing handlers."""

    def __init__(self):
        self.config = ConfigManager(api_base_url='http://test.local/api')
        self.api_service = Mock()
        self.admin_session = Mock()
        self.image_service = Mock()
        self.image_service.load_attachments.return_value = ([], {})
        self.location_service = Mock()
        self.state = SessionState()
        self.executor = ImmediateExecutor()
        self.loop = ImmediateLoop()
        self.ui_manager = Mock()
        self.main_window = Mock()
        self.intake_handler = Mock()


@pytest.fixture
def timer_factory():
    return FakeTimerFactory()


@pytest.fixture
def mock_app():
    """Create a mock app for testing."""
    return MockApp()


def make_image_bytes(fmt='JPEG', size=(64, 48), color='red'):
    img = Image.new('RGB', size, color=color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def jpeg_bytes():
    return make_image_bytes('JPEG')


@pytest.fixture
def png_file(tmp_path):
    path = tmp_path / 'front.png'
    path.write_bytes(make_image_bytes('PNG', color='blue'))
    return path


@pytest.fixture
def jpeg_file(tmp_path):
    path = tmp_path / 'side.jpg'
    path.write_bytes(make_image_bytes('JPEG'))
    return path


@pytest.fixture
def valid_draft():
    """A draft that passes every validation rule."""
    return FormDraft(
        salesman_name='Ahmad',
        customer_name='Siti',
        customer_address='Jalan Merdeka 1',
        customer_home_no='12A',
        village='Kampung Baru',
        coordinates='3.456,89.012',
        building_type='Terrace',
        operators=['CGS', 'FS'],
        remarks='Corner lot',
        building_photos=[
            Attachment.from_bytes('a.jpg', b'a' * 10, 'image/jpeg'),
            Attachment.from_bytes('b.png', b'b' * 20, 'image/png'),
            Attachment.from_bytes('c.webp', b'c' * 30, 'image/webp'),
        ],
    )
