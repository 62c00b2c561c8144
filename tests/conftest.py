import pytest

from watersurvey import create_app
from watersurvey.config import TestingSettings
from watersurvey.extensions import db
from watersurvey.mirror import MirrorError


class FakeMirror:
    """Stands in for the spreadsheet web app; records what it was sent."""

    def __init__(self, configured=True, records=None, fail_forward=False, fail_fetch=False):
        self.configured = configured
        self.records = records if records is not None else []
        self.fail_forward = fail_forward
        self.fail_fetch = fail_fetch
        self.forwarded = []
        self.fetches = 0

    def forward(self, payload):
        if self.fail_forward:
            raise MirrorError("mirror responded with status: 500")
        self.forwarded.append(payload)

    def fetch_records(self):
        self.fetches += 1
        if self.fail_fetch:
            raise MirrorError("mirror GET failed: connection refused")
        return list(self.records)

    def close(self):
        pass


@pytest.fixture
def mirror():
    return FakeMirror()


@pytest.fixture
def app(mirror, tmp_path):
    app = create_app(TestingSettings(), mirror=mirror)
    app.config["UPLOAD_DIR"] = str(tmp_path / "uploads")
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()
