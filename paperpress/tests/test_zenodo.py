"""Tests for the Zenodo publishing client."""

from unittest.mock import MagicMock

import pytest

from paperpress.config import Config
from paperpress.core.models import Author
from paperpress.exceptions import ConfigurationError, PublishError
from paperpress.providers.zenodo import ZenodoClient

API = "https://zenodo.test/api/deposit/depositions"


def fake_response(status, payload):
    response = MagicMock()
    response.status_code = status
    response.json.return_value = payload
    response.text = str(payload)
    return response


@pytest.fixture
def pdf(tmp_path):
    path = tmp_path / "paper.pdf"
    path.write_bytes(b"%PDF-1.5 test")
    return path


@pytest.fixture
def session():
    return MagicMock()


def make_client(session, token="tok"):
    return ZenodoClient(Config(settings_path=None, zenodo_api_url=API), token=token, session=session)


class TestPublish:
    def test_three_sequential_requests(self, session, pdf):
        deposition = {
            "id": 42,
            "links": {
                "bucket": "https://zenodo.test/files/bucket-1",
                "latest_draft_html": "https://zenodo.test/deposit/42",
            },
        }
        session.request.side_effect = [
            fake_response(201, deposition),
            fake_response(200, {}),
            fake_response(202, {}),
        ]

        url = make_client(session).publish(
            str(pdf), "A Title", [Author("Doe, Jane", "MIT", "0000-0001")]
        )

        assert url == "https://zenodo.test/deposit/42"
        calls = session.request.call_args_list
        assert [(c.args[0], c.args[1]) for c in calls] == [
            ("POST", API),
            ("PUT", "https://zenodo.test/files/bucket-1/paper.pdf"),
            ("POST", f"{API}/42/actions/publish"),
        ]

        metadata = calls[0].kwargs["json"]["metadata"]
        assert metadata["title"] == "A Title"
        assert metadata["upload_type"] == "publication"
        assert metadata["publication_type"] == "article"
        assert metadata["creators"] == [
            {"name": "Doe, Jane", "affiliation": "MIT", "orcid": "0000-0001"}
        ]
        assert calls[1].kwargs["data"] == b"%PDF-1.5 test"
        assert calls[1].kwargs["headers"]["Content-Type"] == "application/pdf"
        for c in calls:
            assert c.kwargs["headers"]["Authorization"] == "Bearer tok"

    def test_http_error(self, session, pdf):
        session.request.return_value = fake_response(401, {"message": "bad token"})
        with pytest.raises(PublishError) as excinfo:
            make_client(session).publish(str(pdf), "T", [Author("A")])
        assert excinfo.value.status_code == 401
        assert session.request.call_count == 1

    def test_missing_token(self, session, pdf):
        with pytest.raises(ConfigurationError, match="ZENODO_TOKEN"):
            make_client(session, token=None).publish(str(pdf), "T", [Author("A")])
        session.request.assert_not_called()

    def test_missing_file(self, session, tmp_path):
        with pytest.raises(FileNotFoundError):
            make_client(session).publish(str(tmp_path / "nope.pdf"), "T", [Author("A")])

    def test_requires_author(self, session, pdf):
        with pytest.raises(PublishError, match="author"):
            make_client(session).publish(str(pdf), "T", [])

    def test_unexpected_deposition_shape(self, session, pdf):
        session.request.return_value = fake_response(201, {"id": 1})
        with pytest.raises(PublishError, match="Unexpected"):
            make_client(session).publish(str(pdf), "T", [Author("A")])
