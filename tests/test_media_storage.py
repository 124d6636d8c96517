"""Tests for media storage backends."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import HTTPException

from app.config import settings
from app.modules.media.storage import MediaStorage, file_extension, media_type_for
from tests.fakes import FakeSupabase


@pytest.fixture
def s3_settings(monkeypatch):
    monkeypatch.setattr(settings, "aws_access_key_id", "AKIA-test")
    monkeypatch.setattr(settings, "aws_secret_access_key", "secret")
    monkeypatch.setattr(settings, "s3_bucket_name", "instabids-media")


class TestHelpers:
    @pytest.mark.parametrize("name,ext", [
        ("photo.JPG", "jpg"), ("archive.tar.gz", "gz"), ("README", "bin"), (None, "bin"), ("trailing.", "bin"),
    ])
    def test_file_extension(self, name, ext):
        assert file_extension(name) == ext

    def test_media_type(self):
        assert media_type_for("image/png") == "photo"
        assert media_type_for("application/pdf") == "document"
        assert media_type_for(None) == "document"


class TestSupabaseStorage:
    def test_upload_and_sign(self):
        db = FakeSupabase()
        storage = MediaStorage(db, "media")
        assert storage.upload(b"abc", "bid-cards/1/1.png", "image/png") == "bid-cards/1/1.png"
        _, options = db.storage.from_("media").files["bid-cards/1/1.png"]
        assert options["content-type"] == "image/png"
        assert "bid-cards/1/1.png" in storage.signed_url("bid-cards/1/1.png")

    def test_signed_url_failure_returns_none(self):
        db = MagicMock()
        db.storage.from_.return_value.create_signed_url.side_effect = Exception("not found")
        assert MediaStorage(db, "media").signed_url("missing.png") is None

    def test_upload_limit(self, monkeypatch):
        monkeypatch.setattr(settings, "max_upload_bytes", 2)
        with pytest.raises(HTTPException) as exc:
            MediaStorage(FakeSupabase(), "media").upload(b"abc", "x.bin")
        assert exc.value.status_code == 413


class TestS3Storage:
    def test_uses_s3_when_configured(self, s3_settings):
        with patch("app.modules.media.s3_storage.boto3.client") as client_factory:
            s3 = client_factory.return_value
            s3.generate_presigned_url.return_value = "https://s3.test/signed"
            db = FakeSupabase()
            storage = MediaStorage(db, "message_attachments")

            storage.upload(b"abc", "message-attachments/m1/a.pdf", "application/pdf")
            url = storage.signed_url("message-attachments/m1/a.pdf", 60)
            storage.remove(["message-attachments/m1/a.pdf"])

        put_kwargs = s3.put_object.call_args.kwargs
        assert put_kwargs["Bucket"] == "instabids-media"
        assert put_kwargs["Key"] == "message_attachments/message-attachments/m1/a.pdf"
        assert url == "https://s3.test/signed"
        assert s3.delete_objects.call_args.kwargs["Delete"] == {
            "Objects": [{"Key": "message_attachments/message-attachments/m1/a.pdf"}]
        }
        assert db.storage.buckets == {}
        assert storage.public_url("a.png").startswith("https://instabids-media.s3.")
