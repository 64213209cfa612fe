import pytest
from botocore.exceptions import ClientError

from trendhaven.core.config import settings
from trendhaven.core.errors import ConfigurationError
from trendhaven.storage import LocalImageStore, R2ImageStore, get_image_store
from trendhaven.storage.keys import ext_for, outfit_image_key


class DummyS3:
    def __init__(self, delete_error=None):
        self.objects = {}
        self.delete_error = delete_error

    def put_object(self, Bucket, Key, Body, ContentType):
        self.objects[(Bucket, Key)] = (Body, ContentType)

    def delete_object(self, Bucket, Key):
        if self.delete_error:
            raise ClientError({"Error": {"Code": self.delete_error}}, "DeleteObject")
        self.objects.pop((Bucket, Key), None)


def test_outfit_keys_are_scoped_and_unique():
    a = outfit_image_key("user-1", "image/png")
    b = outfit_image_key("user-1", "image/png")
    assert a.startswith("u/user-1/outfits/")
    assert a.endswith(".png")
    assert a != b
    assert ext_for("image/unknown") == "jpg"


def test_local_store_save_url_delete(tmp_path):
    store = LocalImageStore(tmp_path, "/uploads/")
    store.save("u/1/outfits/a.jpg", b"abc", "image/jpeg")
    path = tmp_path / "u/1/outfits/a.jpg"
    assert path.is_file()
    assert path.read_bytes() == b"abc"
    assert store.url("u/1/outfits/a.jpg") == "/uploads/u/1/outfits/a.jpg"
    store.delete("u/1/outfits/a.jpg")
    assert not path.exists()
    # already gone
    store.delete("u/1/outfits/a.jpg")


def test_local_store_rejects_escaping_keys(tmp_path):
    store = LocalImageStore(tmp_path / "root")
    with pytest.raises(ValueError):
        store.save("../outside.jpg", b"x", "image/jpeg")
    assert not (tmp_path / "outside.jpg").exists()


def test_r2_store_puts_and_deletes():
    s3 = DummyS3()
    store = R2ImageStore(client=s3, bucket="bucket", cdn_base="https://cdn.example.com/")
    store.save("k1", b"img", "image/webp")
    assert s3.objects[("bucket", "k1")] == (b"img", "image/webp")
    assert store.url("k1") == "https://cdn.example.com/k1"
    store.delete("k1")
    assert s3.objects == {}


def test_r2_url_without_cdn(monkeypatch):
    monkeypatch.setattr(settings, "R2_ENDPOINT", "https://r2.example.com/")
    store = R2ImageStore(client=DummyS3(), bucket="bucket", cdn_base="")
    assert store.url("k1") == "https://r2.example.com/bucket/k1"


def test_r2_delete_ignores_missing_object():
    R2ImageStore(client=DummyS3(delete_error="NoSuchKey"), bucket="b", cdn_base="").delete("k")
    with pytest.raises(ClientError):
        R2ImageStore(client=DummyS3(delete_error="AccessDenied"), bucket="b", cdn_base="").delete("k")


def test_get_image_store_backends(monkeypatch):
    monkeypatch.setattr(settings, "STORAGE_BACKEND", "local")
    assert isinstance(get_image_store(), LocalImageStore)

    monkeypatch.setattr(settings, "STORAGE_BACKEND", "r2")
    monkeypatch.setattr(settings, "R2_BUCKET", "")
    with pytest.raises(ConfigurationError) as exc:
        get_image_store()
    assert exc.value.extra["setup_required"] is True

    monkeypatch.setattr(settings, "R2_BUCKET", "bucket")
    monkeypatch.setattr(settings, "R2_ENDPOINT", "https://r2.example.com")
    assert isinstance(get_image_store(), R2ImageStore)
