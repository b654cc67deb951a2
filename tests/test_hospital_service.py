import io
import os

import pytest
from flask import current_app
from sqlalchemy.exc import OperationalError
from werkzeug.datastructures import FileStorage

from extensions import db
from src.services import hospital_service, storage_service
from src.services.errors import NotFoundError, ServiceError, StorageError


def _image(name="front.jpg", content=b"fake-image"):
    return FileStorage(stream=io.BytesIO(content), filename=name)


def _on_disk(key):
    return os.path.exists(os.path.join(current_app.config["UPLOAD_FOLDER"], key))


def _uploads():
    return sorted(os.listdir(os.path.join(current_app.config["UPLOAD_FOLDER"], "hospitals")))


def _failing_commit():
    raise OperationalError("COMMIT", {}, Exception("database is locked"))


def test_create_and_fetch_hospital(app_ctx):
    created = hospital_service.create_hospital({"name": "City General", "address": "1 Main St", "description": "Beds"})
    assert created["status"] == "active"
    assert created["photo"] == ""

    fetched = hospital_service.fetch_hospital_by_id(created["id"])
    assert fetched["name"] == "City General"
    assert [h["id"] for h in hospital_service.fetch_hospitals()] == [created["id"]]


def test_fetch_unknown_hospital(app_ctx):
    with pytest.raises(NotFoundError, match="Hospital not found"):
        hospital_service.fetch_hospital_by_id("missing")


def test_create_hospital_with_photo(app_ctx):
    created = hospital_service.create_hospital({"name": "City", "description": "Beds"}, image_file=_image())
    assert created["photo"].startswith("hospitals/")
    assert created["photo"].endswith("_front.jpg")
    assert _on_disk(created["photo"])


def test_create_hospital_rejects_non_image(app_ctx):
    with pytest.raises(StorageError):
        hospital_service.create_hospital({"name": "City", "description": "Beds"}, image_file=_image("notes.exe"))
    assert hospital_service.fetch_hospitals() == []


def test_update_hospital_replaces_photo(app_ctx):
    created = hospital_service.create_hospital({"name": "City", "description": "Beds"}, image_file=_image("old.png"))
    old_key = created["photo"]

    updated = hospital_service.update_hospital(
        created["id"], {"name": "City North", "description": "More beds"}, image_file=_image("new.png")
    )
    assert updated["name"] == "City North"
    assert updated["photo"] != old_key
    assert _on_disk(updated["photo"])
    assert not _on_disk(old_key)


def test_create_hospital_db_failure_removes_photo(app_ctx, monkeypatch):
    monkeypatch.setattr(db.session, "commit", _failing_commit)
    with pytest.raises(ServiceError, match="Failed to create hospital"):
        hospital_service.create_hospital({"name": "City", "description": "Beds"}, image_file=_image())
    assert _uploads() == []
    assert hospital_service.fetch_hospitals() == []


def test_update_hospital_db_failure_keeps_old_photo(app_ctx, monkeypatch):
    created = hospital_service.create_hospital({"name": "City", "description": "Beds"}, image_file=_image("old.png"))

    monkeypatch.setattr(db.session, "commit", _failing_commit)
    with pytest.raises(ServiceError, match="Failed to update hospital"):
        hospital_service.update_hospital(created["id"], {"name": "City"}, image_file=_image("new.png"))

    assert _on_disk(created["photo"])
    assert _uploads() == [created["photo"].split("/", 1)[1]]
    assert hospital_service.fetch_hospital_by_id(created["id"])["photo"] == created["photo"]


def test_update_hospital_without_image_keeps_photo(app_ctx):
    created = hospital_service.create_hospital({"name": "City", "description": "Beds"}, image_file=_image())
    updated = hospital_service.update_hospital(created["id"], {"name": "City", "description": "Renovated"})
    assert updated["photo"] == created["photo"]
    assert updated["description"] == "Renovated"


def test_delete_hospital_removes_photo(app_ctx):
    created = hospital_service.create_hospital({"name": "City", "description": "Beds"}, image_file=_image())
    assert hospital_service.delete_hospital(created["id"])
    assert not _on_disk(created["photo"])
    with pytest.raises(NotFoundError):
        hospital_service.delete_hospital(created["id"])


def test_delete_hospital_with_missing_photo_file(app_ctx):
    created = hospital_service.create_hospital({"name": "City", "description": "Beds"}, image_file=_image())
    os.remove(os.path.join(current_app.config["UPLOAD_FOLDER"], created["photo"]))
    # Photo cleanup is best effort
    assert hospital_service.delete_hospital(created["id"])


def test_get_hospital_by_admin_id(app_ctx):
    from src.services.auth_service import register_hospital

    result = register_hospital("15550000002", "pw123456", "City", "1 Main St")
    assert hospital_service.get_hospital_by_admin_id(result["user_id"])["id"] == result["hospital_id"]
    assert hospital_service.get_hospital_by_admin_id("nobody") is None


def test_photo_path_refuses_traversal(app_ctx):
    with pytest.raises(StorageError):
        storage_service.photo_path("../secrets.txt")
    assert not storage_service.delete_photo("../secrets.txt")
