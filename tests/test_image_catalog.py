"""Testes do ImageCatalog: arquivo + linha do catálogo."""

import logging
import os
import re

import pytest

from eventreg.core.errors import MissingUploadError, UploadTooLargeError
from eventreg.core.image_catalog import ImageCatalog
from eventreg.core.models import FeatureImage
from eventreg.infra.file_storage import UploadStorage
from eventreg.storage.base import FeatureImageStore

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"


def test_store_writes_file_and_row(backend, config):
    image = backend.catalog.store("hotel", PNG_BYTES, "lobby.png")

    assert image.id == 1
    assert image.category == "hotel"
    assert re.fullmatch(r"\d+-lobby\.png", image.filename)
    with open(os.path.join(config.uploads_dir, image.filename), "rb") as f:
        assert f.read() == PNG_BYTES
    assert backend.catalog.list_all() == [image]


@pytest.mark.parametrize("content", [None, b""])
def test_store_without_content_is_rejected(backend, config, content):
    with pytest.raises(MissingUploadError):
        backend.catalog.store("hotel", content, "lobby.png")

    assert backend.catalog.list_all() == []
    assert os.listdir(config.uploads_dir) == []


def test_store_above_limit_is_rejected(backend, config):
    with pytest.raises(UploadTooLargeError):
        backend.catalog.store("hotel", b"x" * (config.max_upload_bytes + 1), "big.png")

    assert os.listdir(config.uploads_dir) == []


def test_unknown_category_is_stored(backend):
    image = backend.catalog.store("museum", PNG_BYTES, "hall.png")

    assert [row.category for row in backend.catalog.list_all()] == ["museum"]
    assert image.id == 1


def test_same_original_name_gets_distinct_files(backend):
    first = backend.catalog.store("park", PNG_BYTES, "tree.png")
    second = backend.catalog.store("park", PNG_BYTES, "tree.png")

    assert first.filename != second.filename
    assert first.id != second.id


def test_client_directories_are_stripped(backend, config):
    image = backend.catalog.store("park", PNG_BYTES, "../../etc/passwd")

    assert image.filename.endswith("-etc_passwd")
    assert os.path.isfile(os.path.join(config.uploads_dir, image.filename))


def test_delete_removes_file_and_row(backend, config):
    image = backend.catalog.store("baths", PNG_BYTES, "pool.png")
    path = os.path.join(config.uploads_dir, image.filename)

    assert backend.catalog.delete_by_id(image.id) is True
    assert not os.path.exists(path)
    assert backend.catalog.list_all() == []
    assert backend.catalog.delete_by_id(image.id) is False


def test_delete_of_unknown_id_is_not_found(backend):
    assert backend.catalog.delete_by_id(999) is False


def test_delete_proceeds_when_file_is_already_gone(backend, config):
    image = backend.catalog.store("beaches", PNG_BYTES, "sea.png")
    os.remove(os.path.join(config.uploads_dir, image.filename))

    assert backend.catalog.delete_by_id(image.id) is True
    assert backend.catalog.list_all() == []


class BrokenStore(FeatureImageStore):
    def insert(self, category, filename):
        raise OSError("disk full")

    def list_all(self):
        return []

    def get(self, image_id):
        return None

    def delete(self, image_id):
        return False


def test_failed_insert_removes_the_new_file(tmp_path):
    uploads = UploadStorage(str(tmp_path / "uploads"))
    catalog = ImageCatalog(store=BrokenStore(), uploads=uploads, max_upload_bytes=1024)

    with pytest.raises(OSError):
        catalog.store("hotel", PNG_BYTES, "lobby.png")

    assert os.listdir(uploads.directory) == []


@pytest.mark.parametrize(
    "original,expected",
    [
        ("a b#1.png", "a_b1.png"),
        ("foto?v=2%20.jpg", "fotov220.jpg"),
        ("..\\..\\boot.ini", "boot.ini"),
        ("###", "upload"),
        (None, "upload"),
    ],
)
def test_original_names_are_made_url_safe(original, expected):
    assert UploadStorage.clean_original_name(original) == expected


class VanishingRowStore(BrokenStore):
    """Linha encontrada no get, mas já removida por outra requisição no delete."""

    def get(self, image_id):
        return FeatureImage(id=image_id, category="hotel", filename="1-lobby.png")


def test_delete_lost_to_a_concurrent_delete_is_not_logged_as_removed(tmp_path, caplog):
    uploads = UploadStorage(str(tmp_path / "uploads"))
    catalog = ImageCatalog(store=VanishingRowStore(), uploads=uploads, max_upload_bytes=1024)

    with caplog.at_level(logging.INFO, logger="eventreg.core.image_catalog"):
        assert catalog.delete_by_id(7) is False

    assert "Imagem removida" not in caplog.text
