"""Fixtures compartilhadas: configuração isolada em tmp_path para cada teste."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from eventreg.api.http import create_app
from eventreg.config import AppConfig
from eventreg.core.backend import RegistrationBackend

ADMIN_TOKEN = "s3cret-Token"


def make_config(tmp_path: Path, storage_mode: str = "sql", **overrides) -> AppConfig:
    data_dir = tmp_path / "data"
    admin_file = tmp_path / "admin" / "admin.html"
    admin_file.parent.mkdir(parents=True, exist_ok=True)
    admin_file.write_text("<html><body>painel</body></html>", encoding="utf-8")

    public_dir = tmp_path / "public"
    public_dir.mkdir(parents=True, exist_ok=True)
    (public_dir / "index.html").write_text("<html><body>inscricao</body></html>", encoding="utf-8")

    values = dict(
        admin_token=ADMIN_TOKEN,
        storage_mode=storage_mode,
        data_dir=str(data_dir),
        database_url=f"sqlite:///{data_dir / 'registrations.db'}",
        uploads_dir=str(tmp_path / "uploads"),
        public_dir=str(public_dir),
        admin_page_file=str(admin_file),
        max_upload_bytes=1024,
    )
    values.update(overrides)
    return AppConfig(**values)


@pytest.fixture(params=["sql", "json"])
def storage_mode(request):
    return request.param


@pytest.fixture
def config(tmp_path, storage_mode):
    return make_config(tmp_path, storage_mode)


@pytest.fixture
def backend(config):
    return RegistrationBackend(config)


@pytest.fixture
def client(config):
    app = create_app(config)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_headers():
    return {"X-Admin-Token": ADMIN_TOKEN}


@pytest.fixture
def sample_participant():
    return {
        "fullName": "Maria Souza",
        "phone": "+55 11 99999-0000",
        "birthDate": "1990-04-12",
        "gender": "F",
        "birthPlace": "Campinas",
        "address": "Rua das Flores, 10",
        "jobType": "Enfermeira",
        "firstAid": "yes",
    }


@pytest.fixture
def config_factory(tmp_path):
    """Permite montar configurações com overrides dentro do mesmo tmp_path."""
    def factory(storage_mode: str = "sql", **overrides) -> AppConfig:
        return make_config(tmp_path, storage_mode, **overrides)
    return factory
