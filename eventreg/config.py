from dataclasses import dataclass, field
import os
import logging
from typing import Dict, FrozenSet
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

FEATURE_CATEGORIES = ("hotel", "beaches", "baths", "park")

DEFAULT_FEATURE_TITLES: Dict[str, str] = {
    "hotel": "Hotel do evento",
    "beaches": "Praias",
    "baths": "Termas",
    "park": "Parque",
}

# Arquivos que nunca devem ser entregues, qualquer que seja o diretório pedido
BASE_PROTECTED_NAMES = frozenset({
    "main.py",
    "pyproject.toml",
    "alembic.ini",
    ".env",
    "admin.html",
    "app.log",
})

STORAGE_MODES = ("sql", "json")


@dataclass(frozen=True)
class AppConfig:
    """
    Configurações principais da aplicação.

    Carregada uma única vez antes de atender requisições e nunca
    alterada depois disso (dataclass congelada).
    """
    admin_token: str = ""
    env: str = "dev"  # "dev" ou "prod"
    storage_mode: str = "sql"  # "sql" ou "json"
    data_dir: str = "./data"
    database_url: str = "sqlite:///./data/registrations.db"
    uploads_dir: str = "./uploads"
    public_dir: str = "./public"
    admin_page_path: str = "/admin-dashboard-access-key-777"
    admin_page_file: str = "./admin/admin.html"
    max_upload_bytes: int = 5 * 1024 * 1024
    feature_titles: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_FEATURE_TITLES)
    )
    log_dir: str = "logs"
    host: str = "0.0.0.0"
    port: int = 8000

    @property
    def participants_file(self) -> str:
        return os.path.join(self.data_dir, "participants.json")

    @property
    def features_file(self) -> str:
        return os.path.join(self.data_dir, "features.json")

    @property
    def protected_names(self) -> FrozenSet[str]:
        """
        Nomes de arquivo bloqueados pelo guard de caminhos.

        Inclui os arquivos de persistência configurados, mesmo que
        eles já fiquem fora de qualquer diretório servido.
        """
        names = set(BASE_PROTECTED_NAMES)
        names.add(os.path.basename(self.participants_file))
        names.add(os.path.basename(self.features_file))
        if self.database_url.startswith("sqlite:///"):
            db_name = os.path.basename(self.database_url[len("sqlite:///"):])
            if db_name:
                names.add(db_name)
        return frozenset(names)

    @classmethod
    def load_from_env(cls) -> "AppConfig":
        """
        Carrega configuração a partir de variáveis de ambiente.
        Primeiro tenta carregar do arquivo .env, depois do ambiente do sistema.
        Levanta erro explícito se algo crítico faltar.
        """
        load_dotenv()

        env = os.getenv("ENV", "dev").lower()
        if env not in ("dev", "prod"):
            logger.warning(f"ENV inválido '{env}', usando 'dev' como padrão")
            env = "dev"

        admin_token = os.getenv("ADMIN_TOKEN", "").strip()
        if env == "prod":
            if not admin_token:
                raise RuntimeError(
                    "ENV=prod requer ADMIN_TOKEN definido. "
                    "Configure ADMIN_TOKEN no ambiente de produção."
                )
            logger.info("Modo PRODUÇÃO: ADMIN_TOKEN validado")
        elif not admin_token:
            logger.warning(
                "⚠️  MODO DEV: ADMIN_TOKEN não configurado. "
                "Endpoints administrativos vão recusar todas as requisições."
            )

        storage_mode = os.getenv("STORAGE_MODE", "sql").lower()
        if storage_mode not in STORAGE_MODES:
            raise RuntimeError(
                f"STORAGE_MODE inválido '{storage_mode}'. Use 'sql' ou 'json'."
            )
        if storage_mode == "json":
            logger.warning(
                "STORAGE_MODE=json: persistência em arquivo inteiro, "
                "inscrições simultâneas podem se perder."
            )

        data_dir = os.getenv("DATA_DIR", "./data")
        database_url = os.getenv(
            "DATABASE_URL",
            f"sqlite:///{os.path.join(data_dir, 'registrations.db')}",
        )

        feature_titles = {
            category: os.getenv(f"FEATURE_TITLE_{category.upper()}", default_title)
            for category, default_title in DEFAULT_FEATURE_TITLES.items()
        }

        return cls(
            admin_token=admin_token,
            env=env,
            storage_mode=storage_mode,
            data_dir=data_dir,
            database_url=database_url,
            uploads_dir=os.getenv("UPLOADS_DIR", "./uploads"),
            public_dir=os.getenv("PUBLIC_DIR", "./public"),
            admin_page_path=os.getenv("ADMIN_PAGE_PATH", "/admin-dashboard-access-key-777"),
            admin_page_file=os.getenv("ADMIN_PAGE_FILE", "./admin/admin.html"),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024))),
            feature_titles=feature_titles,
            log_dir=os.getenv("LOG_DIR", "logs"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
        )
