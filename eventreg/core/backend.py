import logging
from sqlalchemy import text
from .features import FeatureProjection
from .image_catalog import ImageCatalog
from ..config import AppConfig
from ..infra.file_storage import UploadStorage
from ..storage.base import RecordStore, FeatureImageStore
from ..storage.database import create_session_factory
from ..storage.json_store import JsonParticipantStore, JsonFeatureImageStore
from ..storage.repository import ParticipantRepository, FeatureImageRepository

logger = logging.getLogger(__name__)


class RegistrationBackend:
    """
    Monta a camada de persistência a partir da configuração.

    - Escolhe SQL ou JSON conforme STORAGE_MODE
    - Expõe o RecordStore, o ImageCatalog e a FeatureProjection
    """

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._session_factory = None

        if config.storage_mode == "json":
            self.records: RecordStore = JsonParticipantStore(config.participants_file)
            image_store: FeatureImageStore = JsonFeatureImageStore(config.features_file)
            logger.info(f"Persistência usando arquivos JSON: data_dir={config.data_dir}")
        else:
            self._session_factory = create_session_factory(
                config.database_url,
                create_tables=True,
                env=config.env,
            )
            self.records = ParticipantRepository(self._session_factory)
            image_store = FeatureImageRepository(self._session_factory)
            # Extrair tipo de DB da URL (sem credenciais)
            db_type = "sqlite" if "sqlite" in config.database_url else "postgres" if "postgres" in config.database_url else "unknown"
            logger.info(f"Persistência usando banco de dados: database_type={db_type}")

        self.uploads = UploadStorage(config.uploads_dir)
        self.catalog = ImageCatalog(
            store=image_store,
            uploads=self.uploads,
            max_upload_bytes=config.max_upload_bytes,
        )
        self.features = FeatureProjection(self.catalog, config.feature_titles)

    def storage_ok(self) -> bool:
        """
        Verifica se o armazenamento responde (usado pelo /health).
        """
        try:
            if self._session_factory is not None:
                with self._session_factory() as db:
                    db.execute(text("SELECT 1"))
            else:
                self.records.list_all()
            return True
        except Exception as e:
            logger.warning(f"Storage health check falhou: {type(e).__name__}: {e}")
            return False
