import logging
from typing import List, Optional
from .errors import MissingUploadError, UploadTooLargeError
from .models import FeatureImage
from ..infra.file_storage import UploadStorage
from ..storage.base import FeatureImageStore

logger = logging.getLogger(__name__)


class ImageCatalog:
    """
    Catálogo de imagens por categoria: arquivo no diretório de uploads
    + linha no armazenamento de catálogo.

    Ordem das operações:
    - store: grava o arquivo, depois a linha (se a linha falhar, apaga o arquivo)
    - delete_by_id: apaga o arquivo (best-effort), depois a linha

    Assim uma queda no meio pode deixar uma linha apontando para um arquivo
    inexistente, mas nunca um arquivo sem linha.
    """

    def __init__(
        self,
        store: FeatureImageStore,
        uploads: UploadStorage,
        max_upload_bytes: int,
    ) -> None:
        self._store = store
        self._uploads = uploads
        self._max_upload_bytes = max_upload_bytes

    def store(
        self,
        category: str,
        content: Optional[bytes],
        original_filename: Optional[str],
    ) -> FeatureImage:
        """
        Registra uma imagem. A categoria não é validada contra a lista
        fixa: categorias desconhecidas ficam fora da projeção pública.
        """
        if not content:
            raise MissingUploadError("Nenhum arquivo enviado")
        if len(content) > self._max_upload_bytes:
            raise UploadTooLargeError(len(content), self._max_upload_bytes)

        filename = self._uploads.save(content, original_filename)
        try:
            image = self._store.insert(category, filename)
        except Exception:
            self._uploads.remove(filename)
            raise

        logger.info(
            f"Imagem registrada: id={image.id}, category={category}, filename={filename}"
        )
        return image

    def list_all(self) -> List[FeatureImage]:
        return self._store.list_all()

    def delete_by_id(self, image_id: int) -> bool:
        """
        Remove imagem e arquivo. Devolve False se o id não existe.
        """
        image = self._store.get(image_id)
        if image is None:
            return False

        if not self._uploads.remove(image.filename):
            logger.warning(
                f"Arquivo da imagem não removido, seguindo com a remoção da linha: "
                f"id={image_id}, filename={image.filename}"
            )

        deleted = self._store.delete(image_id)
        if deleted:
            logger.info(f"Imagem removida: id={image_id}, filename={image.filename}")
        return deleted

    def public_url(self, image: FeatureImage) -> str:
        return self._uploads.public_url(image.filename)
