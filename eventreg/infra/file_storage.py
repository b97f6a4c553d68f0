import logging
import os
import time
from typing import Optional
from urllib.parse import quote
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

UPLOADS_URL_PREFIX = "/uploads"


class UploadStorage:
    """
    Diretório dos arquivos enviados pelo painel administrativo.

    Nomes gerados como "{epoch-millis}-{nome original}", criados com
    abertura exclusiva: se o nome já existir, o prefixo avança 1 ms.
    """

    def __init__(self, uploads_dir: str) -> None:
        self._dir = uploads_dir
        os.makedirs(self._dir, exist_ok=True)

    @property
    def directory(self) -> str:
        return self._dir

    @staticmethod
    def clean_original_name(original_filename: Optional[str]) -> str:
        """
        Nome enviado pelo cliente reduzido a ASCII seguro, sem diretórios.
        Se nada sobrar, usa "upload".
        """
        return secure_filename(original_filename or "") or "upload"

    def path_for(self, filename: str) -> str:
        return os.path.join(self._dir, filename)

    def save(self, content: bytes, original_filename: Optional[str]) -> str:
        """
        Grava o conteúdo e devolve o nome gerado.
        """
        base_name = self.clean_original_name(original_filename)
        millis = int(time.time() * 1000)
        while True:
            filename = f"{millis}-{base_name}"
            try:
                with open(self.path_for(filename), "xb") as f:
                    f.write(content)
                break
            except FileExistsError:
                millis += 1

        logger.info(f"Arquivo gravado: filename={filename}, size={len(content)}")
        return filename

    def remove(self, filename: str) -> bool:
        """
        Remoção best-effort: falhas são logadas e devolvem False.
        """
        try:
            os.remove(self.path_for(filename))
            return True
        except OSError as e:
            logger.warning(
                f"Falha ao remover arquivo: filename={filename}, "
                f"error={type(e).__name__}: {e}"
            )
            return False

    @staticmethod
    def public_url(filename: str) -> str:
        return f"{UPLOADS_URL_PREFIX}/{quote(filename)}"
