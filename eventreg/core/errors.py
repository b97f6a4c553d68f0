"""
Erros esperados da camada de armazenamento de imagens.

Falhas de banco/disco não têm classe própria: propagam como vieram
(SQLAlchemyError, OSError, ...) e viram 500 na camada HTTP.
"""


class UploadError(ValueError):
    """Upload recusado por motivo do cliente."""


class MissingUploadError(UploadError):
    """Nenhum conteúdo de arquivo foi enviado."""


class UploadTooLargeError(UploadError):
    def __init__(self, size: int, max_bytes: int) -> None:
        super().__init__(f"Arquivo com {size} bytes excede o limite de {max_bytes} bytes")
        self.size = size
        self.max_bytes = max_bytes
