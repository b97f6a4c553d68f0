import logging
import posixpath
import secrets
from typing import FrozenSet, Optional
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from ..config import AppConfig

logger = logging.getLogger(__name__)

ADMIN_TOKEN_HEADER = "X-Admin-Token"


def is_protected_path(path: str, protected_names: FrozenSet[str]) -> bool:
    """
    True se o último segmento do caminho é um dos nomes protegidos.
    Comparação exata, sem considerar query string.
    """
    return posixpath.basename(path) in protected_names


class ProtectedPathMiddleware(BaseHTTPMiddleware):
    """
    Recusa com 403, antes de qualquer rota e para qualquer método,
    requisições cujo nome final é um arquivo sensível.
    """

    def __init__(self, app, protected_names: FrozenSet[str]) -> None:
        super().__init__(app)
        self._protected_names = protected_names

    async def dispatch(self, request: Request, call_next):
        if is_protected_path(request.url.path, self._protected_names):
            request_id = getattr(request.state, "request_id", "unknown")
            logger.warning(
                f"Acesso a arquivo protegido bloqueado: request_id={request_id}, "
                f"method={request.method}, path={request.url.path}"
            )
            return JSONResponse(status_code=403, content={"error": "Forbidden"})
        return await call_next(request)


def require_admin_token(config: AppConfig, token: Optional[str]) -> None:
    """
    Valida o token administrativo (igualdade exata, sensível a maiúsculas).

    Sem token configurado (ou só com espaços), todas as requisições são recusadas.
    """
    expected = config.admin_token or ""
    if not expected.strip() or token is None or not secrets.compare_digest(
        token.encode("utf-8"), expected.encode("utf-8")
    ):
        logger.warning("Tentativa de acesso administrativo não autorizado")
        raise HTTPException(status_code=401, detail="Unauthorized")
