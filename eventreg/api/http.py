import json
import logging
import os
import time
from uuid import uuid4
from typing import Any, Dict, List, Optional
from fastapi import Depends, FastAPI, File, Form, Header, HTTPException, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from pydantic import BaseModel
from .guard import ADMIN_TOKEN_HEADER, ProtectedPathMiddleware, require_admin_token
from ..config import AppConfig
from ..core.backend import RegistrationBackend
from ..core.errors import MissingUploadError, UploadTooLargeError
from ..core.models import ParticipantInput
from ..infra.file_storage import UPLOADS_URL_PREFIX

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal Server Error"


class MessageResponse(BaseModel):
    message: str


class UploadResponse(BaseModel):
    message: str
    filename: str
    id: int


class FeatureImageOut(BaseModel):
    id: int
    category: str
    filename: str


class FeatureCategoryOut(BaseModel):
    title: str
    images: List[str]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware que gera request_id único para cada requisição
    e adiciona aos logs e headers de resposta.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = uuid4().hex[:16]
        request.state.request_id = request_id

        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Request processado: request_id={request_id}, "
            f"method={request.method}, path={request.url.path}, "
            f"status={response.status_code}, duration_ms={duration_ms:.2f}"
        )

        return response


async def read_field_bag(request: Request) -> Dict[str, Any]:
    """
    Corpo da inscrição como dicionário, sem nunca recusar a requisição.

    Só corpos JSON são lidos; outro content-type, JSON inválido ou JSON
    que não seja objeto viram um dicionário vazio.
    """
    if "json" not in request.headers.get("content-type", "").lower():
        return {}
    body = await request.body()
    if not body:
        return {}
    try:
        payload = json.loads(body)
    except ValueError:
        logger.warning("Corpo de inscrição com JSON inválido, tratado como vazio")
        return {}
    return payload if isinstance(payload, dict) else {}


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """
    Cria a aplicação FastAPI e injeta dependências principais (config + backend).

    A configuração é carregada aqui, uma única vez, antes de qualquer
    requisição ser atendida.
    """
    config = config or AppConfig.load_from_env()
    backend = RegistrationBackend(config=config)

    os.makedirs(config.public_dir, exist_ok=True)

    app = FastAPI(
        title="Event Registration API",
        version="0.1.0",
        description="Inscrições do evento e imagens das categorias de destaque.",
    )
    app.state.config = config
    app.state.backend = backend

    # O último middleware adicionado é o mais externo: request_id primeiro,
    # depois o bloqueio de arquivos protegidos.
    app.add_middleware(ProtectedPathMiddleware, protected_names=config.protected_names)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Bad Request"})

    def internal_error(action: str, request: Request, start_time: float, e: Exception) -> HTTPException:
        request_id = getattr(request.state, "request_id", "unknown")
        duration_ms = (time.time() - start_time) * 1000
        logger.error(
            f"Erro ao {action}: request_id={request_id}, duration_ms={duration_ms:.2f}, "
            f"error={type(e).__name__}: {e}",
            exc_info=True,
        )
        return HTTPException(status_code=500, detail=INTERNAL_ERROR)

    @app.get("/health")
    def health_check():
        """
        Endpoint de health check para monitoramento e Docker healthchecks.
        """
        storage_ok = backend.storage_ok()
        return {
            "status": "healthy" if storage_ok else "degraded",
            "storage": "ok" if storage_ok else "error",
            "storage_mode": config.storage_mode,
        }

    @app.post("/api/register", status_code=201, response_model=MessageResponse)
    def register(
        request: Request,
        payload: Dict[str, Any] = Depends(read_field_bag),
    ) -> MessageResponse:
        """
        Inscrição pública. Nenhum campo é obrigatório.
        """
        request_id = getattr(request.state, "request_id", "unknown")
        start_time = time.time()
        try:
            participant = backend.records.append(ParticipantInput.from_payload(payload))
            logger.info(
                f"Novo participante inscrito: request_id={request_id}, "
                f"id={participant.id}, name={participant.full_name}"
            )
            return MessageResponse(message="Success")
        except Exception as e:
            raise internal_error("registrar participante", request, start_time, e)

    @app.get("/api/participants")
    def list_participants(
        request: Request,
        x_admin_token: Optional[str] = Header(default=None, alias=ADMIN_TOKEN_HEADER),
    ) -> List[Dict[str, Any]]:
        require_admin_token(config, x_admin_token)

        start_time = time.time()
        try:
            return [participant.to_dict() for participant in backend.records.list_all()]
        except Exception as e:
            raise internal_error("listar participantes", request, start_time, e)

    @app.post("/api/upload-image", response_model=UploadResponse)
    def upload_image(
        request: Request,
        image: Optional[UploadFile] = File(default=None),
        category: Optional[str] = Form(default=None),
        x_admin_token: Optional[str] = Header(default=None, alias=ADMIN_TOKEN_HEADER),
    ) -> UploadResponse:
        """
        Upload de imagem de uma categoria (multipart: image + category).
        """
        require_admin_token(config, x_admin_token)

        if image is None:
            raise HTTPException(status_code=400, detail="No file uploaded")
        if not category or not category.strip():
            raise HTTPException(status_code=400, detail="Category is required")

        request_id = getattr(request.state, "request_id", "unknown")
        start_time = time.time()
        try:
            # Lê no máximo limite + 1 byte: o suficiente para detectar excesso
            content = image.file.read(config.max_upload_bytes + 1)
            feature_image = backend.catalog.store(category.strip(), content, image.filename)
        except MissingUploadError:
            raise HTTPException(status_code=400, detail="No file uploaded")
        except UploadTooLargeError as e:
            logger.warning(
                f"Upload recusado por tamanho: request_id={request_id}, max={e.max_bytes}"
            )
            raise HTTPException(status_code=413, detail="File too large")
        except Exception as e:
            raise internal_error("registrar imagem", request, start_time, e)

        return UploadResponse(
            message="Image uploaded",
            filename=feature_image.filename,
            id=feature_image.id,
        )

    @app.get("/api/admin-features", response_model=List[FeatureImageOut])
    def admin_features(
        request: Request,
        x_admin_token: Optional[str] = Header(default=None, alias=ADMIN_TOKEN_HEADER),
    ) -> List[FeatureImageOut]:
        require_admin_token(config, x_admin_token)

        start_time = time.time()
        try:
            rows = backend.features.get_admin_feature_rows()
        except Exception as e:
            raise internal_error("listar imagens", request, start_time, e)
        return [FeatureImageOut(**row.to_dict()) for row in rows]

    @app.get("/api/features", response_model=Dict[str, FeatureCategoryOut])
    def public_features(request: Request) -> Dict[str, FeatureCategoryOut]:
        start_time = time.time()
        try:
            features = backend.features.get_public_features()
        except Exception as e:
            raise internal_error("montar categorias", request, start_time, e)
        return {
            category: FeatureCategoryOut(title=feature.title, images=feature.images)
            for category, feature in features.items()
        }

    @app.delete("/api/delete-image/{image_id}", response_model=MessageResponse)
    def delete_image(
        image_id: int,
        request: Request,
        x_admin_token: Optional[str] = Header(default=None, alias=ADMIN_TOKEN_HEADER),
    ) -> MessageResponse:
        require_admin_token(config, x_admin_token)

        start_time = time.time()
        try:
            deleted = backend.catalog.delete_by_id(image_id)
        except Exception as e:
            raise internal_error("remover imagem", request, start_time, e)

        if not deleted:
            raise HTTPException(status_code=404, detail="Image not found")
        return MessageResponse(message="Image deleted")

    @app.get(config.admin_page_path, include_in_schema=False)
    def admin_page():
        """
        Página do painel. Protegida apenas por um caminho difícil de adivinhar:
        quem conhece a URL vê a página, mas os dados exigem o token.
        """
        if not os.path.isfile(config.admin_page_file):
            logger.error(f"Página de administração não encontrada: path={config.admin_page_file}")
            raise HTTPException(status_code=404, detail="Not Found")
        return FileResponse(config.admin_page_file, media_type="text/html")

    # Por último: o mount em "/" só recebe o que nenhuma rota acima tratou
    app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=backend.uploads.directory), name="uploads")
    app.mount("/", StaticFiles(directory=config.public_dir, html=True), name="public")

    logger.info(
        f"Aplicação criada: storage_mode={config.storage_mode}, env={config.env}, "
        f"admin_page={config.admin_page_path}"
    )
    return app
