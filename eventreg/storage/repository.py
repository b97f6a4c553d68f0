import logging
from typing import List, Optional
from sqlalchemy.orm import sessionmaker
from sqlalchemy.exc import SQLAlchemyError
from .base import RecordStore, FeatureImageStore
from .models import ParticipantRow, FeatureImageRow
from ..core.models import FeatureImage, Participant, ParticipantInput, utc_timestamp

logger = logging.getLogger(__name__)


def _to_participant(row: ParticipantRow) -> Participant:
    return Participant(
        id=row.id,
        timestamp=row.timestamp,
        full_name=row.full_name,
        phone=row.phone,
        birth_date=row.birth_date,
        gender=row.gender,
        birth_place=row.birth_place,
        address=row.address,
        job_type=row.job_type,
        first_aid=row.first_aid,
        extra=dict(row.extra or {}),
    )


def _to_feature_image(row: FeatureImageRow) -> FeatureImage:
    return FeatureImage(id=row.id, category=row.category, filename=row.filename)


class ParticipantRepository(RecordStore):
    """
    Repositório para operações de persistência de participantes.

    Cada inscrição é um único INSERT com commit próprio, então
    inscrições simultâneas não se sobrescrevem.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def append(self, data: ParticipantInput) -> Participant:
        """
        Cria um novo participante no banco de dados.
        """
        logger.debug(f"Criando participante: name={data.full_name}")

        with self._session_factory() as db:
            try:
                row = ParticipantRow(
                    full_name=data.full_name,
                    phone=data.phone,
                    birth_date=data.birth_date,
                    gender=data.gender,
                    birth_place=data.birth_place,
                    address=data.address,
                    job_type=data.job_type,
                    first_aid=data.first_aid,
                    extra=dict(data.extra) or None,
                    timestamp=utc_timestamp(),
                )
                db.add(row)
                db.commit()
                db.refresh(row)

                # ASSERT: garantir que o participante foi persistido com ID
                assert row.id is not None, (
                    "Participant persisted without id! "
                    "This indicates a persistence error."
                )

                logger.debug(f"Participante criado com sucesso: id={row.id}")
                return _to_participant(row)
            except SQLAlchemyError as e:
                logger.error(
                    f"Erro de banco de dados ao criar participante: name={data.full_name}, "
                    f"error={type(e).__name__}: {e}",
                    exc_info=True,
                )
                db.rollback()
                raise

    def list_all(self) -> List[Participant]:
        """
        Lista todas as inscrições, mais recentes primeiro.
        """
        with self._session_factory() as db:
            try:
                rows = db.query(ParticipantRow).order_by(ParticipantRow.id.desc()).all()
                return [_to_participant(row) for row in rows]
            except SQLAlchemyError as e:
                logger.error(
                    f"Erro de banco de dados ao listar participantes: "
                    f"error={type(e).__name__}: {e}",
                    exc_info=True,
                )
                raise


class FeatureImageRepository(FeatureImageStore):
    """
    Linhas da tabela feature_images.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def insert(self, category: str, filename: str) -> FeatureImage:
        with self._session_factory() as db:
            try:
                row = FeatureImageRow(category=category, filename=filename)
                db.add(row)
                db.commit()
                db.refresh(row)
                return _to_feature_image(row)
            except SQLAlchemyError as e:
                logger.error(
                    f"Erro de banco de dados ao registrar imagem: category={category}, "
                    f"filename={filename}, error={type(e).__name__}: {e}",
                    exc_info=True,
                )
                db.rollback()
                raise

    def list_all(self) -> List[FeatureImage]:
        with self._session_factory() as db:
            rows = db.query(FeatureImageRow).order_by(FeatureImageRow.id.asc()).all()
            return [_to_feature_image(row) for row in rows]

    def get(self, image_id: int) -> Optional[FeatureImage]:
        with self._session_factory() as db:
            row = db.get(FeatureImageRow, image_id)
            return _to_feature_image(row) if row else None

    def delete(self, image_id: int) -> bool:
        with self._session_factory() as db:
            try:
                row = db.get(FeatureImageRow, image_id)
                if not row:
                    return False
                db.delete(row)
                db.commit()
                return True
            except SQLAlchemyError as e:
                logger.error(
                    f"Erro de banco de dados ao remover imagem: id={image_id}, "
                    f"error={type(e).__name__}: {e}",
                    exc_info=True,
                )
                db.rollback()
                raise
