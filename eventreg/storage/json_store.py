"""
Persistência legada em documentos JSON.

Cada operação de escrita lê o arquivo inteiro, altera a lista em memória
e regrava o arquivo. Duas escritas simultâneas podem ler o mesmo
conteúdo e a última a gravar apaga a inclusão da outra. Use o modo SQL
quando houver inscrições concorrentes.
"""
import json
import logging
import os
import tempfile
from dataclasses import asdict
from typing import Any, Dict, List, Optional
from .base import RecordStore, FeatureImageStore
from ..core.models import FeatureImage, Participant, ParticipantInput, PARTICIPANT_FIELDS, utc_timestamp

logger = logging.getLogger(__name__)


class JsonDocument:
    """
    Arquivo JSON contendo uma lista de objetos.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._ensure_exists()

    def _ensure_exists(self) -> None:
        if not os.path.exists(self.path):
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            self.write([])
            logger.info(f"Arquivo de dados criado: path={self.path}")

    def read(self) -> List[Dict[str, Any]]:
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def write(self, items: List[Dict[str, Any]]) -> None:
        """
        Regrava o documento inteiro via arquivo temporário + os.replace,
        então um leitor nunca vê o arquivo pela metade.
        """
        directory = os.path.dirname(self.path) or "."
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(items, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise


class JsonParticipantStore(RecordStore):
    """
    Inscrições num array JSON. O id é a posição no array (a partir de 1)
    e a listagem segue a ordem de inclusão.
    """

    def __init__(self, path: str) -> None:
        self._doc = JsonDocument(path)

    def _read_all(self) -> List[Dict[str, Any]]:
        return self._doc.read()

    def append(self, data: ParticipantInput) -> Participant:
        record: Dict[str, Any] = dict(data.extra)
        for wire_name, attr in PARTICIPANT_FIELDS:
            value = getattr(data, attr)
            if value is not None:
                record[wire_name] = value
        record["timestamp"] = utc_timestamp()

        participants = self._read_all()
        participants.append(record)
        self._doc.write(participants)

        return self._from_record(len(participants), record)

    def list_all(self) -> List[Participant]:
        return [
            self._from_record(index, record)
            for index, record in enumerate(self._read_all(), start=1)
        ]

    @staticmethod
    def _from_record(position: int, record: Dict[str, Any]) -> Participant:
        data = ParticipantInput.from_payload(record)
        return Participant.from_input(position, record.get("timestamp", ""), data)


class JsonFeatureImageStore(FeatureImageStore):
    """
    Catálogo de imagens num array JSON. Ids são max(id) + 1.
    """

    def __init__(self, path: str) -> None:
        self._doc = JsonDocument(path)

    def insert(self, category: str, filename: str) -> FeatureImage:
        rows = self._doc.read()
        next_id = max((row["id"] for row in rows), default=0) + 1
        image = FeatureImage(id=next_id, category=category, filename=filename)
        rows.append(asdict(image))
        self._doc.write(rows)
        return image

    def list_all(self) -> List[FeatureImage]:
        return [FeatureImage(**row) for row in self._doc.read()]

    def get(self, image_id: int) -> Optional[FeatureImage]:
        for image in self.list_all():
            if image.id == image_id:
                return image
        return None

    def delete(self, image_id: int) -> bool:
        rows = self._doc.read()
        remaining = [row for row in rows if row["id"] != image_id]
        if len(remaining) == len(rows):
            return False
        self._doc.write(remaining)
        return True
