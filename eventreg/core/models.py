from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

# Campo no JSON do formulário -> atributo/coluna
PARTICIPANT_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("fullName", "full_name"),
    ("phone", "phone"),
    ("birthDate", "birth_date"),
    ("gender", "gender"),
    ("birthPlace", "birth_place"),
    ("address", "address"),
    ("jobType", "job_type"),
    ("firstAid", "first_aid"),
)

# Sempre definidos pelo servidor
SERVER_FIELDS = ("id", "timestamp")


def utc_timestamp() -> str:
    """
    Timestamp ISO-8601 em UTC com sufixo Z, ex: 2026-05-06T12:00:00.123456Z
    """
    return datetime.now(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


@dataclass
class ParticipantInput:
    """
    Dados enviados pelo formulário público.

    Nenhum campo é obrigatório e nada é validado: valores não textuais
    são guardados na forma de texto, e chaves desconhecidas vão para `extra`.
    """
    full_name: Optional[str] = None
    phone: Optional[str] = None
    birth_date: Optional[str] = None
    gender: Optional[str] = None
    birth_place: Optional[str] = None
    address: Optional[str] = None
    job_type: Optional[str] = None
    first_aid: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "ParticipantInput":
        payload = dict(payload or {})
        for key in SERVER_FIELDS:
            payload.pop(key, None)

        values: Dict[str, Any] = {}
        for wire_name, attr in PARTICIPANT_FIELDS:
            raw = payload.pop(wire_name, None)
            values[attr] = None if raw is None else str(raw)
        return cls(extra=payload, **values)


@dataclass
class Participant:
    """
    Inscrição persistida.
    """
    id: int
    timestamp: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    birth_date: Optional[str] = None
    gender: Optional[str] = None
    birth_place: Optional[str] = None
    address: Optional[str] = None
    job_type: Optional[str] = None
    first_aid: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_input(cls, id: int, timestamp: str, data: ParticipantInput) -> "Participant":
        return cls(
            id=id,
            timestamp=timestamp,
            full_name=data.full_name,
            phone=data.phone,
            birth_date=data.birth_date,
            gender=data.gender,
            birth_place=data.birth_place,
            address=data.address,
            job_type=data.job_type,
            first_aid=data.first_aid,
            extra=dict(data.extra),
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Formato devolvido pela API (chaves do formulário).
        """
        result: Dict[str, Any] = dict(self.extra)
        for wire_name, attr in PARTICIPANT_FIELDS:
            value = getattr(self, attr)
            if value is not None:
                result[wire_name] = value
        result["id"] = self.id
        result["timestamp"] = self.timestamp
        return result


@dataclass
class FeatureImage:
    id: int
    category: str
    filename: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "category": self.category, "filename": self.filename}


@dataclass
class FeatureCategory:
    """
    Projeção pública de uma categoria: título fixo + URLs das imagens.
    Não é persistida.
    """
    title: str
    images: List[str] = field(default_factory=list)
