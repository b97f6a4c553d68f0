from sqlalchemy import Column, Integer, String, JSON
from .database import Base


class ParticipantRow(Base):
    """
    Inscrição de participante do evento.
    """
    __tablename__ = "participants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(200), nullable=True)
    phone = Column(String(50), nullable=True)
    birth_date = Column(String(50), nullable=True)
    gender = Column(String(50), nullable=True)
    birth_place = Column(String(200), nullable=True)
    address = Column(String(500), nullable=True)
    job_type = Column(String(100), nullable=True)
    first_aid = Column(String(100), nullable=True)
    extra = Column(JSON, nullable=True)  # chaves do formulário sem coluna própria
    timestamp = Column(String(40), nullable=False)


class FeatureImageRow(Base):
    """
    Imagem de uma categoria de destaque (hotel, beaches, ...).
    """
    __tablename__ = "feature_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category = Column(String(50), nullable=False, index=True)
    filename = Column(String(300), nullable=False)
