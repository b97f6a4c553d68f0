"""
Interfaces de persistência.

Existem duas implementações de cada uma: tabela SQL (padrão) e
documento JSON (modo legado). O restante da aplicação depende só
destas classes base.
"""
from abc import ABC, abstractmethod
from typing import List, Optional
from ..core.models import FeatureImage, Participant, ParticipantInput


class RecordStore(ABC):
    """
    Armazena inscrições. Só inclusão e listagem: nada é alterado ou removido.
    """

    @abstractmethod
    def append(self, data: ParticipantInput) -> Participant:
        """
        Carimba o timestamp do servidor, persiste e devolve o registro com id.
        """

    @abstractmethod
    def list_all(self) -> List[Participant]:
        """
        Devolve todas as inscrições.
        """


class FeatureImageStore(ABC):
    """
    Linhas do catálogo de imagens (id, categoria, nome do arquivo).
    Não mexe nos arquivos em si.
    """

    @abstractmethod
    def insert(self, category: str, filename: str) -> FeatureImage:
        ...

    @abstractmethod
    def list_all(self) -> List[FeatureImage]:
        ...

    @abstractmethod
    def get(self, image_id: int) -> Optional[FeatureImage]:
        ...

    @abstractmethod
    def delete(self, image_id: int) -> bool:
        """
        Remove a linha. Devolve False se ela não existia.
        """
