import logging
from typing import Dict, List, Mapping, Sequence
from .image_catalog import ImageCatalog
from .models import FeatureCategory, FeatureImage
from ..config import FEATURE_CATEGORIES

logger = logging.getLogger(__name__)


class FeatureProjection:
    """
    Visão pública agrupada por categoria.

    Os títulos vêm da configuração (não são persistidos); as imagens
    vêm do catálogo. Categorias sem imagem aparecem com lista vazia e
    linhas de categorias desconhecidas são ignoradas.
    """

    def __init__(
        self,
        catalog: ImageCatalog,
        titles: Mapping[str, str],
        categories: Sequence[str] = FEATURE_CATEGORIES,
    ) -> None:
        self._catalog = catalog
        self._titles = dict(titles)
        self._categories = tuple(categories)

    def get_public_features(self) -> Dict[str, FeatureCategory]:
        features = {
            category: FeatureCategory(title=self._titles.get(category, category))
            for category in self._categories
        }
        for image in self._catalog.list_all():
            feature = features.get(image.category)
            if feature is None:
                logger.debug(f"Imagem com categoria desconhecida ignorada: id={image.id}, category={image.category}")
                continue
            feature.images.append(self._catalog.public_url(image))
        return features

    def get_admin_feature_rows(self) -> List[FeatureImage]:
        return self._catalog.list_all()
