"""
Maintenance operations shared by manage.py and the admin debug endpoints:
seeding lookup tables, data fixes, account bootstrap and table statistics.
"""

from typing import Dict, List, Any
from sqlalchemy import select, func, text
from sqlalchemy.ext.asyncio import AsyncSession
from rentals_api.database import Base
from rentals_api.repositories.catalog import AmenityRepository, PropertyClassRepository
from rentals_api.repositories.owner import OwnerRepository
from rentals_api.repositories.property import PropertyRepository, ListingFilters
from rentals_api.repositories.user import UserRepository
from rentals_api.models.user import User
from rentals_api.utils.exceptions import NotFoundError, DuplicateResourceError
import logging

logger = logging.getLogger(__name__)

DEFAULT_AMENITIES: List[Dict[str, str]] = [
    # Área comum
    {"name": "Piscina", "category": "comum", "icon": "waves", "description": "Piscina para relaxar e se refrescar"},
    {"name": "Academia", "category": "comum", "icon": "dumbbell", "description": "Academia completa para exercícios"},
    {"name": "Salão de Festas", "category": "comum", "icon": "party-popper", "description": "Espaço para eventos e celebrações"},
    {"name": "Churrasqueira", "category": "comum", "icon": "flame", "description": "Área de churrasqueira coletiva"},
    {"name": "Playground", "category": "comum", "icon": "baby", "description": "Área de recreação para crianças"},
    {"name": "Quadra Esportiva", "category": "comum", "icon": "zap", "description": "Quadra para praticar esportes"},
    {"name": "Jardim", "category": "comum", "icon": "tree-pine", "description": "Área verde e jardim"},
    {"name": "Elevador", "category": "comum", "icon": "arrow-up", "description": "Elevador no prédio"},
    # Apartamento
    {"name": "Ar Condicionado", "category": "apartamento", "icon": "snowflake", "description": "Sistema de ar condicionado"},
    {"name": "Wi-Fi", "category": "apartamento", "icon": "wifi", "description": "Internet sem fio gratuita"},
    {"name": "TV", "category": "apartamento", "icon": "tv", "description": "Televisão no imóvel"},
    {"name": "Máquina de Lavar", "category": "apartamento", "icon": "washing-machine", "description": "Máquina de lavar roupas"},
    {"name": "Micro-ondas", "category": "apartamento", "icon": "microwave", "description": "Forno micro-ondas"},
    {"name": "Geladeira", "category": "apartamento", "icon": "refrigerator", "description": "Geladeira/refrigerador"},
    {"name": "Fogão", "category": "apartamento", "icon": "chef-hat", "description": "Fogão para cozinhar"},
    {"name": "Varanda", "category": "apartamento", "icon": "door-open", "description": "Varanda ou sacada"},
    {"name": "Mobiliado", "category": "apartamento", "icon": "sofa", "description": "Imóvel totalmente mobiliado"},
    {"name": "Cozinha Equipada", "category": "apartamento", "icon": "utensils", "description": "Cozinha com utensílios completos"},
    {"name": "Frigobar", "category": "apartamento", "icon": "refrigerator", "description": "Frigobar no apartamento"},
    # Edifício
    {"name": "Portaria 24h", "category": "edificio", "icon": "shield", "description": "Portaria funcionando 24 horas"},
    {"name": "Garagem", "category": "edificio", "icon": "car", "description": "Vaga de garagem"},
    {"name": "Interfone", "category": "edificio", "icon": "phone", "description": "Sistema de interfone"},
    {"name": "Câmeras de Segurança", "category": "edificio", "icon": "eye", "description": "Monitoramento por câmeras"},
    {"name": "Controle de Acesso", "category": "edificio", "icon": "key", "description": "Controle de acesso ao prédio"},
    {"name": "Estacionamento Visitantes", "category": "edificio", "icon": "car-front", "description": "Vagas para visitantes"},
    # Localização
    {"name": "Próximo ao Mar", "category": "localizacao", "icon": "waves", "description": "Perto da praia"},
    {"name": "Centro da Cidade", "category": "localizacao", "icon": "building", "description": "Localizado no centro"},
    {"name": "Transporte Público", "category": "localizacao", "icon": "bus", "description": "Acesso a transporte público"},
    {"name": "Supermercado Próximo", "category": "localizacao", "icon": "shopping-cart", "description": "Supermercado nas proximidades"},
    {"name": "Restaurantes Próximos", "category": "localizacao", "icon": "utensils", "description": "Restaurantes nas proximidades"},
    {"name": "Farmácia Próxima", "category": "localizacao", "icon": "cross", "description": "Farmácia nas proximidades"},
]

FEATURED_CLASSES: List[Dict[str, str]] = [
    {"name": "Imóvel em Destaque", "description": "Imóveis principais em destaque na página inicial"},
    {"name": "Destaque em Casas", "description": "Casas em destaque na seção específica"},
    {"name": "Destaque em Apartamentos", "description": "Apartamentos em destaque na seção específica"},
    {"name": "Normal", "description": "Classificação padrão para imóveis"},
]

BANNER_CLASSES: List[Dict[str, str]] = [
    {"name": "Imovel Banner a Dois", "description": "Imóveis que aparecem no banner romântico para casais"},
    {"name": "Imovel Banner Beach Park", "description": "Imóveis que aparecem no banner do Beach Park"},
    {"name": "Imovel Banner Paracuru", "description": "Imóveis que aparecem no banner de Paracuru"},
]


class MaintenanceService:
    """Operational tasks that are not part of the public API."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.amenity_repo = AmenityRepository(db_session)
        self.class_repo = PropertyClassRepository(db_session)
        self.owner_repo = OwnerRepository(db_session)
        self.property_repo = PropertyRepository(db_session)
        self.user_repo = UserRepository(db_session)

    async def seed_amenities(self) -> int:
        """Insert the default amenity catalogue; existing names are skipped."""
        created = await self.amenity_repo.seed(DEFAULT_AMENITIES)
        return len(created)

    async def seed_classes(self, include_banners: bool = True) -> int:
        """Insert the featured classes (and the banner classes); existing names are skipped."""
        entries = FEATURED_CLASSES + (BANNER_CLASSES if include_banners else [])
        created = await self.class_repo.seed(entries)
        return len(created)

    async def remove_banner_classes(self) -> int:
        """Hard delete the banner classes together with their property links."""
        return await self.class_repo.delete_by_names([entry["name"] for entry in BANNER_CLASSES])

    async def move_amenity(self, name: str, category: str) -> None:
        """
        Raises:
            NotFoundError: If no amenity has that name
        """
        amenity = await self.amenity_repo.move_to_category(name, category)
        if amenity is None:
            raise NotFoundError("Amenity", name)
        logger.info(f"Amenity '{name}' moved to category '{category}'")

    async def create_admin(self, name: str, email: str, password: str) -> User:
        """
        Raises:
            DuplicateResourceError: If the email is already registered
        """
        if await self.user_repo.get_by_email(email):
            raise DuplicateResourceError("User", email)
        return await self.user_repo.create_user({"name": name, "email": email, "password": password})

    async def clear_owners(self) -> int:
        """Delete every owner account; listings are kept without an owner."""
        deleted = await self.owner_repo.delete_all()
        logger.warning(f"Removed all {deleted} owner accounts")
        return deleted

    async def check_connection(self) -> bool:
        """Run a trivial query on the session's connection."""
        try:
            await self.db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database connectivity check failed: {e}")
            return False

    async def table_counts(self) -> Dict[str, int]:
        """Row count of every mapped table."""
        counts = {}
        for table in Base.metadata.sorted_tables:
            result = await self.db.execute(select(func.count()).select_from(table))
            counts[table.name] = result.scalar() or 0
        return counts

    async def class_report(self) -> Dict[str, Any]:
        """Every class with its usage, plus the active listings and their class names."""
        classes = await self.class_repo.list_with_property_counts()
        properties, _ = await self.property_repo.search_properties(ListingFilters(), skip=0, limit=1000)

        return {
            "classes": [
                {**property_class.to_dict(), "property_count": count}
                for property_class, count in classes
            ],
            "active_properties": [
                {
                    "id": property_obj.id,
                    "title": property_obj.title,
                    "class_names": [property_class.name for property_class in property_obj.classes],
                }
                for property_obj in properties
            ],
        }
