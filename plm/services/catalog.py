"""Material and attribute catalogs."""

from plm.core.values import AttributeName, MaterialName
from plm.infra.logging import get_logger
from plm.models import Attribute, Material
from plm.repositories import EntityStore

logger = get_logger(__name__)


class MaterialCatalog:
    def __init__(self, store: EntityStore) -> None:
        self._store = store

    async def create(self, name: str) -> Material:
        """Add a material; raises AlreadyExistsError for a taken name."""
        material_name = MaterialName.create(name)
        material = await self._store.call(self._store.materials.create, material_name.value)
        logger.info("Material created", material_id=material.id, name=material.name)
        return material

    async def get(self, material_id: int) -> Material | None:
        return await self._store.read(self._store.materials.get, material_id)

    async def list_all(self) -> list[Material]:
        return await self._store.read(self._store.materials.list_all)

    async def delete(self, material_id: int) -> bool:
        """Remove an unused material.

        Returns:
            True if deleted, False if no such material

        Raises:
            InUseError: If any garment still uses it
        """
        deleted = await self._store.call(self._store.materials.remove, material_id)
        if deleted:
            logger.info("Material deleted", material_id=material_id)
        return deleted


class AttributeCatalog:
    def __init__(self, store: EntityStore) -> None:
        self._store = store

    async def create(self, name: str) -> Attribute:
        """Add an attribute under its sanitized name.

        Raises:
            ValidationError: If the name is empty, too long or has forbidden characters
            AlreadyExistsError: If the name is taken
        """
        attribute_name = AttributeName.create(name)
        attribute = await self._store.call(self._store.attributes.create, attribute_name.value)
        logger.info("Attribute created", attribute_id=attribute.id, name=attribute.name)
        return attribute

    async def get(self, attribute_id: int) -> Attribute | None:
        return await self._store.read(self._store.attributes.get, attribute_id)

    async def list_all(self) -> list[Attribute]:
        return await self._store.read(self._store.attributes.list_all)

    async def delete(self, attribute_id: int) -> bool:
        """Remove an attribute no garment carries.

        Its incompatibility pairs go with it.

        Raises:
            InUseError: If any garment still has it
        """
        deleted = await self._store.call(self._store.attributes.remove, attribute_id)
        if deleted:
            logger.info("Attribute deleted", attribute_id=attribute_id)
        return deleted
