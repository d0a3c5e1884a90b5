"""Delivery agent data access repository."""

import uuid
from typing import Any, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from kirana.core.errors import DuplicateKeyError, RepositoryError
from kirana.core.logging import get_logger
from kirana.database.models.delivery_agent import DeliveryAgent

logger = get_logger(__name__)


class DeliveryAgentRepository:
    """Repository for delivery agent data access operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, agent_id: uuid.UUID) -> Optional[DeliveryAgent]:
        try:
            result = await self.session.execute(
                select(DeliveryAgent).where(DeliveryAgent.id == agent_id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Failed to fetch delivery agent", agent_id=str(agent_id), error=str(e))
            raise RepositoryError(
                "Failed to fetch delivery agent", agent_id=str(agent_id)
            ) from e

    async def list_by_vendor(self, vendor_id: uuid.UUID) -> Sequence[DeliveryAgent]:
        try:
            result = await self.session.execute(
                select(DeliveryAgent)
                .where(DeliveryAgent.vendor_id == vendor_id)
                .order_by(DeliveryAgent.name)
            )
            return result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(
                "Failed to fetch delivery agents", vendor_id=str(vendor_id), error=str(e)
            )
            raise RepositoryError(
                "Failed to fetch delivery agents", vendor_id=str(vendor_id)
            ) from e

    async def create(self, vendor_id: uuid.UUID, **fields: Any) -> DeliveryAgent:
        """
        Insert a delivery agent.

        Raises:
            DuplicateKeyError: If the vendor already has an agent with this phone
            RepositoryError: If the insert fails
        """
        try:
            agent = DeliveryAgent(vendor_id=vendor_id, **fields)
            self.session.add(agent)
            await self.session.flush()

            logger.info(
                "Delivery agent created",
                agent_id=str(agent.id),
                vendor_id=str(vendor_id),
            )
            return agent

        except IntegrityError as e:
            await self.session.rollback()
            phone = fields.get("phone")
            logger.warning(
                "Delivery agent creation failed - duplicate phone",
                vendor_id=str(vendor_id),
                phone=phone,
            )
            raise DuplicateKeyError(
                f"Delivery agent with phone {phone} already exists",
                vendor_id=str(vendor_id),
                phone=phone,
            ) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Delivery agent creation failed - database error",
                vendor_id=str(vendor_id),
                error=str(e),
            )
            raise RepositoryError(
                "Failed to create delivery agent", vendor_id=str(vendor_id)
            ) from e

    async def update(self, agent: DeliveryAgent, **fields: Any) -> DeliveryAgent:
        """
        Apply field changes to a loaded agent.

        Raises:
            DuplicateKeyError: If the new phone collides with another agent
            RepositoryError: If the update fails
        """
        try:
            for key, value in fields.items():
                setattr(agent, key, value)
            await self.session.flush()
            await self.session.refresh(agent)

            logger.info(
                "Delivery agent updated",
                agent_id=str(agent.id),
                fields=sorted(fields),
            )
            return agent

        except IntegrityError as e:
            await self.session.rollback()
            phone = fields.get("phone")
            raise DuplicateKeyError(
                f"Delivery agent with phone {phone} already exists",
                agent_id=str(agent.id),
                phone=phone,
            ) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to update delivery agent", agent_id=str(agent.id), error=str(e)
            )
            raise RepositoryError(
                "Failed to update delivery agent", agent_id=str(agent.id)
            ) from e

    async def delete(self, agent_id: uuid.UUID, vendor_id: uuid.UUID) -> bool:
        """Delete the agent if it belongs to the vendor; True if a row was removed."""
        try:
            result = await self.session.execute(
                delete(DeliveryAgent)
                .where(
                    DeliveryAgent.id == agent_id,
                    DeliveryAgent.vendor_id == vendor_id,
                )
                .returning(DeliveryAgent.id)
                .execution_options(synchronize_session=False)
            )
            deleted = result.scalar_one_or_none() is not None

            logger.info(
                "Delivery agent delete executed",
                agent_id=str(agent_id),
                vendor_id=str(vendor_id),
                deleted=deleted,
            )
            return deleted

        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to delete delivery agent", agent_id=str(agent_id), error=str(e)
            )
            raise RepositoryError(
                "Failed to delete delivery agent", agent_id=str(agent_id)
            ) from e
