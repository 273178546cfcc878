"""
Investment package repository.

Data access layer for the package catalogue.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.investment_package import InvestmentPackage
from app.repositories.base import BaseRepository


class PackageRepository(BaseRepository[InvestmentPackage]):
    """Package repository with catalogue queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize package repository."""
        super().__init__(InvestmentPackage, session)

    async def get_active(self, package_id: int) -> InvestmentPackage | None:
        """
        Get package by ID if it is offered.

        Args:
            package_id: Package ID

        Returns:
            Active package or None if missing or inactive
        """
        return await self.get_by(id=package_id, active=True)

    async def get_active_packages(self) -> list[InvestmentPackage]:
        """Get all offered packages, cheapest first."""
        stmt = (
            select(InvestmentPackage)
            .where(InvestmentPackage.active.is_(True))
            .order_by(InvestmentPackage.principal_amount)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_principal(self, principal_amount: int) -> InvestmentPackage | None:
        """Get package by principal amount."""
        return await self.get_by(principal_amount=principal_amount)
