"""Wallet services."""

from app.services.wallet.service import ConservationReport, WalletService


__all__ = ["ConservationReport", "WalletService"]
