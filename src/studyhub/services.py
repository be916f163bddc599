"""Wiring of the store-backed services shared by every request."""

from __future__ import annotations

from dataclasses import dataclass

from studyhub.catalog.service import ContentCatalog
from studyhub.config import Settings
from studyhub.identity.provider import IdentityProvider
from studyhub.ledger.rewards import RewardService
from studyhub.ledger.service import LedgerMode, ProfileLedger
from studyhub.session import SessionContext
from studyhub.store.base import DocumentStore


@dataclass
class Services:
    settings: Settings
    store: DocumentStore
    identity: IdentityProvider
    ledger: ProfileLedger
    catalog: ContentCatalog
    rewards: RewardService

    def new_session(self) -> SessionContext:
        """A fresh, signed-out session context."""
        return SessionContext(self.identity, self.ledger, self.catalog)


def build_services(store: DocumentStore, settings: Settings) -> Services:
    ledger = ProfileLedger(store, mode=LedgerMode(settings.ledger_mode))
    catalog = ContentCatalog(store)
    return Services(
        settings=settings,
        store=store,
        identity=IdentityProvider(store, settings),
        ledger=ledger,
        catalog=catalog,
        rewards=RewardService(ledger, catalog),
    )
