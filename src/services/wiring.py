"""Build services around a store; handlers call these lazily on first use."""

from functools import partial
from typing import Optional

from services.bulk_issuance_service import BulkIssuanceService
from services.code_generator import generate_ticket_code
from services.code_resolver import UniqueCodeResolver
from services.event_service import EventService
from services.redemption_service import RedemptionService
from services.ticket_service import TicketService
from utils.settings import Settings


def build_resolver(store, settings: Optional[Settings] = None) -> UniqueCodeResolver:
    settings = settings or Settings.from_environment()
    return UniqueCodeResolver(
        store,
        generator=partial(generate_ticket_code, settings.code_length),
        max_attempts=settings.code_max_attempts,
    )


def build_redemption_service(store, settings: Optional[Settings] = None) -> RedemptionService:
    settings = settings or Settings.from_environment()
    return RedemptionService(store, min_code_length=settings.min_code_length)


def build_ticket_service(store, settings: Optional[Settings] = None) -> TicketService:
    settings = settings or Settings.from_environment()
    return TicketService(
        store,
        resolver=build_resolver(store, settings),
        redemption=build_redemption_service(store, settings),
    )


def build_bulk_service(store, settings: Optional[Settings] = None) -> BulkIssuanceService:
    return BulkIssuanceService(store, resolver=build_resolver(store, settings))


def build_event_service(store) -> EventService:
    return EventService(store)
