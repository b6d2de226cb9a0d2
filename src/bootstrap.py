"""Service wiring.

Builds the store, the catalog and every component on top of them from one
Settings object. The HTTP app, the headless worker runner and the tests all
go through ``build_services``.
"""

from collections.abc import Callable
from dataclasses import dataclass

from catalogue.product.product import Catalog
from identity.session.manager import SessionManager
from identity.user.directory import UserDirectory
from maintenance.garbage_collection import GarbageCollector
from maintenance.log_rotation import LogArchive
from maintenance.workers import MaintenanceWorkers
from notifications.channel import build_channel
from notifications.channel.email_port import EmailPort
from ordering.cart.engine import CartEngine
from ordering.checkout.orchestrator import CheckoutOrchestrator
from payments.gateway import build_gateway
from payments.gateway.port import PaymentGateway
from shared.config import Settings
from shared.ids import now_ms
from shared.store import COLLECTIONS, DocumentStore


@dataclass
class Services:
    settings: Settings
    store: DocumentStore
    catalog: Catalog
    gateway: PaymentGateway
    mailer: EmailPort
    users: UserDirectory
    sessions: SessionManager
    carts: CartEngine
    checkout: CheckoutOrchestrator
    workers: MaintenanceWorkers


def build_services(
    settings: Settings,
    catalog: Catalog | None = None,
    gateway: PaymentGateway | None = None,
    mailer: EmailPort | None = None,
    clock: Callable[[], int] = now_ms,
) -> Services:
    store = DocumentStore(settings.data_dir)
    store.ensure_collections(*COLLECTIONS)
    catalog = catalog if catalog is not None else Catalog.default()
    gateway = gateway if gateway is not None else build_gateway(settings)
    mailer = mailer if mailer is not None else build_channel(settings)

    workers = MaintenanceWorkers(
        archive=LogArchive(settings.log_dir, clock=clock),
        collector=GarbageCollector(store, clock=clock),
        rotation_interval=settings.log_rotation_interval_seconds,
        gc_interval=settings.gc_interval_seconds,
    )
    return Services(
        settings=settings,
        store=store,
        catalog=catalog,
        gateway=gateway,
        mailer=mailer,
        users=UserDirectory(store),
        sessions=SessionManager(store, clock=clock, lifetime_ms=settings.token_lifetime_seconds * 1000),
        carts=CartEngine(store, catalog, clock=clock, lifetime_ms=settings.cart_lifetime_seconds * 1000),
        checkout=CheckoutOrchestrator(store, catalog, gateway, mailer, clock=clock),
        workers=workers,
    )
