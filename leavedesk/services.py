from fastapi import Depends
from leavedesk.config import settings
from leavedesk.db import create_record_store
from leavedesk.utils.balance_utils import BalanceLedger
from leavedesk.utils.leave_utils import LeaveStore
from leavedesk.utils.notification_utils import NotificationDispatcher, NotificationInbox
from leavedesk.utils.presence_utils import PresenceRegistry
from leavedesk.utils.workflow_utils import WorkflowEngine


class Services:
    """One process-wide graph of the workflow collaborators."""

    def __init__(self, store, default_balances: dict, max_attempts: int = 5):
        self.store = store
        self.ledger = BalanceLedger(store, default_balances)
        self.leaves = LeaveStore(store)
        self.inbox = NotificationInbox(store)
        self.presence_registry = PresenceRegistry()
        self.dispatcher = NotificationDispatcher(self.presence_registry)
        self.workflow_engine = WorkflowEngine(
            ledger=self.ledger,
            leaves=self.leaves,
            inbox=self.inbox,
            dispatcher=self.dispatcher,
            max_attempts=max_attempts,
        )


services = Services(
    create_record_store(settings),
    settings.default_balances(),
    max_attempts=settings.TRANSITION_MAX_ATTEMPTS,
)


def get_services() -> Services:
    return services


def get_workflow_engine(services: Services = Depends(get_services)) -> WorkflowEngine:
    return services.workflow_engine


def get_balance_ledger(services: Services = Depends(get_services)) -> BalanceLedger:
    return services.ledger


def get_notification_inbox(services: Services = Depends(get_services)) -> NotificationInbox:
    return services.inbox


def get_presence_registry(services: Services = Depends(get_services)) -> PresenceRegistry:
    return services.presence_registry
