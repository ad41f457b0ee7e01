"""
RecurringOrchestrator -- composition root for recurring processing.

Contract:
    Wires the SQL stores, the batch runner and the clock around one Session,
    and exposes the single upward operation "run recurring processing now"
    (``run_now``).  ``run_startup_processing`` is the application start hook.

Invariants enforced:
    - Clock injection: the default reference date is ``clock.today()``.
    - At most one pass at a time per lock: every orchestrator built with the
      same lock refuses to start a second concurrent pass.
    - Each rule runs inside its own SAVEPOINT (``session.begin_nested``).

Non-goals:
    - Does NOT commit -- ``run_now`` leaves commit to the caller;
      ``run_startup_processing`` owns its session via ``session_scope``.
"""

from __future__ import annotations

import threading
from datetime import date

from sqlalchemy.orm import Session

from budget_kernel.db.engine import create_tables, init_engine_from_url, session_scope
from budget_kernel.domain.clock import Clock, SystemClock
from budget_kernel.exceptions import RecurringRunInProgressError
from budget_kernel.logging_config import configure_logging, get_logger

from budget_config import Settings, get_settings
from budget_recurring.domain.types import ProcessingSummary
from budget_recurring.services.rule_service import RecurringRuleService
from budget_recurring.services.runner import RecurringBatchRunner
from budget_recurring.stores.sql import SqlRecurringRuleStore, SqlTransactionStore

logger = get_logger("recurring.orchestrator")


class RecurringOrchestrator:
    """DI container for the recurring scheduler.

    Contract:
        - ``from_session()`` creates a fully wired orchestrator.
        - ``run_now()`` runs one pass and returns the summary.
        - ``rule_service`` manages rules in the same session.
    """

    def __init__(
        self,
        session: Session,
        runner: RecurringBatchRunner,
        clock: Clock | None = None,
        lock: threading.Lock | None = None,
    ) -> None:
        self._session = session
        self._runner = runner
        self._clock = clock or SystemClock()
        self._lock = lock or threading.Lock()

    # -------------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------------

    @classmethod
    def from_session(
        cls,
        session: Session,
        clock: Clock | None = None,
        lock: threading.Lock | None = None,
    ) -> RecurringOrchestrator:
        """Create an orchestrator backed by the SQL stores on ``session``.

        Args:
            session: SQLAlchemy session for persistence.
            clock: Optional clock for deterministic testing.
            lock: Lock shared with other orchestrators that must not run
                concurrently with this one.
        """
        effective_clock = clock or SystemClock()
        runner = RecurringBatchRunner(
            rule_store=SqlRecurringRuleStore(session),
            transaction_store=SqlTransactionStore(session, clock=effective_clock),
            isolation=session.begin_nested,
        )
        return cls(session=session, runner=runner, clock=effective_clock, lock=lock)

    # -------------------------------------------------------------------------
    # Trigger
    # -------------------------------------------------------------------------

    def run_now(self, reference_date: date | None = None) -> ProcessingSummary:
        """Run recurring processing as of ``reference_date`` (default: today).

        Raises:
            RecurringRunInProgressError: If another pass holds the lock.
            StorageError: If the active rule set cannot be loaded.
        """
        if not self._lock.acquire(blocking=False):
            logger.warning("recurring_run_rejected_in_progress")
            raise RecurringRunInProgressError()
        try:
            ref = reference_date or self._clock.today()
            summary = self._runner.process_all(ref)
            self._session.flush()
            return summary
        finally:
            self._lock.release()

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def session(self) -> Session:
        return self._session

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def rule_service(self) -> RecurringRuleService:
        return RecurringRuleService(self._session, clock=self._clock)


def run_startup_processing(
    settings: Settings | None = None,
    clock: Clock | None = None,
    lock: threading.Lock | None = None,
) -> ProcessingSummary | None:
    """Application start hook: prepare the database and run one pass.

    Every entry point calls this before touching the database.  Pass the
    same ``lock`` from callers that may start concurrently; without one the
    pass is only guarded against itself.

    Returns the summary, or None when ``settings.process_on_startup`` is off.

    Raises:
        RecurringRunInProgressError: If ``lock`` is already held.
    """
    settings = settings or get_settings()
    configure_logging(level=settings.log_level)

    init_engine_from_url(settings.database_url, echo=settings.echo_sql)
    create_tables()

    if not settings.process_on_startup:
        logger.info("startup_processing_disabled")
        return None

    with session_scope() as session:
        orchestrator = RecurringOrchestrator.from_session(
            session, clock=clock, lock=lock,
        )
        summary = orchestrator.run_now()

    logger.info("startup_processing_completed", extra=summary.as_dict())
    return summary
