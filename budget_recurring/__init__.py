"""
budget_recurring -- Recurring transaction scheduler.

Decides, for each recurring rule, whether a new ledger transaction is due as
of a reference date, and materializes it at most once per period.

Architecture:
    budget_recurring/ is a top-level package.  Nothing in budget_kernel
    imports from it except the ORM registry used by ``create_tables()``.

    domain/       pure types, validation, due-date evaluation (ZERO I/O)
    models/       ORM model for recurring rules
    stores/       store protocols + SQLAlchemy implementations
    services/     materializer, batch runner, rule management
    orchestrator  composition root, "run now" trigger, startup hook

Guarantees:
    - Due-date evaluation is pure; the reference date is always explicit.
    - One rule's failure never aborts a pass.
    - Inactive rules are never evaluated.
    - ``last_processed`` never moves backwards.
"""
