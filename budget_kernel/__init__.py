"""
budget_kernel -- infrastructure shared by the budget tracker.

Typed exceptions, structured logging, SQLAlchemy engine and declarative base,
the injectable Clock, and the ledger transaction model.  Nothing in the kernel
depends on the recurring scheduler except the ORM registry used by
``create_tables()``.
"""
