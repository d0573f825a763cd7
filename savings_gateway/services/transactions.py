"""Transaction processing - runs a recalculation workflow as one atomic unit of work"""

import time
import logging
from datetime import datetime
from typing import Tuple
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from savings_gateway.config import settings
from savings_gateway.domain.engine import INCOME_WORKFLOW, EXPENSE_WORKFLOW, allocate_income, handle_expense
from savings_gateway.domain.exceptions import (
    ConcurrentUpdateError,
    MissingGoalSetError,
    MissingProfileError,
    RecalculationError,
)
from savings_gateway.domain.models import Recalculation, TransactionOutcome
from savings_gateway.infrastructure.database.repositories import (
    GoalRepository,
    ProfileRepository,
    TransactionRepository,
    goal_to_domain,
    profile_to_domain,
    transaction_to_domain,
)
from savings_gateway.infrastructure.observability.logging import log_recalculation
from savings_gateway.infrastructure.observability.metrics import (
    concurrency_conflict_counter,
    record_recalculation,
    workflow_failure_counter,
)


class TransactionService:
    """Applies income/expense events to a user's profile and goals"""

    def __init__(self, db: Session, max_retries: int | None = None):
        self.db = db
        self.max_retries = max_retries or settings.max_conflict_retries
        self.profiles = ProfileRepository(db)
        self.goals = GoalRepository(db)
        self.transactions = TransactionRepository(db)

    def apply_transaction(
        self,
        user_id: str,
        amount: float,
        note: str | None = None,
        now: datetime | None = None,
    ) -> TransactionOutcome:
        """
        Record a transaction and recalculate the user's financial state.

        Flow:
        1. Load profile and goals (with category weights)
        2. Record the transaction
        3. Positive amount: income allocation; otherwise: expense handling
        4. Write the profile and every goal, then commit once

        Retry strategy:
        - The profile row is version-checked on UPDATE; a concurrent writer
          causes StaleDataError, the unit of work is rolled back and the whole
          load-compute-write cycle re-runs, up to max_retries attempts
        - Any other failure rolls back and surfaces as RecalculationError,
          so either every write lands or none do

        Raises:
            MissingProfileError: User has no profile
            MissingGoalSetError: Goals could not be loaded
            ConcurrentUpdateError: Conflicts persisted through every retry
            RecalculationError: The workflow or the record store failed mid-way
        """
        workflow = INCOME_WORKFLOW if amount > 0 else EXPENSE_WORKFLOW
        start_time = time.time()
        attempt = 0

        logging.info(
            "Recalculation started",
            extra={"user_id": user_id, "workflow": workflow, "amount": amount},
        )

        while True:
            attempt += 1
            try:
                outcome, recalculation = self._run_workflow(user_id, workflow, amount, note, now)
                self.db.commit()
                break

            except StaleDataError as e:
                self.db.rollback()
                concurrency_conflict_counter.inc()
                logging.warning(
                    f"Concurrent update detected: {e}",
                    extra={"user_id": user_id, "workflow": workflow, "attempt": attempt},
                )
                if attempt >= self.max_retries:
                    workflow_failure_counter.labels(workflow=workflow).inc()
                    raise ConcurrentUpdateError(user_id, workflow, attempt) from e

            except RecalculationError as e:
                self.db.rollback()
                workflow_failure_counter.labels(workflow=workflow).inc()
                logging.error(str(e), extra={"user_id": user_id, "workflow": workflow})
                raise

            except SQLAlchemyError as e:
                self.db.rollback()
                workflow_failure_counter.labels(workflow=workflow).inc()
                logging.error(f"Record store failure: {e}", extra={"user_id": user_id, "workflow": workflow})
                raise RecalculationError(user_id, workflow, "record store write failed") from e

            except Exception as e:
                self.db.rollback()
                workflow_failure_counter.labels(workflow=workflow).inc()
                logging.error(f"Recalculation failed: {e}", extra={"user_id": user_id, "workflow": workflow})
                raise RecalculationError(user_id, workflow, str(e)) from e

        duration = time.time() - start_time
        record_recalculation(recalculation, duration)
        log_recalculation(user_id, recalculation, attempt, duration * 1000)

        if recalculation.surplus:
            logging.info(
                "Surplus detected",
                extra={"user_id": user_id, "advisory": recalculation.surplus.message},
            )
        if recalculation.overspending:
            logging.info(
                "Overspending detected",
                extra={"user_id": user_id, "advisory": recalculation.overspending.message},
            )

        return outcome

    def _run_workflow(
        self,
        user_id: str,
        workflow: str,
        amount: float,
        note: str | None,
        now: datetime | None,
    ) -> Tuple[TransactionOutcome, Recalculation]:
        """One attempt: read, compute and stage all writes without committing"""
        profile_row = self.profiles.get_profile(user_id)
        if profile_row is None:
            raise MissingProfileError(user_id, workflow)

        try:
            goal_rows = self.goals.list_with_categories(user_id)
        except SQLAlchemyError as e:
            raise MissingGoalSetError(user_id, workflow) from e

        transaction_row = self.transactions.create_transaction(user_id, amount, note)

        profile = profile_to_domain(profile_row)
        goals = [goal_to_domain(row) for row in goal_rows]

        if workflow == INCOME_WORKFLOW:
            recalculation = allocate_income(profile, goals, amount, now)
        else:
            recalculation = handle_expense(profile, goals, abs(amount), now)

        self.profiles.update_profile(profile_row, recalculation.profile)
        rows_by_id = {row.id: row for row in goal_rows}
        for goal in recalculation.goals:
            self.goals.update_goal(rows_by_id[goal.id], goal)

        # Version check happens here; conflicts surface before commit
        self.db.flush()

        outcome = TransactionOutcome(
            transaction=transaction_to_domain(transaction_row),
            profile=recalculation.profile,
            goals=recalculation.goals,
        )
        return outcome, recalculation
