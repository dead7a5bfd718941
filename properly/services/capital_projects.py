"""
Capital project cost tracking.

A project's actual cost is never stored: it is the sum of its logged
expenses, and logging an expense is the only way to change it.
"""
import logging

from properly.schemas.rental import CapitalProject, ProjectExpense

logger = logging.getLogger(__name__)


def log_expense(project: CapitalProject, expense: ProjectExpense) -> CapitalProject:
    """Return a copy of ``project`` with ``expense`` appended."""
    updated = project.model_copy(update={"expenses": (*project.expenses, expense)})
    logger.info(
        "Capital project %s: logged %s (%s), actual cost now %s of %s",
        project.id, expense.description, expense.amount, updated.actual_cost, project.budget,
    )
    return updated


def is_over_budget(project: CapitalProject) -> bool:
    return project.actual_cost > project.budget
