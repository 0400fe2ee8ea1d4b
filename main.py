# main.py
import logging

from core.exceptions import CycleError
from infra.config import database_url
from infra.db.base import make_session_factory
from infra.logging_config import setup_logging
from infra.migrate import run_migrations
from infra.operational_support import bind_trace_id, create_trace_id
from infra.services import build_service_graph

logger = logging.getLogger(__name__)


def main() -> int:
    setup_logging()

    with bind_trace_id(create_trace_id("startup")):
        db_url = database_url()
        run_migrations(db_url=db_url)

        session_factory = make_session_factory(db_url)
        session = session_factory()
        services = build_service_graph(session, session_factory=session_factory)
        try:
            try:
                outcome = services.critical_path_service.recalculate_and_update()
                logger.info("%s (%d tasks)", outcome.message, outcome.updated_tasks)
            except CycleError as exc:
                logger.warning("Schedule not updated: %s", exc)

            summary = services.critical_path_service.get_critical_path()
            logger.info(
                "Tasks: %d, critical: %d, project end: %s, ready to start: %d",
                summary.total_tasks,
                summary.critical_task_count,
                summary.project_end_date.isoformat() if summary.project_end_date else "-",
                services.task_service.count_ready_tasks(),
            )
        finally:
            services.shutdown()
            session.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
