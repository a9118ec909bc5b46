from contextlib import asynccontextmanager
import logging

from cv_analyzer.analysis import get_default_rubric
from cv_analyzer.storage import get_cv_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    rubric = get_default_rubric()
    logger.info(
        "rubric_loaded keywords=%s sections=%s",
        len(rubric.keywords),
        ",".join(rubric.section_ids),
    )
    store = get_cv_store()
    store.init_db()
    yield
    store.close()
