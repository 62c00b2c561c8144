import logging
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError

from ..mirror import MirrorError, SheetMirror
from ..models import SurveyResponse

logger = logging.getLogger(__name__)


def load_records(mirror: SheetMirror, store_available: bool = True) -> List[Dict[str, Any]]:
    """
    Mirror first, local store as fallback; one attempt each, no retries.
    An empty mirror counts as a miss. Both sources failing gives [].
    """
    records: List[Dict[str, Any]] = []
    if mirror.configured:
        try:
            records = mirror.fetch_records()
        except MirrorError as e:
            logger.error(f"Mirror read failed, falling back to local store: {e}")

    if records:
        return records

    if not store_available:
        return []
    try:
        return SurveyResponse.list_recent()
    except SQLAlchemyError as e:
        logger.warning(f"Local store read failed: {e}")
        return []
