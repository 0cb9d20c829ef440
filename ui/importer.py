import logging
from typing import List

from core.errors import DataServiceError
from modules.catalog.entities import Component
from modules.reports.excel import parse_components_table
from ui.data_service import DataService

logger = logging.getLogger(__name__)


def _roll_back(service: DataService, stored: List[Component]) -> None:
    for component in stored:
        try:
            service.delete_component(component.id)
        except DataServiceError as exc:
            logger.error("Could not remove imported component %s: %s", component.id, exc)


def import_components_file(service: DataService, data: bytes, filename: str) -> List[Component]:
    """Parse the whole file first, then store each component.

    A parse error propagates before anything is written. If storing fails
    part way, the components already stored are deleted again before the
    error propagates.
    """
    components = parse_components_table(data, filename)
    stored: List[Component] = []
    try:
        for component in components:
            service.add_component(component)
            stored.append(component)
    except DataServiceError:
        logger.error(
            "Import of %s failed after %d of %d component(s); rolling back", filename, len(stored), len(components)
        )
        _roll_back(service, stored)
        raise
    logger.info("Imported %d component(s) from %s", len(components), filename)
    return components
