"""
Legislator sync: batch-fetch sponsor details and reconcile them by Open States ID.
"""
import logging
from typing import Any, Dict, List

from .openstates_client import OpenStatesClient
from .parser import minimal_legislator, parse_legislator
from .records_repository import LEGISLATORS_TABLE, RecordsRepository

logger = logging.getLogger(__name__)


class LegislatorSync:
    """Reconciles person stubs referenced by bills into the legislators table."""

    KEY_FIELD = "openstates_id"

    def __init__(self, client: OpenStatesClient, repository: RecordsRepository):
        self.client = client
        self.repository = repository

    def sync(self, people: List[Dict[str, Any]]) -> List[str]:
        """
        Reconcile legislators and return their record ids, in input order

        Args:
            people: Person stubs from bill sponsorships

        Returns:
            Record ids of the legislators that reconciled successfully
        """
        unique_people: Dict[str, Dict[str, Any]] = {}
        for person in people:
            person_id = person.get("id")
            if not person_id:
                logger.warning(f"Skipping legislator {person.get('name')!r}: no Open States ID")
                continue
            unique_people.setdefault(person_id, person)

        if not unique_people:
            return []

        logger.debug(f"Fetching full details for {len(unique_people)} unique legislators...")
        try:
            people_map = self.client.get_people_by_ids(list(unique_people))
        except Exception as e:
            logger.error(f"Error batch fetching legislators: {e}, falling back to sponsor data")
            return self._sync_minimal(unique_people.values())

        legislator_ids = []
        for person_id, stub in unique_people.items():
            try:
                legislator = parse_legislator(people_map.get(person_id) or stub)
                record_id = self.repository.reconcile(
                    LEGISLATORS_TABLE,
                    self.KEY_FIELD,
                    person_id,
                    self.repository.model_to_row(legislator),
                )
                legislator_ids.append(record_id)
            except Exception as e:
                logger.error(f"Error syncing legislator {stub.get('name')}: {e}", exc_info=True)
                continue

        return legislator_ids

    def _sync_minimal(self, people) -> List[str]:
        legislator_ids = []
        for person in people:
            try:
                legislator = minimal_legislator(person)
                record_id = self.repository.reconcile(
                    LEGISLATORS_TABLE,
                    self.KEY_FIELD,
                    legislator.openstates_id,
                    self.repository.model_to_row(legislator),
                )
                legislator_ids.append(record_id)
            except Exception as e:
                logger.error(f"Error syncing legislator {person.get('name')}: {e}", exc_info=True)
        return legislator_ids
