"""Jurisdiction sync: reconcile a state record by abbreviation (or name)."""
import logging
from typing import Any, Dict, Optional

from .parser import parse_jurisdiction
from .records_repository import STATES_TABLE, RecordsRepository

logger = logging.getLogger(__name__)


class JurisdictionSync:

    def __init__(self, repository: RecordsRepository):
        self.repository = repository

    def sync(self, openstates_jurisdiction: Dict[str, Any]) -> Optional[str]:
        """
        Reconcile one jurisdiction record.

        Returns:
            Record id, or None if the record could not be written
        """
        try:
            jurisdiction = parse_jurisdiction(openstates_jurisdiction)
            key_field = "abbreviation" if jurisdiction.abbreviation else "name"
            return self.repository.reconcile(
                STATES_TABLE,
                key_field,
                jurisdiction.reconciliation_key,
                self.repository.model_to_row(jurisdiction),
            )
        except Exception as e:
            logger.error(f"Error syncing state {openstates_jurisdiction.get('name')}: {e}")
            return None
