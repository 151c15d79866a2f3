"""Subject sync: canonicalize raw labels and reconcile by display name."""
import logging
from typing import List

from .parser import parse_subject
from .records_repository import SUBJECTS_TABLE, RecordsRepository

logger = logging.getLogger(__name__)


class SubjectSync:
    KEY_FIELD = "name"

    def __init__(self, repository: RecordsRepository):
        self.repository = repository

    def sync(self, labels: List[str]) -> List[str]:
        """Reconcile each label's canonical subject; failures are skipped"""
        subject_ids: List[str] = []
        for label in labels:
            try:
                subject = parse_subject(label)
                record_id = self.repository.reconcile(
                    SUBJECTS_TABLE,
                    self.KEY_FIELD,
                    subject.name,
                    self.repository.model_to_row(subject),
                )
            except Exception as e:
                logger.error(f"Error syncing subject {label!r}: {e}")
                continue
            # Distinct raw labels can share one canonical name
            if record_id not in subject_ids:
                subject_ids.append(record_id)
        return subject_ids
