"""
Scheduled sync of every jurisdiction, batched to stay under rate limits.
"""
import time
import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import List, Optional, Sequence

from shared.models.sync_result import FailedState, ScheduledResults, ScheduledSyncSummary

from .sync import SyncService

logger = logging.getLogger(__name__)

ALL_JURISDICTIONS: Sequence[str] = (
    "al", "ak", "az", "ar", "ca", "co", "ct", "de", "fl", "ga",
    "hi", "id", "il", "in", "ia", "ks", "ky", "la", "me", "md",
    "ma", "mi", "mn", "ms", "mo", "mt", "ne", "nv", "nh", "nj",
    "nm", "ny", "nc", "nd", "oh", "ok", "or", "pa", "ri", "sc",
    "sd", "tn", "tx", "ut", "vt", "va", "wa", "wv", "wi", "wy",
    "dc", "pr",
)


class ScheduledSync:
    """Runs the per-state sync for every jurisdiction in concurrent batches."""

    BATCH_SIZE = 5
    BATCH_DELAY_SECONDS = 2.0

    def __init__(
        self,
        sync_service: SyncService,
        states: Sequence[str] = ALL_JURISDICTIONS,
        limit: Optional[int] = None,
        batch_size: int = BATCH_SIZE,
        batch_delay: float = BATCH_DELAY_SECONDS,
    ):
        self.sync_service = sync_service
        self.states = list(states)
        self.limit = sync_service.settings.scheduled_bill_limit if limit is None else limit
        self.batch_size = batch_size
        self.batch_delay = batch_delay

    def _sync_one(self, state: str):
        summary = self.sync_service.sync_states([state], limit=self.limit)
        return summary.results[0]

    def run(self) -> ScheduledSyncSummary:
        """
        Sync all states, batch_size at a time. Every future in a batch is
        settled before moving on; a failed state never stops the run.
        """
        results = ScheduledResults(total=len(self.states))
        batches: List[List[str]] = [
            self.states[i : i + self.batch_size]
            for i in range(0, len(self.states), self.batch_size)
        ]

        for n, batch in enumerate(batches, 1):
            logger.info(f"Scheduled sync batch {n}/{len(batches)}: {', '.join(batch)}")
            with ThreadPoolExecutor(max_workers=self.batch_size) as executor:
                futures = {executor.submit(self._sync_one, state): state for state in batch}
                wait(futures)

            for future, state in futures.items():
                try:
                    state_result = future.result()
                except Exception as e:
                    logger.error(f"Scheduled sync of {state} raised: {e}", exc_info=True)
                    results.failed.append(FailedState(state=state, error=str(e)))
                    continue
                if state_result.success:
                    results.success.append(state)
                else:
                    results.failed.append(
                        FailedState(state=state, error=state_result.error or "Unknown error")
                    )

            if n < len(batches):
                time.sleep(self.batch_delay)

        logger.info(
            f"Scheduled sync completed: {len(results.success)} succeeded, {len(results.failed)} failed"
        )
        return ScheduledSyncSummary(
            success_count=len(results.success),
            failed_count=len(results.failed),
            results=results,
        )
