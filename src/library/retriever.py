# src/library/retriever.py
from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from core.embed_tags import embed_item_tags
from core.errors import RetrievalTransportError
from core.models import Item
from core.utils import PART_SUFFIX, audio_extension, reserve_path, safe_filename

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetrievalOutcome:
    item_id: str
    ok: bool
    path: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class BatchRetrievalResult:
    attempted: int
    outcomes: tuple[RetrievalOutcome, ...]

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)


ProgressCallback = Callable[[int, int, RetrievalOutcome], None]


class ArtifactRetriever:
    def __init__(
        self,
        client,
        download_dir: str,
        pacing_delay_s: float = 0.5,
        tag_files: bool = True,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.download_dir = download_dir
        self.pacing_delay_s = pacing_delay_s
        self.tag_files = tag_files
        self._sleep = sleep

    def reserve_target(self, item: Item) -> str:
        """Create the download dir and claim a free name; its part file now exists."""
        os.makedirs(self.download_dir, exist_ok=True)
        return reserve_path(self.download_dir, safe_filename(item.title), audio_extension(item.audio_url))

    def retrieve_one(self, item: Item) -> RetrievalOutcome:
        if not item.is_retrievable:
            return RetrievalOutcome(item_id=item.id, ok=False, error=f"{item.display_title} is not ready yet.")

        part = None
        try:
            path = self.reserve_target(item)
            part = path + PART_SUFFIX
            self.client.download(item.audio_url, part)
            os.replace(part, path)
        except (RetrievalTransportError, OSError) as e:
            logger.warning("Failed to download %s: %s", item.display_title, e)
            if part is not None and os.path.exists(part):
                os.remove(part)
            return RetrievalOutcome(item_id=item.id, ok=False, error=str(e))

        if self.tag_files:
            embed_item_tags(path, item.title, item.tags)
        logger.info("Saved %s -> %s", item.display_title, path)
        return RetrievalOutcome(item_id=item.id, ok=True, path=path)

    def retrieve_batch(
        self,
        items: Iterable[Item],
        selection,
        on_progress: Optional[ProgressCallback] = None,
    ) -> BatchRetrievalResult:
        """
        Download selected, retrievable items one after another. Each transfer
        finishes (or fails) before the next one starts; a failure never stops
        the batch.
        """
        queue = [item for item in items if item.id in selection and item.is_retrievable]
        total = len(queue)
        outcomes: list[RetrievalOutcome] = []

        for index, item in enumerate(queue):
            if index > 0 and self.pacing_delay_s > 0:
                self._sleep(self.pacing_delay_s)

            outcome = self.retrieve_one(item)
            outcomes.append(outcome)
            if on_progress is not None:
                on_progress(index + 1, total, outcome)

        result = BatchRetrievalResult(attempted=total, outcomes=tuple(outcomes))
        logger.info("Batch download: %d attempted, %d saved", result.attempted, result.succeeded)
        return result
