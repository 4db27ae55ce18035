"""Deduplication of repeated notifications.

Decides whether a candidate notification repeats one sent within the
suppression window. Evaluation performs no I/O; its only side effects are
on the ``active`` flags of history records.

Usage:
    from rgnotify.services.notification import DeduplicationEngine

    engine = DeduplicationEngine(days_to_wait=7)
    decision = engine.evaluate(history, candidate)
    if decision.should_send:
        transport.send(message)
        engine.record_sent(history, decision)
"""

from datetime import timedelta
from typing import List, Optional, Sequence
import structlog

from rgnotify.models.notification import (
    DedupDecision,
    DedupVerdict,
    NotificationMessage,
)

logger = structlog.get_logger()

ONE_DAY = timedelta(days=1)


class DeduplicationEngine:
    """Suppresses repeats of the same notification within a window.

    Attributes:
        days_to_wait: Suppression window in days. Zero or negative means
            never suppress.
    """

    def __init__(self, days_to_wait: int = 0) -> None:
        self.days_to_wait = days_to_wait

    @property
    def suppression_enabled(self) -> bool:
        """Whether any candidate can ever be suppressed."""
        return self.days_to_wait > 0

    def find_previous(
        self,
        history: Sequence[NotificationMessage],
        candidate: NotificationMessage,
    ) -> Optional[NotificationMessage]:
        """Latest history record with the candidate's dedup key.

        Ties on date_sent keep the earliest record in history order.
        """
        key = candidate.dedup_key
        latest: Optional[NotificationMessage] = None
        for record in history:
            if record.dedup_key != key:
                continue
            if latest is None or record.date_sent > latest.date_sent:
                latest = record
        return latest

    def evaluate(
        self,
        history: Sequence[NotificationMessage],
        candidate: NotificationMessage,
    ) -> DedupDecision:
        """Decide whether to send or suppress a candidate.

        On SUPPRESS the matched record is marked active so it survives the
        next save. SEND decisions change nothing until record_sent().

        Args:
            history: Previously sent records.
            candidate: Message about to be sent.

        Returns:
            DedupDecision with the verdict and the matched record.
        """
        previous = self.find_previous(history, candidate)

        if not self.suppression_enabled:
            return DedupDecision(
                verdict=DedupVerdict.SEND,
                candidate=candidate,
                previous=previous,
                reason="suppression_disabled",
            )

        if previous is None:
            return DedupDecision(
                verdict=DedupVerdict.SEND,
                candidate=candidate,
                reason="no_previous_match",
            )

        elapsed_days = (candidate.date_sent - previous.date_sent) / ONE_DAY

        if elapsed_days >= self.days_to_wait:
            return DedupDecision(
                verdict=DedupVerdict.SEND,
                candidate=candidate,
                previous=previous,
                elapsed_days=elapsed_days,
                reason="window_expired",
            )

        previous.active = True
        logger.debug(
            "notification_duplicate",
            notification=candidate.notification_name,
            elapsed_days=round(elapsed_days, 3),
            days_to_wait=self.days_to_wait,
        )
        return DedupDecision(
            verdict=DedupVerdict.SUPPRESS,
            candidate=candidate,
            previous=previous,
            elapsed_days=elapsed_days,
            reason="within_window",
        )

    def record_sent(
        self,
        history: List[NotificationMessage],
        decision: DedupDecision,
    ) -> None:
        """Apply the side effects of a dispatched SEND decision.

        The candidate joins the history as active. Every older record with
        the same dedup key is released so the next save prunes it.
        """
        if not decision.should_send:
            raise ValueError("record_sent() requires a SEND decision")

        key = decision.candidate.dedup_key
        for record in history:
            if record.dedup_key == key:
                record.active = False

        decision.candidate.active = True
        history.append(decision.candidate)
