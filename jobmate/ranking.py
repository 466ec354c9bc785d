from __future__ import annotations

import math
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from loguru import logger

from jobmate.config import DEFAULT_PAGE_SIZE
from jobmate.matching.engine import MatchEngine
from jobmate.matching.types import MatchResult
from jobmate.models import ActorProfile, Candidate, SkippedCandidate
from jobmate.preferences import MatchPreferences

DEADLINE_EXCEEDED = "deadline exceeded"


@dataclass(frozen=True)
class RankedMatch:
    candidate: Candidate
    result: MatchResult

    @property
    def score(self) -> int:
        return self.result.score


@dataclass(frozen=True)
class RankingPage:
    matches: List[RankedMatch]
    total_matches: int
    current_page: int
    total_pages: int
    skipped: List[SkippedCandidate] = field(default_factory=list)
    # True when the deadline expired before every candidate was scored
    truncated: bool = False
    duration_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "matches": [
                {
                    "candidate_id": m.candidate.candidate_id,
                    "title": m.candidate.title,
                    "created_at": m.candidate.created_at.isoformat(),
                    "match": m.result.to_dict(),
                }
                for m in self.matches
            ],
            "pagination": {
                "totalMatches": self.total_matches,
                "currentPage": self.current_page,
                "totalPages": self.total_pages,
            },
            "skipped": [{"candidate_id": s.candidate_id, "reason": s.reason} for s in self.skipped],
            "truncated": self.truncated,
            "duration_ms": self.duration_ms,
        }


def sort_key(match: RankedMatch) -> Tuple[int, float, str]:
    """Score desc, then newest first, then id asc so equal inputs always order the same."""
    return (-match.result.score, -match.candidate.created_at.timestamp(), match.candidate.candidate_id)


def paginate(items: Sequence[RankedMatch], page: int, page_size: int) -> List[RankedMatch]:
    start = (page - 1) * page_size
    return list(items[start:start + page_size])


class RankingService:
    """
    Scores candidates for one actor, filters, sorts and paginates.

    Scoring fans out over a thread pool; sorting only starts once every task has
    finished or the deadline has expired.
    """

    def __init__(
            self,
            engine: Optional[MatchEngine] = None,
            *,
            max_workers: Optional[int] = None,
            deadline_seconds: Optional[float] = None,
    ) -> None:
        self.engine = engine or MatchEngine()
        self.max_workers = max_workers if max_workers is not None else self.engine.config.max_workers
        self.deadline_seconds = deadline_seconds if deadline_seconds is not None else self.engine.config.deadline_seconds
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")

    def _eligible(
            self,
            candidates: Sequence[Candidate],
            actor: ActorProfile,
            preferences: MatchPreferences,
    ) -> Tuple[List[Candidate], List[SkippedCandidate]]:
        eligible: List[Candidate] = []
        skipped: List[SkippedCandidate] = []
        seen = set()
        for c in candidates:
            if not c.candidate_id:
                skipped.append(SkippedCandidate("", "candidate has no identifier"))
                logger.warning("Skipping candidate without identifier (title={!r})", c.title)
                continue
            if c.candidate_id in seen:
                skipped.append(SkippedCandidate(c.candidate_id, "duplicate candidate identifier"))
                logger.warning("Skipping duplicate candidate {}", c.candidate_id)
                continue
            seen.add(c.candidate_id)
            # Access-gated and filtered candidates are excluded silently: they are not errors
            if not self.engine.can_access(c, actor):
                continue
            if not preferences.filters.accepts(c):
                continue
            eligible.append(c)
        return eligible, skipped

    def _score_all(
            self,
            candidates: Sequence[Candidate],
            actor: ActorProfile,
            preferences: MatchPreferences,
    ) -> Tuple[List[RankedMatch], List[SkippedCandidate], bool]:
        matches: List[RankedMatch] = []
        skipped: List[SkippedCandidate] = []
        if not candidates:
            return matches, skipped, False

        workers = min(self.max_workers, len(candidates))
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="jobmate-score")
        try:
            futures: Dict[Future, Candidate] = {
                executor.submit(self.engine.score, c, actor, preferences): c for c in candidates
            }
            _, pending = wait(futures, timeout=self.deadline_seconds)
        finally:
            # Never block on stragglers once the deadline has passed
            executor.shutdown(wait=False, cancel_futures=True)

        for fut in futures:
            c = futures[fut]
            if fut in pending:
                skipped.append(SkippedCandidate(c.candidate_id, DEADLINE_EXCEEDED))
                continue
            exc = fut.exception()
            if exc is not None:
                skipped.append(SkippedCandidate(c.candidate_id, f"{type(exc).__name__}: {exc}"))
                logger.warning("Scoring failed for candidate {}: {}", c.candidate_id, exc)
                continue
            matches.append(RankedMatch(candidate=c, result=fut.result()))

        truncated = bool(pending)
        if truncated:
            logger.warning(
                "Ranking deadline of {}s expired: {} of {} candidates unscored",
                self.deadline_seconds,
                len(pending),
                len(futures),
            )
        return matches, skipped, truncated

    def rank(
            self,
            candidates: Sequence[Candidate],
            actor: ActorProfile,
            preferences: Optional[MatchPreferences] = None,
            *,
            page: int = 1,
            page_size: int = DEFAULT_PAGE_SIZE,
    ) -> RankingPage:
        if page < 1:
            raise ValueError("page must be at least 1")
        if page_size < 1:
            raise ValueError("page_size must be at least 1")

        start = time.time()
        prefs = preferences or MatchPreferences()

        # Resolve weights once: a bad weight table is a configuration error for the whole call
        self.engine.effective_weights(actor, prefs)

        eligible, skipped = self._eligible(candidates, actor, prefs)
        matches, failed, truncated = self._score_all(eligible, actor, prefs)
        skipped.extend(failed)

        matches.sort(key=sort_key)
        total = len(matches)
        total_pages = math.ceil(total / page_size) if total else 0

        duration_ms = int((time.time() - start) * 1000)
        logger.info(
            "Ranked {} candidates for actor {}: {} scored, {} skipped, {}ms",
            len(candidates),
            actor.actor_id,
            total,
            len(skipped),
            duration_ms,
        )

        return RankingPage(
            matches=paginate(matches, page, page_size),
            total_matches=total,
            current_page=page,
            total_pages=total_pages,
            skipped=skipped,
            truncated=truncated,
            duration_ms=duration_ms,
        )
