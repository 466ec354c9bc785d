from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, List, Optional

from loguru import logger

from jobmate.config import DEFAULT_PAGE_SIZE, load_engine_config
from jobmate.exceptions import MatchingError
from jobmate.ingest import load_actor, load_candidates
from jobmate.logging_config import configure_logging
from jobmate.matching.boost import premium_badges
from jobmate.matching.engine import MatchEngine
from jobmate.models import ActorProfile
from jobmate.preferences import load_preferences
from jobmate.ranking import RankingPage, RankingService


def print_human_summary(page: RankingPage, actor: ActorProfile, *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
    print("\n=== JobMate Matches ===")
    print(f"Actor: {actor.actor_id or '-'}")
    badges = premium_badges(actor.premium)
    if badges:
        print(f"Badges: {', '.join(badges)}")
    print(
        f"Matches: {page.total_matches} | Page {page.current_page} of {max(page.total_pages, 1)}"
        f" | Skipped: {len(page.skipped)}"
    )
    if page.truncated:
        print("Deadline expired: results are partial")
    print(f"Duration: {page.duration_ms}ms")

    if not page.matches:
        print("\nNo matches on this page.")

    offset = (page.current_page - 1) * page_size
    for idx, m in enumerate(page.matches, start=1):
        c = m.candidate
        cat = f" [{c.category}]" if c.category else ""
        print(f"\n{offset + idx}) {c.title or c.candidate_id}{cat}")
        score_line = f"   score: {m.result.score}"
        if m.result.boosted:
            score_line += f" (base {m.result.base_score})"
        print(score_line)
        for d in m.result.dimensions:
            print(f"   {d.name}: {int(round(d.score))} - {d.description}")
        for line in m.result.explanations:
            print(f"   * {line}")

    if page.skipped:
        print("\nSkipped:")
        for s in page.skipped:
            print(f"   {s.candidate_id or '<missing id>'}: {s.reason}")


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _candidate_records(data: Any) -> List[Any]:
    # Accept a bare list or an API-style {"jobs": [...]} / {"candidates": [...]} envelope
    if isinstance(data, dict):
        for key in ("candidates", "jobs", "matches"):
            if isinstance(data.get(key), list):
                return data[key]
        raise ValueError("candidates file must be a list or contain a 'candidates' list")
    if not isinstance(data, list):
        raise ValueError("candidates file must be a list")
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="JobMate compatibility ranking")
    parser.add_argument("--candidates", type=str, required=True, help="Path to a JSON list of job records")
    parser.add_argument("--profile", type=str, required=True, help="Path to the specialist profile.json")
    parser.add_argument("--preferences", type=str, default="", help="Optional path to match preferences JSON")
    parser.add_argument("--page", type=int, default=1, help="Page number (1-based)")
    parser.add_argument("--page-size", type=int, default=DEFAULT_PAGE_SIZE, help="Matches per page")
    parser.add_argument("--json", action="store_true", help="Print JSON only (machine-readable)")
    parser.add_argument("--log-level", type=str, default=None, help="Override JOBMATE_LOG_LEVEL")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level)

    paths = [Path(args.candidates), Path(args.profile)]
    if args.preferences:
        paths.append(Path(args.preferences))
    for p in paths:
        if not p.exists():
            print(f"\n[JobMate] File not found: {p}", file=sys.stderr)
            return 2

    try:
        records = _candidate_records(_read_json(Path(args.candidates)))
        actor = load_actor(_read_json(Path(args.profile)))
        prefs = load_preferences(_read_json(Path(args.preferences)) if args.preferences else None)

        candidates, ingest_skipped = load_candidates(records)
        service = RankingService(MatchEngine(load_engine_config()))
        page = service.rank(candidates, actor, prefs, page=args.page, page_size=args.page_size)
    except (MatchingError, ValueError) as exc:
        logger.error("Ranking failed: {}", exc)
        print(f"\n[JobMate] {exc}", file=sys.stderr)
        return 1

    if ingest_skipped:
        page = replace(page, skipped=ingest_skipped + page.skipped)

    if args.json:
        print(json.dumps(page.to_dict(), indent=2))
    else:
        print_human_summary(page, actor, page_size=args.page_size)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
