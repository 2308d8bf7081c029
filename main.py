"""CLI entrypoint: run shortcut refreshes against a JSON fixture."""

from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Dict

from config import get_settings
from core import RefreshTrigger
from orchestrator import RefreshOrchestrator
from sources import Fixture, load_fixture
from utils import ShortcutSyncError, setup_logger


def _report(fixture: Fixture, payload: Dict[str, Any]) -> str:
    body = dict(payload)
    body["platform"] = fixture.platform.snapshot()
    body["window_armed"] = fixture.scheduler.is_window_armed()
    return json.dumps(body, ensure_ascii=False, indent=2)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Contact shortcut sync CLI")
    parser.add_argument("--fixture", required=True, help="JSON file with contacts, pinned shortcuts and flags")
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument("--plain-logs", action="store_true", help="disable Rich log formatting")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("refresh")
    sub.add_parser("initialize")
    sub.add_parser("teardown")
    sub.add_parser("show")

    args = parser.parse_args(argv)
    setup_logger("", level=getattr(logging, str(args.log_level).upper(), logging.WARNING), use_rich=not args.plain_logs)

    try:
        fixture = load_fixture(args.fixture)
    except ShortcutSyncError as exc:
        print(json.dumps({"error": str(exc)}, ensure_ascii=False))
        return 2

    if args.command == "show":
        print(_report(fixture, {}))
        return 0

    settings = get_settings()
    if args.command == "teardown":
        fixture.feature_gate.set(settings.sync.feature_flag, False)

    orchestrator = RefreshOrchestrator(
        entity_source=fixture.entity_source,
        photo_store=fixture.photo_store,
        platform=fixture.platform,
        scheduler=fixture.scheduler,
        feature_gate=fixture.feature_gate,
        settings=settings,
    )
    with orchestrator:
        try:
            if args.command == "initialize":
                future = orchestrator.initialize()
                if future is None:
                    print(_report(fixture, {"processed": False}))
                    return 0
                status = future.result()
            else:
                status = orchestrator.refresh(RefreshTrigger.MANUAL)
        except ShortcutSyncError as exc:
            print(_report(fixture, {"processed": False, "error": str(exc)}))
            return 1

    print(_report(fixture, {"processed": True, "status": status.model_dump(mode="json")}))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
