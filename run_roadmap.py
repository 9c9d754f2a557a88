#!/usr/bin/env python3
"""
CLI entrypoint for the ReguFlow roadmap workflow.
"""

from __future__ import annotations

import argparse
import logging
import mimetypes
import sys
from pathlib import Path
from typing import List

from config import ReguflowConfig
from credentials import EnvCredentialProvider
from errors import AuthorizationRequired, ReguflowError
from file_utils import RoadmapFileStore
from logging_utils import log_exception, setup_run_logging
from models import Attachment, RoadmapRequest, Tier
from renderers import get_renderer
from roadmap_orchestrator import create_orchestrator
from task_tracking import progress_percentage, task_ids, toggle_task


def enable_debug_logging() -> None:
    logging.getLogger().setLevel(logging.DEBUG)
    for logger_name in logging.Logger.manager.loggerDict:
        logging.getLogger(logger_name).setLevel(logging.DEBUG)


def parse_args(argv: List[str] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Turn a business scenario into a compliance roadmap.")
    parser.add_argument("--user", default=ReguflowConfig.DEFAULT_USER, help="User identity for the roadmap vault.")
    parser.add_argument("--store", default=ReguflowConfig.STORE_DIR, help="Roadmap vault directory.")
    parser.add_argument("--debug", action="store_true", help="Enable verbose logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate a new roadmap.")
    gen.add_argument("scenario", nargs="?", default="", help="Business scenario text.")
    gen.add_argument("--tier", choices=[t.value for t in Tier], default=Tier.FREE.value)
    gen.add_argument("--attach", action="append", default=[], help="Attach a document or photo (repeatable).")
    gen.add_argument("--out", default=None, help="Also render the roadmap as Markdown into this directory.")

    sub.add_parser("history", help="List saved roadmaps, newest first.")

    toggle = sub.add_parser("toggle", help="Mark a checklist task done or undone.")
    toggle.add_argument("record_id")
    toggle.add_argument("task_id", help="Positional identifier, e.g. task-0.")

    render = sub.add_parser("render", help="Render a saved roadmap as Markdown.")
    render.add_argument("record_id")
    render.add_argument("--out", default=".", help="Output directory.")
    return parser.parse_args(argv)


def load_attachment(path: str) -> Attachment:
    file_path = Path(path)
    mime_type, _ = mimetypes.guess_type(file_path.name)
    return Attachment(
        data=file_path.read_bytes(),
        mime_type=mime_type or "application/octet-stream",
        filename=file_path.name,
    )


def cmd_generate(args: argparse.Namespace, store: RoadmapFileStore, run_logger: logging.Logger) -> int:
    tier = Tier(args.tier)
    try:
        api_key = EnvCredentialProvider().ensure_ready(tier)
    except AuthorizationRequired as exc:
        print(f"🔑 {exc.user_message} ({exc})")
        return 2

    try:
        attachments = [load_attachment(path) for path in args.attach]
    except OSError as exc:
        log_exception(run_logger, exc, context="load_attachment", scenario=args.scenario)
        print(f"❌ Could not read attachment {exc.filename}: {exc.strerror}")
        return 1

    request = RoadmapRequest(
        scenario=args.scenario,
        tier=tier,
        attachments=attachments,
        recent_history=store.recent_scenarios(args.user),
    )
    print(f"🧭 {ReguflowConfig.PRODUCT_NAME} Roadmap")
    print(f"📋 Scenario: {args.scenario or '(from attachments)'}")
    print(f"🎟️  Tier: {tier.value}")
    print("=" * 60)

    orchestrator = create_orchestrator(api_key)
    try:
        result = orchestrator.generate_roadmap(request)
    except ReguflowError as exc:
        log_exception(run_logger, exc, context="generate_roadmap", scenario=args.scenario, tier=tier.value)
        print(f"❌ {exc.user_message}")
        return 1

    record = store.save(args.user, args.scenario, result)
    print("\n✅ Roadmap ready.")
    print(f"🆔 Record: {record.id}")
    print(f"📜 Regulations: {len(result.applicable_regulations)}")
    print(f"✔️  Tasks: {len(result.actionable_task_checklist)}")
    if result.is_grounded:
        print(f"🔗 Verified sources: {len(result.grounding_sources or [])}")
    if args.out:
        for path in get_renderer("roadmap_markdown").render(record, args.out):
            print(f"📁 {path}")
    return 0


def cmd_history(args: argparse.Namespace, store: RoadmapFileStore) -> int:
    records = store.list_history(args.user)
    if not records:
        print("Roadmap vault is empty.")
        return 0
    for record in records:
        progress = progress_percentage(record.data, record.completed_tasks)
        print(f"{record.id}  {record.created_at:%Y-%m-%d}  {progress:3d}%  {record.scenario[:60]}")
    return 0


def cmd_toggle(args: argparse.Namespace, store: RoadmapFileStore) -> int:
    record = store.get(args.user, args.record_id)
    if args.task_id not in task_ids(record.data):
        print(f"❌ Unknown task id {args.task_id}; expected task-0..task-{len(record.data.actionable_task_checklist) - 1}")
        return 1
    updated = store.update_completed_tasks(
        args.user, record.id, toggle_task(record.completed_tasks, args.task_id)
    )
    state = "done" if args.task_id in updated.completed_tasks else "open"
    print(f"{args.task_id} marked {state}; progress {progress_percentage(updated.data, updated.completed_tasks)}%")
    return 0


def cmd_render(args: argparse.Namespace, store: RoadmapFileStore) -> int:
    record = store.get(args.user, args.record_id)
    for path in get_renderer("roadmap_markdown").render(record, args.out):
        print(f"📁 {path}")
    return 0


def main(argv: List[str] = None) -> int:
    args = parse_args(argv)
    run_logger, _ = setup_run_logging(
        ReguflowConfig.LOG_DIR,
        args.command,
        scenario=getattr(args, "scenario", ""),
        tier=getattr(args, "tier", None),
    )
    if args.debug:
        enable_debug_logging()
        run_logger.debug("Debug logging enabled.")

    store = RoadmapFileStore(args.store)
    try:
        if args.command == "generate":
            return cmd_generate(args, store, run_logger)
        if args.command == "history":
            return cmd_history(args, store)
        if args.command == "toggle":
            return cmd_toggle(args, store)
        return cmd_render(args, store)
    except KeyError as exc:
        log_exception(run_logger, exc, context=args.command)
        print(f"❌ {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
