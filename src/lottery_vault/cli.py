from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from .codec import encode_state
from .config import StorageSettings
from .errors import ConfigError, StorageError
from .logging_config import configure_logging
from .models import create_default_state
from .service import LotteryStorageService
from .stats import cycle_progress, generate_lottery_stats

logger = logging.getLogger(__name__)


def _cmd_show(svc: LotteryStorageService, args: argparse.Namespace) -> int:
    print(encode_state(svc.load_lottery_data()))
    return 0


def _cmd_init(svc: LotteryStorageService, args: argparse.Namespace) -> int:
    if svc.store.exists() and not args.force:
        print(f"Data file already exists: {svc.data_path}")
        return 0
    svc.save_lottery_data(create_default_state())
    print(f"Initialized {svc.data_path}")
    return 0


def _cmd_validate(svc: LotteryStorageService, args: argparse.Namespace) -> int:
    if svc.validate_data():
        print(f"OK: {svc.data_path}")
        return 0
    print(f"INVALID: {svc.data_path}")
    return 1


def _cmd_backup(svc: LotteryStorageService, args: argparse.Namespace) -> int:
    print(svc.backup_data())
    return 0


def _cmd_restore(svc: LotteryStorageService, args: argparse.Namespace) -> int:
    svc.restore_from_backup(args.path)
    print(f"Restored {svc.data_path} from {args.path}")
    return 0


def _cmd_backups(svc: LotteryStorageService, args: argparse.Namespace) -> int:
    for info in svc.list_backups():
        print(f"{info.created_at.isoformat()}  {info.path}")
    return 0


def _cmd_stats(svc: LotteryStorageService, args: argparse.Namespace) -> int:
    state = svc.load_lottery_data()
    progress = cycle_progress(state.current_cycle, state.config)
    stats = generate_lottery_stats(state.history, state.available_prizes, state.config.draws_per_color)
    report = {
        "currentCycle": {
            "id": state.current_cycle.id,
            "completedDraws": progress.completed_draws,
            "totalDraws": progress.total_draws,
            "percentage": progress.percentage,
            "remainingByColor": {c.value: n for c, n in progress.remaining_by_color.items()},
        },
        "history": {
            "totalCycles": stats.total_cycles,
            "totalDraws": stats.total_draws,
            "fairnessPassed": stats.fairness_passed,
            "colorDistribution": {c.value: n for c, n in stats.color_distribution.items()},
        },
    }
    print(json.dumps(report, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="lottery-vault", description="Inspect and maintain lottery game data")
    p.add_argument("--data-dir", type=Path, default=None, help="Directory holding data.json")
    p.add_argument("--config", type=Path, default=None, help="Optional YAML settings file")
    p.add_argument("--debug", action="store_true", help="Enable verbose debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("show", help="Print the stored state as JSON").set_defaults(func=_cmd_show)

    i = sub.add_parser("init", help="Write the default state if no data exists")
    i.add_argument("--force", action="store_true", help="Overwrite existing data")
    i.set_defaults(func=_cmd_init)

    sub.add_parser("validate", help="Check the data file (exit 1 if invalid)").set_defaults(func=_cmd_validate)
    sub.add_parser("backup", help="Create a timestamped backup").set_defaults(func=_cmd_backup)

    r = sub.add_parser("restore", help="Restore data from a backup file")
    r.add_argument("path", help="Backup file to restore")
    r.set_defaults(func=_cmd_restore)

    sub.add_parser("backups", help="List backups, newest first").set_defaults(func=_cmd_backups)
    sub.add_parser("stats", help="Show cycle progress and history statistics").set_defaults(func=_cmd_stats)
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = StorageSettings.load(args.config)
    except ConfigError as e:
        print(f"ERROR: {e}")
        return 2
    configure_logging(level=logging.DEBUG if args.debug else settings.log_level_value, stream=sys.stderr)

    try:
        svc = LotteryStorageService(root_dir=args.data_dir, settings=settings)
        return args.func(svc, args)
    except StorageError as e:
        logger.debug("Command %s failed", args.cmd, exc_info=True)
        print(f"ERROR: {e}")
        return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
