"""Command-line entry point for inspecting and driving progression"""
import argparse
import asyncio
import logging
from typing import Optional

from src.config import validate_config, LOG_LEVEL, DATA_PATH
from src.exceptions import LivreMenteError
from src.gamification.feedback import FeedbackEmitter, FeedbackEvent
from src.gamification.xp_system import progress_percent, total_xp_earned
from src.models.tracking import HabitStatus
from src.services.container import open_container
from src.storage.local_store import LocalStore

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL)
)

logger = logging.getLogger(__name__)


def _print_event(event: FeedbackEvent) -> None:
    if event.kind == "popup_shown" and event.popup is not None:
        print(f"+{event.popup.amount} XP")
    elif event.kind == "level_up_started":
        print(f"LEVEL UP! (+{event.levels_gained})")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="livremente", description="LivreMente progression tools")
    parser.add_argument("--user", required=True, help="Local user id")
    parser.add_argument("--data-path", default=str(DATA_PATH), help="Storage directory")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("status", help="Show level and XP")

    award = sub.add_parser("award", help="Award raw XP")
    award.add_argument("amount", type=float)

    habit = sub.add_parser("habit", help="Toggle a habit")
    habit.add_argument("name", choices=sorted(HabitStatus.model_fields))

    sub.add_parser("consult", help="Open the daily consult")
    return parser


async def run(argv: Optional[list] = None) -> int:
    """Run one CLI command; returns the process exit code"""
    args = build_parser().parse_args(argv)
    validate_config()

    emitter = FeedbackEmitter()
    emitter.subscribe(_print_event)
    try:
        container = await open_container(args.user, LocalStore(args.data_path), emitter)
        if args.command == "award":
            await container.session.award(args.amount, source="cli")
        elif args.command == "habit":
            await container.habit_service.toggle(args.name)
        elif args.command == "consult":
            await container.chat_service.open_daily_consult()
    except LivreMenteError as e:
        print(e.user_message)
        return 1
    finally:
        emitter.close()

    profile = container.session.profile
    print(
        f"Level {profile.level} - {profile.points}/{profile.xp_to_next_level} XP "
        f"({progress_percent(profile):.0f}%)"
    )
    print(f"Total earned: {total_xp_earned(profile, container.session.growth_factor)} XP")
    return 0


def main() -> None:
    raise SystemExit(asyncio.run(run()))


if __name__ == "__main__":
    main()
