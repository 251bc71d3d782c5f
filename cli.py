import argparse
import sys
from pathlib import Path

import requests
from fastapi import HTTPException

from funnel.config import SESSION_DIR
from funnel.database import SessionLocal, init_db
from funnel.errors import FunnelError
from funnel.logging_setup import setup_console_logging
from funnel.models.db.quiz import QuizStatus
from funnel.player import TerminalPlayer
from funnel.services import analytics_service, article_service, quiz_service
from funnel.services.auth_service import create_user
from funnel.services.player_client import FunnelApiClient, QuizNotAvailable, progress_saver
from funnel.services.response_service import list_responses
from funnel.services.sequencer import QuizRunner
from funnel.services.session_service import LocalSessionStore
from funnel.utils import json_load

setup_console_logging()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Quiz funnel tools")
    commands = parser.add_subparsers(dest="command", required=True)

    import_cmd = commands.add_parser("import-quiz", help="Create or update a quiz from JSON")
    import_cmd.add_argument("file", type=Path, help="Path to quiz definition JSON")
    import_cmd.add_argument("--publish", action="store_true", help="Publish after import")

    publish_cmd = commands.add_parser("publish", help="Publish a quiz")
    publish_cmd.add_argument("slug")

    analytics_cmd = commands.add_parser("analytics", help="Print funnel analytics")
    analytics_cmd.add_argument("slug")

    export_cmd = commands.add_parser("export-csv", help="Export responses as CSV")
    export_cmd.add_argument("slug")
    export_cmd.add_argument("--output", type=Path, required=True, help="CSV file to write")

    article_cmd = commands.add_parser("import-article", help="Create or update an article from JSON")
    article_cmd.add_argument("file", type=Path, help="Path to article JSON")

    tracking_cmd = commands.add_parser("set-tracking", help="Set default pixel and CTA URL")
    tracking_cmd.add_argument("--pixel-id", help="Default tracking pixel id")
    tracking_cmd.add_argument("--cta-url", help="Default CTA URL")

    admin_cmd = commands.add_parser("create-admin", help="Create an admin account")
    admin_cmd.add_argument("email")
    admin_cmd.add_argument("password")

    play_cmd = commands.add_parser("play", help="Play a published quiz in the terminal")
    play_cmd.add_argument("slug")
    play_cmd.add_argument("--base-url", default="http://127.0.0.1:8000")
    play_cmd.add_argument(
        "--session-dir",
        type=Path,
        default=SESSION_DIR,
        help="Where the local session copy is kept",
    )
    play_cmd.add_argument("--restart", action="store_true", help="Discard the saved session")
    play_cmd.add_argument("--no-wait", action="store_true", help="Skip loading slide delays")
    return parser.parse_args(argv)


def _quiz_or_exit(db, slug: str):
    quiz = quiz_service.get_quiz_by_slug(db, slug)
    if quiz is None:
        raise SystemExit(f"Quiz {slug} not found")
    return quiz


def _load_json_object(path: Path) -> dict:
    data = json_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise SystemExit(f"{path} must contain a JSON object")
    return data


def import_quiz(args: argparse.Namespace) -> None:
    data = _load_json_object(args.file)
    with SessionLocal() as db:
        quiz = quiz_service.import_quiz(db, data)
        if args.publish:
            quiz_service.set_status(db, quiz, QuizStatus.PUBLISHED)
        print(f"Imported {quiz.slug} ({quiz.id}) with {len(quiz.slides)} slides [{quiz.status}]")


def publish(args: argparse.Namespace) -> None:
    with SessionLocal() as db:
        quiz = quiz_service.set_status(db, _quiz_or_exit(db, args.slug), QuizStatus.PUBLISHED)
        print(f"Published {quiz.slug}")


def show_analytics(args: argparse.Namespace) -> None:
    with SessionLocal() as db:
        quiz = _quiz_or_exit(db, args.slug)
        definition = quiz_service.to_definition(quiz)
        report = analytics_service.build_quiz_analytics(
            definition, list_responses(db, quiz.id)
        )
    print(f"{definition.name} ({definition.slug})")
    print(
        f"Responses: {report.totalResponses}  Completed: {report.completedResponses}  "
        f"Completion rate: {report.completionRate}%  "
        f"Avg time: {report.avgTimeToCompleteMinutes} min"
    )
    for step in report.funnel:
        drop = f"  -{step.dropOff} ({step.dropOffRate}%)" if step.dropOff > 0 else ""
        print(f"{step.slideIndex + 1:>3}. {step.label[:40]:<40} {step.reached:>6} {step.percentage:>4}%{drop}")


def export_csv(args: argparse.Namespace) -> None:
    with SessionLocal() as db:
        quiz = _quiz_or_exit(db, args.slug)
        content = analytics_service.export_responses_csv(
            quiz_service.to_definition(quiz), list_responses(db, quiz.id)
        )
    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(content, encoding="utf-8")
    print(f"Saved responses to {args.output}")


def import_article(args: argparse.Namespace) -> None:
    data = _load_json_object(args.file)
    with SessionLocal() as db:
        article = article_service.import_article(db, data)
        print(f"Imported article {article.slug}")


def set_tracking(args: argparse.Namespace) -> None:
    with SessionLocal() as db:
        config = article_service.set_tracking_config(db, args.pixel_id, args.cta_url)
    print(f"Default pixel: {config.defaultPixelId or '-'}  Default CTA: {config.defaultCtaUrl or '-'}")
    for slug, tracking in config.articles.items():
        print(f"  {slug}: pixel {tracking.pixelId or '-'}  CTA {tracking.ctaUrl or '-'}")


def create_admin(args: argparse.Namespace) -> None:
    with SessionLocal() as db:
        user = create_user(db, args.email, args.password)
        print(f"Created admin {user.email}")


def play(args: argparse.Namespace) -> None:
    client = FunnelApiClient(args.base_url)
    try:
        quiz = client.fetch_quiz(args.slug)
    except QuizNotAvailable as exc:
        raise SystemExit(str(exc))
    except requests.RequestException as exc:
        print(f"Error: could not load quiz from {args.base_url}: {exc}", file=sys.stderr)
        raise SystemExit(1)

    store = LocalSessionStore(args.session_dir)
    if args.restart:
        store.clear(args.slug)
    state = store.get_or_create(args.slug)
    runner = QuizRunner(
        quiz,
        state,
        on_progress=progress_saver(store, args.slug, client, quiz.id or ""),
    )
    TerminalPlayer(runner, wait=not args.no_wait).run()


COMMANDS = {
    "import-quiz": import_quiz,
    "publish": publish,
    "analytics": show_analytics,
    "export-csv": export_csv,
    "import-article": import_article,
    "set-tracking": set_tracking,
    "create-admin": create_admin,
    "play": play,
}


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    if args.command != "play":
        init_db()
    try:
        COMMANDS[args.command](args)
    except HTTPException as exc:
        detail = exc.detail.get("error") if isinstance(exc.detail, dict) else exc.detail
        print(f"Error: {detail}", file=sys.stderr)
        raise SystemExit(1)
    except FunnelError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
