import argparse
import json
from pathlib import Path

from . import __version__
from .database import init_database, get_session
from .env import Settings, load_env
from .errors import InvalidInputError, NotFoundError, SkillStoreError, StoreFailure
from .logger import get_logger
from .skill import Skill
from .skill_service import SkillService


def _print_skill(skill: Skill) -> None:
    print(f"ID: {skill.id}")
    print(f"  Name: {skill.name}")
    print(f"  Authorized: {'yes' if skill.authorized else 'no'}")
    print(f"  Added: {skill.added.isoformat(sep=' ') if skill.added else '-'}")


def _print_skills(skills) -> None:
    if not skills:
        print("No skills found.")
        return
    for skill in skills:
        _print_skill(skill)


def _require_skill(service: SkillService, skill_id: str) -> Skill:
    try:
        return service.lookup(skill_id).one()
    except NotFoundError:
        raise SystemExit(f"Skill not found: {skill_id}")
    except StoreFailure as e:
        raise SystemExit(f"Store error: {e}")


def cmd_init(args: argparse.Namespace, service: SkillService) -> None:
    print(f"Database ready at {args.db}")


def cmd_add(args: argparse.Namespace, service: SkillService) -> None:
    skill = Skill(name=args.name, authorized=args.authorized)
    if not service.save(skill):
        raise SystemExit("Failed to save skill (see log for details)")
    print(f"Saved: {skill.id}")


def cmd_get(args: argparse.Namespace, service: SkillService) -> None:
    _print_skill(_require_skill(service, args.id))


def cmd_list(args: argparse.Namespace, service: SkillService) -> None:
    per_page = args.per_page or args.settings.page_size
    _print_skills(service.retrieve_all(args.page, per_page))


def cmd_search(args: argparse.Namespace, service: SkillService) -> None:
    _print_skills(service.search_by_term(args.term))


def cmd_authorize(args: argparse.Namespace, service: SkillService) -> None:
    skill = _require_skill(service, args.id)
    skill.authorized = not args.revoke
    if not service.save(skill):
        raise SystemExit("Failed to update skill (see log for details)")
    print(f"{skill.id}: {'authorized' if skill.authorized else 'revoked'}")


def cmd_delete(args: argparse.Namespace, service: SkillService) -> None:
    if not service.delete(args.id):
        raise SystemExit(f"Nothing deleted for id: {args.id}")
    print(f"Deleted: {args.id}")


def cmd_import(args: argparse.Namespace, service: SkillService) -> None:
    input_path = Path(args.input)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    with input_path.open("r", encoding="utf-8") as f:
        try:
            entries = json.load(f)
        except json.JSONDecodeError as e:
            raise SystemExit(f"Invalid JSON in {input_path}: {e}")
    if not isinstance(entries, list):
        raise SystemExit("Input must be a JSON list of skills")

    saved = skipped = failed = 0
    for entry in entries:
        if not isinstance(entry, dict):
            skipped += 1
            continue
        # raw value: validate_skill rejects anything but a real bool, e.g. "false"
        skill = Skill(name=entry.get("name") or "", authorized=entry.get("authorized", False))
        try:
            if service.save(skill):
                saved += 1
            else:
                failed += 1
        except InvalidInputError as e:
            print(f"[warn] skipping {entry!r}: {e}")
            skipped += 1

    print(f"Imported: {saved}, skipped: {skipped}, failed: {failed}")


def main(argv=None):
    # Load .env if present (MENTORAPP_DB_PATH, MENTORAPP_LOG_LEVEL, etc.)
    load_env()
    settings = Settings.from_env()

    parser = argparse.ArgumentParser(prog="mentorapp", description="MentorApp skill store admin CLI")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--db", default=str(settings.db_path), help=f"Path to SQLite database (default: {settings.db_path})")

    subparsers = parser.add_subparsers(dest="command")
    ini = subparsers.add_parser("init", help="Create the database and skill table")
    ini.set_defaults(func=cmd_init)

    add = subparsers.add_parser("add", help="Add a new skill")
    add.add_argument("name", help="Skill name")
    add.add_argument("--authorized", action="store_true", help="Mark the skill as authorized")
    add.set_defaults(func=cmd_add)

    get = subparsers.add_parser("get", help="Show a skill by id")
    get.add_argument("id", help="Skill id")
    get.set_defaults(func=cmd_get)

    lst = subparsers.add_parser("list", help="List skills ordered by id")
    lst.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    lst.add_argument("--per-page", type=int, help=f"Results per page (default: {settings.page_size})")
    lst.set_defaults(func=cmd_list)

    sch = subparsers.add_parser("search", help="Search skills by partial name")
    sch.add_argument("term", help="Text to look for in skill names")
    sch.set_defaults(func=cmd_search)

    aut = subparsers.add_parser("authorize", help="Authorize (or revoke) a skill")
    aut.add_argument("id", help="Skill id")
    aut.add_argument("--revoke", action="store_true", help="Revoke authorization instead")
    aut.set_defaults(func=cmd_authorize)

    dele = subparsers.add_parser("delete", help="Delete a skill by id")
    dele.add_argument("id", help="Skill id")
    dele.set_defaults(func=cmd_delete)

    imp = subparsers.add_parser("import", help="Import skills from a JSON list of {name, authorized}")
    imp.add_argument("--input", required=True, help="Path to JSON input")
    imp.set_defaults(func=cmd_import)

    args = parser.parse_args(argv)
    args.settings = settings

    if args.version:
        print(__version__)
        return

    if not hasattr(args, "func"):
        parser.print_help()
        return

    db_path = Path(args.db)
    init_database(db_path)
    session = get_session(db_path)
    logger = get_logger(level=settings.log_level, log_dir=settings.log_dir)
    service = SkillService(session, logger=logger, id_max_attempts=settings.id_max_attempts)
    try:
        args.func(args, service)
    except SkillStoreError as e:
        raise SystemExit(f"Error: {e}")
    finally:
        session.close()


if __name__ == "__main__":
    main()
