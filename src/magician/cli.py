"""
CLI entry point.

Commands:
- status: Show provider availability and servable capabilities
- health: Check provider connectivity
- ideas <interest>...: Generate business ideas
- analyze <title> <description> <market>: Analyze a business idea
- plan <name> <description> <market>: Outline a business plan
- ask <query>: Ask the business assistant

Flags:
- --debug: Enable debug logging
- --provider P: anthropic, openai, fallback, primary, secondary, local or auto
- --json: Ask the assistant for a JSON answer
"""

import asyncio
import json
import logging
import sys

from magician.capabilities import Capability
from magician.core.config import Settings, get_settings
from magician.core.errors import MagicianError
from magician.core.logging import get_logger, setup_logging

USAGE = """Usage: magician [--debug] [--provider P] <command> [args]
Commands: status, health, ideas, analyze, plan, ask
Flags: --debug, --provider P, --json (ask only)"""


def _pop_flag(argv: list[str], flag: str) -> bool:
    if flag in argv:
        argv.remove(flag)
        return True
    return False


def _pop_option(argv: list[str], option: str) -> str | None:
    if option not in argv:
        return None
    index = argv.index(option)
    if index + 1 >= len(argv):
        raise ValueError(f"{option} requires a value")
    value = argv[index + 1]
    del argv[index : index + 2]
    return value


def _build_payload(command: str, args: list[str], as_json: bool) -> tuple[Capability, dict] | None:
    if command == "ideas" and args:
        return Capability.BUSINESS_IDEA_GENERATION, {"interests": args}
    if command == "analyze" and len(args) == 3:
        title, description, market = args
        return Capability.IDEA_ANALYSIS, {
            "ideaTitle": title,
            "ideaDescription": description,
            "targetMarket": market,
        }
    if command == "plan" and len(args) == 3:
        name, description, market = args
        return Capability.BUSINESS_PLAN_OUTLINE, {
            "businessName": name,
            "businessDescription": description,
            "targetMarket": market,
        }
    if command == "ask" and args:
        return Capability.BUSINESS_ASSISTANCE, {
            "query": " ".join(args),
            "format": "json" if as_json else "text",
        }
    return None


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    argv = list(sys.argv[1:] if argv is None else argv)
    settings = get_settings()

    debug_mode = _pop_flag(argv, "--debug")
    as_json = _pop_flag(argv, "--json")
    try:
        provider = _pop_option(argv, "--provider")
    except ValueError as e:
        print(e, file=sys.stderr)
        return 1

    # --debug also writes a log file under data_dir
    if debug_mode:
        setup_logging(level=logging.DEBUG, log_file=settings.log_path)
    else:
        try:
            setup_logging(level=settings.log_level)
        except ValueError as e:
            print(e, file=sys.stderr)
            return 1

    if not argv:
        print(USAGE)
        return 1

    command, args = argv[0], argv[1:]

    if command == "status":
        return _status(settings)
    if command == "health":
        return asyncio.run(_health_check(settings))

    request = _build_payload(command, args, as_json)
    if request is None:
        print(USAGE)
        return 1

    capability, payload = request
    return asyncio.run(_invoke(settings, capability, payload, provider))


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _status(settings: Settings) -> int:
    from magician.llm.router import create_default_router

    router = create_default_router(settings)
    _print_json(router.services_info())
    return 0


async def _invoke(
    settings: Settings, capability: Capability, payload: dict, provider: str | None
) -> int:
    from magician.llm.router import create_default_router

    logger = get_logger("cli")
    router = create_default_router(settings)
    try:
        result = await router.invoke(capability, payload, preference=provider)
    except MagicianError as e:
        logger.error(f"{capability.value} failed: {e.message}")
        _print_json(e.to_dict())
        return 1
    finally:
        await router.reset_clients()

    _print_json(result)
    return 0


async def _health_check(settings: Settings) -> int:
    """Check provider health."""
    from magician.llm.router import create_default_router

    print("Checking AI providers...")
    router = create_default_router(settings)
    try:
        results = await router.health_check_all()
    finally:
        await router.reset_clients()

    for provider, healthy in results.items():
        print(f"  {provider.value}: {'OK' if healthy else 'unavailable'}")
    return 0 if router.available_providers else 1


if __name__ == "__main__":
    sys.exit(main())
