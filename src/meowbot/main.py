"""meowbot entry point."""

import asyncio
import json
import logging
import sys

from dotenv import find_dotenv, load_dotenv

from .config import Settings, config_from_env
from .logging import configure_logger

USAGE = "usage: meowbot [serve | reply [--test] | roast | state]"


async def _run_once(settings: Settings, command: str, force: bool) -> dict:
    from .runtime import Runtime

    runtime = Runtime(settings)
    try:
        if command == "reply":
            summary = await runtime.reactive.run(force=force)
            return summary.to_dict()
        if command == "roast":
            summary = await runtime.proactive.run()
            return summary.to_dict()
        return await runtime.state()
    finally:
        await runtime.close()


def main() -> None:
    """Main entry point."""
    load_dotenv(find_dotenv(usecwd=True))
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = config_from_env()
    configure_logger(settings.log_dir)

    command = sys.argv[1] if len(sys.argv) > 1 else "serve"

    if command == "serve":
        from .api import run_server

        run_server(settings)
        return

    if command in ("reply", "roast", "state"):
        force = "--test" in sys.argv[2:]
        result = asyncio.run(_run_once(settings, command, force))
        print(json.dumps(result, indent=2, ensure_ascii=False, default=str))
        return

    print(USAGE, file=sys.stderr)
    sys.exit(2)


if __name__ == "__main__":
    main()
