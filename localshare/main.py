"""Shell entry point."""

import asyncio
import os
import sys
from pathlib import Path

from common.logging_config import setup_logging
from localshare.app import LocalShareApp
from localshare.config import Config
from localshare.repl import repl_loop


def default_config_path() -> Path:
    return Path(os.getenv('LOCALSHARE_CONFIG', Path.home() / '.localshare' / 'config.json'))


async def run(config: Config) -> None:
    app = LocalShareApp(config)
    try:
        await repl_loop(app)
    finally:
        await app.close()


def main() -> None:
    """Entry point for the shell."""
    debug = '--debug' in sys.argv
    if debug:
        sys.argv.remove('--debug')
    log_level = 'DEBUG' if debug else os.getenv('LOG_LEVEL', 'WARNING')

    config = Config(default_config_path())
    logger = setup_logging('localshare', log_level=log_level, log_file=config.get_log_file())

    if debug:
        logger.info("Debug logging enabled")

    logger.info("Shell starting...")
    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.error(f"Shell error: {e}", exc_info=True)
        raise
    finally:
        logger.info("Shell exiting")


if __name__ == "__main__":
    main()
