"""Entry point: load config and run the status server."""

import logging
import sys
from typing import List, Optional

from spacebeacon.config.settings import read_config
from spacebeacon.core.logging_utils import setup_logging
from spacebeacon.errors import ConfigInvalid

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    """Usage: spacebeacon [config.yaml] [--debug]. Config path falls back to $CONFIG_FILE, then config/config.yaml."""
    argv = sys.argv[1:] if argv is None else argv
    debug = "--debug" in argv
    args = [a for a in argv if not a.startswith("--")]
    setup_logging(debug=debug)

    try:
        config, _ = read_config(args[0] if args else None)
    except ConfigInvalid as e:
        logger.error("Invalid config: %s", e)
        return 1

    from spacebeacon.status_server.app import run_server

    run_server(config, log_level="debug" if debug else "info")
    return 0


if __name__ == "__main__":
    sys.exit(main())
