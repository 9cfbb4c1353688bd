"""
Coffee Pixie - scheduled coffee on a Raspberry Pi

Arms a daily coffee trigger, drives the Nespresso machine through relays,
shows armed/disarmed state on two LEDs, and serves a small web form for
setting the trigger time and coffee type.
"""

import asyncio
import logging
import signal
import sys
from coffeepixie.core import PixieServer
from coffeepixie.utils import setup_logging

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)


async def main():
    """Main entry point"""
    server = PixieServer()

    # Handle shutdown signals
    def signal_handler(sig, frame):
        logger.info(f"Received signal {sig}")
        server.running = False

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        await server.start()
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
    finally:
        await server.stop()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Server crashed: {e}", exc_info=True)
        sys.exit(1)
