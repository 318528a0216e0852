import argparse
import logging

from database.init_db import init_db

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="DevinOut API server")
    parser.add_argument("--init-db", action="store_true", help="Create tables before serving")
    parser.add_argument("--init-only", action="store_true", help="Create tables and exit")
    args = parser.parse_args()

    if args.init_db or args.init_only:
        init_db()
        if args.init_only:
            logger.info("Database initialised; exiting")
            return

    from web.backend.app import main as serve
    serve()


if __name__ == "__main__":
    main()
