# scripts/init_db.py

import logging

from paintwall.core.log import configure_logging
from paintwall.db.engine import get_engine
from paintwall.db.schema import metadata

logger = logging.getLogger(__name__)


def main():
    configure_logging()
    engine = get_engine()
    metadata.drop_all(engine)
    metadata.create_all(engine)
    logger.info("DB schema created at %s", engine.url)


if __name__ == "__main__":
    main()
