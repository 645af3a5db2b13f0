# Production entry point: `uvicorn keeper:app`
import logging
import sys

from keeper_lib.errors import ConfigurationError
from keeper_lib.main import create_app, Config

# Minimal early config so startup failures are reported before
# create_app() installs the configured handlers.
logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s [%(name)s]: %(message)s')
logger = logging.getLogger('keeper')

try:
    app = create_app(Config())
except ConfigurationError as e:
    logger.critical("Startup failed: %s", e)
    sys.exit(2)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
