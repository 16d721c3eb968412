import os
import sys

from mpesa_express import create_app
from mpesa_express.errors import ConfigurationError
from mpesa_express.utils.logger import get_logger

logger = get_logger('mpesa_express.boot')

try:
    app = create_app(os.getenv('RELAY_PROFILE', 'default'))
except ConfigurationError as e:
    logger.critical(str(e))
    sys.exit(1)

if __name__ == '__main__':
    app.run(host='0.0.0.0', port=app.config['PORT'])
