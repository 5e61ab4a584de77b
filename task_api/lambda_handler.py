"""AWS Lambda entry point.

Mangum translates API Gateway REST (v1) and HTTP (v2) events into ASGI,
letting the FastAPI app run unchanged on Lambda.
"""

from mangum import Mangum

from task_api.logging.audit import setup_logging
from task_api.main import app

# Lifespan is off under Lambda, so configure logging at cold start
setup_logging()

handler = Mangum(app, lifespan="off")
