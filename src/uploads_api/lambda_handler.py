"""Lambda entrypoints: the HTTP API through Mangum, and the S3 upload event handler."""
import logging

from mangum import Mangum

from uploads_api.config.settings import get_settings
from uploads_api.events import process_s3_event
from uploads_api.main import create_app
from uploads_api.utils.logs import configure_logging

settings = get_settings()
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)

# Create FastAPI app
app = create_app(settings)

# Wrap with Mangum for Lambda compatibility
handler = Mangum(app, lifespan="off")

# Export handler for Lambda runtime
lambda_handler = handler


def s3_event_handler(event, context):
    """Mark file records uploaded when S3 reports their objects (directly or via SQS)."""
    completed = process_s3_event(app.state.file_service, event)
    logger.info(f"Completed {len(completed)} upload(s)")
    return {"completed": completed}
