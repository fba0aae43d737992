import logging
import time

from pythonjsonlogger import jsonlogger

from .config import Settings


class RequestIdFilter(logging.Filter):
    """Stamps the current Lambda request id on every record that reaches the handler."""

    request_id = None

    def filter(self, record):
        if getattr(record, 'aws_request_id', None) is None:
            record.aws_request_id = RequestIdFilter.request_id
        return True


def set_request_id(request_id):
    """Set the request id stamped on log lines until the next invocation."""
    RequestIdFilter.request_id = request_id


def setup_logging(settings: Settings):
    """Configure JSON logging for the handler."""
    log_level = getattr(logging, settings.log_level.upper())

    # Create JSON formatter for structured logging
    class CustomJsonFormatter(jsonlogger.JsonFormatter):
        def add_fields(self, log_record, record, message_dict):
            super(CustomJsonFormatter, self).add_fields(log_record, record, message_dict)
            log_record['service'] = settings.service_name
            log_record['environment'] = settings.environment
            log_record['timestamp'] = time.strftime(
                '%Y-%m-%dT%H:%M:%SZ', time.gmtime(record.created)
            )

    handler = logging.StreamHandler()
    handler.setFormatter(CustomJsonFormatter('%(timestamp)s %(levelname)s %(service)s %(environment)s %(name)s %(message)s'))
    handler.addFilter(RequestIdFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # The Lambda runtime installs its own handler; replace it so lines are not duplicated
    for h in list(root_logger.handlers):
        root_logger.removeHandler(h)

    root_logger.addHandler(handler)

    # Set specific logger levels
    logging.getLogger('boto3').setLevel(logging.WARNING)
    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
