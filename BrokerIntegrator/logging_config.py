import structlog
from logging import getLevelName


def configure_structlog(log_level="WARNING", json_logs=True):
    """Configure structlog if it has not been configured by the user"""
    if structlog.is_configured():
        return
    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getLevelName(str(log_level).upper()))
    )
