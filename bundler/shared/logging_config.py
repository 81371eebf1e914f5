# bundler\shared\logging_config.py
import sys
import logging
import structlog
from opentelemetry import trace
from bundler.shared.config import Settings, settings as default_settings

def add_open_telemetry_spans(_, __, event_dict):
    """
    Processor to inject the current TraceID and SpanID into the log entry.
    This links each stage log line to the span of the stage that emitted it.
    """
    span = trace.get_current_span()
    if not span.is_recording():
        event_dict["trace_id"] = None
        event_dict["span_id"] = None
        return event_dict

    ctx = span.get_span_context()
    event_dict["trace_id"] = format(ctx.trace_id, "032x")
    event_dict["span_id"] = format(ctx.span_id, "016x")
    return event_dict

def configure_logging(settings: Settings = default_settings):
    """
    Configures structlog and the standard logging library to emit
    structured JSON logs (CI) or colored text logs (operator console).
    """

    # 1. Define the chain of processors (Middleware for logs)
    processors = [
        structlog.contextvars.merge_contextvars, # Merge run_id bound by the pipeline
        add_open_telemetry_spans,                # Inject Trace IDs
        structlog.processors.add_log_level,      # Add "level": "info"
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    # 2. Determine the Output Format
    if settings.LOG_FORMAT == "json":
        # Machine-readable JSON, exceptions flattened into the event
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Human-readable colored console output (renders exceptions itself)
        processors.append(structlog.dev.ConsoleRenderer())

    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    # 3. Configure Structlog
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    # 4. Standard library logging (third-party libraries) goes to the same stream
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
        force=True,
    )
