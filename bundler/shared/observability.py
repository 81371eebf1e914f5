# bundler\shared\observability.py
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.resources import Resource
from bundler import __version__
from bundler.shared.config import Settings, settings as default_settings

def setup_observability(settings: Settings = default_settings) -> TracerProvider:
    """
    Configures OpenTelemetry for a build run.

    1. Sets the Global Tracer Provider.
    2. Configures an Exporter (Console when DEBUG, otherwise spans only
       provide Trace IDs for the structured logs).
    """

    # 1. Define Resource (Service Name identity)
    resource = Resource.create(attributes={
        "service.name": settings.OTEL_SERVICE_NAME,
        "service.environment": settings.APP_ENV.value,
        "service.version": __version__,
    })

    # 2. Initialize the Tracer Provider
    provider = TracerProvider(resource=resource)

    # 3. Configure the Exporter
    # A build is short-lived, so spans are exported synchronously instead of batched.
    if settings.DEBUG:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    # Set the global provider
    trace.set_tracer_provider(provider)
    return provider

def get_tracer(name: str):
    """
    Utility to get a tracer for manual instrumentation of pipeline stages.
    Usage:
        tracer = get_tracer(__name__)
        with tracer.start_as_current_span("stage.generate"):
            ...
    """
    return trace.get_tracer(name)
