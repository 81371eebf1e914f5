# bundler\shared\container.py
from dependency_injector import containers, providers

from bundler.shared.config import settings as default_settings
from bundler.core.domain.models import BuildLayout
from bundler.adapters.tools.subprocess_runner import SubprocessToolRunner
from bundler.core.use_cases.build_bundle import BuildBundle

class Container(containers.DeclarativeContainer):
    """
    Dependency Injection Container.

    This declarative container defines the assembly instructions for a build.
    Tests override `layout` and `tool_runner`; the CLI overrides `settings`.
    """

    # 1. Configuration
    settings = providers.Object(default_settings)

    # The explicit path struct handed to every component
    layout = providers.Singleton(
        BuildLayout.from_settings,
        settings=settings,
    )

    # 2. Gateways (Infrastructure Adapters)

    # External tools (Singleton: stateless process spawner)
    tool_runner = providers.Singleton(
        SubprocessToolRunner
    )

    # 3. Use Cases (Application Logic)

    # Factory: a fresh pipeline per run, with Singleton dependencies injected.
    build_bundle_use_case = providers.Factory(
        BuildBundle,
        layout=layout,
        tool_runner=tool_runner,
    )

# Instantiate the container for global access (e.g. by the CLI)
container = Container()
