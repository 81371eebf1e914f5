from bundler.core.use_cases.build_bundle import BuildBundle

__all__ = ["BuildBundle"]
