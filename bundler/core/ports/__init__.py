from bundler.core.ports.tool_runner import IToolRunner

__all__ = ["IToolRunner"]
