# tests\__init__.py
"""
Test Suite for the SPA bundle builder.

Organization:
- `adapters`: One module per pipeline component, on real temporary directories.
- `core`: The pipeline driver with a fake or mocked IToolRunner.
- `integration`: Full runs through the DI container.
"""
