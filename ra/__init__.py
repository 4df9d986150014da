"""Release agent: go/no-go validation and release workflow orchestration."""

__version__ = "0.1.0"
