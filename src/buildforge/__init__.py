"""buildforge: build-pipeline orchestrator for customized engine builds."""

__version__ = "0.1.0"
