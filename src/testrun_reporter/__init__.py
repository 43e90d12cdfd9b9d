# Lightweight package init: avoid eager imports that can fail at console start.
__all__ = ["VerboseReporter", "RunPlan", "RunStatus", "ReporterConfig", "parse_event"]

def __getattr__(name):
    if name == "VerboseReporter":
        from .reporters.verbose import VerboseReporter as _VerboseReporter
        return _VerboseReporter
    if name in ("RunPlan", "RunStatus"):
        from . import plan as _plan
        return getattr(_plan, name)
    if name == "ReporterConfig":
        from .config import ReporterConfig as _ReporterConfig
        return _ReporterConfig
    if name == "parse_event":
        from .events import parse_event as _parse_event
        return _parse_event
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
