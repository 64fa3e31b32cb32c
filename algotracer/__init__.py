"""LLM execution-trace playback engine."""

from .analyzer import TraceAnalyzer  # noqa: F401
from .errors import (  # noqa: F401
    AnalysisInProgressError,
    AnalyzerUnavailableError,
    InvalidTraceError,
    MalformedTraceError,
    TraceViewerError,
    UserInputError,
)
from .playback import PlaybackController, PlaybackStatus  # noqa: F401
from .session import TraceSession  # noqa: F401
from .step_view import StepView, build_step_view  # noqa: F401
from .structure import classify, partition_variables  # noqa: F401
from .trace_parser import parse_trace_response  # noqa: F401
from .trace_types import TraceDocument  # noqa: F401
