from .hosted_api import HostedApiProcessor, format_model_name
from .invoker import ProcessingInvoker
from .local_process import build_command, build_full_prompt, process_with_local_command
from .model_catalog import ModelCatalogCache, merge_model_options, parse_models_response
from .result import FailureReason, InvocationResult, ResultSource
from .session import PostProcessingSession

__all__ = [
    "FailureReason",
    "HostedApiProcessor",
    "InvocationResult",
    "ModelCatalogCache",
    "PostProcessingSession",
    "ProcessingInvoker",
    "ResultSource",
    "build_command",
    "build_full_prompt",
    "format_model_name",
    "merge_model_options",
    "parse_models_response",
    "process_with_local_command",
]
