# 配置、日志、错误分类、LiteLLM 封装、tiktoken 截断

from .config import (
    get_default_model,
    has_llm_key,
    scoring_backend,
    redis_url,
    record_store_backend,
    listing_ttl,
    record_ttl,
    results_ttl,
    default_page_size,
    prompt_cv_tokens,
    get_document_root,
    admin_token,
)
from .errors import (
    JobHubError,
    NotFound,
    ValidationFailure,
    StoreUnavailable,
    CacheUnavailable,
    ExternalServiceFailure,
    DocumentNotFound,
)
from .llm import ask_ai
from .log import setup_logging
from .tokens import count_tokens, truncate_to_tokens

__all__ = [
    "get_default_model",
    "has_llm_key",
    "scoring_backend",
    "redis_url",
    "record_store_backend",
    "listing_ttl",
    "record_ttl",
    "results_ttl",
    "default_page_size",
    "prompt_cv_tokens",
    "get_document_root",
    "admin_token",
    "JobHubError",
    "NotFound",
    "ValidationFailure",
    "StoreUnavailable",
    "CacheUnavailable",
    "ExternalServiceFailure",
    "DocumentNotFound",
    "ask_ai",
    "setup_logging",
    "count_tokens",
    "truncate_to_tokens",
]
