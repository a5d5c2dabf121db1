"""
配置：从环境变量读取，供列表查询、缓存、简历匹配等模块使用。

每次调用时读取，便于测试中 monkeypatch.setenv 即时生效。
"""
import os
from pathlib import Path

# 可选加载 .env（若存在）：先项目根（与 pyproject.toml 同层），再当前工作目录
_env_paths = [
    Path(__file__).resolve().parents[3] / ".env",  # src/jobhub/core -> 项目根
    Path.cwd() / ".env",
]
for _p in _env_paths:
    if _p.exists():
        from dotenv import load_dotenv
        load_dotenv(_p)
        break


def _int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_default_model() -> str:
    """LiteLLM 格式的模型名，如 gemini/gemini-1.5-flash、openai/gpt-4o、deepseek/deepseek-chat。"""
    return os.getenv("JOBHUB_DEFAULT_MODEL", "gemini/gemini-1.5-flash")


def has_llm_key() -> bool:
    """是否配置了任一模型厂商的 API Key；无 key 时简历打分直接走本地回退。"""
    key = (
        os.getenv("GEMINI_API_KEY")
        or os.getenv("OPENAI_API_KEY")
        or os.getenv("ANTHROPIC_API_KEY")
        or os.getenv("DEEPSEEK_API_KEY")
    )
    return bool((key or "").strip())


def scoring_backend() -> str:
    """简历打分后端：pydantic_ai（默认，类型安全边界）| litellm（原始 JSON 解析）| heuristic（仅本地规则）。"""
    return (os.getenv("JOBHUB_SCORING_BACKEND") or "pydantic_ai").strip().lower()


def redis_url() -> str:
    """Redis 连接串；为空时缓存与记录存储均使用进程内内存。"""
    return os.environ.get("REDIS_URL", "").strip()


def record_store_backend() -> str:
    """记录存储后端：memory（默认）| redis。"""
    return (os.getenv("JOBHUB_RECORD_STORE") or "memory").strip().lower()


def listing_ttl() -> int:
    """列表查询缓存 TTL（秒）。"""
    return _int_env("JOBHUB_LISTING_TTL", 300)


def record_ttl() -> int:
    """单条记录缓存 TTL（秒）。"""
    return _int_env("JOBHUB_RECORD_TTL", 600)


def results_ttl() -> int:
    """政府岗位「已出结果」视图缓存 TTL（秒）。"""
    return _int_env("JOBHUB_RESULTS_TTL", 300)


def default_page_size() -> int:
    return _int_env("JOBHUB_PAGE_SIZE", 15)


def prompt_cv_tokens() -> int:
    """打分 prompt 中简历正文的 token 上限，控制单次调用成本。"""
    return _int_env("JOBHUB_PROMPT_CV_TOKENS", 3000)


def get_document_root() -> Path:
    """
    简历文件根目录（上传后由对象存储同步到本地，或直接挂载）。
    默认：项目根下的 .data/documents；可通过 JOBHUB_DOCUMENT_ROOT 覆盖。
    """
    env_path = os.getenv("JOBHUB_DOCUMENT_ROOT")
    if env_path:
        return Path(env_path)
    return Path(__file__).resolve().parents[3] / ".data" / "documents"


def admin_token() -> str:
    """管理后台 token；为空时任意非空 Bearer token 视为 stub 管理员。"""
    return os.environ.get("JOBHUB_ADMIN_TOKEN", "").strip()


def log_level() -> str:
    return (os.getenv("JOBHUB_LOG_LEVEL") or "INFO").strip().upper()
