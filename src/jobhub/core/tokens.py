"""
tiktoken：按 token 截断 prompt 输入，保证打分请求长度有界且结果可复现。
"""
from __future__ import annotations

from typing import Optional

# OpenAI 兼容 API 多用 cl100k_base；Gemini/DeepSeek 用它做近似估算
_DEFAULT_ENCODING = "cl100k_base"

_encoding = None


def _get_encoding():
    """懒加载编码表；加载失败（如无网络下载）返回 None，调用方走字符近似。"""
    global _encoding
    if _encoding is None:
        import tiktoken
        try:
            _encoding = tiktoken.get_encoding(_DEFAULT_ENCODING)
        except Exception:
            return None
    return _encoding


def count_tokens(text: str) -> int:
    """
    计算文本 token 数。
    若 tiktoken 编码表不可用，回退为约 len(text)//4 的近似值。
    """
    if not text:
        return 0
    enc = _get_encoding()
    if enc is not None:
        return len(enc.encode(text))
    return max(1, len(text) // 4)


def truncate_to_tokens(text: str, max_tokens: int, marker: Optional[str] = "\n[...truncated]") -> str:
    """
    截断到最多 max_tokens 个 token；未超长原样返回。
    截断后追加 marker，提示模型内容不完整。
    """
    if not text or max_tokens <= 0:
        return ""
    enc = _get_encoding()
    if enc is not None:
        ids = enc.encode(text)
        if len(ids) <= max_tokens:
            return text
        return enc.decode(ids[:max_tokens]) + (marker or "")
    limit = max_tokens * 4
    if len(text) <= limit:
        return text
    return text[:limit] + (marker or "")
