"""
LiteLLM 单轮调用：换模型只改 JOBHUB_DEFAULT_MODEL（如 gemini/gemini-1.5-flash、deepseek/deepseek-chat）。
厂商 API Key 由 LiteLLM 从环境变量读取。
"""
from __future__ import annotations

from typing import Any

from jobhub.core.config import get_default_model


def ask_ai(prompt: str, model: str | None = None, system: str | None = None, **kwargs: Any) -> str:
    """system + user 两条消息，返回回复正文（去首尾空白）；kwargs 透传给 litellm.completion。"""
    from litellm import completion

    messages = [{"role": "user", "content": prompt or ""}]
    if system:
        messages.insert(0, {"role": "system", "content": system})
    resp = completion(model=model or get_default_model(), messages=messages, **kwargs)
    return (resp.choices[0].message.content or "").strip()
