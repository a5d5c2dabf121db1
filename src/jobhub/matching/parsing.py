"""外部打分结果解析：文本/字典 → CompatibilityAnalysis；无法解析抛 ExternalServiceFailure。"""
from __future__ import annotations

import json
import re
from typing import Any

from pydantic import ValidationError

from jobhub.core.errors import ExternalServiceFailure
from .schemas import CompatibilityAnalysis

_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def _extract_json_text(text: str) -> str:
    text = (text or "").strip()
    # 允许被 markdown 代码块包裹
    if "```" in text:
        m = _FENCE.search(text)
        if m:
            return m.group(1).strip()
    # 模型偶尔在 JSON 前后夹带说明文字，取最外层花括号
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        return text[start:end + 1]
    return text


def parse_analysis(raw: Any) -> CompatibilityAnalysis:
    if isinstance(raw, CompatibilityAnalysis):
        return raw
    if isinstance(raw, (str, bytes)):
        text = raw.decode("utf-8", "replace") if isinstance(raw, bytes) else raw
        try:
            raw = json.loads(_extract_json_text(text))
        except json.JSONDecodeError as e:
            raise ExternalServiceFailure(f"unparseable scoring response: {e.msg}") from e
    if not isinstance(raw, dict):
        raise ExternalServiceFailure(f"scoring response is not an object: {type(raw).__name__}")
    try:
        return CompatibilityAnalysis.model_validate(raw)
    except ValidationError as e:
        raise ExternalServiceFailure(f"invalid scoring response: {e.error_count()} error(s)") from e
