"""
MarkItDown：简历多格式（PDF / Word / HTML / TXT 等）统一转 Markdown 文本，作为打分输入。

扫描件或图片型 PDF 只能取到文字层，结果可能为空。
"""
from __future__ import annotations

import os
from typing import BinaryIO

from markitdown import MarkItDown, StreamInfo

_converter_instance: MarkItDown | None = None


def _converter() -> MarkItDown:
    """单例式获取转换器，避免重复初始化。"""
    global _converter_instance
    if _converter_instance is None:
        _converter_instance = MarkItDown()
    return _converter_instance


def stream_to_markdown(
    stream: BinaryIO,
    *,
    filename: str | None = None,
    file_extension: str | None = None,
) -> str:
    """
    二进制流（如上传文件内容）→ Markdown 字符串。
    filename: 原始文件名，用于推断类型（如 cv.pdf）。
    file_extension: 若已知扩展名可直接传入（如 .pdf）；否则从 filename 推断。
    """
    ext = file_extension
    if not ext and filename:
        ext = os.path.splitext(filename)[1]
    stream_info = StreamInfo(extension=ext or None, filename=filename) if (ext or filename) else None
    return _converter().convert_stream(stream, stream_info=stream_info).markdown
