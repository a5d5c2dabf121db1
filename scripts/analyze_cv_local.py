#!/usr/bin/env python3
"""
用本地简历跑一次完整的简历分析：MarkItDown 转 Markdown → 打分（无 key 时本地回退）→ 备选职位。
职位来自内存存储中的几条示例数据，不连接任何外部存储。
用法: python scripts/analyze_cv_local.py <简历文件路径> [目标职位 jobId]
"""
import io
import json
import sys
from pathlib import Path

SAMPLE_JOBS = [
    {
        "role": "Backend Developer",
        "companyName": "Acme",
        "location": "Bangalore",
        "salary": "14 LPA",
        "jobDescription": "Design REST APIs in Python, deploy on AWS.",
        "originalLink": "https://example.com/backend",
        "category": "Engineering",
        "expiresOn": "2025-12-31",
        "tags": "Python, FastAPI, AWS, PostgreSQL",
    },
    {
        "role": "Frontend Developer",
        "companyName": "Pixel Labs",
        "location": "Remote",
        "salary": "12 LPA",
        "jobDescription": "Build dashboards with React and TypeScript.",
        "originalLink": "https://example.com/frontend",
        "category": "Engineering",
        "expiresOn": "2025-12-31",
        "tags": "React, TypeScript, CSS",
    },
    {
        "role": "Data Engineer",
        "companyName": "StreamCo",
        "location": "Hyderabad",
        "salary": "18 LPA",
        "jobDescription": "Batch and streaming pipelines.",
        "originalLink": "https://example.com/data",
        "category": "Data",
        "expiresOn": "2025-12-31",
        "tags": "Python, Spark, Kafka, SQL",
    },
]


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)
    path = Path(sys.argv[1])
    if not path.exists():
        print(f"文件不存在: {path}")
        sys.exit(1)

    from jobhub.cache import MemoryCache
    from jobhub.listings.cache import ListingCache
    from jobhub.listings.service import ListingService
    from jobhub.matching.backends import get_scoring_backend
    from jobhub.matching.pipeline import analyze_cv_text
    from jobhub.store import MemoryRecordStore

    service = ListingService(MemoryRecordStore(), ListingCache(MemoryCache()))
    created = [service.create_job(job) for job in SAMPLE_JOBS]
    target = sys.argv[2] if len(sys.argv) > 2 else created[0]["jobId"]

    print(f"=== 1. MarkItDown 转换: {path.name} ===\n")
    try:
        from jobhub.ingest.markitdown_convert import stream_to_markdown
        markdown = stream_to_markdown(io.BytesIO(path.read_bytes()), filename=path.name)
    except Exception as e:
        print(f"转换失败: {e}")
        sys.exit(1)
    print(markdown[:1500] or "(空)")
    print("\n")

    backend = get_scoring_backend()
    print(f"=== 2. 打分（后端: {backend.name if backend else '本地回退'}）===\n")
    result = analyze_cv_text(service, target, markdown, backend)
    if result.error:
        print(f"提示: 打分服务调用失败，已回退本地结果（{result.error}）。请检查 .env 中的 API key 与 JOBHUB_DEFAULT_MODEL。\n")
    print(json.dumps(result.model_dump(by_alias=True, exclude_none=True), ensure_ascii=False, indent=2))

    print("\n=== 完成 ===")


if __name__ == "__main__":
    main()
