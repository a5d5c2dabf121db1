"""集合元数据：各集合的分区属性名，供存储后端拼主键。"""

JOBS = "jobs"
SARKARI_JOBS = "sarkari-jobs"

PARTITION_ATTR: dict[str, str] = {
    JOBS: "category",
    SARKARI_JOBS: "organization",
}


def partition_attr(collection: str) -> str:
    try:
        return PARTITION_ATTR[collection]
    except KeyError:
        raise ValueError(f"未知集合: {collection}，支持 {JOBS} / {SARKARI_JOBS}") from None


def record_key(collection: str, item: dict) -> tuple[str, str]:
    """从记录中取出 (分区值, jobId)。"""
    return (str(item.get(partition_attr(collection)) or ""), str(item.get("jobId") or ""))
