"""
错误分类：存储/缓存/外部打分服务失败与业务校验失败。

传播策略：StoreUnavailable、NotFound、ValidationFailure 向调用方显式暴露；
CacheUnavailable、ExternalServiceFailure 在内部吸收（缓存视为未命中、打分回退本地结果）。
"""


class JobHubError(Exception):
    """所有业务异常的基类。"""


class NotFound(JobHubError):
    """按 jobId 扫描后记录不存在。"""

    def __init__(self, collection: str, job_id: str):
        self.collection = collection
        self.job_id = job_id
        super().__init__(f"{collection} record not found: {job_id}")


class ValidationFailure(JobHubError):
    """创建时缺少必填字段，或分页参数非法。"""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class StoreUnavailable(JobHubError):
    """记录存储读写失败（含客户端超时）。"""


class CacheUnavailable(JobHubError):
    """缓存读写失败；永远不会升级为请求失败。"""


class ExternalServiceFailure(JobHubError):
    """外部生成式打分服务调用失败或返回无法解析的内容。"""


class DocumentNotFound(JobHubError):
    """简历文件不存在或路径非法。"""

    def __init__(self, ref: str):
        self.ref = ref
        super().__init__(f"document not found: {ref}")
