"""
管理端鉴权：从请求头取 Bearer token，校验后注入 AdminContext。

登录与签发 token 由外部认证服务负责；这里只做校验。
配置 JOBHUB_ADMIN_TOKEN 时 token 必须一致；未配置时使用 stub（任意非空 token 视为管理员）。
"""
import hmac
import re
from dataclasses import dataclass
from typing import Literal

from fastapi import Header, HTTPException

from jobhub.core.config import admin_token

AdminRole = Literal["superadmin", "editor"]


@dataclass
class AdminContext:
    """请求上下文中的管理员身份。"""
    admin_id: str
    role: AdminRole


def get_bearer_token(authorization: str | None = Header(None, alias="Authorization")) -> str | None:
    """从请求头取出 Bearer token；无头或格式不对返回 None。"""
    if not authorization or not isinstance(authorization, str):
        return None
    auth = authorization.strip()
    if not auth.lower().startswith("bearer "):
        return None
    token = auth[7:].strip()
    return token if token else None


def _verify_token_stub(token: str) -> AdminContext:
    """Stub：任意非空 token 视为 editor，admin_id 由 token 派生。"""
    safe = re.sub(r"[^a-zA-Z0-9\-]", "", token[:32]) or "anon"
    return AdminContext(admin_id=f"stub-{safe}", role="editor")


def verify_token(token: str) -> AdminContext | None:
    """校验 token：配置了 JOBHUB_ADMIN_TOKEN 则做常量时间比较，否则 stub。"""
    expected = admin_token()
    if not expected:
        return _verify_token_stub(token)
    if hmac.compare_digest(token.encode(), expected.encode()):
        return AdminContext(admin_id="admin", role="superadmin")
    return None


def get_admin(authorization: str | None = Header(None, alias="Authorization")) -> AdminContext:
    """依赖项：无 token 或校验失败抛出 401。"""
    token = get_bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="missing or invalid authorization")
    ctx = verify_token(token)
    if ctx is None:
        raise HTTPException(status_code=401, detail="invalid or expired token")
    return ctx
