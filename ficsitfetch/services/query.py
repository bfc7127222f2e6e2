"""
GraphQL 查询执行器

向 ficsit.app 发送单次查询，把传输层异常统一转换为 QueryResult.errors，
调用方只需要检查一种失败形式。
"""

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import aiohttp
from loguru import logger

from ficsitfetch.exceptions import NetworkError, RegistryError
from ficsitfetch.models.config import GRAPHQL_API_URL


@dataclass
class QueryResult:
    """查询结果，data 与 errors 只会有一个有值"""

    data: Optional[Dict[str, Any]] = None
    errors: Optional[Union[NetworkError, RegistryError]] = None

    @property
    def ok(self) -> bool:
        return self.errors is None


class QueryExecutor:
    """ficsit.app GraphQL 客户端"""

    def __init__(
        self,
        endpoint: str = GRAPHQL_API_URL,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.endpoint = endpoint
        self._session = session
        self._owned_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def _post(self, body: Dict[str, Any]) -> str:
        """发送请求并返回原始响应文本"""
        async with self.session.post(
            self.endpoint,
            json=body,
            headers={"Content-Type": "application/json"},
        ) as response:
            return await response.text()

    async def execute(
        self, query: str, variables: Optional[Dict[str, Any]] = None
    ) -> QueryResult:
        """
        执行查询

        不会抛出异常，也不会重试。

        Args:
            query: GraphQL 查询语句
            variables: 查询变量

        Returns:
            QueryResult，失败时 errors 为 NetworkError 或 RegistryError
        """
        try:
            text = await self._post({"query": query, "variables": variables or {}})
            response = json.loads(text)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.debug(f"[网络] 查询失败: {e!r}")
            return QueryResult(errors=NetworkError(cause=e))

        if not isinstance(response, dict):
            logger.debug(f"[网络] 无法识别的响应: {text[:200]!r}")
            return QueryResult(
                errors=NetworkError(context={"endpoint": self.endpoint})
            )

        errors = response.get("errors")
        if errors:
            if not isinstance(errors, list):
                errors = [errors]
            logger.debug(f"[注册表] 返回错误: {errors}")
            return QueryResult(errors=RegistryError(errors))

        data = response.get("data") or {}
        if not isinstance(data, dict):
            logger.debug(f"[网络] data 不是对象: {type(data).__name__}")
            return QueryResult(
                errors=NetworkError(context={"endpoint": self.endpoint})
            )
        return QueryResult(data=data)

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
