"""產生流程的例外類別."""

from typing import Optional


class CodeGenerationError(Exception):
    """所有產生錯誤的基底類別."""

    def __init__(self, message: str, node_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.node_id = node_id

    def to_dict(self) -> dict:
        return {
            "name": type(self).__name__,
            "message": self.message,
            "nodeId": self.node_id,
        }


class NodeNotFoundError(CodeGenerationError, LookupError):
    """目標節點不在場景樹中（單次請求致命，不重試）."""


class ConfigurationError(CodeGenerationError, ValueError):
    """不支援或缺少的 dialect 設定，屬於呼叫端錯誤."""


class IntegrationError(CodeGenerationError):
    """自訂程式碼無法插入；只在 integrator 內部使用並降級為警告."""
