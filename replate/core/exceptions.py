"""
自定义异常类
提供更精确的错误处理和异常信息

每个异常类带有默认的 error_code，由 error_handler 映射为HTTP状态码
"""

from typing import Any, Dict, Optional


class BaseApplicationError(Exception):
    """应用基础异常类"""

    default_code = "APPLICATION_ERROR"
    default_message = "应用错误"

    def __init__(
        self,
        message: Optional[str] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message or self.default_message
        self.error_code = error_code or self.default_code
        self.details = details or {}
        super().__init__(self.message)


class DatabaseError(BaseApplicationError):
    """数据库相关异常"""
    default_code = "DATABASE_ERROR"
    default_message = "数据库操作失败"


class ConcurrencyError(BaseApplicationError):
    """并发控制错误"""
    default_code = "CONCURRENCY_CONFLICT"
    default_message = "系统繁忙，请稍后重试"


class AuthenticationError(BaseApplicationError):
    """认证相关异常"""
    default_code = "AUTHENTICATION_REQUIRED"
    default_message = "需要登录"


class PermissionDeniedError(BaseApplicationError):
    """权限拒绝错误"""
    default_code = "PERMISSION_DENIED"
    default_message = "权限不足"


class ValidationError(BaseApplicationError):
    """数据验证异常"""
    default_code = "VALIDATION_ERROR"
    default_message = "请求参数验证失败"


class NotFoundError(BaseApplicationError):
    """资源不存在"""
    default_code = "RESOURCE_NOT_FOUND"
    default_message = "资源不存在"


class UserNotFoundError(NotFoundError):
    default_code = "USER_NOT_FOUND"
    default_message = "用户不存在"


class FoodItemNotFoundError(NotFoundError):
    default_code = "FOOD_ITEM_NOT_FOUND"
    default_message = "餐品不存在"


class ClaimNotFoundError(NotFoundError):
    default_code = "CLAIM_NOT_FOUND"
    default_message = "领取记录不存在"


class InvalidClaimCodeError(NotFoundError):
    """领取码无法解析到任何领取记录"""
    default_code = "INVALID_CLAIM_CODE"
    default_message = "领取码无效"


class DonationNotFoundError(NotFoundError):
    default_code = "DONATION_NOT_FOUND"
    default_message = "捐赠记录不存在"


class BusinessLogicError(BaseApplicationError):
    """业务逻辑异常"""
    default_code = "BUSINESS_RULE_VIOLATION"
    default_message = "业务规则校验失败"


class NotAvailableError(BusinessLogicError):
    """餐品当前不可领取（已下架、已过期或数量不足）"""
    default_code = "FOOD_ITEM_NOT_AVAILABLE"
    default_message = "餐品已不可领取"


class ClaimWrongStateError(BusinessLogicError):
    """领取记录状态不允许当前操作"""
    default_code = "CLAIM_WRONG_STATE"

    def __init__(self, current_status: str, message: Optional[str] = None):
        super().__init__(
            message or f"领取记录当前状态为 {current_status}",
            details={"current_status": current_status}
        )
        self.current_status = current_status


class ClaimExpiredError(BusinessLogicError):
    """领取记录已过期"""
    default_code = "CLAIM_EXPIRED"
    default_message = "领取码已过期"


class DonationWrongStateError(BusinessLogicError):
    """捐赠记录状态不允许当前操作"""
    default_code = "DONATION_WRONG_STATE"

    def __init__(self, current_status: str, expected_status: str):
        super().__init__(
            f"捐赠记录当前状态为 {current_status}，需要为 {expected_status}",
            details={"current_status": current_status, "expected_status": expected_status}
        )
        self.current_status = current_status
