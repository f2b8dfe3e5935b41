"""
Domain Exceptions.

Custom exceptions for domain-level errors.
These exceptions represent business rule violations and are rendered
to HTTP responses by presentation.api.exception_handler.
"""

from typing import Optional, Any, Dict, List


class DomainException(Exception):
    """Base exception for all domain errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "DOMAIN_ERROR"
        self.details = details or {}


class EntityNotFoundException(DomainException):
    """Raised when an entity is not found (or is not visible to the caller)."""

    def __init__(self, entity_type: str, entity_id: Any = None, message: Optional[str] = None):
        super().__init__(
            message=message or f"{entity_type} не найден",
            code="ENTITY_NOT_FOUND",
            details={"entity_type": entity_type, "entity_id": str(entity_id) if entity_id else None}
        )


class EntitiesNotFoundException(DomainException):
    """Raised when some ids of a bulk operation do not exist."""

    def __init__(self, entity_type: str, missing_ids: List[str]):
        super().__init__(
            message=f"{entity_type}: записи не найдены",
            code="ENTITY_NOT_FOUND",
            details={"entity_type": entity_type, "missing_ids": list(missing_ids)}
        )


class ValidationException(DomainException):
    """Raised when validation fails."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details={"field": field, "value": str(value) if value is not None else None}
        )


class ConcurrencyException(DomainException):
    """Raised when optimistic locking fails due to concurrent modification."""

    def __init__(self, entity_type: str, entity_id: Any, current_version: int):
        super().__init__(
            message="Версия устарела, обновите данные",
            code="CONCURRENCY_ERROR",
            details={
                "entity_type": entity_type,
                "entity_id": str(entity_id),
                "current_version": current_version
            }
        )


class EntityLockedException(DomainException):
    """Raised when a locked entity is modified."""

    def __init__(self, entity_type: str, entity_id: Any, message: Optional[str] = None):
        super().__init__(
            message=message or f"{entity_type} заблокирована для изменений",
            code="ENTITY_LOCKED",
            details={"entity_type": entity_type, "entity_id": str(entity_id)}
        )


class AuthorizationException(DomainException):
    """Raised when user is not authorized to perform an operation."""

    def __init__(self, operation: str, resource: Optional[str] = None):
        super().__init__(
            message=f"Недостаточно прав для операции '{operation}'" +
                    (f" над '{resource}'" if resource else ""),
            code="AUTHORIZATION_ERROR",
            details={"operation": operation, "resource": resource}
        )


class BusinessRuleViolationException(DomainException):
    """Raised when a business rule is violated."""

    def __init__(self, rule: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            code="BUSINESS_RULE_VIOLATION",
            details={"rule": rule, **(details or {})}
        )
