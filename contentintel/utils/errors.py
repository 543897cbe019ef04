"""
Custom exceptions for the Content Intelligence Dispatcher.

This module defines a hierarchy of exceptions for handling various
error conditions throughout the application.
"""

from typing import Optional, Any


class ContentIntelError(Exception):
    """Base exception for all content intelligence errors."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ConfigurationError(ContentIntelError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(message)
        self.config_key = config_key
        self.details = {"config_key": config_key}


class StoreError(ContentIntelError):
    """Raised when the persisted state document cannot be written."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
        self.details = {"path": path}


class ModelLoadError(ContentIntelError):
    """Raised when the LLM client cannot be created."""

    def __init__(self, message: str, model_name: Optional[str] = None):
        super().__init__(message)
        self.model_name = model_name
        self.details = {"model_name": model_name}


class AnalysisError(ContentIntelError):
    """Raised when an analysis collaborator fails."""

    def __init__(
        self,
        message: str,
        engine_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.engine_name = engine_name
        self.original_error = original_error
        self.details = {
            "engine_name": engine_name,
            "original_error": str(original_error) if original_error else None,
        }


class EngineTimeoutError(AnalysisError):
    """Raised when a collaborator does not answer within its time budget."""

    def __init__(self, engine_name: str, timeout: float):
        super().__init__(
            f"Engine '{engine_name}' timed out after {timeout:.1f}s",
            engine_name=engine_name,
        )
        self.timeout = timeout
        self.details["timeout"] = timeout


class CategoryOfflineError(ContentIntelError):
    """Raised when a content category is switched off by an administrator."""

    def __init__(self, category: str):
        super().__init__(
            f"Category '{category}' is currently offline by administrator.",
            details={"category": category},
        )
        self.category = category


class AccessDeniedError(ContentIntelError):
    """Raised when the caller's tier is below the category requirement (paywall)."""

    def __init__(
        self,
        category: str,
        required_plan: str,
        current_tier: str = "FREE",
        caller: str = "anonymous",
    ):
        super().__init__(
            f"Caller '{caller}' on plan {current_tier} cannot use '{category}'. "
            f"Upgrade to {required_plan.upper()} or higher.",
            details={
                "category": category,
                "required_plan": required_plan,
                "current_tier": current_tier,
            },
        )
        self.category = category
        self.required_plan = required_plan
        self.current_tier = current_tier
        self.caller = caller


class AdminAuthError(ContentIntelError):
    """Raised when administrative credentials are rejected."""

    def __init__(self, username: Optional[str] = None):
        super().__init__("Invalid administrator credentials.", details={"username": username})
        self.username = username
