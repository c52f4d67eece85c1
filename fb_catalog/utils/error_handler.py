"""
Sistema de manejo de errores del cliente de catálogos.

Este módulo define las excepciones personalizadas del cliente
y proporciona utilidades para manejo consistente de errores.
"""

import logging
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

GRAPH_API_FALLBACK_MESSAGE = "Facebook API request failed"


class ErrorCode(Enum):
    """
    Códigos de error estandardizados para el cliente.
    """

    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    GRAPH_API_ERROR = "GRAPH_API_ERROR"
    SDK_NOT_INITIALIZED = "SDK_NOT_INITIALIZED"


class ErrorSeverity(Enum):
    """
    Niveles de severidad para errores.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AppException(Exception):
    """
    Excepción base para todas las excepciones personalizadas del cliente.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
    ):
        """
        Inicializa la excepción.

        Args:
            message: Mensaje de error
            error_code: Código de error estandardizado
            details: Información adicional del error
            status_code: Código HTTP asociado
            severity: Severidad del error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        self.severity = severity
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convierte la excepción a diccionario.

        Returns:
            Dict: Representación de la excepción
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "details": self.details,
            "status_code": self.status_code,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        """String representation del error."""
        return f"{self.error_code.value}: {self.message}"


class ValidationException(AppException):
    """
    Excepción para argumentos que no cumplen las precondiciones de una operación.
    """

    def __init__(
        self,
        message: str,
        field: str,
        invalid_value: Any = None,
        expected_format: Optional[str] = None,
        **kwargs,
    ):
        """
        Inicializa la excepción de validación.

        Args:
            message: Mensaje de error
            field: Campo que falló la validación
            invalid_value: Valor que causó el error
            expected_format: Formato esperado
            **kwargs: Argumentos adicionales para AppException
        """
        super().__init__(
            message=message,
            error_code=ErrorCode.VALIDATION_ERROR,
            status_code=422,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.field = field
        self.invalid_value = invalid_value
        self.expected_format = expected_format

        self.details.update(
            {
                "field": field,
                "invalid_value": str(invalid_value) if invalid_value is not None else None,
                "expected_format": expected_format,
            }
        )


class GraphAPIException(AppException):
    """
    Excepción única para cualquier respuesta fallida de la Graph API.

    No distingue expiración de token, rate limiting ni validación:
    el mensaje es el que reporta Facebook o el mensaje genérico.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        api_response_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        **kwargs,
    ):
        """
        Inicializa la excepción de la Graph API.

        Args:
            message: Mensaje reportado por Facebook (error.message)
            api_response_code: Código HTTP de la respuesta
            endpoint: Path que falló
            **kwargs: Argumentos adicionales para AppException
        """
        severity = ErrorSeverity.MEDIUM
        if api_response_code and api_response_code >= 500:
            severity = ErrorSeverity.HIGH

        super().__init__(
            message=message or GRAPH_API_FALLBACK_MESSAGE,
            error_code=ErrorCode.GRAPH_API_ERROR,
            status_code=api_response_code or 502,
            severity=severity,
            **kwargs,
        )

        self.api_response_code = api_response_code
        self.endpoint = endpoint

        self.details.update({"api_response_code": api_response_code, "endpoint": endpoint})

    @classmethod
    def from_response_body(
        cls, body: Any, api_response_code: Optional[int] = None, endpoint: Optional[str] = None
    ) -> "GraphAPIException":
        """
        Construye la excepción a partir del cuerpo JSON de una respuesta de error.

        Args:
            body: Cuerpo ya parseado de la respuesta
            api_response_code: Código HTTP de la respuesta
            endpoint: Path que falló

        Returns:
            GraphAPIException: Excepción con error.message o el mensaje genérico
        """
        message = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            message = body["error"].get("message")
        return cls(message, api_response_code=api_response_code, endpoint=endpoint)


class SdkException(AppException):
    """
    Excepción para operaciones de sesión usadas sin inicializar el SDK.
    """

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.SDK_NOT_INITIALIZED,
            status_code=500,
            severity=ErrorSeverity.HIGH,
            **kwargs,
        )


# === FUNCIONES DE UTILIDAD ===


def log_error(
    exception: Exception,
    operation: str,
    context: Optional[Dict[str, Any]] = None,
    level: int = logging.ERROR,
) -> None:
    """
    Registra un error con contexto estructurado.

    Args:
        exception: Excepción a registrar
        operation: Operación del cliente que falló
        context: Contexto adicional
        level: Nivel de logging
    """
    extra: Dict[str, Any] = {"operation": operation, "context": context or {}}

    if isinstance(exception, AppException):
        extra["error_details"] = exception.to_dict()
    else:
        extra["exception_type"] = type(exception).__name__
        extra["traceback"] = traceback.format_exc()

    logger.log(level, f"Error in {operation}: {exception}", extra=extra)
