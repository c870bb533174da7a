"""Shared constants and literal types for the tutor relay Lambda."""

from typing import Literal

GEMINI_API_KEY_ENV = "GEMINI_API_KEY"
GEMINI_API_KEY_PARAMETER_ENV = "GEMINI_API_KEY_PARAMETER_NAME"
GEMINI_MODEL_ENV = "GEMINI_MODEL"
LANGSMITH_API_KEY_PARAMETER_ENV = "LANGSMITH_API_KEY_PARAMETER_NAME"
AWS_REGION_ENV = "AWS_REGION"
DEFAULT_AWS_REGION = "ap-northeast-1"
LANGSMITH_PROJECT = "tutor-relay"

GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_MODEL = "gemini-2.5-flash-preview-05-20"
UPSTREAM_TIMEOUT_SECONDS = 60.0
TUTOR_PROMPT_TEMPLATE = (
    "Responde a la siguiente pregunta de un estudiante de forma concisa y amigable, "
    'como un tutor experto. La pregunta es: "{prompt}"'
)

MAX_RETRIES = 3
INITIAL_RETRY_DELAY_MS = 1000
RETRY_BACKOFF_FACTOR = 2
RETRYABLE_STATUS_CODES = frozenset({429, 503})
OVERLOADED_STATUS_CODE = 503
MAX_LOGGED_ERROR_BODY_LENGTH = 2000

PROMPT_REQUIRED_MESSAGE = "Prompt is required"
METHOD_NOT_ALLOWED_MESSAGE = "Method Not Allowed"
CONFIG_INCOMPLETE_MESSAGE = "La configuración del servidor está incompleta."
UPSTREAM_ERROR_MESSAGE = "Error al comunicarse con el asistente de IA."
NO_OUTPUT_MESSAGE = "El asistente de IA no pudo generar una respuesta."
OVERLOADED_MESSAGE = (
    "El asistente de IA está saturado en este momento. Inténtalo de nuevo en unos segundos."
)
INTERNAL_ERROR_MESSAGE = "Ha ocurrido un error interno en el servidor."

CredentialSource = Literal["environment", "ssm"]
