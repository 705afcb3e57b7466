from .base import ApplicationError, ErrorCode, ErrorLevel
from .errors import InvalidValueError, QueryConstructionError, QueryExecutionError
