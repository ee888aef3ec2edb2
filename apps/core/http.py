# apps/core/http.py
import json
import logging
from functools import wraps

from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.http import JsonResponse

from apps.core.notifications import default_bus
from apps.core.store import error_message

logger = logging.getLogger(__name__)


def parse_json_body(request) -> dict:
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except ValueError:
        raise ValidationError("Request body is not valid JSON", code='invalid')
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object", code='invalid')
    return data


def json_error(exc: Exception, status: int = 400, bus=None) -> JsonResponse:
    """Błąd zapisu: powiadom użytkownika i zwróć JSON z komunikatem."""
    message = error_message(exc)
    (bus or default_bus).error(message)
    return JsonResponse({'error': message}, status=status)


def json_errors(func):
    """
    Wspólna obsługa błędów widoków JSON:
    ValidationError -> 400, ValueError (brak obiektu / zły stan) -> 404,
    DatabaseError (magazyn niedostępny) -> 503.
    """
    @wraps(func)
    def wrapper(request, *args, **kwargs):
        try:
            return func(request, *args, **kwargs)
        except ValidationError as exc:
            return json_error(exc, status=400)
        except ValueError as exc:
            return json_error(exc, status=404)
        except DatabaseError as exc:
            logger.error("Store failure in %s", func.__name__, exc_info=True)
            return json_error(exc, status=503)
    return wrapper
