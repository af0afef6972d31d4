"""Request body parsing shared by the route blueprints."""

from datetime import date

from flask import request

from redemption.errors import ValidationError

MAX_ID = 2 ** 31 - 1


def get_json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def pick(data, *names):
    """Return the first non-null value among camelCase / snake_case aliases."""
    for name in names:
        if data.get(name) is not None:
            return data[name]
    return None


def parse_id(value, field, required=True):
    if value is None or value == '':
        if required:
            raise ValidationError(f'Missing field: {field}')
        return None
    if isinstance(value, str):
        value = value.strip()
        # '²'.isdigit() is True but int('²') fails
        if not (value.isascii() and value.isdigit()):
            raise ValidationError(f'{field} must be an integer id')
        value = int(value)
    elif isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f'{field} must be an integer id')
    # Primary keys are INTEGER columns (int4 on PostgreSQL)
    if not 1 <= value <= MAX_ID:
        raise ValidationError(f'{field} must be an integer id')
    return value


def parse_text(value, field, required=True, max_length=255):
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError(f'Missing field: {field}')
        return None
    if not isinstance(value, str):
        raise ValidationError(f'{field} must be a string')
    value = value.strip()
    if len(value) > max_length:
        raise ValidationError(f'{field} must be at most {max_length} characters')
    return value


def parse_date(value, field):
    """Parse YYYY-MM-DD (a trailing time part is ignored)."""
    if value is None or value == '':
        return None
    if not isinstance(value, str):
        raise ValidationError(f'{field} must be an ISO date (YYYY-MM-DD)')
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        raise ValidationError(f'{field} must be an ISO date (YYYY-MM-DD)')
