"""
Shared helpers for the tracking API views
Request decoding, Basic auth and time range parameters
"""
import base64
import binascii
import json

from django.http import JsonResponse

from ...conf import tracking_setting
from ...functions import parse_timestamp


class BadRequest(ValueError):
    pass


def read_payload(request):
    """
    Decode the request body as JSON, falling back to form data
    """
    if request.body and request.content_type != 'application/x-www-form-urlencoded':
        try:
            return json.loads(request.body)
        except (ValueError, UnicodeDecodeError) as e:
            if not request.POST:
                raise BadRequest(f"Invalid JSON body: {e}")
    return request.POST.dict()


def basic_credentials(request):
    """
    Returns:
        (username, password) from a Basic Authorization header, or None
    """
    header = request.META.get('HTTP_AUTHORIZATION', '')
    if not header.startswith('Basic '):
        return None
    try:
        decoded = base64.b64decode(header[len('Basic '):], validate=True).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError):
        return None
    parts = decoded.split(':', 1)
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


def check_auth(request, services):
    """
    Returns:
        None if the request may proceed, otherwise a 401 response
    """
    if not tracking_setting('REQUIRE_AUTH'):
        return None
    credentials = basic_credentials(request)
    if credentials is None or services.directory.authenticate(*credentials) is None:
        return JsonResponse({'status': 'error', 'message': 'Invalid credentials'}, status=401)
    return None


def time_param(request, name):
    value = request.GET.get(name)
    if value is None or not value.strip():
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        raise BadRequest(f"Invalid {name} timestamp: {value}")
    return parsed


def int_param(request, name, default):
    value = request.GET.get(name)
    if value is None or value == '':
        return default
    try:
        return int(value)
    except ValueError:
        raise BadRequest(f"Invalid {name}: {value}")
