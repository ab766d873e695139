"""
Live Location Receiver API

Receives GPS samples from the surveyor mobile app via POST requests,
runs them through the ingestion pipeline and answers with the outcome.
"""
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from ...services import get_services
from ...services.ingestion import GpsSample
from .base import BadRequest, check_auth, read_payload

# Configure logging
logger = logging.getLogger(__name__)


def _ingest_response(result):
    if not result.accepted:
        return JsonResponse({'status': 'error', 'message': result.reason}, status=400)

    message = 'Location updated' if result.stored else 'Location unchanged, duplicate skipped'
    body = {'status': 'success', 'message': message, 'stored': result.stored}
    if result.flagged:
        body['flagged'] = True
        body['message'] += ' (timestamp is ahead of server time)'
    if result.point is not None:
        body['id'] = result.point.pk
    return JsonResponse(body)


def _single_sample_view(request, final):
    services = get_services()
    denied = check_auth(request, services)
    if denied is not None:
        return denied

    try:
        payload = read_payload(request)
    except BadRequest as e:
        return JsonResponse({'status': 'error', 'message': str(e)}, status=400)
    if not isinstance(payload, dict):
        return JsonResponse({'status': 'error', 'message': 'Expected a JSON object'}, status=400)

    sample = GpsSample.from_payload(payload)
    logger.info(f"[INCOMING] Surveyor: {sample.surveyor_id}, final={final}")

    try:
        if final:
            result = services.ingestion.ingest_final(sample)
        else:
            result = services.ingestion.ingest(sample)
    except Exception as e:
        return JsonResponse({'status': 'error', 'message': f'Processing error: {e}'}, status=500)

    return _ingest_response(result)


@csrf_exempt
@require_POST
def publish_live_location(request):
    """
    Receive one GPS sample

    JSON body:
        surveyorId: Surveyor ID (required)
        latitude, longitude: Decimal degrees (required)
        timestamp: ISO 8601 (optional, server time if missing)
    """
    return _single_sample_view(request, final=False)


@csrf_exempt
@require_POST
def publish_final_location(request):
    """
    Receive the last GPS sample of a session (logout), always stored
    """
    return _single_sample_view(request, final=True)


@csrf_exempt
@require_POST
def publish_location_batch(request):
    """
    Receive GPS samples buffered offline by the app

    JSON body:
        Either a list of samples or {"locations": [...]}

    Returns:
        JSON with successful/failed counts and a readable summary
    """
    services = get_services()
    denied = check_auth(request, services)
    if denied is not None:
        return denied

    try:
        payload = read_payload(request)
    except BadRequest as e:
        return JsonResponse({'status': 'error', 'message': str(e)}, status=400)

    items = payload.get('locations') if isinstance(payload, dict) else payload
    if not isinstance(items, list) or not items:
        return JsonResponse({'status': 'error', 'message': 'Expected a non-empty list of locations'}, status=400)

    samples = [
        GpsSample.from_payload(item) if isinstance(item, dict) else GpsSample(None, None, None)
        for item in items
    ]
    logger.info(f"[INCOMING] Batch of {len(samples)} locations for surveyor {samples[0].surveyor_id}")

    batch = services.ingestion.ingest_batch(samples)
    return JsonResponse({
        'status': 'success' if batch.failed == 0 else 'partial',
        'total': batch.total,
        'successful': batch.successful,
        'failed': batch.failed,
        'errors': batch.errors,
        'message': batch.summary,
    })
