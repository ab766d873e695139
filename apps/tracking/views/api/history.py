"""
Location History API

Latest position, paged track history, gap-filled (enhanced) track and
cumulative distance of one surveyor.
"""
from django.http import HttpResponse, JsonResponse
from django.views.decorators.http import require_GET

from ...services import get_services
from ...services.query import InvalidTimeRange
from .base import BadRequest, int_param, time_param


@require_GET
def get_latest_location(request, surveyor_id):
    """
    Latest stored point, 204 if there is none
    """
    point = get_services().queries.latest(surveyor_id)
    if point is None:
        return HttpResponse(status=204)
    return JsonResponse(point.as_dict())


@require_GET
def get_track_history(request, surveyor_id):
    """
    Get location history of a surveyor, ascending by time

    Query parameters:
        start: ISO 8601 lower bound (optional)
        end: ISO 8601 upper bound (optional)
        page: 0-based page index (default: 0)
        size: Page size (default: 1000)
    """
    queries = get_services().queries
    try:
        start = time_param(request, 'start')
        end = time_param(request, 'end')
        page = int_param(request, 'page', 0)
        size = int_param(request, 'size', queries.page_size)
        if page < 0 or size <= 0:
            raise BadRequest("page must be >= 0 and size > 0")
        result = queries.history_page(surveyor_id, start, end, page, size)
    except (BadRequest, InvalidTimeRange) as e:
        return JsonResponse({'error': str(e)}, status=400)

    if not result.points:
        return HttpResponse(status=204)
    return JsonResponse(result.as_dict())


@require_GET
def get_enhanced_track_history(request, surveyor_id):
    """
    Location history with interpolated points filling gaps > 5 min and > 100 m

    Query parameters:
        start, end: ISO 8601 bounds (optional)
    """
    try:
        start = time_param(request, 'start')
        end = time_param(request, 'end')
        points = get_services().queries.enhanced_history(surveyor_id, start, end)
    except (BadRequest, InvalidTimeRange) as e:
        return JsonResponse({'error': str(e)}, status=400)

    if not points:
        return HttpResponse(status=204)
    return JsonResponse([point.as_dict() for point in points], safe=False)


@require_GET
def get_total_distance(request, surveyor_id):
    distance = get_services().queries.total_distance(surveyor_id)
    return JsonResponse({
        'surveyor_id': surveyor_id,
        'total_distance_km': round(distance, 3),
    })
