"""
Surveyor Status API
Online/offline status and directory listings for the dashboard
"""
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from ...services import get_services


@require_GET
def get_surveyor_statuses(request):
    """
    Map of surveyor ID -> "Online" / "Offline", admin accounts excluded
    """
    return JsonResponse(get_services().queries.status_map())


@require_GET
def filter_surveyors(request):
    """
    Query parameters:
        city: City substring (optional)
        project: Project substring (optional)
    """
    surveyors = get_services().queries.surveyors(
        city=request.GET.get('city') or None,
        project=request.GET.get('project') or None,
    )
    return JsonResponse([surveyor.as_dict() for surveyor in surveyors], safe=False)


@require_GET
def get_surveyors_with_locations(request):
    return JsonResponse(get_services().queries.surveyors_with_latest_locations(), safe=False)


@require_GET
def get_surveyor_status(request, surveyor_id):
    return JsonResponse({'online': get_services().activity.is_online(surveyor_id)})


@csrf_exempt
@require_POST
def update_activity(request, surveyor_id):
    """
    Heartbeat from the app without a position
    """
    services = get_services()
    if services.directory.find_surveyor(surveyor_id) is None:
        return JsonResponse({'status': 'error', 'message': 'Surveyor not found'}, status=404)

    services.activity.record_activity(surveyor_id)
    return JsonResponse({'status': 'success'})
