"""
Management command to report surveyor status
Shows online state, last position, point count and distance covered per surveyor
"""
from django.core.management.base import BaseCommand

from apps.tracking.services import get_services
from apps.tracking.services.activity import ONLINE


class Command(BaseCommand):
    help = 'Report online status and location statistics for each surveyor'

    def add_arguments(self, parser):
        parser.add_argument(
            '--surveyor',
            type=str,
            help='Report a specific surveyor only',
        )
        parser.add_argument(
            '--city',
            type=str,
            help='Filter by city',
        )
        parser.add_argument(
            '--project',
            type=str,
            help='Filter by project name',
        )

    def handle(self, *args, **options):
        services = get_services()
        queries = services.queries

        surveyors = queries.surveyors(city=options['city'], project=options['project'])
        if options['surveyor']:
            surveyors = [s for s in surveyors if s.id == options['surveyor']]

        if not surveyors:
            self.stdout.write(self.style.WARNING('No surveyors found'))
            return

        online_count = 0

        self.stdout.write(self.style.SUCCESS('\n=== Surveyor Status ===\n'))

        for i, surveyor in enumerate(surveyors, 1):
            latest = queries.latest(surveyor.id)
            status = services.activity.display_status(surveyor.id, latest)
            if status == ONLINE:
                online_count += 1

            self.stdout.write(f"{i}. [{status}] {surveyor.id} ({surveyor.username})")
            self.stdout.write(f"   City / project: {surveyor.city or '-'} / {surveyor.project_name or '-'}")
            if latest is not None:
                self.stdout.write(
                    f"   Last position: ({latest.latitude:.6f}, {latest.longitude:.6f}) "
                    f"at {latest.timestamp.isoformat()}"
                )
            else:
                self.stdout.write("   Last position: none")

            last_activity = services.activity.last_activity(surveyor.id)
            self.stdout.write(f"   Last activity: {last_activity.isoformat() if last_activity else 'never'}")
            self.stdout.write(f"   Points: {services.points.count_for(surveyor.id)}")
            self.stdout.write(f"   Distance: {queries.total_distance(surveyor.id):.3f} km")
            self.stdout.write("")

        self.stdout.write(
            self.style.SUCCESS(f"{online_count} of {len(surveyors)} surveyors online")
        )
