"""
GPS Sample Ingestion

Validates incoming samples, suppresses near-duplicates, persists accepted
points and broadcasts them. Persistence comes first and is the durability
guarantee; broadcast is best-effort.
"""
import logging
import math
from dataclasses import dataclass, field
from datetime import timedelta
from typing import List, Optional

from django.utils import timezone

from ..functions import distance_m, parse_coordinate, parse_timestamp, whole_minutes
from ..models import LocationTrack
from ..notifications import topic_for

logger = logging.getLogger(__name__)

STORED = 'stored'
SKIPPED = 'skipped'
REJECTED = 'rejected'

INVALID_SURVEYOR_ID = 'invalid surveyor id'
INVALID_COORDINATES = 'invalid coordinates'

DEDUP_MAX_MINUTES = 1
DEDUP_MAX_METERS = 10
FUTURE_TOLERANCE_SECONDS = 60
STATS_EVERY_POINTS = 5


@dataclass
class GpsSample:
    surveyor_id: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    timestamp: Optional[object] = None

    @classmethod
    def from_payload(cls, payload):
        """
        Build a sample from a decoded JSON object or form data
        Accepts the mobile app's camelCase keys and snake_case keys
        """
        surveyor_id = payload.get('surveyorId', payload.get('surveyor_id'))
        if surveyor_id is not None and not isinstance(surveyor_id, str):
            surveyor_id = str(surveyor_id)
        return cls(
            surveyor_id=surveyor_id,
            latitude=parse_coordinate(payload.get('latitude')),
            longitude=parse_coordinate(payload.get('longitude')),
            timestamp=parse_timestamp(payload.get('timestamp')),
        )

    def as_message(self, timestamp=None):
        return {
            'surveyorId': self.surveyor_id,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'timestamp': timestamp or self.timestamp,
        }


@dataclass
class IngestResult:
    status: str
    reason: Optional[str] = None
    point: Optional[LocationTrack] = None
    flagged: bool = False

    @property
    def accepted(self):
        return self.status != REJECTED

    @property
    def stored(self):
        return self.status == STORED


@dataclass
class BatchResult:
    total: int = 0
    successful: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)
    results: List[Optional[IngestResult]] = field(default_factory=list)

    @property
    def summary(self):
        text = f"Processed {self.total} locations: {self.successful} successful, {self.failed} failed"
        if self.errors:
            text += ". Errors: " + "; ".join(self.errors)
        return text


def validate_sample(sample):
    """
    Returns:
        Rejection reason, or None if the sample is valid
    """
    if sample.surveyor_id is None or not sample.surveyor_id.strip():
        return INVALID_SURVEYOR_ID

    lat, lon = sample.latitude, sample.longitude
    if lat is None or lon is None or not math.isfinite(lat) or not math.isfinite(lon):
        return INVALID_COORDINATES
    if lat < -90 or lat > 90 or lon < -180 or lon > 180:
        return INVALID_COORDINATES
    return None


class IngestionPipeline:

    def __init__(self, points, activity, sink, clock=timezone.now,
                 topic_prefix='/topic/location',
                 dedup_max_minutes=DEDUP_MAX_MINUTES,
                 dedup_max_meters=DEDUP_MAX_METERS,
                 future_tolerance_seconds=FUTURE_TOLERANCE_SECONDS):
        self.points = points
        self.activity = activity
        self.sink = sink
        self.clock = clock
        self.topic_prefix = topic_prefix
        self.dedup_max_minutes = dedup_max_minutes
        self.dedup_max_meters = dedup_max_meters
        self.future_tolerance_seconds = future_tolerance_seconds

    def ingest(self, sample):
        """
        Ingest one sample with duplicate suppression
        Activity is recorded for every valid sample, stored or skipped
        """
        result = self._process(sample, dedup=True)
        if result.accepted:
            self.activity.record_activity(sample.surveyor_id)
        return result

    def ingest_final(self, sample):
        """
        Ingest the last sample of a session, never suppressed as duplicate
        """
        result = self._process(sample, dedup=False)
        if result.accepted:
            self.activity.record_activity(sample.surveyor_id)
        return result

    def ingest_batch(self, samples):
        """
        Ingest samples in order, one failure does not stop the rest

        Returns:
            BatchResult with counts and "Location <n>: <message>" errors
        """
        batch = BatchResult(total=len(samples))

        for index, sample in enumerate(samples, 1):
            try:
                result = self._process(sample, dedup=True)
            except Exception as e:
                logger.error(f"[BATCH] Location {index} for surveyor {sample.surveyor_id} failed: {e}")
                batch.failed += 1
                batch.errors.append(f"Location {index}: {e}")
                batch.results.append(None)
                continue

            batch.results.append(result)
            if result.accepted:
                batch.successful += 1
            else:
                batch.failed += 1
                batch.errors.append(f"Location {index}: {result.reason}")

        # One activity update for the batch owner
        if samples and samples[0].surveyor_id and samples[0].surveyor_id.strip():
            self.activity.record_activity(samples[0].surveyor_id)

        logger.info(f"[BATCH] {batch.summary}")
        return batch

    def _resolve_timestamp(self, sample):
        now = self.clock()
        if sample.timestamp is None:
            logger.info(f"No timestamp provided for surveyor {sample.surveyor_id}, using current time")
            return now, False

        flagged = sample.timestamp - now > timedelta(seconds=self.future_tolerance_seconds)
        if flagged:
            logger.warning(
                f"[FUTURE] Surveyor {sample.surveyor_id} sent timestamp {sample.timestamp.isoformat()} "
                f"which is {(sample.timestamp - now).total_seconds():.0f}s ahead of server time"
            )
        return sample.timestamp, flagged

    def _is_duplicate(self, previous, sample, timestamp):
        minutes = whole_minutes(timestamp - previous.timestamp)
        meters = distance_m(previous.latitude, previous.longitude, sample.latitude, sample.longitude)

        # Both gaps must be small, either one being large forces a save
        if minutes < self.dedup_max_minutes and meters < self.dedup_max_meters:
            logger.info(
                f"[SKIP] Duplicate location for surveyor {sample.surveyor_id}: "
                f"time diff={minutes} min, distance={meters:.2f} m"
            )
            return True
        return False

    def _process(self, sample, dedup):
        reason = validate_sample(sample)
        if reason is not None:
            logger.warning(
                f"[REJECT] Surveyor {sample.surveyor_id!r}: {reason} "
                f"(lat={sample.latitude}, lon={sample.longitude})"
            )
            return IngestResult(REJECTED, reason=reason)

        timestamp, flagged = self._resolve_timestamp(sample)

        if dedup:
            previous = self.points.latest_for(sample.surveyor_id)
            if previous is not None and self._is_duplicate(previous, sample, timestamp):
                return IngestResult(SKIPPED, flagged=flagged)

        point = LocationTrack(
            surveyor_id=sample.surveyor_id,
            latitude=sample.latitude,
            longitude=sample.longitude,
            timestamp=timestamp,
            geometry=None,
        )
        try:
            saved = self.points.save(point)
        except Exception as e:
            logger.error(f"[ERROR] Failed to save location for surveyor {sample.surveyor_id}: {e}")
            raise

        logger.info(
            f"[SAVE] Saved location ID={saved.pk} for surveyor {sample.surveyor_id} "
            f"at {timestamp.isoformat()} ({sample.latitude:.6f}, {sample.longitude:.6f})"
        )
        self._log_statistics(sample.surveyor_id)
        self._broadcast(sample, timestamp)

        return IngestResult(STORED, point=saved, flagged=flagged)

    def _log_statistics(self, surveyor_id):
        try:
            total = self.points.count_for(surveyor_id)
        except Exception as e:
            logger.debug(f"[STATS] Could not count points for surveyor {surveyor_id}: {e}")
            return
        if total and total % STATS_EVERY_POINTS == 0:
            logger.info(f"[STATS] Surveyor {surveyor_id} has reached {total} total GPS points")

    def _broadcast(self, sample, timestamp):
        topic = topic_for(self.topic_prefix, sample.surveyor_id)
        try:
            self.sink.publish(topic, sample.as_message(timestamp))
        except Exception as e:
            # Point is already persisted
            logger.warning(f"[BROADCAST] Failed to publish on {topic}: {e}")
