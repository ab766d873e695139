"""
Live location broadcast
Publishes accepted GPS samples on a per-surveyor Redis pub/sub channel.
Delivery is fire-and-forget, callers handle failures.
"""
import json
import logging

import redis
from django.core.serializers.json import DjangoJSONEncoder

logger = logging.getLogger(__name__)


def topic_for(prefix, surveyor_id):
    return f"{prefix.rstrip('/')}/{surveyor_id}"


def encode_payload(payload):
    return json.dumps(payload, cls=DjangoJSONEncoder)


class RedisNotificationSink:
    """
    Publish JSON messages to Redis channels
    The client is created on first publish
    """

    def __init__(self, url):
        self.url = url
        self._client = None

    @property
    def client(self):
        if self._client is None:
            self._client = redis.Redis.from_url(self.url, decode_responses=True)
        return self._client

    def publish(self, topic, payload):
        receivers = self.client.publish(topic, encode_payload(payload))
        logger.debug(f"[BROADCAST] {topic} -> {receivers} subscribers")
        return receivers


class LoggingNotificationSink:
    """
    Used when no broadcast URL is configured
    """

    def publish(self, topic, payload):
        logger.debug(f"[BROADCAST] {topic}: {encode_payload(payload)}")
        return 0


def build_notification_sink(url):
    if url:
        return RedisNotificationSink(url)
    return LoggingNotificationSink()
