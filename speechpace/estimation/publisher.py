"""Monitor state publisher for pub/sub event publishing."""

import logging
from typing import Callable
from pubsub import pub

from ..models.events import AlertEvent
from ..models.session import MonitorState

logger = logging.getLogger(__name__)

STATE_TOPIC = "speechpace.state"
ALERT_TOPIC = "speechpace.alert"


class MonitorStatePublisher:
    """Publishes monitor state snapshots and alert events using pubsub.pub."""

    def __init__(self, state_topic: str = STATE_TOPIC, alert_topic: str = ALERT_TOPIC):
        """Initialize monitor state publisher.

        Args:
            state_topic: Pub/sub topic name for MonitorState snapshots
            alert_topic: Pub/sub topic name for AlertEvents
        """
        self.state_topic = state_topic
        self.alert_topic = alert_topic
        logger.info(f"MonitorStatePublisher initialized with topics: {state_topic}, {alert_topic}")

    def publish_state(self, state: MonitorState) -> None:
        """Publish a state snapshot to the state topic.

        Args:
            state: Immutable snapshot of the session's published state
        """
        pub.sendMessage(self.state_topic, state=state)
        logger.debug(f"Published state: {state.session_status.value} "
                     f"rate={state.current_rate} '{state.status_message}'")

    def publish_alert(self, event: AlertEvent) -> None:
        pub.sendMessage(self.alert_topic, event=event)

    def get_callback(self) -> Callable[[MonitorState], None]:
        """Get callback function for the monitoring session to use."""
        return self.publish_state
