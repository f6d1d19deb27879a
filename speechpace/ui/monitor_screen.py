"""Live terminal view of the monitoring session."""

import time
import queue
import logging
from typing import Optional

from pubsub import pub
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..estimation.publisher import STATE_TOPIC, ALERT_TOPIC
from ..models.events import AlertEvent
from ..models.session import MonitorState, SessionStatus

logger = logging.getLogger(__name__)


class MonitorScreen:
    """Renders published MonitorState snapshots with rich.

    Snapshots arrive on worker threads and are queued; only the thread
    running ``run`` touches the display.
    """

    def __init__(self, console: Optional[Console] = None,
                 state_topic: str = STATE_TOPIC, alert_topic: str = ALERT_TOPIC):
        self.console = console or Console()
        self.state_topic = state_topic
        self.alert_topic = alert_topic
        self.updates: "queue.Queue[MonitorState]" = queue.Queue()
        self.state = MonitorState(
            session_status=SessionStatus.IDLE,
            is_monitoring=False,
            current_rate=0,
            status_message="Ready",
        )
        self.alert_count = 0
        self.subscribed = False

    def subscribe(self) -> None:
        if self.subscribed:
            return
        pub.subscribe(self._on_state, self.state_topic)
        pub.subscribe(self._on_alert, self.alert_topic)
        self.subscribed = True

    def unsubscribe(self) -> None:
        if not self.subscribed:
            return
        pub.unsubscribe(self._on_state, self.state_topic)
        pub.unsubscribe(self._on_alert, self.alert_topic)
        self.subscribed = False

    def _on_state(self, state: MonitorState) -> None:
        self.updates.put(state)

    def _on_alert(self, event: AlertEvent) -> None:
        logger.debug(f"Alert received: {event.rate} WPM > {event.threshold}")
        self.alert_count += 1

    def drain(self) -> MonitorState:
        """Apply every queued snapshot and return the latest one."""
        while True:
            try:
                self.state = self.updates.get_nowait()
            except queue.Empty:
                return self.state

    def render(self) -> Panel:
        state = self.state
        rate_style = "bold red" if state.wpm_above_threshold else "bold green"

        table = Table.grid(padding=(0, 2))
        table.add_column(justify="right", style="bold")
        table.add_column()
        table.add_row("Rate", Text(f"{state.current_rate} WPM", style=rate_style))
        table.add_row("Status", state.status_message)
        minutes, seconds = divmod(int(state.elapsed_seconds), 60)
        table.add_row("Elapsed", f"{minutes}:{seconds:02d}")
        table.add_row("Alerts", str(self.alert_count))

        border = "green" if state.is_monitoring else "yellow"
        if state.session_status in (SessionStatus.PERMISSION_DENIED, SessionStatus.AUDIO_ERROR):
            border = "red"
        return Panel(table, title="SpeechPace", border_style=border)

    def run(self, duration: float = 0, refresh_seconds: float = 0.25) -> None:
        """Show the live view for ``duration`` seconds, or until Ctrl-C when 0."""
        deadline = time.monotonic() + duration if duration else None
        with Live(self.render(), console=self.console, refresh_per_second=4) as live:
            while deadline is None or time.monotonic() < deadline:
                self.drain()
                live.update(self.render())
                time.sleep(refresh_seconds)
