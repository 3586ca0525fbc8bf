"""
Deployment monitor for Laravel Forge sites.

Triggers one deployment and polls it until Forge reports a terminal
status or the timeout expires, printing new log output as it arrives.
"""

import logging
import time
from datetime import datetime
from typing import Optional

from clients import ForgeRestClient
from errors import DeploymentFailedError, DeploymentTimeoutError, ForgeError
from models import (
    DeploymentHandle,
    DeploymentResult,
    DeploymentState,
    LogCursor,
    PollResult,
    SiteRef,
    StatusCategory,
    classify_status,
)

logger = logging.getLogger(__name__)


class DeploymentMonitor:
    """Triggers a Forge deployment and watches it to completion."""

    def __init__(
        self,
        client: ForgeRestClient,
        site: SiteRef,
        timeout: int = 600,
        poll_interval: int = 10,
    ):
        """
        Initialize the deployment monitor.

        Args:
            client: Forge API client
            site: Site to deploy
            timeout: Maximum session duration (seconds)
            poll_interval: Interval between status polls (seconds)
        """
        self.api = client
        self.site = site
        self.timeout = timeout
        self.poll_interval = poll_interval

        self.state = DeploymentState.RUNNING
        self.cursor = LogCursor()
        self.last_status: Optional[str] = None
        self.last_output: Optional[str] = None
        self.session_start: Optional[float] = None

    def _elapsed(self) -> float:
        return time.monotonic() - self.session_start

    def _transition(self, new_state: DeploymentState) -> None:
        """Move to new_state; terminal states can never be left."""
        if self.state.is_terminal:
            raise RuntimeError(
                f"Session already resolved as {self.state.name}, "
                f"cannot move to {new_state.name}"
            )
        logger.debug(f"State {self.state.name} -> {new_state.name}")
        self.state = new_state

    def trigger_deployment(self) -> DeploymentHandle:
        """
        Start a new deployment. Not retried: any failure is fatal.

        Returns:
            Deployment identifier

        Raises:
            ForgeError: If the deployment could not be created
        """
        logger.info("🚀 Starting deployment...")
        try:
            deployment_id = self.api.create_deployment(self.site)
        except ForgeError as e:
            logger.error(f"❌ Failed to create deployment: {e}")
            raise
        logger.info(f"✓ Deployment created (ID: {deployment_id})")
        return deployment_id

    def _fetch_status(self, deployment_id: DeploymentHandle) -> Optional[str]:
        """Fetch the deployment status, or None if this cycle's fetch failed."""
        try:
            return self.api.get_deployment_status(self.site, deployment_id)
        except ForgeError as e:
            logger.warning(f"⚠️  Failed to fetch deployment status: {e}")
            return None

    def _fetch_log(self, deployment_id: DeploymentHandle) -> Optional[str]:
        """Fetch the full deployment log; best-effort."""
        try:
            output = self.api.get_deployment_log(self.site, deployment_id)
        except ForgeError as e:
            logger.warning(f"⚠️  Failed to fetch deployment log: {e}")
            return None
        self.last_output = output
        return output

    def _display_logs(self, output: Optional[str]) -> str:
        """
        Print the part of the log not shown yet.

        Whitespace-only increments move the cursor without printing.

        Returns:
            The increment that was consumed
        """
        new_content = self.cursor.advance(output)
        if new_content.strip():
            logger.info("--- Deployment Output ---")
            logger.info(new_content)
            logger.info("-" * 25)
        return new_content

    def _dump_final_log(self, deployment_id: DeploymentHandle) -> Optional[str]:
        """Fetch the complete log once more and print it in full to stderr."""
        final_output = self._fetch_log(deployment_id)
        if final_output is None:
            final_output = self.last_output
        if final_output:
            logger.error("--- Final Deployment Output ---")
            logger.error(final_output)
            logger.error("-" * 31)
        return final_output

    def poll_once(self, deployment_id: DeploymentHandle) -> PollResult:
        """
        Run one poll cycle and apply any resulting state transition.

        Args:
            deployment_id: Deployment identifier

        Returns:
            PollResult with what this cycle observed
        """
        status = self._fetch_status(deployment_id)
        if status is None:
            # Transient failure, retried on the next interval
            return PollResult()

        if status != self.last_status:
            logger.info(f"📊 Status: {status}")
            self.last_status = status

        output = self._fetch_log(deployment_id)
        self._display_logs(output)

        category = classify_status(status)
        if category is StatusCategory.SUCCESS:
            self._transition(DeploymentState.SUCCEEDED)
            logger.info("✅ Deployment completed successfully!")
        elif category is StatusCategory.FAILURE:
            self._transition(DeploymentState.FAILED)
            logger.error(f"❌ Deployment ended with status '{status}'")
            output = self._dump_final_log(deployment_id)

        return PollResult(status=status, output=output)

    def watch(self, deployment_id: DeploymentHandle) -> DeploymentResult:
        """
        Poll a deployment until it reaches a terminal state.

        Args:
            deployment_id: Deployment identifier

        Returns:
            DeploymentResult describing the terminal state
        """
        if self.session_start is None:
            self.session_start = time.monotonic()
        start_time = time.time()

        logger.info("⏳ Monitoring deployment...")

        last_poll = PollResult()
        while self.state is DeploymentState.RUNNING:
            time.sleep(self.poll_interval)

            # Checked before any request so nothing is sent after expiry
            if self._elapsed() > self.timeout:
                self._transition(DeploymentState.TIMED_OUT)
                logger.error(
                    f"❌ Deployment timeout after {self.timeout}s "
                    f"(last status: {self.last_status or 'unknown'})"
                )
                break

            last_poll = self.poll_once(deployment_id)

        end_time = time.time()
        result = DeploymentResult(
            deployment_id=deployment_id,
            state=self.state,
            status=self.last_status,
            start_time=start_time,
            end_time=end_time,
            duration_seconds=end_time - start_time,
        )
        if self.state is DeploymentState.FAILED:
            result.output = last_poll.output
            result.error_message = str(
                DeploymentFailedError(self.last_status, last_poll.output)
            )
        elif self.state is DeploymentState.TIMED_OUT:
            result.output = self.last_output
            result.error_message = str(DeploymentTimeoutError(self.timeout))
        else:
            result.output = self.last_output

        self._print_summary(result)
        return result

    def run(self) -> DeploymentResult:
        """
        Trigger a deployment and watch it to completion.

        Returns:
            DeploymentResult for a successful deployment

        Raises:
            ForgeError: If the trigger fails
            DeploymentFailedError: If Forge reports a failure status
            DeploymentTimeoutError: If the timeout expires first
        """
        self.session_start = time.monotonic()

        deployment_id = self.trigger_deployment()
        result = self.watch(deployment_id)

        if result.state is DeploymentState.FAILED:
            raise DeploymentFailedError(result.status, result.output)
        if result.state is DeploymentState.TIMED_OUT:
            raise DeploymentTimeoutError(self.timeout)
        return result

    def _format_duration(self, seconds: float) -> str:
        """Format duration in human-readable format."""
        if seconds < 60:
            return f"{seconds:.1f}s"
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.0f}s"

    def _print_summary(self, result: DeploymentResult) -> None:
        logger.info("")
        logger.info("-" * 40)
        logger.info(f"Deployment:  {result.deployment_id}")
        logger.info(f"Final state: {result.state.name}")
        logger.info(f"Last status: {result.status or 'unknown'}")
        logger.info(
            f"Finished:    {datetime.fromtimestamp(result.end_time).strftime('%Y-%m-%d %H:%M:%S')}"
        )
        logger.info(f"Duration:    {self._format_duration(result.duration_seconds)}")
        logger.info("-" * 40)
