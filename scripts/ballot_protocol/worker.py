"""Temporal worker entry point for BallotWorkflow (`ballot-worker`)."""

from __future__ import annotations

import asyncio
import logging

from temporalio.client import Client
from temporalio.worker import Worker

from ballot_protocol.config import WorkerConfig
from ballot_protocol.workflow import BallotInput, BallotWorkflow, record_transition

logger = logging.getLogger(__name__)


def build_worker(client: Client, config: WorkerConfig) -> Worker:
    return Worker(
        client,
        task_queue=config.task_queue,
        workflows=[BallotWorkflow],
        activities=[record_transition],
    )


def ballot_input(config: WorkerConfig, ballot_id: str, controller: str) -> BallotInput:
    """Build the run() input for a new ballot using the worker's activity timeout."""
    return BallotInput(
        ballot_id=ballot_id,
        controller=controller,
        activity_timeout_seconds=config.activity_timeout_seconds,
    )


async def run_worker(config: WorkerConfig) -> None:
    client = await Client.connect(
        config.temporal_address, namespace=config.temporal_namespace
    )
    logger.info(
        "Ballot worker polling %s on %s (namespace %s)",
        config.task_queue,
        config.temporal_address,
        config.temporal_namespace,
    )
    await build_worker(client, config).run()


def main() -> None:
    config = WorkerConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(run_worker(config))


if __name__ == "__main__":
    main()
