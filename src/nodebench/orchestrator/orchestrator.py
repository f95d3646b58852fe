# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Node lifecycle orchestration.

NodeOrchestrator drives one node descriptor from adapter selection to
teardown. BatchOrchestrator walks the configured descriptors in order.

The one rule both uphold: a cloud node that was launched, or whose launch was
attempted, is terminated exactly once before its result is reported.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from nodebench.common.config import NodeDescriptor, RunConfig, RunOptions
from nodebench.common.enums import NodeState
from nodebench.common.exceptions import TerminateError
from nodebench.orchestrator.checkpoint import AutoContinueCheckpoint, OperatorCheckpoint
from nodebench.orchestrator.collector import ResultMatrixCollector
from nodebench.orchestrator.installer import RetryingInstaller
from nodebench.orchestrator.models import CollectedSummary, ExperimentOutcome, NodeRunResult
from nodebench.orchestrator.policies import BatchPolicy, policy_for
from nodebench.orchestrator.runner import ExperimentRunner
from nodebench.orchestrator.setup import NodeSetup
from nodebench.orchestrator.state import NodeStateMachine
from nodebench.providers.base import ProviderAdapter
from nodebench.providers.factory import create_provider_adapter

logger = logging.getLogger(__name__)

__all__ = [
    "BatchOrchestrator",
    "MACHINE_NAME",
    "NodeOrchestrator",
]

MACHINE_NAME = "primary-node"

AdapterFactory = Callable[[NodeDescriptor], ProviderAdapter]


@dataclass
class _NodeRun:
    """Mutable bookkeeping for one node while it is being processed."""

    label: str
    descriptor: NodeDescriptor
    machine: NodeStateMachine
    experiment: ExperimentOutcome | None = None
    summary: CollectedSummary | None = None
    termination_failed: bool = False


class NodeOrchestrator:
    """Runs a single node through launch, experiment, collection and teardown.

    Collaborators are injectable so the state machine can be exercised
    without any cloud or SSH access.
    """

    def __init__(
        self,
        run_config: RunConfig,
        options: RunOptions | None = None,
        adapter_factory: AdapterFactory = create_provider_adapter,
        installer: RetryingInstaller | None = None,
        runner: ExperimentRunner | None = None,
        collector: ResultMatrixCollector | None = None,
        checkpoint: OperatorCheckpoint | None = None,
    ):
        self.run_config = run_config
        self.options = options or RunOptions()
        self.adapter_factory = adapter_factory
        self.installer = installer or RetryingInstaller()
        self.runner = runner or ExperimentRunner(output_dir=self.options.output_dir)
        self.collector = collector or ResultMatrixCollector(output_dir=self.options.output_dir)
        self.checkpoint = checkpoint or AutoContinueCheckpoint()

    async def run(self, descriptor: NodeDescriptor, label: str | None = None) -> NodeRunResult:
        """Process one node descriptor.

        Failures are reported in the returned result rather than raised.
        Cancellation still propagates, after cloud resources are released.

        Args:
            descriptor: Node to process
            label: Label used in logs and in the result

        Returns:
            NodeRunResult describing how far the node got
        """
        label = label or descriptor.provider_tag
        run = _NodeRun(label=label, descriptor=descriptor, machine=NodeStateMachine(label))

        try:
            await self._drive(run)
        except Exception as e:
            failed_in = run.machine.state
            run.machine.fail(repr(e))
            logger.error(f"{label} failed in state {failed_in.value}: {e}")
            return self._result(run, error=str(e))

        return self._result(run)

    def _result(self, run: _NodeRun, error: str | None = None) -> NodeRunResult:
        return NodeRunResult(
            label=run.label,
            descriptor=run.descriptor.describe(),
            provider_tag=run.descriptor.provider_tag,
            success=error is None and run.machine.state == NodeState.DONE,
            state=run.machine.state,
            history=list(run.machine.history),
            experiment=run.experiment,
            summary=run.summary,
            error=error,
            termination_failed=run.termination_failed,
        )

    async def _drive(self, run: _NodeRun) -> None:
        machine = run.machine

        # Pending: pick the backend and reject bad regions/addresses before spending anything
        adapter = self.adapter_factory(run.descriptor)
        await adapter.validate()

        setup = NodeSetup(self.run_config.bench_bin, self.run_config.script, self.installer)
        machine.transition(NodeState.LAUNCHING)
        logger.info(f"{run.label}: starting machines")
        try:
            await adapter.launch(MACHINE_NAME, setup, self.options.launch_timeout)
        except BaseException as e:
            if adapter.owns_resources:
                machine.transition(NodeState.TERMINATING, reason=f"launch failed: {e!r}")
                await self._terminate(run, adapter, cause=e)
            raise

        try:
            sessions = await adapter.connect_all()
            session = sessions[MACHINE_NAME]
            machine.transition(NodeState.CONNECTED)

            if self.options.pause_after_connect:
                machine.transition(NodeState.WAITING_FOR_OPERATOR, reason="after connect")
                await self.checkpoint.wait(f"{run.label} connected")

            machine.transition(NodeState.RUNNING)
            run.experiment = await self.runner.run(
                session, setup.script_remote_path, setup.bench_remote_path, adapter.provider_tag
            )

            # a failed experiment still leaves partial results worth fetching
            machine.transition(NodeState.COLLECTING)
            run.summary = await self.collector.collect(session, adapter.provider_tag)

            if self.options.pause_after_collect:
                machine.transition(NodeState.WAITING_FOR_OPERATOR, reason="after collect")
                await self.checkpoint.wait(f"{run.label} results collected")
        except BaseException as e:
            await adapter.disconnect_all()
            if adapter.owns_resources:
                machine.transition(NodeState.TERMINATING, reason=repr(e))
                await self._terminate(run, adapter, cause=e)
            raise

        await adapter.disconnect_all()
        if adapter.owns_resources:
            machine.transition(NodeState.TERMINATING)
            await self._terminate(run, adapter)
        machine.transition(NodeState.DONE)
        logger.info(f"{run.label}: done")

    async def _terminate(
        self, run: _NodeRun, adapter: ProviderAdapter, cause: BaseException | None = None
    ) -> None:
        try:
            await adapter.terminate_all()
        except Exception as e:
            run.termination_failed = True
            after = f" (while handling: {cause!r})" if cause is not None else ""
            if isinstance(e, TerminateError):
                raise TerminateError(f"{e}{after}") from e
            raise TerminateError(
                f"terminating {adapter.provider_tag} resources failed; they may still be "
                f"running and billing: {e!r}{after}"
            ) from e


class BatchOrchestrator:
    """Processes every node descriptor of a RunConfig, strictly one after another.

    The policy decides whether a failed node stops the batch. A node whose
    resources could not be terminated always stops it.
    """

    def __init__(
        self,
        run_config: RunConfig,
        options: RunOptions | None = None,
        node_orchestrator: NodeOrchestrator | None = None,
    ):
        self.run_config = run_config
        self.options = options or RunOptions()
        self.node_orchestrator = node_orchestrator or NodeOrchestrator(run_config, self.options)

    async def execute(self, policy: BatchPolicy | None = None) -> list[NodeRunResult]:
        """Run the batch.

        Args:
            policy: Batch policy; derived from options.continue_on_error if None

        Returns:
            One NodeRunResult per node processed, in configuration order
        """
        policy = policy or policy_for(self.options.continue_on_error)
        nodes = self.run_config.nodes
        total = len(nodes)
        results: list[NodeRunResult] = []

        logger.info(f"Starting batch of {total} node(s) with policy: {policy.__class__.__name__}")

        for index, descriptor in enumerate(nodes):
            label = f"node_{index + 1:04d}-{descriptor.provider_tag}"
            logger.info(f"[{index + 1}/{total}] Executing {label}: {descriptor.describe()}")

            result = await self.node_orchestrator.run(descriptor, label)
            results.append(result)

            if result.success:
                logger.info(f"[{index + 1}/{total}] {label} completed successfully")
            else:
                logger.error(f"[{index + 1}/{total}] {label} failed: {result.error}")

            remaining = total - index - 1
            if result.termination_failed:
                if remaining:
                    logger.critical(
                        f"{label} may have left cloud resources running; "
                        f"not starting the remaining {remaining} node(s)"
                    )
                break
            if not policy.should_continue(results, remaining):
                break

        successful = sum(1 for r in results if r.success)
        logger.info(f"All nodes complete: {successful}/{len(results)} successful")
        return results
