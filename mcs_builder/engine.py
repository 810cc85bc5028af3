"""
Execution Engine - applies stored command lists to the world in the background
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional

from .config import BuilderConfig
from .errors import ExecutionInProgressError
from .logging_config import get_logger
from .schemas import BlockPlacement, ExecutionResult, ProgressUpdate, is_command_line
from .store import CommandStore, Handle
from .world import BlockRegistry, WorldSink

logger = get_logger(__name__)

FeedbackSink = Callable[[str], None]


class RunState(Enum):
    """Lifecycle of one execution run"""
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ExecutionRun:
    """Bookkeeping for one run of one handle"""

    handle: str
    state: RunState = RunState.IDLE
    started_at: Optional[datetime] = None
    result: Optional[ExecutionResult] = None
    task: Optional["asyncio.Task[ExecutionResult]"] = field(default=None, repr=False)


class ExecutionEngine:
    """Runs command lists as background tasks, at most one per handle"""

    def __init__(self, store: CommandStore, config: Optional[BuilderConfig] = None):
        self.store = store
        self.config = config or BuilderConfig()
        self._slots = asyncio.Semaphore(self.config.max_concurrent_runs)
        self._active: Dict[str, ExecutionRun] = {}

    @property
    def active_handles(self) -> List[str]:
        return list(self._active)

    def is_running(self, handle: Handle) -> bool:
        return str(self.store.resolve(handle)) in self._active

    def _start(self, key: str, coro_factory, task_name: str) -> "asyncio.Task[ExecutionResult]":
        if key in self._active:
            raise ExecutionInProgressError(f"{key} is already being executed")

        run = ExecutionRun(handle=key)
        self._active[key] = run
        run.task = asyncio.get_running_loop().create_task(coro_factory(run), name=task_name)
        run.task.add_done_callback(lambda _: self._active.pop(key, None))
        return run.task

    def execute(self, handle: Handle, world: WorldSink, feedback: FeedbackSink) -> "asyncio.Task[ExecutionResult]":
        """Start executing a stored command file

        Args:
            handle: Path or build name of a stored command file
            world: World the commands are applied to
            feedback: Receives one-line progress and result messages

        Returns:
            Task resolving to the ExecutionResult

        Raises:
            ExecutionInProgressError: The handle is already being executed
        """
        key = str(self.store.resolve(handle))
        logger.info("Executing MCS file", handle=key)
        return self._start(key, lambda run: self._run_file(run, world, feedback), f"mcs-execution-{key}")

    def place_blocks(
        self,
        placements: List[BlockPlacement],
        world: WorldSink,
        feedback: FeedbackSink,
        registry: Optional[BlockRegistry] = None,
        name: str = "placement",
    ) -> "asyncio.Task[ExecutionResult]":
        """Start placing structured block records

        Args:
            placements: Block records in build order
            world: World the blocks are placed in
            feedback: Receives one-line progress and result messages
            registry: Block registry used to reject unknown block ids (optional)
            name: Identifier of this batch for exclusivity and logs

        Returns:
            Task resolving to the ExecutionResult
        """
        key = f"placement:{name}"
        logger.info("Placing blocks", batch=name, count=len(placements))
        return self._start(
            key,
            lambda run: self._run_placements(run, list(placements), world, feedback, registry),
            f"mcs-placement-{name}",
        )

    async def _run_file(self, run: ExecutionRun, world: WorldSink, feedback: FeedbackSink) -> ExecutionResult:
        async with self._slots:
            run.state = RunState.RUNNING
            run.started_at = datetime.now()
            try:
                lines = self.store.load(run.handle)
                result = await self._apply_lines(run.handle, lines, world, feedback)
            except Exception as e:
                run.state = RunState.FAILED
                logger.error("Error executing MCS file", handle=run.handle, error=str(e), exc_info=True)
                feedback(f"Error executing MCS file: {e}")
                raise

            run.state = RunState.COMPLETED
            run.result = result
            return result

    async def _apply_lines(
        self, handle: str, lines: List[str], world: WorldSink, feedback: FeedbackSink
    ) -> ExecutionResult:
        total = len(lines)
        effective_total = CommandStore.count_commands(lines)
        executed = skipped = failed = 0
        delay = self.config.command_delay_ms / 1000

        feedback(f"Starting execution of {effective_total} commands...")

        for raw_line in lines:
            command = raw_line.strip()
            if not is_command_line(command):
                skipped += 1
                continue

            if command.startswith("/"):
                command = command[1:]

            try:
                if await world.run_command(command) is False:
                    raise RuntimeError("command was rejected by the world")
                executed += 1
            except Exception as e:
                failed += 1
                logger.warning("Error executing command", command=raw_line, error=str(e))

            attempted = executed + failed
            if attempted % self.config.progress_interval == 0 or attempted == effective_total:
                feedback(ProgressUpdate(handle=handle, done=executed, total=effective_total).message())

            await asyncio.sleep(delay)

        summary = f"Execution complete: {executed} commands executed, {skipped} lines skipped"
        if failed:
            summary += f", {failed} failed"
        feedback(summary)

        result = ExecutionResult(
            total_operations=total, executed_count=executed, skipped_count=skipped, failed_count=failed
        )
        logger.info("MCS file executed", handle=handle, **result.model_dump())
        return result

    async def _run_placements(
        self,
        run: ExecutionRun,
        placements: List[BlockPlacement],
        world: WorldSink,
        feedback: FeedbackSink,
        registry: Optional[BlockRegistry],
    ) -> ExecutionResult:
        async with self._slots:
            run.state = RunState.RUNNING
            run.started_at = datetime.now()
            try:
                result = await self._apply_placements(run.handle, placements, world, feedback, registry)
            except Exception as e:
                run.state = RunState.FAILED
                logger.error("Error placing blocks", batch=run.handle, error=str(e), exc_info=True)
                feedback(f"Error placing blocks: {e}")
                raise

            run.state = RunState.COMPLETED
            run.result = result
            return result

    async def _apply_placements(
        self,
        handle: str,
        placements: List[BlockPlacement],
        world: WorldSink,
        feedback: FeedbackSink,
        registry: Optional[BlockRegistry],
    ) -> ExecutionResult:
        total = len(placements)
        placed = skipped = failed = 0
        delay = self.config.command_delay_ms / 1000

        feedback(f"Placing {total} blocks...")

        for index, placement in enumerate(placements, start=1):
            block_id = registry.resolve(placement.block_id) if registry else placement.block_id
            if block_id is None:
                skipped += 1
                logger.error(
                    "Unknown block type",
                    block_id=placement.block_id,
                    position=placement.position.as_tuple(),
                    suggestions=registry.suggest(placement.block_id),
                )
            else:
                try:
                    if await world.set_block(block_id, placement.x, placement.y, placement.z) is False:
                        raise RuntimeError("block placement was rejected by the world")
                    placed += 1
                except Exception as e:
                    failed += 1
                    logger.warning("Error placing block", block_id=block_id, position=placement.position.as_tuple(), error=str(e))
                await asyncio.sleep(delay)

            if index % self.config.placement_progress_interval == 0 or index == total:
                feedback(ProgressUpdate(handle=handle, done=placed, total=total, unit="blocks placed").message())

        summary = f"Placement complete: {placed} blocks placed, {skipped} skipped"
        if failed:
            summary += f", {failed} failed"
        feedback(summary)

        result = ExecutionResult(total_operations=total, executed_count=placed, skipped_count=skipped, failed_count=failed)
        logger.info("Blocks placed", batch=handle, **result.model_dump())
        return result
