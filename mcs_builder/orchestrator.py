"""
Multi-Turn Orchestrator - runs request/extract/execute rounds until the build is done
"""

from typing import Optional

from .api import ClaudeClient
from .api.prompt import CONTINUATION_INSTRUCTION
from .config import BuilderConfig
from .engine import ExecutionEngine, FeedbackSink
from .errors import BuilderError, ParseError
from .interpreter import Extraction, ResponseInterpreter
from .logging_config import get_logger
from .schemas import BuildRequest, BuildSession, ExecutionResult
from .store import CommandStore
from .world import BlockRegistry, WorldSink

logger = get_logger(__name__)

MAX_ROUNDS = 5

CONTINUATION_PHRASES = (
    "next section",
    "continue building",
    "next part",
    "moving on to",
    "now let's build",
    "let's add",
    "next, we'll",
)


def signals_more_content(text: str) -> bool:
    """True when reply text says the build continues"""
    lowered = text.lower()
    return any(phrase in lowered for phrase in CONTINUATION_PHRASES)


def build_continuation_prompt(previous_text: str, tail_chars: int = 200) -> str:
    """Prompt asking Claude to continue, carrying the end of its previous reply"""
    tail = previous_text.strip()[-tail_chars:] if tail_chars > 0 else ""
    if not tail:
        return CONTINUATION_INSTRUCTION
    return f"{CONTINUATION_INSTRUCTION}\n\nYour previous reply ended with:\n{tail}"


def describe_error(error: BuilderError) -> str:
    """One requester-facing line for a round-ending error"""
    if isinstance(error, ParseError):
        return f"Error: Could not parse Claude's response - {error}"
    return f"Error: {error}"


class BuildOrchestrator:
    """Drives one build request through as many rounds as Claude needs"""

    def __init__(
        self,
        config: BuilderConfig,
        client: ClaudeClient,
        store: CommandStore,
        engine: ExecutionEngine,
        world: WorldSink,
        interpreter: Optional[ResponseInterpreter] = None,
        registry: Optional[BlockRegistry] = None,
    ):
        self.config = config
        self.client = client
        self.store = store
        self.engine = engine
        self.world = world
        self.interpreter = interpreter or ResponseInterpreter()
        self.registry = registry

    @property
    def max_rounds(self) -> int:
        return min(self.config.max_rounds, MAX_ROUNDS)

    async def run(self, request: BuildRequest, feedback: FeedbackSink) -> BuildSession:
        """Run a build session

        Args:
            request: The player's building request
            feedback: Receives one-line progress and result messages

        Returns:
            BuildSession with totals across all rounds; errors are reported, not raised
        """
        session = BuildSession()
        build_name = self.store.new_build_name()
        prompt = request.contextual_prompt()
        log = logger.bind(build=build_name)

        while True:
            round_number = session.rounds_completed + 1
            log.info("Starting build round", round=round_number)
            try:
                extraction, result = await self._run_round(prompt, round_number, build_name, feedback)
            except BuilderError as e:
                log.error("Build round failed", round=round_number, error_type=type(e).__name__, error=str(e))
                feedback(describe_error(e))
                session.error = str(e)
                break

            session.record_round(result)
            more = extraction.has_more or signals_more_content(extraction.text)
            if not more:
                break

            if session.rounds_completed >= self.max_rounds:
                session.truncated = True
                log.warning("Round cap reached with more content signaled", rounds=session.rounds_completed)
                feedback(
                    f"Warning: build stopped after {session.rounds_completed} rounds (the maximum); "
                    "the structure may be incomplete"
                )
                break

            feedback(f"Claude indicates more to build, continuing (round {round_number + 1})...")
            prompt = build_continuation_prompt(extraction.text, self.config.continuation_tail_chars)

        session.terminated = True
        if session.rounds_completed:
            feedback(
                f"Built structure with {session.aggregate.executed_count} commands "
                f"in {session.rounds_completed} round{'s' if session.rounds_completed != 1 else ''}!"
            )
        log.info("Build session finished", rounds=session.rounds_completed, **session.aggregate.model_dump())
        return session

    async def _run_round(self, prompt: str, round_number: int, build_name: str, feedback: FeedbackSink):
        feedback("Making API call to Claude...")
        reply = await self.client.send(prompt, include_guide=round_number == 1)
        feedback("Got response from Claude, processing...")

        extraction = self.interpreter.extract(reply)
        if extraction.skipped_records:
            feedback(f"Skipped {extraction.skipped_records} malformed block records")

        name = build_name if round_number == 1 else f"{build_name}_r{round_number}"
        handle = self.store.persist(name, extraction.operations)
        feedback(f"Created MCS file: {handle}")

        result = await self._execute(extraction, handle, name, feedback)
        return extraction, result

    async def _execute(self, extraction: Extraction, handle, name: str, feedback: FeedbackSink) -> ExecutionResult:
        if extraction.is_placement:
            task = self.engine.place_blocks(extraction.placements, self.world, feedback, self.registry, name=name)
        else:
            feedback("Executing MCS commands...")
            task = self.engine.execute(handle, self.world, feedback)
        return await task
