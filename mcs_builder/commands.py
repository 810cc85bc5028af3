"""
Requester-facing commands - build, set the API key, replay a stored build
"""

from typing import Optional

from pydantic import SecretStr, ValidationError

from .config import BuilderConfig, SettingsStore
from .engine import ExecutionEngine, FeedbackSink
from .errors import BuilderError
from .logging_config import get_logger
from .orchestrator import BuildOrchestrator
from .schemas import BlockPosition, BuildRequest
from .store import CommandStore
from .world import WorldSink

logger = get_logger(__name__)

SUCCESS = 1
FAILURE = 0


class BuildCommands:
    """Entry points a chat or command-line front end calls into

    Every entry point returns SUCCESS or FAILURE and reports through the
    feedback sink; no exception escapes to the caller.
    """

    def __init__(
        self,
        config: BuilderConfig,
        settings: SettingsStore,
        orchestrator: BuildOrchestrator,
        store: CommandStore,
        engine: ExecutionEngine,
        world: WorldSink,
    ):
        self.config = config
        self.settings = settings
        self.orchestrator = orchestrator
        self.store = store
        self.engine = engine
        self.world = world

    async def build(self, prompt: str, origin: BlockPosition, feedback: FeedbackSink) -> int:
        """Build a structure from a natural-language prompt"""
        feedback(f"Processing: {prompt}")
        logger.info("Build requested", prompt=prompt, origin=origin.as_tuple())

        try:
            request = BuildRequest(prompt=prompt, origin=origin)
        except ValidationError:
            feedback("Error: a building prompt is required")
            return FAILURE

        try:
            session = await self.orchestrator.run(request, feedback)
        except Exception as e:
            logger.error("Error in build command", error=str(e), exc_info=True)
            feedback(f"Command error: {type(e).__name__}: {e}")
            if e.__cause__ is not None:
                feedback(f"Caused by: {e.__cause__}")
            return FAILURE

        if not session.succeeded:
            return FAILURE
        feedback("Successfully processed your request!")
        return SUCCESS

    def set_api_key(self, api_key: str, feedback: FeedbackSink, is_operator: bool = False) -> int:
        """Save the Claude API key (operators only)"""
        if not is_operator:
            feedback("You do not have permission to set the Claude API key")
            logger.warning("Rejected API key update from non-operator")
            return FAILURE

        api_key = api_key.strip()
        if not api_key:
            feedback("Error: an API key is required")
            return FAILURE

        try:
            self.settings.save_api_key(api_key)
        except OSError as e:
            logger.error("Failed to save API key to config file", error=str(e))
            feedback(f"Error: could not save the API key: {e}")
            return FAILURE

        self.config.api_key = SecretStr(api_key)
        feedback("Claude API key saved successfully")
        logger.info("API key updated")
        return SUCCESS

    async def replay(self, name: str, feedback: FeedbackSink, world: Optional[WorldSink] = None) -> int:
        """Execute a previously stored command file again"""
        try:
            handle = self.store.resolve(name)
            count = self.store.count_file_commands(handle)
            feedback(f"Replaying {handle.name} ({count} commands)")
            result = await self.engine.execute(handle, world or self.world, feedback)
        except BuilderError as e:
            logger.error("Replay failed", build=name, error=str(e))
            feedback(f"Error: {e}")
            return FAILURE

        return SUCCESS if result.failed_count == 0 else FAILURE

    def list_builds(self, feedback: FeedbackSink) -> int:
        builds = self.store.list_builds()
        if not builds:
            feedback("No stored builds")
            return SUCCESS
        for path in builds:
            feedback(f"{path.stem} ({self.store.count_file_commands(path)} commands)")
        return SUCCESS
