"""
Main entry point for the MCS builder
Sends building prompts to Claude and applies the resulting commands to a Minecraft world
"""

import argparse
import asyncio
import sys
from typing import Optional

from mcs_builder.api import ClaudeClient
from mcs_builder.commands import SUCCESS, BuildCommands
from mcs_builder.config import BuilderConfig, SettingsStore, load_config
from mcs_builder.engine import ExecutionEngine
from mcs_builder.logging_config import get_logger, setup_logging
from mcs_builder.orchestrator import BuildOrchestrator
from mcs_builder.schemas import BlockPosition
from mcs_builder.store import CommandStore
from mcs_builder.world import BlockRegistry, InMemoryWorld, RconWorld

logger = get_logger(__name__)


def print_feedback(message: str) -> None:
    print(message, flush=True)


def create_commands(config: BuilderConfig, world, registry: Optional[BlockRegistry] = None) -> BuildCommands:
    """Wire the pipeline components together

    Args:
        config: Loaded configuration
        world: World sink commands are applied to
        registry: Block registry for the block placement mode

    Returns:
        BuildCommands ready to handle requests
    """
    store = CommandStore(config.mcs_dir)
    store.initialize()
    engine = ExecutionEngine(store, config)
    orchestrator = BuildOrchestrator(
        config=config,
        client=ClaudeClient(config),
        store=store,
        engine=engine,
        world=world,
        registry=registry,
    )
    return BuildCommands(
        config=config,
        settings=SettingsStore(config.config_dir),
        orchestrator=orchestrator,
        store=store,
        engine=engine,
        world=world,
    )


def parse_args(argv=None):
    """Parse command line arguments

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description="MCS Builder - build Minecraft structures from natural language")
    parser.add_argument("prompt", nargs="?", help="What to build (e.g., 'a small stone cottage')")
    parser.add_argument(
        "--origin", nargs=3, type=int, default=[0, 64, 0], metavar=("X", "Y", "Z"), help="Player position"
    )
    parser.add_argument("--mode", choices=["text", "blocks"], help="Request style (default from config)")
    parser.add_argument("--dry-run", action="store_true", help="Apply commands to an in-memory world")
    parser.add_argument("--set-key", metavar="API_KEY", help="Save the Claude API key")
    parser.add_argument("--replay", metavar="BUILD", help="Execute a stored build again")
    parser.add_argument("--list", action="store_true", help="List stored builds")
    parser.add_argument("--interactive", "-i", action="store_true", help="Run in interactive mode")
    return parser.parse_args(argv)


async def interactive(commands: BuildCommands, origin: BlockPosition) -> None:
    """Read building prompts until the user exits"""
    logger.info("Starting interactive mode. Type 'exit' to quit.")
    while True:
        try:
            line = (await asyncio.to_thread(input, "\nMCS Builder> ")).strip()
        except EOFError:
            break

        if line.lower() in ["exit", "quit", "q"]:
            break
        if not line:
            continue
        if line.lower() == "list":
            commands.list_builds(print_feedback)
            continue
        if line.lower().startswith("replay "):
            await commands.replay(line.split(" ", 1)[1], print_feedback)
            continue

        await commands.build(line, origin, print_feedback)


async def main(argv=None) -> int:
    """Main entry point for the builder"""
    args = parse_args(argv)

    overrides = {"build_mode": args.mode} if args.mode else {}
    config = load_config(**overrides)

    setup_logging(
        log_level=config.log_level,
        log_file=config.log_file,
        log_dir=config.log_dir,
        console_output=True,
        json_format=config.log_json_format,
    )
    logger.info("Starting MCS builder", mode=config.build_mode, model=config.get_model())

    registry = BlockRegistry(config.minecraft_version) if config.build_mode == "blocks" else None

    if args.dry_run:
        world = InMemoryWorld()
    else:
        password = config.rcon_password.get_secret_value() if config.rcon_password else ""
        world = RconWorld(config.rcon_host, password, port=config.rcon_port)

    commands = create_commands(config, world, registry)

    if args.set_key:
        # Local command line users are trusted as operators
        return 0 if commands.set_api_key(args.set_key, print_feedback, is_operator=True) == SUCCESS else 1

    if args.list:
        commands.list_builds(print_feedback)
        return 0

    if not (args.prompt or args.replay or args.interactive):
        print("Examples:")
        print("  python main.py 'a small stone cottage' --origin 100 64 -20")
        print("  python main.py 'a watch tower' --dry-run")
        print("  python main.py --replay build_1a2b3c4d")
        print("  python main.py --set-key sk-ant-...")
        print("  python main.py --interactive")
        return 1

    if isinstance(world, RconWorld):
        try:
            world.connect()
        except Exception as e:
            logger.error(f"Failed to connect to RCON: {e}")
            logger.error("Make sure:")
            logger.error("1. Minecraft server is running with enable-rcon=true")
            logger.error("2. CLAUDE_RCON_PASSWORD matches rcon.password")
            logger.error("3. Or use --dry-run to build in memory")
            return 1

    origin = BlockPosition(x=args.origin[0], y=args.origin[1], z=args.origin[2])
    try:
        if args.interactive:
            await interactive(commands, origin)
            return 0
        if args.replay:
            status = await commands.replay(args.replay, print_feedback)
        else:
            status = await commands.build(args.prompt, origin, print_feedback)
        return 0 if status == SUCCESS else 1
    finally:
        if isinstance(world, RconWorld):
            world.close()
        if isinstance(world, InMemoryWorld) and world.rejected:
            logger.info("Dry run rejected commands", count=len(world.rejected))


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
