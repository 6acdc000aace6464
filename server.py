import argparse
import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional

from server_modules import BoardFormatError, GameServer, MinesweeperBoard
from server_modules.game_server import DEFAULT_PORT

logger = logging.getLogger("minesweeper")

DEFAULT_SIZE = 10
PORT_ENV_VAR = "MINESWEEPER_PORT"


@dataclass
class ServerConfig:
    debug: bool = False
    size: Optional[int] = DEFAULT_SIZE
    board_file: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"


def _debug_flag(value: str) -> bool:
    if value == "true":
        return True
    if value == "false":
        return False
    raise argparse.ArgumentTypeError("DEBUG must be 'true' or 'false'")


def _board_size(value: str) -> int:
    try:
        size = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid board size: {value!r}")
    if size < 0:
        raise argparse.ArgumentTypeError(f"board size must be non-negative: {size}")
    return size


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Multiplayer Minesweeper server.")
    parser.add_argument("debug", nargs="?", type=_debug_flag, default=False,
                        help="'true' keeps a player connected after BOOM (default: false)")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("-s", "--size", type=_board_size,
                        help=f"generate a random SIZE x SIZE board (default: {DEFAULT_SIZE})")
    source.add_argument("-f", "--file", dest="board_file",
                        help="load the board from FILE")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=None,
                        help=f"listening port (default: ${PORT_ENV_VAR} or {DEFAULT_PORT})")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def parse_args(argv=None) -> ServerConfig:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.board_file is not None and not os.path.isfile(args.board_file):
        parser.error(f"file not found: {args.board_file!r}")

    port = args.port
    if port is None:
        env_port = os.getenv(PORT_ENV_VAR, "")
        try:
            port = int(env_port) if env_port else DEFAULT_PORT
        except ValueError:
            parser.error(f"{PORT_ENV_VAR} must be an integer, got {env_port!r}")
    if not 0 <= port <= 65535:
        parser.error(f"port out of range: {port}")

    size = args.size
    if size is None and args.board_file is None:
        size = DEFAULT_SIZE

    return ServerConfig(
        debug=args.debug,
        size=size,
        board_file=args.board_file,
        host=args.host,
        port=port,
        log_level=args.log_level,
    )


def build_board(config: ServerConfig) -> MinesweeperBoard:
    if config.board_file is not None:
        return MinesweeperBoard.from_file(config.board_file)
    return MinesweeperBoard.random(config.size)


def main(argv=None) -> int:
    config = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        board = build_board(config)
    except (BoardFormatError, OSError) as e:
        logger.error("Could not load board: %s", e)
        return 1
    logger.info("Board ready with %d mines", board.mine_count())

    server = GameServer(board, host=config.host, port=config.port, debug=config.debug)
    try:
        server.start()
    except KeyboardInterrupt:
        logger.info("Ctrl+C detected. Shutting down server...")
    except OSError as e:
        logger.error("Server failed: %s", e)
        return 1
    finally:
        server.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
