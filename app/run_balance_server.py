# app/run_balance_server.py
import asyncio, signal, os, argparse
import contextlib
from dataclasses import replace

from infra import ServerContainer, balance_healthcheck
from ledger.config import ServerSettings
from utils.config import load_cfg
from utils.logger import logger

def env_default(name: str, default=None):
    return os.getenv(name, default)

def build_parser():
    p = argparse.ArgumentParser("balance-server")
    p.add_argument("--host",        default=env_default("BALANCE_HOST", None))
    p.add_argument("--port",        type=int, default=int(env_default("BALANCE_PORT", "0") or 0))
    p.add_argument("--config-path", default=env_default("BALANCE_CONFIG", None))
    return p

def build_settings(args) -> ServerSettings:
    cfg = load_cfg(args.config_path)
    settings = ServerSettings.from_cfg(cfg)
    overrides = {k: v for k, v in (("host", args.host), ("port", args.port)) if v}
    return replace(settings, **overrides)

async def main(argv=None):
    args = build_parser().parse_args(argv)
    settings = build_settings(args)

    container = await ServerContainer.start(settings=settings)
    host, port = container.server.address
    if not await balance_healthcheck(host, port):
        logger.warning(f"Balance server on {host}:{port} failed its startup self-check")

    serve_task = asyncio.create_task(container.server.serve_forever(), name="balance-server")
    stop_event = asyncio.Event()

    def _graceful(*_):
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _graceful)
        except NotImplementedError:
            pass  # Windows

    await stop_event.wait()
    logger.info("Shutdown requested")
    await container.stop()
    serve_task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await serve_task

def cli():
    asyncio.run(main())

if __name__ == "__main__":
    cli()
