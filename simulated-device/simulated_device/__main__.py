# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Run a simulated device: provision with a symmetric key, then stream telemetry
"""
import argparse
import asyncio
import logging
import signal
import sys
from .agent import DeviceAgent
from .config import AgentConfig
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-5s %(filename)s:%(funcName)s():%(message)s"


def _create_parser():
    parser = argparse.ArgumentParser(
        "simulated-device",
        description="Provision a simulated device with a symmetric key and send telemetry",
    )
    parser.add_argument(
        "id_scope",
        nargs="?",
        help="ID Scope of the Device Provisioning Service (if not set in PROVISIONING_IDSCOPE)",
    )
    parser.add_argument(
        "--interval", type=float, default=None, help="Seconds between telemetry messages"
    )
    parser.add_argument("--provisioning-host", default=None, help="Provisioning endpoint")
    parser.add_argument(
        "--websockets", action="store_true", default=None, help="Use MQTT over WebSockets"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _configure_logging(verbose):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)


async def _run(agent):
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGTERM, stop_event.set)
    except NotImplementedError:
        logger.debug("SIGTERM handler not supported on this platform")
    await agent.run(stop_event=stop_event)


def main(argv=None):
    parser = _create_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = AgentConfig.from_environment(
            telemetry_interval=args.interval,
            provisioning_host=args.provisioning_host,
            websockets=args.websockets,
        )
    except ConfigurationError as e:
        logger.error("Invalid configuration provided: {}".format(e))
        return -1

    # The positional ID scope only applies when none is configured
    if not (config.id_scope and config.id_scope.strip()) and args.id_scope:
        config.id_scope = args.id_scope
    if not (config.id_scope and config.id_scope.strip()):
        parser.print_usage()
        return 1

    try:
        credential = config.create_credential()
    except ConfigurationError as e:
        logger.error("Invalid configuration provided: {}".format(e))
        return -1

    agent = DeviceAgent(credential, config)
    try:
        asyncio.run(_run(agent))
    except KeyboardInterrupt:
        # Exit application because user indicated they wish to exit.
        # This will have cancelled `_run()` implicitly.
        logger.info("User initiated exit. Exiting")
    return 0


if __name__ == "__main__":
    sys.exit(main())
