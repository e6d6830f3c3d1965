"""Composition root: wire client, controller, renderer and terminal together."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

from ..controller import ExplorerController
from ..errors import ExplorerError
from ..highlight import DEFAULT_STYLE
from ..kmip.client import KmipClient
from ..render import BannerInfo, compose_frame, paint
from ..ui_theme import resolve_theme
from .loop import RuntimeLoopCallbacks, RuntimeLoopTiming, run_main_loop
from .terminal import TerminalController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExplorerOptions:
    """Explicit configuration handed to the explorer instead of process globals."""

    version: str
    latest_version: str | None = None
    theme_name: str | None = None
    no_color: bool = False
    style: str = DEFAULT_STYLE


def build_controller(client: KmipClient, options: ExplorerOptions) -> ExplorerController:
    return ExplorerController(client, style=options.style, no_color=options.no_color)


def run_explorer(
    client: KmipClient,
    options: ExplorerOptions,
    *,
    stdin_fd: int | None = None,
    stdout_fd: int | None = None,
    timing: RuntimeLoopTiming | None = None,
) -> None:
    """Run the interactive explorer against ``client`` until the user quits."""
    stdin_fd = sys.stdin.fileno() if stdin_fd is None else stdin_fd
    stdout_fd = sys.stdout.fileno() if stdout_fd is None else stdout_fd
    if not os.isatty(stdin_fd):
        raise ExplorerError("kmip-explorer needs an interactive terminal")

    theme = resolve_theme(options.theme_name, no_color=options.no_color)
    controller = build_controller(client, options)
    info = BannerInfo(
        server=client.address,
        client_version=options.version,
        kmip_version=client.protocol_version,
        latest_version=options.latest_version,
    )
    terminal = TerminalController(stdin_fd, stdout_fd)

    def render(width: int, height: int) -> None:
        paint(compose_frame(controller, info, width, height, theme), stdout_fd)

    logger.info("explorer started against %s", client.address)
    controller.start()
    run_main_loop(
        controller,
        terminal,
        stdin_fd,
        timing or RuntimeLoopTiming(),
        RuntimeLoopCallbacks(render=render),
    )
    logger.info("explorer stopped")


__all__ = ["ExplorerOptions", "build_controller", "run_explorer"]
