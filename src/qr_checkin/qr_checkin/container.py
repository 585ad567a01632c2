from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .capture.camera_source import CameraCaptureSource
from .decoding.factory import DecodeAttemptFactory
from .decoding.service import ImageDecoder
from .decoding.strategies.opencv_strategy import OpenCVBlobDecoder
from .decoding.strategies.zbar_strategy import ZBarDecoder
from .scanning.navigation import RecordingNavigator
from .scanning.state_machine import ScanStateMachine
from .scanning.timers import Scheduler
from .sessions.client import CheckInClient
from .sessions.gateway import CheckInGateway
from .sessions.service import SessionResolver
from .settings import ScannerSettings


@dataclass(frozen=True)
class Container:
    settings: ScannerSettings

    checkin_gateway: CheckInGateway
    navigator: RecordingNavigator

    decoder: ImageDecoder
    resolver: SessionResolver
    scanner: ScanStateMachine


def build_container(
    *,
    settings: ScannerSettings,
    gateway: Optional[CheckInGateway] = None,
    scheduler: Optional[Scheduler] = None,
) -> Container:
    checkin_gateway = gateway or CheckInClient(
        settings.api_base_url,
        endpoint=settings.checkin_endpoint,
        timeout=settings.checkin_timeout,
        api_token=settings.api_token,
    )
    navigator = RecordingNavigator()

    decoder = ImageDecoder(ZBarDecoder(), OpenCVBlobDecoder(), attempt_factory=DecodeAttemptFactory())
    resolver = SessionResolver(checkin_gateway, location=settings.location)

    def camera_factory() -> CameraCaptureSource:
        return CameraCaptureSource(settings.camera_source, fps=settings.camera_fps)

    scanner = ScanStateMachine(
        decoder,
        resolver,
        organization=settings.organization,
        camera_factory=camera_factory,
        navigator=navigator,
        scheduler=scheduler,
        redirect_delay=settings.redirect_delay,
    )

    return Container(
        settings=settings,
        checkin_gateway=checkin_gateway,
        navigator=navigator,
        decoder=decoder,
        resolver=resolver,
        scanner=scanner,
    )
