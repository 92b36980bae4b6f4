"""Pytest configuration and shared fixtures for appswitch tests."""

import io
from typing import List

import pytest

from appswitch.core.config import AppSwitchConfig
from appswitch.core.dispatcher import Dispatcher
from fixtures.mock_process_manager import FakeProcessManager, MockApp


FINDER_PATH = "/System/Library/CoreServices/Finder.app"
SAFARI_PATH = "/Applications/Safari.app"


@pytest.fixture
def sample_apps() -> List[MockApp]:
    """Finder and Safari, in enumeration order."""
    return [
        MockApp(
            name="Finder",
            pid=100,
            path=FINDER_PATH,
            file_type=b"FNDR",
            creator=b"MACS",
            bundle_id="com.apple.finder",
        ),
        MockApp(
            name="Safari",
            pid=200,
            path=SAFARI_PATH,
            file_type=b"APPL",
            creator=b"sfri",
            bundle_id="com.apple.Safari",
        ),
    ]


@pytest.fixture
def manager(sample_apps) -> FakeProcessManager:
    """Process manager with Finder frontmost."""
    return FakeProcessManager(apps=sample_apps, front_pid=100)


@pytest.fixture
def resolver(manager):
    """Bundle resolver answering from the mock apps."""
    bundle_ids = manager.bundle_ids()

    def resolve(path):
        return bundle_ids.get(path)

    return resolve


@pytest.fixture
def sleeps() -> List[float]:
    """Records settle-delay pauses instead of sleeping."""
    return []


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def dispatcher(manager, resolver, sleeps, output) -> Dispatcher:
    """Dispatcher wired to the fake manager."""
    return Dispatcher(
        manager,
        config=AppSwitchConfig(settle_delay=0.5),
        resolver=resolver,
        out=output,
        sleep=sleeps.append,
    )
