"""
Pytest fixtures for DAS tests.

Every fixture builds fresh instances; dice are seeded so rolls repeat.
"""

import random

import pytest

from das.interface.dispatcher import CommandDispatcher
from das.state.event_bus import EventBus
from das.state.manager import CampaignManager
from das.state.schema import Agent, SanityTracker
from das.state.store import EntityStore


@pytest.fixture
def rng():
    """Seeded RNG so breakdown durations and skill rolls repeat."""
    return random.Random(1337)


@pytest.fixture
def store():
    """Empty entity store."""
    return EntityStore()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def manager(store, bus, rng):
    """Campaign manager over the empty store."""
    return CampaignManager(
        campaign_id="DG-TEST",
        gamemaster="Test Handler",
        store=store,
        event_bus=bus,
        rng=rng,
    )


@pytest.fixture
def dispatcher(manager, rng):
    """Dispatcher with the full directive set over the test campaign."""
    return CommandDispatcher(manager=manager, rng=rng)


@pytest.fixture
def agent(manager):
    """A registered agent at 60/60 sanity with a couple of skills."""
    return manager.register_agent({
        "id": "A1",
        "name": "Agent Smith",
        "role": "Field Agent",
        "skills": {"Firearms": 60, "Occult": 25},
    })


@pytest.fixture
def loose_agent():
    """Unregistered agent and tracker pair for driving systems directly."""
    agent = Agent(id="X1", name="Loose", sanity=60, max_sanity=60)
    tracker = SanityTracker(agent_id="X1", current=60, maximum=60)
    return agent, tracker
