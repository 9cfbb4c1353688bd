"""Tests for PixieServer wiring on simulated hardware."""

import asyncio
import json

import pytest

from coffeepixie import config
from coffeepixie.core import PixieServer
from coffeepixie.hardware import SimulatedGPIO

ARM_BUTTON, CHECK_BUTTON = 24, 23
ARMED_LED, DISARMED_LED = 17, 4
ESPRESSO, LUNGO = 27, 22


@pytest.fixture(autouse=True)
def short_status_pulse(monkeypatch):
    monkeypatch.setattr(config, "SHOW_STATUS_MS", 10)


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "raspberry_pi": {"button_press_detecting_duration_ms": 0},
        "nespresso_machine": {"button_press_duration_ms": 10},
        "timer": {"trigger_time": "6:45"},
    }))
    return path


@pytest.fixture
def server(config_path):
    return PixieServer(config_path=str(config_path), driver=SimulatedGPIO(), web_port=0)


def test_wiring_from_config(server):
    assert server.coffee_timer.get_trigger_time() == "06:45"
    assert [m.line_id for m in server.monitors] == [CHECK_BUTTON, ARM_BUTTON]
    assert not server.coffee_timer.is_armed()
    # relays open on startup
    assert server.driver.level(ESPRESSO) is True
    assert server.driver.level(LUNGO) is True


def test_unconnected_buttons_get_no_monitor(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"raspberry_pi": {"arm_button_pin": -1, "check_status_button_pin": -1}}))
    server = PixieServer(config_path=str(path), driver=SimulatedGPIO(), web_port=0)
    assert server.monitors == []


def test_start_arms_and_button_toggles(server):
    async def scenario():
        task = asyncio.create_task(server.start())
        for _ in range(100):
            if server.running:
                break
            await asyncio.sleep(0.02)
        assert server.running
        assert server.coffee_timer.is_armed()

        server.driver.inject_edge(ARM_BUTTON)
        for _ in range(100):
            if not server.coffee_timer.is_armed():
                break
            await asyncio.sleep(0.02)
        assert not server.coffee_timer.is_armed()

        server.running = False
        await task
        await server.stop()

    asyncio.run(scenario())
    assert all(not m.running for m in server.monitors)
    # stop leaves relays open and LEDs off
    assert server.driver.history[-4:] == [
        (ESPRESSO, True), (LUNGO, True), (ARMED_LED, False), (DISARMED_LED, False),
    ]


def test_stop_is_idempotent(server):
    asyncio.run(server.stop())
    asyncio.run(server.stop())
    assert not server.coffee_timer.is_armed()
