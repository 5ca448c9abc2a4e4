import httpx
import pytest

from converteverything_mcp.sdk.client import ConvertEverythingClient
from converteverything_mcp.sdk.config import ClientConfig
from tests.helpers.network import API_KEY, BASE_URL, FakeAPI, FakeClock, FakeSleep


@pytest.fixture
def config():
    return ClientConfig(api_key=API_KEY, base_url=BASE_URL, timeout=5, max_retries=3)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_sleep(clock):
    return FakeSleep(clock)


@pytest.fixture
def api():
    return FakeAPI()


@pytest.fixture
def client(config, api, fake_sleep, clock):
    return ConvertEverythingClient(
        config,
        transport=httpx.MockTransport(api),
        sleep=fake_sleep,
        clock=clock,
    )


@pytest.fixture
def wav_file(tmp_path):
    path = tmp_path / "song.wav"
    path.write_bytes(b"RIFF" + b"\x00" * 60)
    return path
