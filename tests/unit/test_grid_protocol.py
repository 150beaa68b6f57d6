import pytest

from stormlink.grid_protocol import GridProtocolHandler, LoginResult, ProtocolState
from stormlink.grid_types import GridInfo, LoginCredentials
from stormlink.login_errors import GridUnavailableError, ProtocolError

GRID = GridInfo("OSGrid", "http://login.osgrid.org", "OSGrid")
CREDS = LoginCredentials("A", "B", "pw")


class ScriptedHandler(GridProtocolHandler):
    def __init__(self, outcome):
        super().__init__("scripted")
        self.outcome = outcome

    async def _perform_login(self, grid, credentials):
        self.set_authenticating()
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


@pytest.mark.asyncio
async def test_connect_emits_states_and_keeps_result():
    result = LoginResult(capabilities={"seed": "http://caps"})
    handler = ScriptedHandler(result)
    states = []
    handler.add_state_listener(lambda status: states.append(status.state))

    assert await handler.connect(GRID, CREDS) is result

    assert states == [ProtocolState.CONNECTING, ProtocolState.AUTHENTICATING, ProtocolState.CONNECTED]
    assert handler.current_grid == GRID
    assert handler.last_login is result


@pytest.mark.asyncio
async def test_login_errors_pass_through_unchanged():
    failure = GridUnavailableError(grid=GRID)
    handler = ScriptedHandler(failure)

    with pytest.raises(GridUnavailableError):
        await handler.connect(GRID, CREDS)

    assert handler.state is ProtocolState.ERROR


@pytest.mark.asyncio
async def test_other_errors_are_wrapped():
    handler = ScriptedHandler(ValueError("malformed login reply"))

    with pytest.raises(ProtocolError, match="malformed login reply"):
        await handler.connect(GRID, CREDS)

    assert handler.status.message == "malformed login reply"


@pytest.mark.asyncio
async def test_disconnect_always_ends_disconnected():
    handler = ScriptedHandler(LoginResult())
    await handler.connect(GRID, CREDS)

    handler.disconnect()

    assert handler.state is ProtocolState.DISCONNECTED
    assert handler.current_grid is None
    assert handler.last_login is None


@pytest.mark.asyncio
async def test_unexpected_handler_errors_are_wrapped():
    handler = ScriptedHandler(KeyError("session_id"))

    with pytest.raises(ProtocolError) as excinfo:
        await handler.connect(GRID, CREDS)

    assert isinstance(excinfo.value.__cause__, KeyError)
    assert excinfo.value.grid == GRID
    assert handler.state is ProtocolState.ERROR
