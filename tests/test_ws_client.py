import json

import pytest

import ws_client


def test_payload_encoding_is_reversible():
    encoded = ws_client.encode_payload("héllo")
    assert encoded != "héllo"
    assert ws_client.decode_payload(encoded) == "héllo"


def test_non_base64_payloads_are_shown_as_is():
    assert ws_client.decode_payload("not base64!") == "not base64!"
    assert ws_client.decode_payload({"ct": 1}) == '{"ct": 1}'


def test_pair_url_carries_api_key():
    assert ws_client._ws_pair_url("ws://host/", None) == "ws://host/ws/pair/"
    assert ws_client._ws_pair_url("ws://host", "a b") == "ws://host/ws/pair/?authorization=a%20b"


class FakeSocket:
    def __init__(self):
        self.sent = []

    async def send(self, data):
        self.sent.append(json.loads(data))


def feed_stdin(monkeypatch, lines):
    remaining = list(lines)

    async def fake_readline():
        return remaining.pop(0) if remaining else ""

    monkeypatch.setattr(ws_client, "_stdin_lines", fake_readline)
    return remaining


@pytest.mark.asyncio
async def test_input_loop_stops_at_end_of_input(monkeypatch):
    feed_stdin(monkeypatch, [])
    ws = FakeSocket()

    await ws_client._input_loop(ws, ws_client.ChatState(), name="Ada", avatar=None, done=lambda: False)

    assert ws.sent == []


@pytest.mark.asyncio
async def test_input_loop_sends_lines_then_stops_at_end_of_input(monkeypatch):
    remaining = feed_stdin(monkeypatch, ["\n", "hello\n", "/leave\n"])
    ws = FakeSocket()

    await ws_client._input_loop(ws, ws_client.ChatState(room="room-1"), name="Ada", avatar=None, done=lambda: False)

    assert remaining == []
    assert [frame["type"] for frame in ws.sent] == ["typing", "encrypted_message", "leave"]
    assert ws_client.decode_payload(ws.sent[1]["encrypted"]) == "hello"
    assert ws.sent[1]["room"] == "room-1"


@pytest.mark.asyncio
async def test_input_loop_holds_messages_until_paired(monkeypatch):
    feed_stdin(monkeypatch, ["hello\n"])
    ws = FakeSocket()

    await ws_client._input_loop(ws, ws_client.ChatState(), name="Ada", avatar=None, done=lambda: False)

    assert ws.sent == []
