"""Tests for ECU connections."""

import pytest

from wbh_diag.connection.device import DeviceConnection, parse_connect_response
from wbh_diag.connection.interface import InterfaceState
from wbh_diag.exceptions import (
    ConnectRejectedError,
    InterfaceStateError,
    InvalidArgumentError,
    TransportTimeout,
    UnexpectedResponseError,
)
from wbh_diag.models.device import Protocol


class TestParseConnectResponse:
    @pytest.mark.parametrize("text, baud, protocol", [
        ("CONNECT: 96,1\n", 9, 1),
        ("CONNECT: 41\n", 4, 1),
        ("CONNECT: 52\n", 5, 2),
        ("CONNECT: 3,2\n", 3, 2),
    ])
    def test_classifies_parameters(self, text, baud, protocol):
        info = parse_connect_response(0x01, text)
        assert info.baud_rate == baud
        assert info.protocol_id == protocol
        assert info.specs == text

    def test_error_is_rejection(self):
        with pytest.raises(ConnectRejectedError):
            parse_connect_response(0x17, "ERROR\n")

    def test_garbage_is_unexpected(self):
        with pytest.raises(UnexpectedResponseError):
            parse_connect_response(0x17, "GARBAGE\n")

    def test_non_digit_parameters_are_unexpected(self):
        with pytest.raises(UnexpectedResponseError):
            parse_connect_response(0x17, "CONNECT: xy\n")


class TestConnect:
    def test_connect(self, ready_interface, fake_serial, connect_reply):
        connect_reply(0x01, "CONNECT: 41\r>")
        conn = DeviceConnection.connect(ready_interface, 0x01)

        assert fake_serial.commands == ["ATD01"]
        assert conn.is_connected
        assert conn.device_id == 0x01
        assert conn.protocol == Protocol.KW1281
        assert conn.baud_rate == 4
        assert ready_interface.device is conn

    def test_rejected(self, ready_interface, connect_reply):
        connect_reply(0x17, "ERROR\r>")
        with pytest.raises(ConnectRejectedError):
            DeviceConnection.connect(ready_interface, 0x17)
        assert ready_interface.device is None
        assert "rejected" in ready_interface.last_error

    def test_garbage(self, ready_interface, connect_reply):
        connect_reply(0x17, "GARBAGE\r>")
        with pytest.raises(UnexpectedResponseError):
            DeviceConnection.connect(ready_interface, 0x17)

    def test_silence(self, ready_interface):
        with pytest.raises(TransportTimeout):
            DeviceConnection.connect(ready_interface, 0x42)

    @pytest.mark.parametrize("device_id", [-1, 256])
    def test_invalid_id_sends_nothing(self, ready_interface, fake_serial, device_id):
        with pytest.raises(InvalidArgumentError):
            DeviceConnection.connect(ready_interface, device_id)
        assert fake_serial.commands == []

    def test_requires_ready_interface(self, interface, fake_serial):
        with pytest.raises(InterfaceStateError):
            DeviceConnection.connect(interface, 0x01)
        assert fake_serial.commands == []

    def test_one_device_at_a_time(self, ready_interface, connect_reply):
        connect_reply(0x01)
        connect_reply(0x02)
        DeviceConnection.connect(ready_interface, 0x01)
        with pytest.raises(InterfaceStateError):
            DeviceConnection.connect(ready_interface, 0x02)


class TestDeviceConnection:
    @pytest.fixture
    def conn(self, ready_interface, fake_serial, connect_reply):
        connect_reply(0x01)
        conn = DeviceConnection.connect(ready_interface, 0x01)
        fake_serial.commands.clear()
        return conn

    def test_send_command_strips_prompt(self, conn, fake_serial):
        fake_serial.reply("00", "4A0906259 \rMOTRONIC\r>")
        assert conn.send_command("00") == "4A0906259 \nMOTRONIC\n"

    def test_disconnect(self, conn, ready_interface, fake_serial):
        conn.disconnect()
        assert fake_serial.commands == ["ATH"]
        assert not conn.is_connected
        assert ready_interface.device is None

    def test_disconnect_is_idempotent(self, conn, fake_serial):
        conn.disconnect()
        conn.disconnect()
        assert fake_serial.commands == ["ATH"]

    def test_failed_disconnect_still_releases(self, conn, ready_interface, fake_serial):
        fake_serial._replies.pop("ATH")
        with pytest.raises(TransportTimeout):
            conn.disconnect()
        assert not conn.is_connected
        assert ready_interface.device is None

    def test_commands_after_disconnect(self, conn):
        conn.disconnect()
        with pytest.raises(InterfaceStateError):
            conn.send_command("02")

    def test_shutdown_releases_connection(self, conn, ready_interface, fake_serial):
        fake_serial.reply("02", "1234 00\r>")
        ready_interface.shutdown()

        assert not conn.is_connected
        with pytest.raises(InterfaceStateError):
            conn.send_command("02")
        conn.disconnect()
        assert fake_serial.commands == []

    def test_commands_need_ready_interface(self, conn, ready_interface, fake_serial):
        ready_interface._set_state(InterfaceState.FAILED)
        with pytest.raises(InterfaceStateError):
            conn.send_command("02")
        assert fake_serial.commands == []

    def test_context_manager_disconnects(self, conn, fake_serial):
        with conn:
            pass
        assert fake_serial.commands == ["ATH"]
        assert not conn.is_connected
